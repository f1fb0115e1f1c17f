from aggregator import aggregate, build_local_narrative, compute_stats
from github_client import PRMetadata
from models import ReviewStats


def _pr() -> PRMetadata:
    return PRMetadata(
        number=7,
        title="Add config loader",
        body=None,
        author="octocat",
        state="open",
        base_branch="main",
        head_branch="feature/config",
        additions=3,
        deletions=0,
        changed_files=3,
        url="https://github.com/octocat/hello-world/pull/7",
        draft=False,
    )


def test_stats_sum_over_files(reviewed_files):
    stats = compute_stats(reviewed_files)

    assert stats == ReviewStats(
        total_files=3,
        total_issues=1,
        total_suggestions=1,
        total_security_issues=1,
    )


def test_empty_review():
    review = aggregate([])

    assert review.stats == ReviewStats()
    assert review.files == ()
    assert "Files Changed**: 0" in review.summary
    assert "Key Findings" not in review.summary


def test_pr_narrative(reviewed_files):
    review = aggregate(reviewed_files, scope="pr", pr=_pr())

    assert review.scope == "pr"
    assert review.summary.startswith("## Code Review Summary")
    assert "- **Issues Found**: 1" in review.summary
    assert "- **Title**: Add config loader" in review.summary
    assert "⚠️ **Security**: Found 1 potential security concern(s)" in review.summary
    assert "**config.js**" in review.summary
    # only files with issues are listed
    assert "**util.py**" not in review.summary
    assert review.summary.endswith("*Reviewed with PatchLens*")


def test_files_keep_input_order(reviewed_files):
    review = aggregate(reviewed_files)

    assert [f.filename for f in review.files] == ["config.js", "util.py", "README.md"]


def test_local_scope_uses_reduced_narrative(reviewed_files):
    review = aggregate(reviewed_files, scope="local")

    assert review.scope == "local"
    assert review.summary == build_local_narrative(review.stats)
    assert review.summary == (
        "## Local Code Review\n\nAnalyzed 3 file(s).\n\n"
        "Found 1 issue(s) and 1 suggestion(s)."
    )
