import subprocess
from unittest.mock import MagicMock, patch

import pytest

from local_git import (
    get_branch_diff,
    get_current_branch,
    get_staged_changes,
    get_uncommitted_changes,
    run_git,
)

DIFF = """diff --git a/a.py b/a.py
index 1111111..2222222 100644
--- a/a.py
+++ b/a.py
@@ -1 +1 @@
-x = 1
+x = 2
"""


def _completed(stdout: str) -> MagicMock:
    return MagicMock(stdout=stdout, returncode=0)


@patch("local_git.subprocess.run")
def test_run_git_passes_arguments(mock_run):
    mock_run.return_value = _completed("ok\n")

    assert run_git(["status"], cwd="/repo") == "ok\n"
    args, kwargs = mock_run.call_args
    assert args[0] == ["git", "status"]
    assert kwargs["cwd"] == "/repo"
    assert kwargs["check"] is True


@patch("local_git.subprocess.run", side_effect=FileNotFoundError("git"))
def test_missing_git(mock_run):
    with pytest.raises(ValueError, match="git executable not found"):
        run_git(["status"])


@patch("local_git.subprocess.run")
def test_failed_command(mock_run):
    mock_run.side_effect = subprocess.CalledProcessError(
        128, ["git", "diff"], stderr="fatal: not a git repository\n"
    )

    with pytest.raises(ValueError, match="not a git repository"):
        run_git(["diff"])


@patch("local_git.subprocess.run")
def test_staged_changes(mock_run):
    mock_run.return_value = _completed(DIFF)

    files = get_staged_changes()

    assert [f.filename for f in files] == ["a.py"]
    assert mock_run.call_args.args[0] == ["git", "diff", "--cached"]


@patch("local_git.subprocess.run")
def test_uncommitted_changes_empty(mock_run):
    mock_run.side_effect = [_completed(""), _completed("")]

    assert get_uncommitted_changes() == []
    calls = [c.args[0] for c in mock_run.call_args_list]
    assert calls == [
        ["git", "diff"],
        ["git", "ls-files", "--others", "--exclude-standard"],
    ]


@patch("local_git.subprocess.run")
def test_uncommitted_changes_include_untracked_files(mock_run, tmp_path):
    (tmp_path / "secrets.py").write_text('API_KEY = "abc123"\nDEBUG = 1\n')
    (tmp_path / "logo.png").write_bytes(b"\x89PNG\xff\x00")
    mock_run.side_effect = [_completed(DIFF), _completed("secrets.py\nlogo.png\n")]

    files = get_uncommitted_changes(cwd=tmp_path)

    assert [(f.filename, f.status) for f in files] == [
        ("a.py", "modified"),
        ("secrets.py", "added"),
    ]
    untracked = files[1]
    assert untracked.patch == '+API_KEY = "abc123"\n+DEBUG = 1'
    assert untracked.additions == 2


@patch("local_git.subprocess.run")
def test_branch_diff_defaults_to_current_branch(mock_run):
    mock_run.side_effect = [_completed("feature\n"), _completed(DIFF)]

    files = get_branch_diff("main")

    assert len(files) == 1
    calls = [c.args[0] for c in mock_run.call_args_list]
    assert calls == [
        ["git", "rev-parse", "--abbrev-ref", "HEAD"],
        ["git", "diff", "main", "feature"],
    ]


@patch("local_git.subprocess.run")
def test_branch_diff_error_is_wrapped(mock_run):
    mock_run.side_effect = subprocess.CalledProcessError(
        128, ["git", "diff"], stderr="fatal: bad revision 'nope'"
    )

    with pytest.raises(ValueError, match="Failed to get branch diff"):
        get_branch_diff("nope", "feature")


@patch("local_git.subprocess.run")
def test_current_branch(mock_run):
    mock_run.return_value = _completed("main\n")

    assert get_current_branch() == "main"
