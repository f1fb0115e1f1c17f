"""Review orchestration - connects diff sources, analyzers and the aggregator."""

import logging
from pathlib import Path

from aggregator import aggregate
from analyzer import Analyzer, analyze_file
from local_git import get_branch_diff, get_staged_changes, get_uncommitted_changes
from models import ChangedFile, FileChanges, Finding, ReviewedFile, ReviewSet, ReviewStats
from scanner import scan_file

logger = logging.getLogger(__name__)

SEVERITY_ORDER: dict[str, int] = {
    "critical": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
}


# ---------------------------------------------------------------------------
# File loop
# ---------------------------------------------------------------------------
def review_files(files: list[ChangedFile], analyzer: Analyzer) -> list[ReviewedFile]:
    """Analyze each file in order and pair it with its change information."""
    reviewed: list[ReviewedFile] = []

    for file in files:
        logger.info("Reviewing %s...", file.filename)
        analysis = analyze_file(file, analyzer)

        reviewed.append(
            ReviewedFile(
                filename=file.filename,
                changes=FileChanges(
                    status=file.status,
                    additions=file.additions,
                    deletions=file.deletions,
                ),
                analysis=analysis,
            )
        )
        logger.info(
            "  %s: %d issue(s), %d suggestion(s)",
            analysis.rating,
            len(analysis.issues),
            len(analysis.suggestions),
        )

    return reviewed


# ---------------------------------------------------------------------------
# Local review
# ---------------------------------------------------------------------------
def review_local(
    analyzer: Analyzer,
    cwd: str | Path = ".",
    staged: bool = False,
    base: str | None = None,
    compare: str | None = None,
) -> ReviewSet:
    """
    Review changes in a local git working tree.

    Args:
        analyzer: Analysis strategy for each file
        cwd: Repository working directory
        staged: Review only the staged changes
        base: Base branch; when given, review ``base..compare``
        compare: Branch with the changes (defaults to the current branch)

    Returns:
        ReviewSet with the reduced local narrative
    """
    if staged:
        files = get_staged_changes(cwd)
    elif base:
        files = get_branch_diff(base, compare, cwd)
    else:
        files = get_uncommitted_changes(cwd)

    if not files:
        logger.info("No changes to review")

    return aggregate(review_files(files, analyzer), scope="local")


# ---------------------------------------------------------------------------
# Security scan of files on disk
# ---------------------------------------------------------------------------
def collect_paths(paths: list[str | Path], recursive: bool = False) -> list[Path]:
    """Expand *paths* into files; directories are only walked when *recursive*."""
    collected: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_file():
            collected.append(path)
        elif path.is_dir():
            if recursive:
                collected.extend(sorted(p for p in path.rglob("*") if p.is_file()))
            else:
                logger.warning("Skipping directory %s (use --recursive)", path)
        else:
            raise ValueError(f"Path not found: {path}")
    return collected


def scan_paths(paths: list[str | Path], recursive: bool = False) -> ReviewSet:
    """Scan whole files with the rule registry; each file's content is its patch."""
    reviewed: list[ReviewedFile] = []

    for path in collect_paths(paths, recursive):
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.debug("Skipping binary file %s", path)
            continue

        file = ChangedFile(
            filename=str(path),
            patch=content,
            additions=len(content.splitlines()),
        )
        reviewed.append(ReviewedFile(filename=file.filename, analysis=scan_file(file)))

    return aggregate(reviewed, scope="scan")


def security_findings(
    review: ReviewSet,
    severity: str | None = None,
) -> list[tuple[str, Finding]]:
    """
    Security findings across all files, most severe first.

    Args:
        review: ReviewSet to search
        severity: Keep only this severity (case-insensitive)

    Returns:
        List of (filename, finding) pairs
    """
    wanted = severity.lower() if severity else None
    if wanted is not None and wanted not in SEVERITY_ORDER:
        raise ValueError(
            f"Invalid severity: {severity!r}. Expected CRITICAL, HIGH, MEDIUM or LOW."
        )

    found = [
        (file.filename, issue)
        for file in review.files
        for issue in file.analysis.security_issues
        if wanted is None or issue.severity == wanted
    ]
    found.sort(key=lambda item: SEVERITY_ORDER[item[1].severity])
    return found


def has_critical(findings: list[tuple[str, Finding]]) -> bool:
    return any(f.severity == "critical" for _, f in findings)


# ---------------------------------------------------------------------------
# Posting
# ---------------------------------------------------------------------------
def choose_review_event(stats: ReviewStats, approve: bool = False) -> str:
    """REQUEST_CHANGES on security issues, APPROVE a clean PR when asked, else COMMENT."""
    if stats.total_security_issues:
        return "REQUEST_CHANGES"
    if approve and not stats.total_issues:
        return "APPROVE"
    return "COMMENT"
