"""Fold per-file reviews into a ReviewSet with totals and a narrative."""

import logging
from typing import TYPE_CHECKING

from models import ReviewedFile, ReviewScope, ReviewSet, ReviewStats

if TYPE_CHECKING:
    from github_client import PRMetadata

logger = logging.getLogger(__name__)

TOOL_NAME = "PatchLens"


def compute_stats(files: list[ReviewedFile]) -> ReviewStats:
    """Sum issue, suggestion and security counts over all files."""
    return ReviewStats(
        total_files=len(files),
        total_issues=sum(len(f.analysis.issues) for f in files),
        total_suggestions=sum(len(f.analysis.suggestions) for f in files),
        total_security_issues=sum(len(f.analysis.security_issues) for f in files),
    )


def build_pr_narrative(
    files: list[ReviewedFile],
    stats: ReviewStats,
    pr: "PRMetadata | None" = None,
) -> str:
    """Markdown overview of a pull request review."""
    lines: list[str] = []
    lines.append("## Code Review Summary\n")
    lines.append(f"Analyzed {stats.total_files} file(s) with {TOOL_NAME}.\n")
    lines.append("### Overview")
    lines.append(f"- **Files Changed**: {stats.total_files}")
    lines.append(f"- **Issues Found**: {stats.total_issues}")
    lines.append(f"- **Suggestions**: {stats.total_suggestions}")
    lines.append(f"- **Security Concerns**: {stats.total_security_issues}\n")

    if pr is not None:
        lines.append("### Pull Request")
        lines.append(f"- **Title**: {pr.title}")
        lines.append(f"- **Author**: {pr.author}")
        lines.append(f"- **Base**: {pr.base_branch}\n")

    if stats.total_issues or stats.total_security_issues:
        lines.append("### Key Findings")

        if stats.total_security_issues:
            lines.append(
                f"⚠️ **Security**: Found {stats.total_security_issues} potential "
                "security concern(s). Please review carefully.\n"
            )

        if stats.total_issues:
            lines.append("### Issues by File")
            for file in files:
                if not file.analysis.issues:
                    continue
                lines.append(f"\n**{file.filename}**")
                for issue in file.analysis.issues:
                    lines.append(f"- {issue.description}")

    lines.append("\n---")
    lines.append(f"*Reviewed with {TOOL_NAME}*")

    return "\n".join(lines)


def build_local_narrative(stats: ReviewStats) -> str:
    """Reduced overview used for local diffs and file scans."""
    return (
        "## Local Code Review\n\n"
        f"Analyzed {stats.total_files} file(s).\n\n"
        f"Found {stats.total_issues} issue(s) and "
        f"{stats.total_suggestions} suggestion(s)."
    )


def aggregate(
    files: list[ReviewedFile],
    scope: ReviewScope = "pr",
    pr: "PRMetadata | None" = None,
) -> ReviewSet:
    """
    Build the ReviewSet for one review unit.

    Args:
        files: Reviewed files in the order the diff source supplied them
        scope: "pr" for the full narrative, "local"/"scan" for the reduced one
        pr: Optional pull request metadata shown in the PR narrative

    Returns:
        Read-only ReviewSet with stats and narrative
    """
    stats = compute_stats(files)

    if scope == "pr":
        summary = build_pr_narrative(files, stats, pr)
    else:
        summary = build_local_narrative(stats)

    logger.info(
        "Aggregated %d file(s): %d issue(s), %d suggestion(s), %d security",
        stats.total_files,
        stats.total_issues,
        stats.total_suggestions,
        stats.total_security_issues,
    )

    return ReviewSet(summary=summary, stats=stats, files=tuple(files), scope=scope)
