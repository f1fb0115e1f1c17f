"""Render a ReviewSet as json, plain text, markdown or a GitHub review body."""

import re

import typer

from models import ReviewedFile, ReviewSet

DEFAULT_FORMAT = "markdown"
FORMATS = ("markdown", "json", "text")

_STYLES: dict[str, dict] = {
    "bright": {"bold": True},
    "dim": {"dim": True},
    "red": {"fg": typer.colors.RED},
    "green": {"fg": typer.colors.GREEN},
    "yellow": {"fg": typer.colors.YELLOW},
    "blue": {"fg": typer.colors.BLUE},
    "magenta": {"fg": typer.colors.MAGENTA},
    "cyan": {"fg": typer.colors.CYAN},
}

_RATING_COLORS = {
    "good": "green",
    "needs-attention": "yellow",
    "poor": "red",
}

_RATING_BADGES = {
    "good": "✅ **Good** - No major issues detected",
    "needs-attention": "⚠️ **Needs Attention** - Some issues found",
    "poor": "❌ **Issues Found** - Requires changes before merge",
}

_STATUS_ICONS = {
    "added": "✨",
    "removed": "🗑️",
    "deleted": "🗑️",
    "modified": "📝",
    "renamed": "📦",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def colorize(text: str, color: str, enabled: bool = False) -> str:
    """Wrap *text* in ANSI styling when *enabled*; the text itself never changes."""
    if not enabled or color not in _STYLES:
        return text
    return typer.style(text, **_STYLES[color])


def strip_markdown(text: str) -> str:
    """Best-effort removal of markdown syntax for plain-text output."""
    text = re.sub(r"#{1,6}\s", "", text)
    text = text.replace("**", "")
    text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", text)
    text = text.replace("`", "")
    text = re.sub(r"^(\s*)[-*]\s+", r"\1", text, flags=re.MULTILINE)
    return text.strip()


def rating_badge(rating: str | None) -> str:
    return _RATING_BADGES.get(rating or "", "")


def status_icon(status: str | None) -> str:
    return _STATUS_ICONS.get(status or "", "📄")


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------
def format_json(review: ReviewSet) -> str:
    return review.model_dump_json(indent=2)


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------
def format_file_text(file: ReviewedFile, color: bool = False) -> str:
    analysis = file.analysis
    lines: list[str] = []

    lines.append(colorize(f"📄 {file.filename}", "bright", color))
    lines.append(
        colorize(
            f"   Rating: {analysis.rating or 'N/A'}",
            _RATING_COLORS.get(analysis.rating, "reset"),
            color,
        )
    )

    if analysis.summary:
        lines.append(f"   {strip_markdown(analysis.summary)}")

    if analysis.issues:
        lines.append(colorize("   Issues:", "red", color))
        for issue in analysis.issues:
            lines.append(
                colorize(f"   - {issue.description} [{issue.severity}]", "yellow", color)
            )

    if analysis.suggestions:
        lines.append(colorize("   Suggestions:", "cyan", color))
        for suggestion in analysis.suggestions:
            lines.append(f"   - {suggestion.description}")

    return "\n".join(lines) + "\n"


def format_text(review: ReviewSet, color: bool = False) -> str:
    stats = review.stats
    out: list[str] = []

    out.append(colorize("═" * 60, "cyan", color))
    out.append(colorize("  CODE REVIEW RESULTS", "bright", color))
    out.append(colorize("═" * 60, "cyan", color) + "\n")

    out.append(colorize("Summary:", "bright", color))
    out.append(f"  Files analyzed: {stats.total_files}")
    out.append(f"  Issues found:   {stats.total_issues}")
    out.append(f"  Suggestions:    {stats.total_suggestions}")
    out.append(f"  Security:       {stats.total_security_issues}\n")

    if review.summary:
        out.append(colorize("Overall Review:", "bright", color))
        out.append(strip_markdown(review.summary) + "\n")

    out.append(colorize("─" * 60, "cyan", color))
    out.append(colorize("File Reviews:", "bright", color))
    out.append(colorize("─" * 60, "cyan", color) + "\n")

    for file in review.files:
        out.append(format_file_text(file, color))

    return "\n".join(out)


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------
def _stats_table(review: ReviewSet, files_label: str, security_cell: str) -> list[str]:
    stats = review.stats
    return [
        "| Metric | Value |",
        "|--------|-------|",
        f"| {files_label} | {stats.total_files} |",
        f"| Issues Found | {stats.total_issues} |",
        f"| Suggestions | {stats.total_suggestions} |",
        f"| {security_cell} |",
    ]


def format_file_markdown(file: ReviewedFile) -> str:
    analysis = file.analysis
    changes = file.changes
    out: list[str] = []

    out.append(f"### {status_icon(changes.status if changes else None)} {file.filename}\n")

    if changes is not None:
        parts = []
        if changes.additions:
            parts.append(f"+{changes.additions}")
        if changes.deletions:
            parts.append(f"-{changes.deletions}")
        out.append(f"**Changes:** {', '.join(parts) or 'None'}\n")

    badge = rating_badge(analysis.rating)
    if badge:
        out.append(f"{badge}\n")

    if analysis.summary:
        out.append(f"**Summary:** {analysis.summary}\n")

    if analysis.issues:
        out.append("#### Issues\n")
        for issue in analysis.issues:
            out.append(f"- {issue.description} **[{issue.severity.upper()}]**")
        out.append("")

    if analysis.suggestions:
        out.append("#### Suggestions\n")
        for suggestion in analysis.suggestions:
            out.append(f"- {suggestion.description}")
        out.append("")

    return "\n".join(out)


def format_markdown(review: ReviewSet) -> str:
    out: list[str] = ["# Code Review Results\n", "## Summary\n"]
    out.extend(
        _stats_table(
            review,
            "Files Analyzed",
            f"Security Concerns | {review.stats.total_security_issues}",
        )
    )
    out.append("")

    if review.summary:
        out.append(review.summary + "\n")

    out.append("---\n")
    out.append("## File Reviews\n")

    for file in review.files:
        out.append(format_file_markdown(file))

    return "\n".join(out)


def format_for_github(review: ReviewSet) -> str:
    """Summary table and narrative only; used as the body of a posted review."""
    security = review.stats.total_security_issues
    icon = "⚠️" if security else "✅"

    out: list[str] = [
        "## Code Review Summary\n",
        "🤖 *Analyzed with PatchLens*\n",
    ]
    out.extend(_stats_table(review, "Files Changed", f"Security | {icon} {security}"))
    out.append("")

    if review.summary:
        out.append(review.summary + "\n")

    return "\n".join(out)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
def render(review: ReviewSet, fmt: str = DEFAULT_FORMAT, color: bool = False) -> str:
    """Render *review* in the named format; unknown names fall back to markdown."""
    fmt = (fmt or DEFAULT_FORMAT).lower()
    if fmt == "json":
        return format_json(review)
    if fmt == "text":
        return format_text(review, color=color)
    if fmt == "github":
        return format_for_github(review)
    return format_markdown(review)
