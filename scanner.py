"""Pattern-based scanning of a single file's patch text."""

import logging

from models import HIGH_SEVERITIES, ChangedFile, FileReview, Finding, Rating
from patterns import LINE_RULES, LOOKAHEAD_RULES, PATCH_RULES

logger = logging.getLogger(__name__)

NO_DIFF_SUMMARY = "No diff available for analysis"
CLEAN_SUMMARY = "Code looks good! No major issues detected."


def is_issue(finding: Finding) -> bool:
    """Security findings are always issues; otherwise only high/critical ones."""
    return finding.category == "security" or finding.severity in HIGH_SEVERITIES


def derive_rating(issues: tuple[Finding, ...] | list[Finding], has_patch: bool = True) -> Rating:
    """Coarse per-file verdict. Suggestions never affect it."""
    if issues:
        return "needs-attention"
    if not has_patch:
        return "neutral"
    return "good"


def summarize(issues: list[Finding], suggestions: list[Finding]) -> str:
    if not issues and not suggestions:
        return CLEAN_SUMMARY

    high = [i for i in issues if i.severity in HIGH_SEVERITIES]
    if high:
        return f"Found {len(high)} high-priority issue(s) that should be addressed."

    total = len(issues) + len(suggestions)
    return (
        f"Found {total} item(s) to review: "
        f"{len(issues)} issue(s), {len(suggestions)} suggestion(s)."
    )


def scan_lines(lines: list[str]) -> list[Finding]:
    """Run line and lookahead rules over *lines* (1-based line numbers)."""
    findings: list[Finding] = []

    for index, line in enumerate(lines):
        line_no = index + 1
        following = lines[index + 1] if index + 1 < len(lines) else None

        for rule in LINE_RULES:
            if rule.matches(line):
                findings.append(
                    Finding(
                        category=rule.category,
                        severity=rule.severity,
                        line=line_no,
                        description=rule.describe(line),
                        rule=rule.name,
                    )
                )

        for rule in LOOKAHEAD_RULES:
            if rule.matches(line, following):
                findings.append(
                    Finding(
                        category=rule.category,
                        severity=rule.severity,
                        line=line_no,
                        description=rule.describe(line),
                        rule=rule.name,
                    )
                )

    return findings


def scan_patch(filename: str, patch: str) -> list[Finding]:
    """Run every applicable rule over a patch, per-line rules first."""
    findings = scan_lines(patch.split("\n"))

    for rule in PATCH_RULES:
        if rule.applies_to(filename) and rule.matches(patch):
            findings.append(
                Finding(
                    category=rule.category,
                    severity=rule.severity,
                    description=rule.description,
                    rule=rule.name,
                )
            )

    return findings


def scan_file(file: ChangedFile) -> FileReview:
    """
    Turn one changed file into a FileReview using the rule registry.

    Args:
        file: ChangedFile with the patch text to scan

    Returns:
        FileReview with issues, suggestions, summary and rating
    """
    if not file.patch:
        return FileReview(
            filename=file.filename,
            rating=derive_rating((), has_patch=False),
            summary=NO_DIFF_SUMMARY,
        )

    issues: list[Finding] = []
    suggestions: list[Finding] = []
    for finding in scan_patch(file.filename, file.patch):
        (issues if is_issue(finding) else suggestions).append(finding)

    logger.debug(
        "Scanned %s: %d issue(s), %d suggestion(s)",
        file.filename,
        len(issues),
        len(suggestions),
    )

    return FileReview(
        filename=file.filename,
        rating=derive_rating(issues),
        summary=summarize(issues, suggestions),
        issues=tuple(issues),
        suggestions=tuple(suggestions),
    )
