"""Heuristic extraction of findings from Gemini's free-text review.

The response is prose, so everything here is best-effort: a response that
does not follow the requested layout simply yields no findings.
"""

import logging
import re

from models import FileReview, Finding, Severity
from scanner import derive_rating

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "Code reviewed by Gemini"

_BULLET = r"^[ \t]*(?:[-•*]|\d+\.)[ \t]*\**[ \t]*"

_SUMMARY_PATTERNS = (
    re.compile(r"summary\**\s*:\s*\**\s*(\S.*)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^#+\s*summary\s*\n+\s*(\S.*)$", re.IGNORECASE | re.MULTILINE),
)
_ISSUE_PATTERN = re.compile(
    _BULLET + r"(?:bug|issue|concern)\**[ \t]*:\**[ \t]*(.+)$",
    re.IGNORECASE | re.MULTILINE,
)
_SUGGESTION_PATTERN = re.compile(
    _BULLET + r"(?:suggestion|recommendation|consider)\**[ \t]*:\**[ \t]*(.+)$",
    re.IGNORECASE | re.MULTILINE,
)

_SECURITY_KEYWORDS = re.compile(
    r"\b(?:security|vulnerab\w*|injection|xss|csrf|"
    r"auth(?:entication|orization|n|z)?|credentials?|secrets?)\b",
    re.IGNORECASE,
)
_PERFORMANCE_KEYWORDS = re.compile(
    r"\b(?:performance|memory|leaks?|optimi[sz]ation|inefficient|slow)\b",
    re.IGNORECASE,
)

_HIGH_KEYWORDS = ("critical", "danger", "bug", "vulnerability", "security")
_MEDIUM_KEYWORDS = ("concern", "warning", "issue")


def detect_severity(text: str) -> Severity:
    """Keyword-based severity for a free-text finding."""
    lower = text.lower()
    if any(kw in lower for kw in _HIGH_KEYWORDS):
        return "high"
    if any(kw in lower for kw in _MEDIUM_KEYWORDS):
        return "medium"
    return "low"


def extract_summary(text: str) -> tuple[str | None, int | None]:
    """Return the summary sentence and the offset where it was found."""
    for pattern in _SUMMARY_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip(), match.start(1)
    return None, None


def _line_start(text: str, offset: int) -> int:
    return text.rfind("\n", 0, offset) + 1


def _issue_from(description: str) -> Finding:
    is_security = _SECURITY_KEYWORDS.search(description) is not None
    severity = detect_severity(description)
    if is_security and severity in ("low", "medium"):
        severity = "high"
    return Finding(
        category="security" if is_security else "potential-bug",
        severity=severity,
        description=description,
    )


def parse_review_text(text: str, filename: str) -> FileReview:
    """
    Turn a free-text review into a FileReview.

    Bulleted ``Bug:/Issue:/Concern:`` lines become issues and
    ``Suggestion:/Recommendation:/Consider:`` lines become suggestions.
    Any other line mentioning security or performance keywords becomes a
    security issue or a performance suggestion respectively. Each line
    contributes at most one finding.

    Args:
        text: Raw response from Gemini
        filename: File the review is about

    Returns:
        FileReview tagged with source "llm"
    """
    summary, summary_offset = extract_summary(text)
    consumed: set[int] = set()
    if summary_offset is not None:
        consumed.add(_line_start(text, summary_offset))

    issues: list[Finding] = []
    suggestions: list[Finding] = []

    for match in _ISSUE_PATTERN.finditer(text):
        consumed.add(_line_start(text, match.start()))
        issues.append(_issue_from(match.group(1).strip()))

    for match in _SUGGESTION_PATTERN.finditer(text):
        start = _line_start(text, match.start())
        if start in consumed:
            continue
        consumed.add(start)
        suggestions.append(
            Finding(
                category="best-practice",
                severity="low",
                description=match.group(1).strip(),
            )
        )

    offset = 0
    for raw_line in text.split("\n"):
        start, offset = offset, offset + len(raw_line) + 1
        line = raw_line.strip()
        if not line or start in consumed:
            continue
        if _SECURITY_KEYWORDS.search(line):
            issues.append(
                Finding(category="security", severity="high", description=line)
            )
        elif _PERFORMANCE_KEYWORDS.search(line):
            suggestions.append(
                Finding(category="performance", severity="low", description=line)
            )

    if not issues and not suggestions:
        logger.debug("No structured findings extracted for %s", filename)

    return FileReview(
        filename=filename,
        rating=derive_rating(issues),
        summary=summary or DEFAULT_SUMMARY,
        issues=tuple(issues),
        suggestions=tuple(suggestions),
        source="llm",
    )
