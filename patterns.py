"""Detection rules applied to patch text.

Three kinds of rule exist:

- ``LineRule``: a regex tested against one line at a time.
- ``LookaheadRule``: a regex on one line plus a check on the line after it.
- ``PatchRule``: a regex tested once against the whole patch, only for
  files with matching extensions.

Each rule carries a category and a severity; the scanner decides whether a
match becomes an issue or a suggestion.
"""

import re
from dataclasses import dataclass, field
from typing import Literal

from models import Category, Severity

MAX_LINE_LENGTH = 120

# Leading diff marker on a patch line (added, removed or context)
_DIFF_MARKER = re.compile(r"^[+\- ]")


def strip_diff_marker(line: str) -> str:
    """Drop the leading ``+``/``-``/space a unified diff puts on each line."""
    return _DIFF_MARKER.sub("", line, count=1)


# ---------------------------------------------------------------------------
# Rule variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class LineRule:
    """A rule evaluated against a single line."""

    name: str
    pattern: re.Pattern
    category: Category
    severity: Severity
    description: str  # may use {line} and {length}
    kind: Literal["line"] = field(default="line", init=False)

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None

    def describe(self, line: str) -> str:
        return self.description.format(line=line.strip(), length=len(line))


@dataclass(frozen=True)
class LookaheadRule:
    """A rule that needs the line following the matching one."""

    name: str
    pattern: re.Pattern
    next_line: re.Pattern
    category: Category
    severity: Severity
    description: str
    kind: Literal["lookahead"] = field(default="lookahead", init=False)

    def matches(self, line: str, following: str | None) -> bool:
        if following is None or not self.pattern.search(line):
            return False
        return self.next_line.fullmatch(strip_diff_marker(following).strip()) is not None

    def describe(self, line: str) -> str:
        return self.description.format(line=line.strip(), length=len(line))


@dataclass(frozen=True)
class PatchRule:
    """A rule evaluated once against the whole patch of certain file types."""

    name: str
    pattern: re.Pattern
    extensions: frozenset[str]
    category: Category
    severity: Severity
    description: str
    kind: Literal["patch"] = field(default="patch", init=False)

    def applies_to(self, filename: str) -> bool:
        _, dot, ext = filename.rpartition(".")
        return bool(dot) and ext.lower() in self.extensions

    def matches(self, patch: str) -> bool:
        return self.pattern.search(patch) is not None


Rule = LineRule | LookaheadRule | PatchRule


def _line(name, pattern, category, severity, description, flags=re.IGNORECASE):
    return LineRule(name, re.compile(pattern, flags), category, severity, description)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
_CREDENTIAL_HINT = "Potential hardcoded credential detected ({name}). Use environment variables instead."

LINE_RULES: tuple[LineRule, ...] = (
    # Hardcoded credentials
    _line(
        "Hardcoded Password",
        r"""password\s*[:=]\s*['"][^'"]+['"]""",
        "security",
        "high",
        _CREDENTIAL_HINT.format(name="password"),
    ),
    _line(
        "Hardcoded API Key",
        r"""api[_-]?key\s*[:=]\s*['"][^'"]+['"]""",
        "security",
        "high",
        _CREDENTIAL_HINT.format(name="API key"),
    ),
    _line(
        "Hardcoded Secret",
        r"""secret\s*[:=]\s*['"][^'"]+['"]""",
        "security",
        "high",
        _CREDENTIAL_HINT.format(name="secret"),
    ),
    _line(
        "Generic Token",
        r"""token\s*[:=]\s*['"][A-Za-z0-9_\-]{20,}['"]""",
        "security",
        "medium",
        _CREDENTIAL_HINT.format(name="token"),
    ),
    _line(
        "Database URL",
        r"(?:mysql|postgres(?:ql)?|mongodb(?:\+srv)?)://[^:/\s]+:[^@\s]+@",
        "security",
        "high",
        "Database connection string with inline credentials. Move it to configuration.",
    ),
    _line(
        "AWS Key",
        r"\b(?:AKIA|ASIA)[A-Z0-9]{16}\b",
        "security",
        "critical",
        "AWS access key ID detected. Revoke it and load credentials from the environment.",
        flags=0,
    ),
    _line(
        "GitHub Token",
        r"\bgh[pousr]_[A-Za-z0-9]{36,}",
        "security",
        "critical",
        "GitHub token detected. Revoke it and use a secret store instead.",
        flags=0,
    ),
    _line(
        "Private Key",
        r"-----BEGIN\s+(?:RSA\s+|EC\s+|DSA\s+|OPENSSH\s+)?PRIVATE\s+KEY-----",
        "security",
        "critical",
        "Private key committed to the repository. Remove it and rotate the key.",
    ),
    # Risky constructs
    _line(
        "Eval Usage",
        r"\beval\s*\(",
        "security",
        "high",
        "eval() executes arbitrary code. Avoid dynamic code execution.",
    ),
    _line(
        "Inner HTML",
        r"\.innerHTML\s*=(?!=)",
        "security",
        "medium",
        "Assigning to innerHTML can introduce XSS. Use textContent or sanitize the markup.",
    ),
    _line(
        "Command Injection",
        r"\b(?:exec(?:Sync)?\s*\(\s*[^)]+\)|os\.system\s*\(|shell\s*=\s*True)",
        "security",
        "high",
        "Shell command built at runtime. Pass arguments as a list and avoid the shell.",
    ),
    _line(
        "SQL Injection Risk",
        r"""['"]\s*\+\s*[^;]+\+\s*['"]""",
        "security",
        "medium",
        "String concatenation that may build a query. Use parameterized queries.",
    ),
    _line(
        "Weak Crypto",
        r"\b(?:md5|sha1)\b",
        "security",
        "medium",
        "Weak hash algorithm (MD5/SHA-1). Use SHA-256 or a password hashing function.",
    ),
    _line(
        "Disabled SSL",
        r"rejectUnauthorized\s*:\s*false|verify\s*=\s*False",
        "security",
        "high",
        "Certificate validation is disabled. Keep TLS verification enabled.",
    ),
    _line(
        "Debug Mode",
        r"\bdebug\s*[:=]\s*true\b",
        "security",
        "low",
        "Debug mode enabled. Make sure it is off in production.",
    ),
    # Style and maintenance
    _line(
        "Debug Statement",
        r"console\.(?:log|debug)\s*\(|\bprint\s*\(",
        "style",
        "low",
        "Debug statement found. Consider removing before merging.",
    ),
    _line(
        "Marker Comment",
        r"\b(?:TODO|FIXME|HACK)\b",
        "maintenance",
        "low",
        'Found "{line}" - ensure this is tracked in your issue tracker.',
        flags=0,
    ),
    _line(
        "Promise Chain",
        r"^(?!.*\bawait\b).*\.then\s*\(",
        "potential-bug",
        "low",
        "Promise chain detected. Consider using async/await for better readability.",
        flags=0,
    ),
    _line(
        "Long Line",
        r"^.{%d,}$" % (MAX_LINE_LENGTH + 1),
        "style",
        "low",
        "Line exceeds %d characters ({length} chars). Consider breaking it up." % MAX_LINE_LENGTH,
        flags=0,
    ),
)

LOOKAHEAD_RULES: tuple[LookaheadRule, ...] = (
    LookaheadRule(
        "Empty Catch Block",
        re.compile(r"\bcatch\b|\bexcept\b"),
        re.compile(r"\}|pass"),
        "best-practice",
        "low",
        "Empty catch block detected. Consider at least logging the error.",
    ),
)

PATCH_RULES: tuple[PatchRule, ...] = (
    PatchRule(
        "Legacy Var Declaration",
        re.compile(r"\bvar\s"),
        frozenset({"js", "jsx", "mjs", "cjs", "ts", "tsx"}),
        "style",
        "low",
        'Use "let" or "const" instead of "var" for better scoping.',
    ),
)

RULES: tuple[Rule, ...] = LINE_RULES + LOOKAHEAD_RULES + PATCH_RULES


def evaluate(line: str) -> list[tuple[str, Severity]]:
    """Return ``(rule_name, severity)`` for every line rule matching *line*."""
    return [(rule.name, rule.severity) for rule in LINE_RULES if rule.matches(line)]
