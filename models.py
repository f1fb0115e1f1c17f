"""Data models for changed files, findings and review results."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["low", "medium", "high", "critical"]
Category = Literal[
    "security",
    "style",
    "maintenance",
    "best-practice",
    "potential-bug",
    "performance",
]
Rating = Literal["good", "needs-attention", "poor", "neutral"]
FileStatus = Literal[
    "added",
    "modified",
    "deleted",
    "removed",
    "renamed",
    "copied",
    "changed",
    "unchanged",
]
ReviewScope = Literal["pr", "local", "scan"]

HIGH_SEVERITIES: frozenset[str] = frozenset({"high", "critical"})


class ChangedFile(BaseModel):
    """A file changed in a pull request or local diff."""

    model_config = ConfigDict(frozen=True)

    filename: str
    status: FileStatus = "modified"
    patch: str = Field(default="", description="Unified-diff text, may be empty")
    additions: int = 0
    deletions: int = 0
    previous_filename: str | None = None


class Finding(BaseModel):
    """A single detected issue or suggestion."""

    model_config = ConfigDict(frozen=True)

    category: Category
    severity: Severity = "low"
    line: int | None = Field(
        default=None, description="1-based line number within the patch text"
    )
    description: str
    rule: str | None = Field(default=None, description="Name of the matching rule")


class FileReview(BaseModel):
    """Analysis result for a single file."""

    model_config = ConfigDict(frozen=True)

    filename: str
    rating: Rating
    summary: str
    issues: tuple[Finding, ...] = ()
    suggestions: tuple[Finding, ...] = ()
    source: Literal["static", "llm"] = "static"

    @property
    def security_issues(self) -> tuple[Finding, ...]:
        return tuple(i for i in self.issues if i.category == "security")


class FileChanges(BaseModel):
    """Change size and status shown next to a file in the report."""

    model_config = ConfigDict(frozen=True)

    status: str | None = None
    additions: int = 0
    deletions: int = 0


class ReviewedFile(BaseModel):
    """One entry of a review report: the file plus its analysis."""

    model_config = ConfigDict(frozen=True)

    filename: str
    changes: FileChanges | None = None
    analysis: FileReview


class ReviewStats(BaseModel):
    """Aggregate counts across all reviewed files."""

    model_config = ConfigDict(frozen=True)

    total_files: int = 0
    total_issues: int = 0
    total_suggestions: int = 0
    total_security_issues: int = 0


class ReviewSet(BaseModel):
    """Complete review of one review unit (a PR, a local diff or a scan)."""

    model_config = ConfigDict(frozen=True)

    summary: str = Field(default="", description="Narrative overall review")
    stats: ReviewStats = Field(default_factory=ReviewStats)
    files: tuple[ReviewedFile, ...] = ()
    scope: ReviewScope = "pr"
