"""Analysis strategies that turn a ChangedFile into a FileReview.

``StaticAnalyzer`` runs the rule registry. ``GeminiAnalyzer`` asks Gemini
for a free-text review and parses it; when that fails it returns a degraded
``AnalysisOutcome`` and ``analyze_file`` falls back to the static scan for
that file only.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from config import Settings, call_gemini
from llm_parsing import parse_review_text
from mock_data import MOCK_RESPONSE
from models import ChangedFile, FileReview
from prompts import SYSTEM_PROMPT, build_user_prompt
from scanner import scan_file

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalysisOutcome:
    """Either a FileReview or the reason the analysis degraded."""

    review: FileReview | None = None
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.review is None


class Analyzer(Protocol):
    name: str

    def analyze(self, file: ChangedFile) -> AnalysisOutcome: ...


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------
class StaticAnalyzer:
    """Pattern-based analysis using the rule registry."""

    name = "static"

    def analyze(self, file: ChangedFile) -> AnalysisOutcome:
        return AnalysisOutcome(review=scan_file(file))


class GeminiAnalyzer:
    """Gemini-assisted analysis with heuristic parsing of the response."""

    name = "gemini"

    def __init__(self, api_key: str | None, model: str, use_mock: bool = False):
        self.api_key = api_key
        self.model = model
        self.use_mock = use_mock

    def _complete(self, file: ChangedFile) -> str:
        if self.use_mock:
            return MOCK_RESPONSE
        return call_gemini(
            SYSTEM_PROMPT,
            build_user_prompt(file.filename, file.status, file.patch),
            api_key=self.api_key or "",
            model=self.model,
        )

    def analyze(self, file: ChangedFile) -> AnalysisOutcome:
        try:
            text = self._complete(file)
        except Exception as e:
            return AnalysisOutcome(error=str(e))

        if not text.strip():
            return AnalysisOutcome(error="Empty response from Gemini")

        return AnalysisOutcome(review=parse_review_text(text, file.filename))


def build_analyzer(settings: Settings) -> Analyzer:
    """Pick the analysis strategy once, from resolved settings."""
    if settings.use_llm:
        logger.info("Using Gemini-assisted analysis (%s)", settings.model)
        return GeminiAnalyzer(settings.gemini_api_key, settings.model, settings.use_mock)
    logger.info("Using pattern-based analysis")
    return StaticAnalyzer()


# ---------------------------------------------------------------------------
# Single fallback site
# ---------------------------------------------------------------------------
def analyze_file(file: ChangedFile, analyzer: Analyzer) -> FileReview:
    """Analyze *file*, falling back to the static scan when *analyzer* degrades."""
    outcome = analyzer.analyze(file)
    if outcome.review is not None:
        return outcome.review

    logger.warning(
        "%s analysis failed for %s, using static analysis: %s",
        analyzer.name,
        file.filename,
        outcome.error,
    )
    return scan_file(file)
