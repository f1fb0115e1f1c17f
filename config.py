"""Shared configuration and utilities for PatchLens."""

import functools
import logging
import os
import re
import sys
from dataclasses import dataclass

from dotenv import load_dotenv
from google import genai

# ---------------------------------------------------------------------------
# Environment & logging (initialised once on first import)
# ---------------------------------------------------------------------------
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_MODEL: str = "gemini-2.5-flash-lite"

# Repo format: "owner/repo"
_REPO_PATTERN = re.compile(r"^[\w.-]+/[\w.-]+$")

ENV_EXAMPLE = """# PatchLens configuration
# GitHub personal access token (repo scope), used by `pr` and `action`
GITHUB_TOKEN=your_github_token_here

# Optional: Gemini API key. When set, files are reviewed by Gemini and the
# pattern scanner is only used as a fallback.
GEMINI_API_KEY=

# Optional: Gemini model override
GEMINI_MODEL=gemini-2.5-flash-lite

# Optional: return a canned Gemini response instead of calling the API
USE_MOCK=false

# Optional: DEBUG, INFO, WARNING, ERROR
LOG_LEVEL=INFO
"""


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() in ("1", "true", "yes")


def _color_enabled() -> bool:
    """Decorate output only on an interactive terminal outside CI."""
    if os.getenv("CI") or os.getenv("GITHUB_ACTIONS"):
        return False
    return sys.stdout.isatty()


@dataclass(frozen=True)
class Settings:
    """Runtime configuration resolved once at startup and passed down."""

    github_token: str | None = None
    gemini_api_key: str | None = None
    model: str = DEFAULT_MODEL
    use_mock: bool = False
    color: bool = False

    @property
    def use_llm(self) -> bool:
        """Gemini-assisted analysis is enabled by the presence of an API key."""
        return bool(self.gemini_api_key) or self.use_mock

    @classmethod
    def from_env(cls, github_token: str | None = None) -> "Settings":
        return cls(
            github_token=github_token or os.getenv("GITHUB_TOKEN") or None,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
            use_mock=_env_flag("USE_MOCK"),
            color=_color_enabled(),
        )

    def require_github_token(self) -> str:
        if not self.github_token:
            raise ValueError(
                "GITHUB_TOKEN not found. Pass --token or set it in .env file.\n"
                "Get your token at: https://github.com/settings/tokens"
            )
        return self.github_token


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------
def validate_repo(repo: str) -> str:
    """Validate repository string matches 'owner/repo' format.

    Returns *repo* unchanged on success; raises ``ValueError`` otherwise.
    """
    if not _REPO_PATTERN.match(repo):
        raise ValueError(
            f"Invalid repo format: {repo!r}. Expected 'owner/repo' "
            f"(e.g. 'octocat/hello-world')."
        )
    return repo


# ---------------------------------------------------------------------------
# Gemini API
# ---------------------------------------------------------------------------
@functools.lru_cache(maxsize=1)
def get_gemini_client(api_key: str) -> genai.Client:
    """Return a Gemini client (created once per process)."""
    if not api_key:
        raise ValueError("GEMINI_API_KEY not found. Set it in .env file.")
    return genai.Client(api_key=api_key)


def call_gemini(
    system_prompt: str,
    user_prompt: str,
    api_key: str,
    model: str = DEFAULT_MODEL,
) -> str:
    """Call Gemini once and return the raw response text."""
    client = get_gemini_client(api_key)
    response = client.models.generate_content(
        model=model,
        contents=user_prompt,
        config={"system_instruction": system_prompt, "max_output_tokens": 4000},
    )
    return response.text or ""
