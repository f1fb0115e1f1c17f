"""GitHub API client for PR operations."""

import functools
import logging
from dataclasses import dataclass
from datetime import datetime

from github import Auth, Github
from github.GithubException import GithubException

from config import validate_repo
from models import ChangedFile

logger = logging.getLogger(__name__)

REVIEW_EVENTS = ("APPROVE", "REQUEST_CHANGES", "COMMENT")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------
@dataclass
class PRMetadata:
    """Pull Request metadata."""

    number: int
    title: str
    body: str | None
    author: str
    state: str
    base_branch: str
    head_branch: str
    additions: int
    deletions: int
    changed_files: int
    url: str
    draft: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ReviewSubmission:
    """A summary review to submit to a PR."""

    body: str = ""
    event: str = "COMMENT"  # one of REVIEW_EVENTS


# ---------------------------------------------------------------------------
# GitHub client
# ---------------------------------------------------------------------------
@functools.lru_cache(maxsize=1)
def get_github_client(token: str) -> Github:
    """Create or return the GitHub client for *token*."""
    if not token:
        raise ValueError(
            "GITHUB_TOKEN not found. Set it in .env file.\n"
            "Get your token at: https://github.com/settings/tokens"
        )
    return Github(auth=Auth.Token(token))


def _error_message(e: GithubException) -> str:
    data = e.data if isinstance(e.data, dict) else {}
    return data.get("message", str(e))


def _get_pull(repo: str, pr_number: int, token: str):
    repo = validate_repo(repo)
    client = get_github_client(token)
    return client.get_repo(repo).get_pull(pr_number)


# ---------------------------------------------------------------------------
# Read operations
# ---------------------------------------------------------------------------
def fetch_pr_metadata(repo: str, pr_number: int, token: str) -> PRMetadata:
    """
    Fetch PR metadata from GitHub.

    Args:
        repo: Repository in "owner/repo" format (e.g., "octocat/hello-world")
        pr_number: Pull request number
        token: GitHub access token

    Returns:
        PRMetadata object with PR details

    Raises:
        ValueError: If PR not found or access denied
    """
    try:
        pr = _get_pull(repo, pr_number, token)

        return PRMetadata(
            number=pr.number,
            title=pr.title,
            body=pr.body,
            author=pr.user.login,
            state=pr.state,
            base_branch=pr.base.ref,
            head_branch=pr.head.ref,
            additions=pr.additions,
            deletions=pr.deletions,
            changed_files=pr.changed_files,
            url=pr.html_url,
            draft=pr.draft,
            created_at=pr.created_at,
            updated_at=pr.updated_at,
        )
    except GithubException as e:
        if e.status == 404:
            raise ValueError(f"PR #{pr_number} not found in {repo}") from e
        raise ValueError(f"Failed to fetch pull request: {_error_message(e)}") from e


def fetch_changed_files(repo: str, pr_number: int, token: str) -> list[ChangedFile]:
    """
    Fetch list of files changed in a PR.

    Args:
        repo: Repository in "owner/repo" format
        pr_number: Pull request number
        token: GitHub access token

    Returns:
        List of ChangedFile objects with status, sizes and patches
    """
    try:
        pr = _get_pull(repo, pr_number, token)

        files = []
        for file in pr.get_files():
            files.append(
                ChangedFile(
                    filename=file.filename,
                    status=file.status,
                    additions=file.additions,
                    deletions=file.deletions,
                    patch=file.patch or "",
                    previous_filename=file.previous_filename,
                )
            )
        return files

    except GithubException as e:
        if e.status == 404:
            raise ValueError(f"PR #{pr_number} not found in {repo}") from e
        raise ValueError(
            f"Failed to fetch pull request files: {_error_message(e)}"
        ) from e


# ---------------------------------------------------------------------------
# Write operations
# ---------------------------------------------------------------------------
def post_review(
    repo: str,
    pr_number: int,
    review: ReviewSubmission,
    token: str,
) -> int:
    """
    Post a review to a PR.

    Args:
        repo: Repository in "owner/repo" format
        pr_number: Pull request number
        review: ReviewSubmission with body and event type
        token: GitHub access token

    Returns:
        Review ID

    Raises:
        ValueError: If the event is unknown or posting fails
    """
    if review.event not in REVIEW_EVENTS:
        raise ValueError(
            f"Invalid review event: {review.event!r}. "
            f"Expected one of {', '.join(REVIEW_EVENTS)}."
        )

    try:
        pr = _get_pull(repo, pr_number, token)

        # Get the latest commit SHA (required for review API)
        commit = pr.get_commits().reversed[0]

        github_review = pr.create_review(
            commit=commit,
            body=review.body,
            event=review.event,
        )

        logger.info(
            "Posted %s review %d on PR #%d",
            review.event,
            github_review.id,
            pr_number,
        )
        return github_review.id

    except GithubException as e:
        error_msg = _error_message(e)
        logger.error("Failed to post review: %s", error_msg)

        if isinstance(e.data, dict) and "errors" in e.data:
            for error in e.data["errors"]:
                logger.error("  - %s", error)

        raise ValueError(f"Failed to post review: {error_msg}") from e
