"""
PatchLens Agent - LangGraph-based PR review pipeline

The review of a pull request runs as a state machine:

    fetch_pr_data -> analyze_files -> aggregate_results -> post_review

Nodes run one after another. A failed fetch ends the run with ``error`` set,
and the review is only posted when the caller asked for it.
"""

import logging
from dataclasses import dataclass, field

from langgraph.graph import END, START, StateGraph

import config  # noqa: F401  loads .env and configures logging
from aggregator import aggregate
from analyzer import Analyzer, StaticAnalyzer
from formatter import format_for_github
from github_client import (
    PRMetadata,
    ReviewSubmission,
    fetch_changed_files,
    fetch_pr_metadata,
    post_review,
)
from models import ChangedFile, ReviewedFile, ReviewSet
from reviewer import choose_review_event, review_files

logger = logging.getLogger(__name__)


# =============================================================================
# STATE DEFINITION
# =============================================================================
@dataclass
class ReviewState:
    """
    State that flows through the review graph.

    Each node can read any field and return updates to specific fields.
    LangGraph automatically merges the updates into the state.
    """

    # Input (required)
    repo: str  # e.g., "octocat/hello-world"
    pr_number: int  # e.g., 1
    token: str = ""

    # Options
    analyzer: Analyzer = field(default_factory=StaticAnalyzer)
    post: bool = False  # Whether to post the review to GitHub
    approve: bool = False  # Allow APPROVE when no issues were found

    # Intermediate data (populated by nodes)
    pr: PRMetadata | None = None
    files: list[ChangedFile] = field(default_factory=list)
    reviewed: list[ReviewedFile] = field(default_factory=list)
    review: ReviewSet | None = None

    # Output
    review_event: str | None = None
    review_posted: bool = False
    review_id: int | None = None
    error: str | None = None


# =============================================================================
# NODE FUNCTIONS
# =============================================================================
def fetch_pr_data(state: ReviewState) -> dict:
    """
    Node 1: Fetch PR metadata and changed files from GitHub.

    Reads: repo, pr_number, token
    Updates: pr, files, error
    """
    logger.info("📥 Fetching PR #%d from %s...", state.pr_number, state.repo)

    try:
        pr = fetch_pr_metadata(state.repo, state.pr_number, state.token)
        files = fetch_changed_files(state.repo, state.pr_number, state.token)
    except ValueError as e:
        logger.error("Failed to fetch PR: %s", e)
        return {"error": str(e)}

    logger.info("   PR: %s by %s, %d file(s)", pr.title, pr.author, len(files))
    return {"pr": pr, "files": files}


def analyze_files(state: ReviewState) -> dict:
    """
    Node 2: Analyze every changed file in order.

    Reads: files, analyzer
    Updates: reviewed
    """
    logger.info("🔍 Analysing %d file(s)...", len(state.files))
    return {"reviewed": review_files(state.files, state.analyzer)}


def aggregate_results(state: ReviewState) -> dict:
    """
    Node 3: Fold per-file reviews into a ReviewSet.

    Reads: reviewed, pr, approve
    Updates: review, review_event
    """
    review = aggregate(state.reviewed, scope="pr", pr=state.pr)
    return {
        "review": review,
        "review_event": choose_review_event(review.stats, state.approve),
    }


def post_review_node(state: ReviewState) -> dict:
    """
    Node 4: Post the summary review to GitHub.

    Reads: repo, pr_number, token, review, review_event
    Updates: review_posted, review_id, error
    """
    logger.info("📝 Posting %s review to GitHub...", state.review_event)

    submission = ReviewSubmission(
        body=format_for_github(state.review),
        event=state.review_event or "COMMENT",
    )

    try:
        review_id = post_review(state.repo, state.pr_number, submission, state.token)
    except ValueError as e:
        logger.error("   ❌ Failed to post review: %s", e)
        return {"review_posted": False, "error": str(e)}

    logger.info("   ✅ Posted review #%d", review_id)
    return {"review_posted": True, "review_id": review_id}


# =============================================================================
# DECISION FUNCTIONS (for conditional edges)
# =============================================================================
def _get(state, key):
    # LangGraph may pass state as dict or dataclass
    return state.get(key) if isinstance(state, dict) else getattr(state, key)


def route_after_fetch(state: ReviewState) -> str:
    """Stop when the PR could not be fetched."""
    return "end" if _get(state, "error") else "analyze_files"


def should_post_review(state: ReviewState) -> str:
    """
    Decide whether to post a review or end.

    Returns:
        "post_review" if the caller asked for posting
        "end" otherwise
    """
    if _get(state, "post"):
        logger.info("🔀 Decision: posting review")
        return "post_review"

    logger.info("🔀 Decision: not posting")
    return "end"


# =============================================================================
# GRAPH CONSTRUCTION
# =============================================================================
def build_review_graph() -> StateGraph:
    """Build the sequential review workflow graph."""
    graph = StateGraph(ReviewState)

    graph.add_node("fetch_pr_data", fetch_pr_data)
    graph.add_node("analyze_files", analyze_files)
    graph.add_node("aggregate_results", aggregate_results)
    graph.add_node("post_review", post_review_node)

    graph.add_edge(START, "fetch_pr_data")
    graph.add_conditional_edges(
        "fetch_pr_data",
        route_after_fetch,
        {"analyze_files": "analyze_files", "end": END},
    )
    graph.add_edge("analyze_files", "aggregate_results")
    graph.add_conditional_edges(
        "aggregate_results",
        should_post_review,
        {"post_review": "post_review", "end": END},
    )
    graph.add_edge("post_review", END)

    return graph


def create_agent():
    """Create and compile the review agent."""
    return build_review_graph().compile()


def run_pr_review(
    repo: str,
    pr_number: int,
    token: str,
    analyzer: Analyzer,
    post: bool = False,
    approve: bool = False,
) -> dict:
    """Run the review graph for one PR and return the final state."""
    agent = create_agent()
    initial_state = ReviewState(
        repo=repo,
        pr_number=pr_number,
        token=token,
        analyzer=analyzer,
        post=post,
        approve=approve,
    )
    logger.info("🤖 Running PatchLens on %s PR #%d", repo, pr_number)
    return agent.invoke(initial_state)
