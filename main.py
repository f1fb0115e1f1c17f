"""PatchLens command line interface."""

import json
import os
from pathlib import Path
from typing import NoReturn, Optional

import typer

from agent import run_pr_review
from analyzer import build_analyzer
from config import ENV_EXAMPLE, Settings, validate_repo
from formatter import FORMATS, render
from reviewer import has_critical, review_local, scan_paths, security_findings

app = typer.Typer(
    name="patchlens",
    help="PatchLens - review pull requests and local git changes",
    add_completion=False,
    no_args_is_help=True,
)

_SEVERITY_ICONS = {"critical": "🔴", "high": "🟠", "medium": "🟡", "low": "⚪"}


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _write_or_echo(text: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(text)
        return
    output.write_text(text, encoding="utf-8")
    typer.echo(f"📁 Review saved to: {output}")


def _run_pr(
    repo: str,
    pr_number: int,
    settings: Settings,
    fmt: str,
    post: bool,
    approve: bool,
) -> None:
    """Shared flow of the `pr` and `action` commands."""
    try:
        token = settings.require_github_token()
        validate_repo(repo)
    except ValueError as e:
        _fail(str(e))

    final_state = run_pr_review(
        repo,
        pr_number,
        token,
        build_analyzer(settings),
        post=post,
        approve=approve,
    )

    error = final_state.get("error")
    review = final_state.get("review")

    if review is not None:
        typer.echo(render(review, fmt, color=settings.color))
    if error:
        _fail(error)
    if final_state.get("review_posted"):
        typer.echo(
            f"✅ Posted {final_state.get('review_event')} review "
            f"#{final_state.get('review_id')} on {repo}#{pr_number}"
        )


# =============================================================================
# COMMANDS
# =============================================================================
@app.command(name="pr")
def pr_command(
    owner: str = typer.Option(..., "--owner", "-o", help="Repository owner"),
    repo: str = typer.Option(..., "--repo", "-r", help="Repository name"),
    pr_number: int = typer.Option(..., "--pr-number", "-p", help="Pull request number"),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="GitHub token (defaults to GITHUB_TOKEN)"
    ),
    fmt: str = typer.Option(
        "markdown", "--format", "-f", help=f"Output format: {', '.join(FORMATS)}"
    ),
    post: bool = typer.Option(False, "--post", help="Post the review to GitHub"),
    approve: bool = typer.Option(
        False, "--approve", help="Approve the PR when no issues are found"
    ),
):
    """Review a GitHub pull request."""
    settings = Settings.from_env(github_token=token)
    _run_pr(f"{owner}/{repo}", pr_number, settings, fmt, post, approve)


@app.command(name="local")
def local_command(
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Base branch to compare against"),
    compare: Optional[str] = typer.Option(
        None, "--compare", "-c", help="Branch with the changes (defaults to current)"
    ),
    staged: bool = typer.Option(False, "--staged", "-s", help="Review staged changes only"),
    fmt: str = typer.Option(
        "markdown", "--format", "-f", help=f"Output format: {', '.join(FORMATS)}"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the review to a file"
    ),
    cwd: Path = typer.Option(Path("."), "--cwd", help="Repository working directory"),
):
    """Review changes in the local git working tree."""
    settings = Settings.from_env()

    try:
        review = review_local(
            build_analyzer(settings),
            cwd=cwd,
            staged=staged,
            base=base,
            compare=compare,
        )
    except ValueError as e:
        _fail(str(e))

    color = settings.color and output is None
    _write_or_echo(render(review, fmt, color=color), output)


@app.command(name="setup")
def setup_command(
    path: Path = typer.Option(Path(".env.example"), "--path", help="File to write"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    """Write an example environment file."""
    if path.exists() and not force:
        _fail(f"{path} already exists (use --force to overwrite)")

    path.write_text(ENV_EXAMPLE, encoding="utf-8")
    typer.echo(f"✅ Wrote {path}")
    typer.echo("Copy it to .env and fill in GITHUB_TOKEN (and GEMINI_API_KEY if wanted).")


def read_event(event_path: Path) -> tuple[str, int]:
    """
    Extract ``owner/repo`` and the PR number from a GitHub Actions event payload.

    Raises:
        ValueError: If the payload is missing or has no pull request
    """
    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Cannot read event payload {event_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid event payload {event_path}: {e}") from e

    if not isinstance(payload, dict):
        raise ValueError(f"Invalid event payload {event_path}: expected a JSON object")

    pull_request = payload.get("pull_request") or {}
    pr_number = pull_request.get("number") or payload.get("number")
    if not pr_number:
        raise ValueError("Event payload does not reference a pull request")

    repo = (payload.get("repository") or {}).get("full_name") or os.getenv(
        "GITHUB_REPOSITORY"
    )
    if not repo:
        raise ValueError("Repository not found in event payload or GITHUB_REPOSITORY")

    return repo, int(pr_number)


@app.command(name="action")
def action_command(
    event_path: Optional[Path] = typer.Option(
        None, "--event-path", help="Event payload (defaults to GITHUB_EVENT_PATH)"
    ),
    fmt: str = typer.Option("markdown", "--format", "-f", help="Output format"),
    post: bool = typer.Option(True, "--post/--no-post", help="Post the review to GitHub"),
):
    """Review the pull request that triggered a GitHub Actions run."""
    settings = Settings.from_env()

    if event_path is None:
        env_path = os.getenv("GITHUB_EVENT_PATH")
        if not env_path:
            _fail("GITHUB_EVENT_PATH not set. Run inside GitHub Actions or pass --event-path.")
        event_path = Path(env_path)

    try:
        repo, pr_number = read_event(event_path)
    except ValueError as e:
        _fail(str(e))

    _run_pr(repo, pr_number, settings, fmt, post, approve=False)


@app.command(name="scan")
def scan_command(
    paths: list[Path] = typer.Argument(..., help="Files or directories to scan"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Scan directories recursively"),
    severity: Optional[str] = typer.Option(
        None, "--severity", help="Filter by severity: CRITICAL, HIGH, MEDIUM, LOW"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save results to a JSON file"
    ),
):
    """Scan files for security issues; exits 1 when a critical issue is found."""
    try:
        review = scan_paths(paths, recursive=recursive)
        findings = security_findings(review, severity)
    except ValueError as e:
        _fail(str(e))

    typer.echo("🔒 Security Scanner\n")
    typer.echo(f"Scanned {review.stats.total_files} files")
    typer.echo(f"Found {len(findings)} security issues\n")

    if findings:
        counts = {level: 0 for level in _SEVERITY_ICONS}
        for filename, finding in findings:
            counts[finding.severity] += 1
            typer.echo(
                f"{_SEVERITY_ICONS[finding.severity]} [{finding.severity.upper()}] "
                f"{finding.rule or finding.description}"
            )
            typer.echo(f"   File: {filename}:{finding.line}")
        typer.echo("")
        for level, count in counts.items():
            typer.echo(f"{level.upper()}: {count}")
    else:
        typer.echo("✅ No security issues found!")

    if output is not None:
        output.write_text(render(review, "json"), encoding="utf-8")
        typer.echo(f"\n📁 Report saved to: {output}")

    if has_critical(findings):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
