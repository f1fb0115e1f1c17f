"""Read changes from a local git working tree."""

import logging
import subprocess
from pathlib import Path

from diff_parser import parse_diff
from models import ChangedFile

logger = logging.getLogger(__name__)


def run_git(args: list[str], cwd: str | Path = ".") -> str:
    """
    Run a git command and return its stdout.

    Raises:
        ValueError: If git is missing or the command fails
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise ValueError("git executable not found on PATH") from e
    except subprocess.CalledProcessError as e:
        message = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise ValueError(f"git {' '.join(args)} failed: {message}") from e

    return result.stdout


def get_current_branch(cwd: str | Path = ".") -> str:
    return run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd).strip()


def get_staged_changes(cwd: str | Path = ".") -> list[ChangedFile]:
    """Changes staged in the index."""
    try:
        files = parse_diff(run_git(["diff", "--cached"], cwd))
    except ValueError as e:
        raise ValueError(f"Failed to get staged changes: {e}") from e
    logger.info("Found %d staged file(s)", len(files))
    return files


def untracked_file(path: str, cwd: str | Path = ".") -> ChangedFile | None:
    """An untracked file as an added ChangedFile; None for binary content."""
    try:
        content = (Path(cwd) / path).read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.debug("Skipping binary untracked file %s", path)
        return None
    except OSError as e:
        raise ValueError(f"Cannot read untracked file {path}: {e}") from e

    lines = content.splitlines()
    return ChangedFile(
        filename=path,
        status="added",
        patch="\n".join("+" + line for line in lines),
        additions=len(lines),
    )


def get_untracked_files(cwd: str | Path = ".") -> list[ChangedFile]:
    """New files git does not track yet, honouring .gitignore."""
    output = run_git(["ls-files", "--others", "--exclude-standard"], cwd)
    files = []
    for path in output.splitlines():
        if not path:
            continue
        file = untracked_file(path, cwd)
        if file is not None:
            files.append(file)
    return files


def get_uncommitted_changes(cwd: str | Path = ".") -> list[ChangedFile]:
    """Unstaged changes to tracked files, followed by untracked files."""
    try:
        files = parse_diff(run_git(["diff"], cwd))
        files.extend(get_untracked_files(cwd))
    except ValueError as e:
        raise ValueError(f"Failed to get uncommitted changes: {e}") from e
    logger.info("Found %d changed file(s) in working tree", len(files))
    return files


def get_branch_diff(
    base_branch: str,
    compare_branch: str | None = None,
    cwd: str | Path = ".",
) -> list[ChangedFile]:
    """
    Changes between two branches.

    Args:
        base_branch: Branch to compare against (e.g. "main")
        compare_branch: Branch with the changes; defaults to the current branch
        cwd: Repository working directory

    Returns:
        List of ChangedFile objects parsed from ``git diff base compare``
    """
    try:
        if not compare_branch:
            compare_branch = get_current_branch(cwd)
        files = parse_diff(run_git(["diff", base_branch, compare_branch], cwd))
    except ValueError as e:
        raise ValueError(f"Failed to get branch diff: {e}") from e

    logger.info(
        "Found %d changed file(s) between %s and %s",
        len(files),
        base_branch,
        compare_branch,
    )
    return files
