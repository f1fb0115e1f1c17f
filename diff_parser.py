"""Parser for unified diff format using unidiff library."""

from unidiff import PatchSet
from unidiff.constants import DEV_NULL
from unidiff.errors import UnidiffParseError

from models import ChangedFile, FileStatus


def _strip_prefix(path: str) -> str:
    return path[2:] if path[:2] in ("a/", "b/") else path


def file_status(patched_file) -> FileStatus:
    """Map unidiff's new/deleted/rename markers onto a ChangedFile status."""
    if patched_file.is_added_file:
        return "added"
    if patched_file.is_removed_file:
        return "deleted"
    if patched_file.is_rename:
        return "renamed"
    return "modified"


def parse_diff(diff_text: str) -> list[ChangedFile]:
    """
    Parse a unified diff into ChangedFile records.

    The patch text of each file holds only its hunks (``@@`` headers and
    lines), so line numbers in findings are relative to the hunks.

    Args:
        diff_text: Raw unified diff string, e.g. the output of ``git diff``

    Returns:
        List of ChangedFile objects, one per file

    Raises:
        ValueError: If the diff cannot be parsed
    """
    if not diff_text.strip():
        return []

    try:
        patch_set = PatchSet(diff_text)
    except UnidiffParseError as e:
        raise ValueError(f"Failed to parse diff: {e}") from e

    files = []
    for patched_file in patch_set:
        status = file_status(patched_file)
        source = _strip_prefix(patched_file.source_file)
        target = _strip_prefix(patched_file.target_file)

        files.append(
            ChangedFile(
                filename=source if patched_file.target_file == DEV_NULL else target,
                status=status,
                patch="".join(str(hunk) for hunk in patched_file).rstrip("\n"),
                additions=patched_file.added,
                deletions=patched_file.removed,
                previous_filename=source if status == "renamed" else None,
            )
        )

    return files
