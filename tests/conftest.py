import pytest

from models import ChangedFile, FileChanges, ReviewedFile
from scanner import scan_file


def reviewed(filename: str, patch: str, status: str = "modified") -> ReviewedFile:
    file = ChangedFile(filename=filename, status=status, patch=patch, additions=2, deletions=1)
    return ReviewedFile(
        filename=filename,
        changes=FileChanges(status=status, additions=2, deletions=1),
        analysis=scan_file(file),
    )


@pytest.fixture
def reviewed_files() -> list[ReviewedFile]:
    return [
        reviewed("config.js", '+const apiKey = "sk-1234567890";', status="added"),
        reviewed("util.py", "+# TODO: split this module"),
        reviewed("README.md", "+Just docs."),
    ]
