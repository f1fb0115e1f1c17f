import pytest

from aggregator import aggregate
from formatter import (
    colorize,
    format_for_github,
    render,
    status_icon,
    strip_markdown,
)
from models import ReviewSet


@pytest.fixture
def review(reviewed_files) -> ReviewSet:
    return aggregate(reviewed_files)


def test_json_round_trips(review):
    text = render(review, "json")

    assert ReviewSet.model_validate_json(text) == review
    assert '"total_security_issues": 1' in text


def test_unknown_format_falls_back_to_markdown(review):
    assert render(review, "yaml") == render(review, "markdown")
    assert render(review, "") == render(review, "markdown")


def test_markdown_output(review):
    text = render(review, "markdown")

    assert text.startswith("# Code Review Results")
    assert "| Files Analyzed | 3 |" in text
    assert "| Security Concerns | 1 |" in text
    assert "### ✨ config.js" in text
    assert "**Changes:** +2, -1" in text
    assert "⚠️ **Needs Attention**" in text
    assert "**[HIGH]**" in text
    assert "#### Suggestions" in text


def test_text_output_has_no_ansi_without_color(review):
    text = render(review, "text", color=False)

    assert "\x1b[" not in text
    assert "CODE REVIEW RESULTS" in text
    assert "Files analyzed: 3" in text
    assert "📄 config.js" in text
    assert "**" not in text


def test_text_output_with_color(review):
    plain = render(review, "text", color=False)
    colored = render(review, "text", color=True)

    assert "\x1b[" in colored
    assert "CODE REVIEW RESULTS" in colored
    assert colored != plain


def test_github_body(review):
    body = format_for_github(review)

    assert body.startswith("## Code Review Summary")
    assert "| Files Changed | 3 |" in body
    assert "| Security | ⚠️ 1 |" in body
    assert "## File Reviews" not in body
    assert render(review, "github") == body


def test_colorize_disabled_returns_text():
    assert colorize("hello", "red", enabled=False) == "hello"
    assert colorize("hello", "unknown", enabled=True) == "hello"


def test_strip_markdown():
    text = "## Title\n- **bold** and `code` with [a link](http://x)"

    assert strip_markdown(text) == "Title\nbold and code with a link"


def test_status_icon_default():
    assert status_icon("renamed") == "📦"
    assert status_icon(None) == "📄"
