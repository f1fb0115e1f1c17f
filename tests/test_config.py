import pytest

from config import DEFAULT_MODEL, Settings, validate_repo


@pytest.mark.parametrize("repo", ["octocat/hello-world", "my.org/repo_name"])
def test_valid_repo(repo):
    assert validate_repo(repo) == repo


@pytest.mark.parametrize("repo", ["octocat", "a/b/c", "", "owner/ repo"])
def test_invalid_repo(repo):
    with pytest.raises(ValueError, match="Invalid repo format"):
        validate_repo(repo)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-test")
    monkeypatch.setenv("USE_MOCK", "false")
    monkeypatch.setenv("CI", "true")

    settings = Settings.from_env()

    assert settings.github_token == "gh-token"
    assert settings.model == "gemini-test"
    assert settings.use_llm
    assert not settings.color


def test_token_argument_wins(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")

    assert Settings.from_env(github_token="from-flag").github_token == "from-flag"


def test_defaults(monkeypatch):
    for name in ("GITHUB_TOKEN", "GEMINI_API_KEY", "GEMINI_MODEL", "USE_MOCK"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.model == DEFAULT_MODEL
    assert not settings.use_llm
    with pytest.raises(ValueError, match="GITHUB_TOKEN not found"):
        settings.require_github_token()


def test_mock_flag_enables_llm(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("USE_MOCK", "true")

    assert Settings.from_env().use_llm
