from discdb_api.config import DEFAULT_REPO, load_settings


def test_defaults(monkeypatch):
    for var in ("DISCDB_REPO", "DISCDB_BRANCH", "GITHUB_TOKEN", "DISCDB_TIMEOUT", "DISCDB_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    settings = load_settings()
    assert settings.repo == DEFAULT_REPO
    assert settings.branch == "main"
    assert settings.github_token is None
    assert settings.timeout == 15.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DISCDB_REPO", "me/discs")
    monkeypatch.setenv("DISCDB_BRANCH", "data")
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    monkeypatch.setenv("DISCDB_LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.raw_url.endswith("/me/discs/data/disc_database.jsonl")
    assert settings.github_token == "secret"
    assert settings.log_level == "DEBUG"


def test_empty_token_means_unconfigured(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "")
    assert load_settings().github_token is None
