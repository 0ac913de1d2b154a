import pytest

from cropscan.config import Config

ENV_VARS = (
    "LOG_LEVEL",
    "HOST",
    "PORT",
    "UPLOAD_PROVIDER",
    "URL_PROVIDER",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "CLAUDE_API_KEY",
    "ANTHROPIC_API_KEY",
    "CLAUDE_MODEL",
    "GEMINI_API_KEY",
    "GEMINI_API_URL",
    "GEMINI_MODEL",
    "UPLOAD_DIR",
    "SERVICE_API_KEY",
)


@pytest.fixture
def clean_env(monkeypatch):
    """No .env file and no provider variables leaking in from the host."""
    monkeypatch.setattr("cropscan.config.load_dotenv", lambda **_: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def _make_config(**overrides) -> Config:
    values = dict(
        log_level="INFO",
        host="127.0.0.1",
        port=8000,
        upload_provider="claude",
        url_provider="openai-chat",
        openai_api_key="sk-test",
        openai_model="gpt-4.1-mini",
        anthropic_api_key="claude-test",
        claude_model="claude-sonnet-4-20250514",
        gemini_api_key="gemini-test",
        gemini_api_url=None,
        gemini_model="gemini-2.0-flash",
        upload_dir=None,
        service_api_key=None,
    )
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def make_config():
    return _make_config

