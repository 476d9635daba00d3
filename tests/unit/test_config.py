"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from report_extractor.config import DatabaseSettings, ExtractionSettings, LLMSettings, Settings


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///local.db")
    monkeypatch.setenv("LLM_PROVIDER", "openrouter")
    monkeypatch.setenv("LLM_MODEL", "anthropic/claude-3.5-sonnet")
    monkeypatch.setenv("LLM_API_KEY", "env-key")
    monkeypatch.setenv("EXTRACTION_CENTURY_PIVOT", "50")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.db.connection_url == "sqlite+aiosqlite:///local.db"
    assert settings.llm.provider == "openrouter"
    assert settings.llm.model_name == "anthropic/claude-3.5-sonnet"
    assert settings.llm.api_key.get_secret_value() == "env-key"
    assert settings.extraction.century_pivot == 50
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "url",
    ["postgres://u:p@db:5432/reports", "postgresql://u:p@db:5432/reports"],
)
def test_postgres_urls_use_asyncpg(url):
    settings = DatabaseSettings(DATABASE_URL=url)

    assert settings.connection_url == "postgresql+asyncpg://u:p@db:5432/reports"


def test_api_key_is_masked():
    settings = LLMSettings(LLM_API_KEY="very-secret")

    assert "very-secret" not in repr(settings)


def test_century_pivot_range():
    with pytest.raises(ValidationError):
        ExtractionSettings(EXTRACTION_CENTURY_PIVOT=100)


def test_log_level_is_case_insensitive():
    assert Settings(LOG_LEVEL="debug").log_level == "DEBUG"


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValidationError, match="LOG_LEVEL"):
        Settings(LOG_LEVEL="verbose")
