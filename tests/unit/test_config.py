"""
Unit tests for settings loading.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from crudkit.config import DatabaseSettings, Environment, Settings, get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.app.name == "crudkit"
    assert settings.app.environment is Environment.LOCAL
    assert settings.database.url.startswith("postgresql+psycopg://")
    assert settings.database.pool_pre_ping is True
    assert settings.pagination.default_limit == 20


def test_nested_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE__URL", "sqlite:///override.db")
    monkeypatch.setenv("PAGINATION__DEFAULT_LIMIT", "50")
    monkeypatch.setenv("APP__ENVIRONMENT", "staging")

    settings = Settings()

    assert settings.database.url == "sqlite:///override.db"
    assert settings.database.is_sqlite
    assert settings.pagination.default_limit == 50
    assert settings.app.environment is Environment.STAGING


def test_dotenv_file_is_read(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("LOGGING__LEVEL=DEBUG\n", encoding="utf-8")

    assert Settings().logging.level == "DEBUG"


def test_blank_database_url_is_rejected() -> None:
    with pytest.raises(ValidationError):
        DatabaseSettings(url="   ")


def test_non_positive_limit_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGINATION__DEFAULT_LIMIT", "0")

    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached() -> None:
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
