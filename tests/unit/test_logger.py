"""
Unit tests for logging setup.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from crudkit import logger as logger_module
from crudkit.config import AppSettings, DatabaseSettings, LoggingSettings, Settings
from crudkit.logger import PACKAGE_LOGGER, setup_logging

_TOUCHED_LOGGERS = ("", PACKAGE_LOGGER, "sqlalchemy.engine")


@pytest.fixture
def isolated_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Restore handlers and levels that dictConfig replaced."""
    saved = {
        name: (logging.getLogger(name).handlers[:], logging.getLogger(name).level)
        for name in _TOUCHED_LOGGERS
    }
    monkeypatch.setattr(logger_module, "_configured", False)
    try:
        yield
    finally:
        for name, (handlers, level) in saved.items():
            current = logging.getLogger(name)
            for handler in current.handlers:
                if handler not in handlers:
                    handler.close()
            current.handlers[:] = handlers
            current.setLevel(level)


def _settings(tmp_path: Path, *, level: str = "INFO", debug: bool = False, **logging_opts) -> Settings:
    return Settings(
        app=AppSettings(debug=debug),
        logging=LoggingSettings(level=level, directory=tmp_path / "logs", **logging_opts),
    )


def _root_handler_types() -> list[type]:
    return [type(handler) for handler in logging.getLogger().handlers]


def test_file_handler_writes_package_records(isolated_logging: None, tmp_path: Path) -> None:
    setup_logging(_settings(tmp_path))

    logging.getLogger(f"{PACKAGE_LOGGER}.db").info("hello")

    assert RotatingFileHandler in _root_handler_types()
    assert "hello" in (tmp_path / "logs" / "crudkit.log").read_text(encoding="utf-8")


def test_file_output_can_be_disabled(isolated_logging: None, tmp_path: Path) -> None:
    setup_logging(_settings(tmp_path, to_file=False))

    assert RotatingFileHandler not in _root_handler_types()
    assert not (tmp_path / "logs").exists()


def test_debug_lowers_only_the_package_logger(isolated_logging: None, tmp_path: Path) -> None:
    setup_logging(_settings(tmp_path, level="WARNING", debug=True))

    assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG
    assert logging.getLogger().level == logging.WARNING


def test_package_logger_follows_configured_level(isolated_logging: None, tmp_path: Path) -> None:
    setup_logging(_settings(tmp_path, level="ERROR"))

    assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR


@pytest.mark.parametrize(("echo", "expected"), [(True, logging.INFO), (False, logging.WARNING)])
def test_sql_echo_controls_engine_logger(
    isolated_logging: None, tmp_path: Path, echo: bool, expected: int
) -> None:
    settings = _settings(tmp_path).model_copy(
        update={"database": DatabaseSettings(url="sqlite://", echo=echo)}
    )

    setup_logging(settings)

    assert logging.getLogger("sqlalchemy.engine").level == expected


def test_setup_is_idempotent(isolated_logging: None, tmp_path: Path) -> None:
    setup_logging(_settings(tmp_path))
    handlers = logging.getLogger().handlers[:]

    setup_logging(_settings(tmp_path, level="DEBUG", debug=True))

    assert logging.getLogger().handlers == handlers
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO


def test_unknown_level_is_rejected(isolated_logging: None, tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unsupported log level"):
        setup_logging(_settings(tmp_path, level="LOUD"))
