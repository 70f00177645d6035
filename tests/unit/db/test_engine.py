"""
Unit tests for engine and session factory construction.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import inspect

from crudkit.config import DatabaseSettings, Settings
from crudkit.db import engine as engine_module
from crudkit.db.engine import (
    build_engine,
    build_session_factory,
    create_schema,
    dispose_engine,
    get_engine,
    get_session_factory,
)
from crudkit.db.models import Base


@pytest.fixture
def sqlite_settings(tmp_path) -> Iterator[Settings]:
    dispose_engine()
    yield Settings(database=DatabaseSettings(url=f"sqlite:///{tmp_path / 'engine.db'}"))
    dispose_engine()


def test_build_engine_for_sqlite(tmp_path) -> None:
    engine = build_engine(DatabaseSettings(url=f"sqlite:///{tmp_path / 'a.db'}"))
    try:
        assert engine.dialect.name == "sqlite"
    finally:
        engine.dispose()


def test_session_factory_keeps_instances_loaded(tmp_path) -> None:
    engine = build_engine(DatabaseSettings(url=f"sqlite:///{tmp_path / 'b.db'}"))
    try:
        factory = build_session_factory(engine)

        assert factory.kw["expire_on_commit"] is False
        assert factory.kw["autoflush"] is False
    finally:
        engine.dispose()


def test_engine_and_factory_are_cached(sqlite_settings: Settings) -> None:
    engine = get_engine(sqlite_settings)

    assert get_engine(sqlite_settings) is engine
    assert get_session_factory(sqlite_settings) is get_session_factory(sqlite_settings)
    assert get_session_factory(sqlite_settings).kw["bind"] is engine


def test_dispose_resets_cache(sqlite_settings: Settings) -> None:
    first = get_engine(sqlite_settings)
    dispose_engine()

    assert engine_module._engine is None
    assert get_engine(sqlite_settings) is not first


def test_create_schema(sqlite_settings: Settings) -> None:
    engine = get_engine(sqlite_settings)

    create_schema(engine, Base)

    assert "accounts" in inspect(engine).get_table_names()
