"""
Engine and session factory construction.

One engine and one ``sessionmaker`` are cached per process. Both are safe to
share between threads; sessions created from the factory are not, and the
repositories never keep one beyond a single call.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from ..config import DatabaseSettings, Settings, get_settings

LOGGER = logging.getLogger(__name__)

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def build_engine(database: DatabaseSettings) -> Engine:
    """Create a new engine from database settings."""

    options: dict[str, Any] = {
        "echo": database.echo,
        "pool_pre_ping": database.pool_pre_ping,
    }
    if not database.is_sqlite:
        options["pool_size"] = database.pool_size
    return create_engine(database.url, **options)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Create a session factory bound to the engine.

    Instances stay readable after commit and close so that repository
    results can be handed back to callers.
    """
    return sessionmaker(
        bind=engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine(settings: Settings | None = None) -> Engine:
    """Create or return cached engine."""
    global _engine
    if _engine is None:
        runtime_settings = settings or get_settings()
        _engine = build_engine(runtime_settings.database)
        LOGGER.debug("Created engine for %s", _engine.url.render_as_string(hide_password=True))
    return _engine


def get_session_factory(settings: Settings | None = None) -> sessionmaker[Session]:
    """Create or return cached session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(get_engine(settings))
    return _session_factory


def create_schema(engine: Engine, base: type[DeclarativeBase]) -> None:
    """Create every table known to the declarative base that does not exist yet."""

    base.metadata.create_all(engine)
    LOGGER.info("Schema ready: %s", ", ".join(sorted(base.metadata.tables)))


def dispose_engine() -> None:
    """Dispose the cached engine and forget the cached factory."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


__all__ = [
    "build_engine",
    "build_session_factory",
    "create_schema",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
]
