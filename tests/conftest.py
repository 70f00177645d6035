"""
Shared pytest fixtures for the database, registry, repository and settings.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from crudkit.config import Settings
from crudkit.dao import Dao
from crudkit.db.engine import build_session_factory
from crudkit.db.registry import EntityRegistry
from crudkit.db.repositories import GenericRepository
from tests.test_models import MockBase, MockMember


@pytest.fixture
def db_engine() -> Iterator[Engine]:
    """Provide a fresh in-memory SQLite engine per test.

    StaticPool keeps the single in-memory connection alive across sessions.
    """
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    MockBase.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return build_session_factory(db_engine)


@pytest.fixture
def registry() -> EntityRegistry:
    """Registry of the test models; MockMember uses custom credential columns."""

    registry = EntityRegistry()
    for mapper in MockBase.registry.mappers:
        if mapper.class_ is MockMember:
            continue
        registry.register(mapper.class_)
    registry.register(MockMember, email_column="login_email", password_column="secret")
    return registry


@pytest.fixture
def repository(
    session_factory: sessionmaker[Session], registry: EntityRegistry
) -> GenericRepository:
    return GenericRepository(session_factory, registry)


@pytest.fixture
def dao(repository: GenericRepository) -> Dao:
    return Dao(repository)


@pytest.fixture
def transaction_events(session_factory: sessionmaker[Session]) -> dict[str, int]:
    """Count commits and rollbacks of sessions created by the factory."""

    counts = {"commit": 0, "rollback": 0}

    @event.listens_for(session_factory, "after_commit")
    def _on_commit(session: Session) -> None:
        counts["commit"] += 1

    @event.listens_for(session_factory, "after_soft_rollback")
    def _on_rollback(session: Session, previous_transaction: object) -> None:
        counts["rollback"] += 1

    return counts


@pytest.fixture
def settings_override(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Settings:
    """Override global settings with a file-backed SQLite database."""

    from crudkit import cli as cli_module
    from crudkit import config as config_module
    from crudkit import dao as dao_module

    base_settings = config_module.Settings()
    database = base_settings.database.model_copy(
        update={"url": f"sqlite:///{tmp_path / 'crudkit.db'}", "echo": False}
    )
    logging_conf = base_settings.logging.model_copy(update={"directory": tmp_path / "logs"})
    overrides = base_settings.model_copy(update={"database": database, "logging": logging_conf})
    for module in (config_module, cli_module, dao_module):
        monkeypatch.setattr(module, "get_settings", lambda: overrides)
    return overrides
