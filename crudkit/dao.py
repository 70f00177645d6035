"""
Classic DAO facade.

``Dao`` keeps the boolean / ``None`` / zero contract for callers that do
not care why an operation produced nothing. Use ``Dao.repository`` to get
the outcome-returning ``GenericRepository`` underneath.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from sqlalchemy.orm import DeclarativeBase

from .config import Settings, get_settings
from .db.engine import get_session_factory
from .db.models import Base
from .db.registry import EntityRegistry, EntityTag
from .db.repositories import GenericRepository

EntityT = TypeVar("EntityT")


@runtime_checkable
class CrudMethods(Protocol[EntityT]):
    """Operations every DAO offers."""

    def insert(self, entity: EntityT) -> bool: ...

    def update(self, entity: EntityT) -> bool: ...

    def delete(self, tag: EntityTag, ident: int) -> bool: ...

    def get_by_id(self, tag: EntityTag, ident: int) -> EntityT | None: ...

    def get_by_like(
        self, tag: EntityTag, column: str, pattern: str, offset: int, limit: int
    ) -> list[EntityT] | None: ...

    def get_total_rows(self, tag: EntityTag) -> int: ...

    def get_entities(self, tag: EntityTag, offset: int, limit: int) -> list[EntityT] | None: ...

    def login(self, tag: EntityTag, email: str, password: str) -> EntityT | None: ...

    def forgotten_password(self, tag: EntityTag, email: str) -> EntityT | None: ...


class Dao(CrudMethods[Any]):
    """
    Generic DAO over every entity known to the repository's registry.

    Failures are logged by the repository and reported here only as
    ``False``, ``None`` or ``0``.
    """

    def __init__(self, repository: GenericRepository) -> None:
        self._repository = repository

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        base: type[DeclarativeBase] = Base,
    ) -> Dao:
        """Build a DAO on the cached session factory for every model of ``base``."""
        runtime_settings = settings or get_settings()
        repository = GenericRepository(
            get_session_factory(runtime_settings),
            EntityRegistry.from_base(base),
        )
        return cls(repository)

    @property
    def repository(self) -> GenericRepository:
        return self._repository

    def insert(self, entity: Any) -> bool:
        return self._repository.insert(entity).ok

    def update(self, entity: Any) -> bool:
        return self._repository.update(entity).ok

    def delete(self, tag: EntityTag, ident: int) -> bool:
        return self._repository.delete(tag, ident).ok

    def get_by_id(self, tag: EntityTag, ident: int) -> Any | None:
        return self._repository.get_by_id(tag, ident).unwrap_or(None)

    def get_by_like(
        self,
        tag: EntityTag,
        column: str,
        pattern: str,
        offset: int,
        limit: int,
        *,
        escape: str | None = None,
    ) -> list[Any] | None:
        outcome = self._repository.get_by_like(tag, column, pattern, offset, limit, escape=escape)
        return outcome.unwrap_or(None)

    def get_total_rows(self, tag: EntityTag) -> int:
        return self._repository.get_total_rows(tag).unwrap_or(0)

    def get_entities(self, tag: EntityTag, offset: int, limit: int) -> list[Any] | None:
        return self._repository.get_entities(tag, offset, limit).unwrap_or(None)

    def login(self, tag: EntityTag, email: str, password: str) -> Any | None:
        """Equality lookup on stored email and password; not a secure login."""
        return self._repository.login(tag, email, password).unwrap_or(None)

    def forgotten_password(self, tag: EntityTag, email: str) -> Any | None:
        return self._repository.forgotten_password(tag, email).unwrap_or(None)


__all__ = ["CrudMethods", "Dao"]
