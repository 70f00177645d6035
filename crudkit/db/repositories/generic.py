"""
Generic repository serving every registered entity type.

Each public method runs inside its own unit of work and reports through an
outcome value instead of raising:

- ``Success(value)``: committed.
- ``NotFound``: no matching row, nothing written.
- ``Failure(cause)``: rolled back; ``cause`` is a ``StoreError`` wrapping the
  SQLAlchemy exception, or the mapping/page error that stopped the call.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from sqlalchemy import Select, and_, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import make_transient

from ...exceptions import CrudKitError, StoreError
from ..outcome import Failure, NotFound, Outcome, Success
from ..pagination import PageRequest
from ..registry import EntityDescriptor, EntityTag
from .base import BaseRepository

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def _tag_name(tag: Any) -> str:
    if isinstance(tag, type):
        return tag.__name__
    return str(tag)


class GenericRepository(BaseRepository):
    """CRUD, pagination and credential lookups over any registered entity."""

    def insert(self, entity: ModelT) -> Outcome[ModelT]:
        """
        Persist a new entity; its primary key is populated on success.

        An instance that was loaded or inserted before is reset to transient
        first, so this always emits an INSERT. If its row still exists the
        key collides and the call fails.
        """
        try:
            with self.unit_of_work() as session:
                self._registry.for_instance(entity)
                if inspect(entity).key is not None:
                    make_transient(entity)
                session.add(entity)
                session.flush()
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("insert", type(entity).__name__, exc)
        return Success(entity)

    def update(self, entity: ModelT) -> Outcome[ModelT]:
        """
        Write the state of an entity whose key already exists.

        Returns ``NotFound`` when the key is unset or unknown; the entity is
        never inserted by this call. On success the value is the persisted
        copy, which may be a different object than ``entity``.
        """
        try:
            with self.unit_of_work() as session:
                descriptor = self._registry.for_instance(entity)
                ident = descriptor.identity(entity)
                if ident is None or session.get(descriptor.model, ident) is None:
                    return self._not_found(descriptor, f"{descriptor.primary_key}={ident!r}")
                merged = session.merge(entity)
                session.flush()
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("update", type(entity).__name__, exc)
        return Success(merged)

    def delete(self, tag: EntityTag, ident: int) -> Outcome[Any]:
        """Remove the row with the given key; the value is the removed entity."""
        try:
            with self.unit_of_work() as session:
                descriptor = self._registry.resolve(tag)
                entity = session.get(descriptor.model, ident)
                if entity is None:
                    return self._not_found(descriptor, f"{descriptor.primary_key}={ident!r}")
                session.delete(entity)
                session.flush()
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("delete", _tag_name(tag), exc)
        return Success(entity)

    def get_by_id(self, tag: EntityTag, ident: int) -> Outcome[Any]:
        try:
            with self.unit_of_work() as session:
                descriptor = self._registry.resolve(tag)
                entity = session.get(descriptor.model, ident)
                if entity is None:
                    return self._not_found(descriptor, f"{descriptor.primary_key}={ident!r}")
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("get_by_id", _tag_name(tag), exc)
        return Success(entity)

    def get_by_like(
        self,
        tag: EntityTag,
        column: str,
        pattern: str,
        offset: int,
        limit: int,
        *,
        escape: str | None = None,
    ) -> Outcome[list[Any]]:
        """
        Return a window of rows whose ``column`` matches a LIKE pattern.

        The pattern is used verbatim: ``%abc%`` contains, ``abc%`` prefix,
        ``%abc`` suffix. Wildcards in user input are not escaped unless the
        caller does so (see ``escape_like``) and passes ``escape``.
        """
        try:
            with self.unit_of_work() as session:
                descriptor = self._registry.resolve(tag)
                page = PageRequest(offset=offset, limit=limit)
                stmt = select(descriptor.model).where(
                    descriptor.column(column).like(pattern, escape=escape)
                )
                entities = list(session.scalars(self._windowed(stmt, descriptor, page)))
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("get_by_like", _tag_name(tag), exc)
        return Success(entities)

    def get_total_rows(self, tag: EntityTag) -> Outcome[int]:
        try:
            with self.unit_of_work() as session:
                descriptor = self._registry.resolve(tag)
                total = session.scalar(select(func.count()).select_from(descriptor.model))
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("get_total_rows", _tag_name(tag), exc)
        return Success(int(total or 0))

    def get_entities(self, tag: EntityTag, offset: int, limit: int) -> Outcome[list[Any]]:
        """Return a window of rows ordered by primary key."""
        try:
            with self.unit_of_work() as session:
                descriptor = self._registry.resolve(tag)
                page = PageRequest(offset=offset, limit=limit)
                stmt = select(descriptor.model)
                entities = list(session.scalars(self._windowed(stmt, descriptor, page)))
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("get_entities", _tag_name(tag), exc)
        return Success(entities)

    def login(self, tag: EntityTag, email: str, password: str) -> Outcome[Any]:
        """
        Find the entity whose email and password columns both equal the inputs.

        This is a plain equality match against stored values. It does not
        hash or verify anything and must not back real authentication.
        When several rows match, the one with the lowest key is returned.
        """
        try:
            with self.unit_of_work() as session:
                descriptor = self._registry.resolve(tag)
                stmt = select(descriptor.model).where(
                    and_(
                        descriptor.column(descriptor.email_column) == email,
                        descriptor.column(descriptor.password_column) == password,
                    )
                )
                entity = session.scalars(self._first(stmt, descriptor)).first()
                if entity is None:
                    return self._not_found(descriptor, f"{descriptor.email_column}={email!r}")
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("login", _tag_name(tag), exc)
        return Success(entity)

    def forgotten_password(self, tag: EntityTag, email: str) -> Outcome[Any]:
        """Find the entity registered under an email address."""
        try:
            with self.unit_of_work() as session:
                descriptor = self._registry.resolve(tag)
                stmt = select(descriptor.model).where(
                    descriptor.column(descriptor.email_column) == email
                )
                entity = session.scalars(self._first(stmt, descriptor)).first()
                if entity is None:
                    return self._not_found(descriptor, f"{descriptor.email_column}={email!r}")
        except (SQLAlchemyError, CrudKitError) as exc:
            return self._failure("forgotten_password", _tag_name(tag), exc)
        return Success(entity)

    @staticmethod
    def _windowed(stmt: Select[Any], descriptor: EntityDescriptor, page: PageRequest) -> Select[Any]:
        return stmt.order_by(descriptor.key_column).offset(page.offset).limit(page.limit)

    @staticmethod
    def _first(stmt: Select[Any], descriptor: EntityDescriptor) -> Select[Any]:
        return stmt.order_by(descriptor.key_column).limit(1)

    @staticmethod
    def _not_found(descriptor: EntityDescriptor, detail: str) -> NotFound:
        LOGGER.debug("%s not found: %s", descriptor.name, detail)
        return NotFound(entity=descriptor.name, detail=detail)

    @staticmethod
    def _failure(operation: str, entity: str, exc: SQLAlchemyError | CrudKitError) -> Failure:
        if isinstance(exc, CrudKitError):
            LOGGER.warning("%s on %s rejected: %s", operation, entity, exc)
            return Failure(cause=exc)
        error = StoreError(operation, entity, exc)
        LOGGER.error("%s", error)
        return Failure(cause=error)


__all__ = ["GenericRepository"]
