"""
Typed registry mapping entity type tags to their storage schema.

A tag is either the mapped class itself or a registered name (the class
name by default, the table name is accepted as well). Mapper inspection
happens once, at registration time.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase, InstrumentedAttribute

from ..exceptions import MappingError, UnknownColumnError, UnknownEntityError

LOGGER = logging.getLogger(__name__)

EntityTag = type | str


@dataclass(frozen=True)
class EntityDescriptor:
    """Storage schema of one registered entity type."""

    name: str
    model: type
    table_name: str
    primary_key: str
    columns: tuple[str, ...]
    email_column: str = "email"
    password_column: str = "password"

    def column(self, name: str) -> InstrumentedAttribute[Any]:
        """Return the mapped attribute for a column name."""
        if name not in self.columns:
            raise UnknownColumnError(self.name, name)
        return getattr(self.model, name)

    @property
    def key_column(self) -> InstrumentedAttribute[Any]:
        return getattr(self.model, self.primary_key)

    def identity(self, entity: Any) -> Any:
        """Return the primary key value carried by an instance."""
        return getattr(entity, self.primary_key)

    def as_dict(self, entity: Any) -> dict[str, Any]:
        """Column values of an instance keyed by column name."""
        return {name: getattr(entity, name) for name in self.columns}


class EntityRegistry:
    """Resolves entity tags to descriptors."""

    def __init__(self) -> None:
        self._by_model: dict[type, EntityDescriptor] = {}
        self._by_name: dict[str, EntityDescriptor] = {}
        self._by_table: dict[str, EntityDescriptor] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_base(cls, base: type[DeclarativeBase]) -> EntityRegistry:
        """Build a registry holding every class mapped on a declarative base."""
        registry = cls()
        mappers = sorted(base.registry.mappers, key=lambda mapper: mapper.class_.__name__)
        for mapper in mappers:
            registry.register(mapper.class_)
        return registry

    def register(
        self,
        model: type,
        name: str | None = None,
        *,
        email_column: str = "email",
        password_column: str = "password",
    ) -> EntityDescriptor:
        """
        Register a mapped class and return its descriptor.

        Registering the same class under the same name again is a no-op.

        Raises:
            MappingError: if the class is not mapped, has a composite primary
                key, or the name is already bound to another class.
        """
        mapper = inspect(model, raiseerr=False)
        if mapper is None or not hasattr(mapper, "column_attrs"):
            raise MappingError(f"{model!r} is not a mapped class")
        if len(mapper.primary_key) != 1:
            raise MappingError(f"{model.__name__} must have exactly one primary key column")

        entity_name = name or model.__name__
        with self._lock:
            existing = self._by_name.get(entity_name)
            if existing is not None:
                if existing.model is model:
                    return existing
                raise MappingError(
                    f"{entity_name!r} is already registered for {existing.model.__name__}"
                )

            pk_column = mapper.primary_key[0]
            pk_attr = mapper.get_property_by_column(pk_column)
            descriptor = EntityDescriptor(
                name=entity_name,
                model=model,
                table_name=mapper.local_table.name,
                primary_key=pk_attr.key,
                columns=tuple(attr.key for attr in mapper.column_attrs),
                email_column=email_column,
                password_column=password_column,
            )
            self._by_model[model] = descriptor
            self._by_name[entity_name] = descriptor
            self._by_table.setdefault(descriptor.table_name, descriptor)

        LOGGER.debug("Registered entity %s (table %s)", entity_name, descriptor.table_name)
        return descriptor

    def resolve(self, tag: EntityTag) -> EntityDescriptor:
        """Return the descriptor for a mapped class, registered name or table name."""
        if isinstance(tag, type):
            descriptor = self._by_model.get(tag)
        elif isinstance(tag, str):
            descriptor = self._by_name.get(tag) or self._by_table.get(tag)
        else:
            descriptor = None
        if descriptor is None:
            raise UnknownEntityError(tag)
        return descriptor

    def for_instance(self, entity: Any) -> EntityDescriptor:
        """Return the descriptor of an instance's class."""
        return self.resolve(type(entity))

    def names(self) -> list[str]:
        return sorted(self._by_name)

    def __contains__(self, tag: object) -> bool:
        if not isinstance(tag, (type, str)):
            return False
        try:
            self.resolve(tag)
        except UnknownEntityError:
            return False
        return True

    def __iter__(self) -> Iterator[EntityDescriptor]:
        return iter(list(self._by_name.values()))

    def __len__(self) -> int:
        return len(self._by_name)


__all__ = ["EntityDescriptor", "EntityRegistry", "EntityTag"]
