"""
Error taxonomy shared by the registry, pagination and repository layers.

None of these escape the public repository operations; they are carried
inside ``Failure`` outcomes instead.
"""

from __future__ import annotations


class CrudKitError(Exception):
    """Base class for every error raised by crudkit."""


class StoreError(CrudKitError):
    """A store-level failure: connectivity, constraint violation, bad SQL."""

    def __init__(self, operation: str, entity: str, cause: BaseException) -> None:
        self.operation = operation
        self.entity = entity
        self.cause = cause
        super().__init__(f"{operation} on {entity} failed: {cause}")


class MappingError(CrudKitError):
    """The entity type or one of its columns cannot be resolved."""


class UnknownEntityError(MappingError, LookupError):
    """No entity is registered under the requested type tag."""

    def __init__(self, tag: object) -> None:
        self.tag = tag
        super().__init__(f"Unknown entity type: {tag!r}")


class UnknownColumnError(MappingError, LookupError):
    """The entity has no mapped column with the requested name."""

    def __init__(self, entity: str, column: str) -> None:
        self.entity = entity
        self.column = column
        super().__init__(f"{entity} has no column {column!r}")


class InvalidPageError(CrudKitError, ValueError):
    """The requested page window is malformed."""


__all__ = [
    "CrudKitError",
    "InvalidPageError",
    "MappingError",
    "StoreError",
    "UnknownColumnError",
    "UnknownEntityError",
]
