"""
Outcome values returned by the generic repository.

Every operation yields exactly one of ``Success``, ``NotFound`` or
``Failure``, so a missing row is never confused with a broken store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..exceptions import CrudKitError

T = TypeVar("T")
D = TypeVar("D")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The operation committed and produced ``value``."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class NotFound:
    """No row matched; nothing was written."""

    entity: str
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False

    def unwrap_or(self, default: D) -> D:
        return default


@dataclass(frozen=True)
class Failure:
    """The operation was rolled back because of ``cause``."""

    cause: CrudKitError

    @property
    def ok(self) -> bool:
        return False

    def unwrap_or(self, default: D) -> D:
        return default


Outcome = Success[T] | NotFound | Failure


__all__ = ["Failure", "NotFound", "Outcome", "Success"]
