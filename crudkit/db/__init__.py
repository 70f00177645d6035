"""
Database toolkit exposing ORM models, the entity registry and repositories.
"""

from .models import Account, Base
from .outcome import Failure, NotFound, Outcome, Success
from .pagination import PageRequest, escape_like
from .registry import EntityDescriptor, EntityRegistry
from .repositories import BaseRepository, GenericRepository

__all__ = [
    "Account",
    "Base",
    "BaseRepository",
    "EntityDescriptor",
    "EntityRegistry",
    "Failure",
    "GenericRepository",
    "NotFound",
    "Outcome",
    "PageRequest",
    "Success",
    "escape_like",
]
