"""
Repository classes for database access.

- BaseRepository: session factory, registry and the per-call unit of work
- GenericRepository: CRUD, pagination and lookups for any registered entity
"""

from .base import BaseRepository
from .generic import GenericRepository

__all__ = ["BaseRepository", "GenericRepository"]
