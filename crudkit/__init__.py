"""
Generic data access over SQLAlchemy: CRUD, pagination and lookups for any
registered entity type.
"""

from .config import Settings, get_settings
from .dao import CrudMethods, Dao
from .db import EntityRegistry, Failure, GenericRepository, NotFound, PageRequest, Success

__all__ = [
    "CrudMethods",
    "Dao",
    "EntityRegistry",
    "Failure",
    "GenericRepository",
    "NotFound",
    "PageRequest",
    "Settings",
    "Success",
    "get_settings",
]
