"""
Base repository class with shared unit-of-work handling.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session, sessionmaker

from ..registry import EntityRegistry

LOGGER = logging.getLogger(__name__)


class BaseRepository:
    """
    Base class for all repositories.

    Holds only the session factory and the entity registry. Sessions are
    created per call by ``unit_of_work`` and never stored on the instance,
    so one repository can be shared between threads.
    """

    def __init__(self, session_factory: sessionmaker[Session], registry: EntityRegistry) -> None:
        self._session_factory = session_factory
        self._registry = registry

    @property
    def registry(self) -> EntityRegistry:
        """Expose the entity registry used to resolve type tags."""
        return self._registry

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """
        Open a session and a transaction bounding exactly one operation.

        The transaction commits when the block exits normally and rolls back
        when it raises; the exception is re-raised. The session is closed
        in both cases.
        """
        with self._session_factory() as session:
            with session.begin():
                yield session
            LOGGER.debug("Unit of work committed")


__all__ = ["BaseRepository"]
