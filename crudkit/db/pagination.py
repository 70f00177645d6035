"""
Page windows and LIKE pattern helpers.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import InvalidPageError


@dataclass(frozen=True)
class PageRequest:
    """
    A contiguous result window.

    ``offset`` is a raw row offset, not a page index. Use ``for_page`` to
    convert a 1-based page number.
    """

    offset: int = 0
    limit: int = 20

    def __post_init__(self) -> None:
        if isinstance(self.offset, bool) or not isinstance(self.offset, int):
            raise InvalidPageError(f"offset must be an integer, got {self.offset!r}")
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise InvalidPageError(f"limit must be an integer, got {self.limit!r}")
        if self.offset < 0:
            raise InvalidPageError(f"offset must be >= 0, got {self.offset}")
        if self.limit <= 0:
            raise InvalidPageError(f"limit must be > 0, got {self.limit}")

    @classmethod
    def for_page(cls, page: int, size: int) -> PageRequest:
        """Window for a 1-based page number."""
        if page < 1:
            raise InvalidPageError(f"page must be >= 1, got {page}")
        return cls(offset=(page - 1) * size, limit=size)


def escape_like(value: str, escape: str = "\\") -> str:
    """
    Escape LIKE wildcards so ``value`` matches literally.

    Pass the same ``escape`` character to the query, e.g.
    ``f"%{escape_like(term)}%"`` with ``escape="\\\\"``.
    """
    if len(escape) != 1:
        raise ValueError("escape must be a single character")
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


__all__ = ["PageRequest", "escape_like"]
