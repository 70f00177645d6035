"""
Command line access to the generic repository.

Usage:
    # Create the tables of the bundled models
    crudkit init-db

    # Count, list and search rows
    crudkit count Account
    crudkit list Account --offset 0 --limit 10
    crudkit list Account --page 2 --limit 10
    crudkit search Account email "%@example.com"

    # Fetch or delete a single row
    crudkit get Account 1
    crudkit delete Account 1

The database URL comes from settings (DATABASE__URL) unless --database-url
is given. -v enables debug output from crudkit modules.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from .config import Settings, get_settings
from .db.engine import build_engine, build_session_factory, create_schema
from .db.models import Base
from .db.outcome import Failure, NotFound, Outcome
from .db.pagination import PageRequest
from .db.registry import EntityRegistry
from .db.repositories import GenericRepository
from .exceptions import InvalidPageError
from .logger import setup_logging

LOGGER = logging.getLogger(__name__)


def _add_window_arguments(parser: argparse.ArgumentParser, default_limit: int) -> None:
    start = parser.add_mutually_exclusive_group()
    start.add_argument("--offset", type=int, default=0, help="Raw row offset")
    start.add_argument("--page", type=int, help="1-based page number of --limit rows")
    parser.add_argument("--limit", type=int, default=default_limit, help="Rows to return")


def _build_parser(default_limit: int) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crudkit",
        description="Generic CRUD access to registered entities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--database-url", help="Override the configured database URL")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug messages from crudkit"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create missing tables")

    count_parser = subparsers.add_parser("count", help="Count rows of an entity")
    count_parser.add_argument("entity")

    list_parser = subparsers.add_parser("list", help="List a window of rows")
    list_parser.add_argument("entity")
    _add_window_arguments(list_parser, default_limit)

    search_parser = subparsers.add_parser("search", help="LIKE search on one column")
    search_parser.add_argument("entity")
    search_parser.add_argument("column")
    search_parser.add_argument("pattern", help="LIKE pattern, e.g. %%abc%%")
    _add_window_arguments(search_parser, default_limit)

    get_parser = subparsers.add_parser("get", help="Fetch one row by id")
    get_parser.add_argument("entity")
    get_parser.add_argument("id", type=int)

    delete_parser = subparsers.add_parser("delete", help="Delete one row by id")
    delete_parser.add_argument("entity")
    delete_parser.add_argument("id", type=int)

    return parser


def _runtime_settings(settings: Settings, args: argparse.Namespace) -> Settings:
    updates: dict[str, Any] = {}
    if args.database_url:
        updates["database"] = settings.database.model_copy(update={"url": args.database_url})
    if args.verbose:
        updates["app"] = settings.app.model_copy(update={"debug": True})
    return settings.model_copy(update=updates) if updates else settings


def _offset(args: argparse.Namespace) -> int:
    if args.page is None:
        return args.offset
    return PageRequest.for_page(args.page, args.limit).offset


def _serialize(repository: GenericRepository, entity_tag: str, entity: Any) -> dict[str, Any]:
    descriptor = repository.registry.resolve(entity_tag)
    row = descriptor.as_dict(entity)
    row.pop(descriptor.password_column, None)
    return row


def _emit(payload: Any) -> None:
    print(json.dumps(payload, default=str, ensure_ascii=False, indent=2))


def _report(outcome: Outcome[Any], render: Any) -> int:
    if isinstance(outcome, NotFound):
        print(f"Not found: {outcome.entity} {outcome.detail}".rstrip(), file=sys.stderr)
        return 1
    if isinstance(outcome, Failure):
        print(f"Error: {outcome.cause}", file=sys.stderr)
        return 1
    _emit(render(outcome.value))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point with subcommand routing."""
    base_settings = get_settings()
    parser = _build_parser(base_settings.pagination.default_limit)
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = _runtime_settings(base_settings, args)
    setup_logging(settings)

    engine = build_engine(settings.database)
    try:
        if args.command == "init-db":
            create_schema(engine, Base)
            return 0

        repository = GenericRepository(
            build_session_factory(engine),
            EntityRegistry.from_base(Base),
        )
        if args.entity not in repository.registry:
            print(
                f"Error: unknown entity {args.entity!r}; known: {', '.join(repository.registry.names())}",
                file=sys.stderr,
            )
            return 1

        def rows(entities: list[Any]) -> list[dict[str, Any]]:
            return [_serialize(repository, args.entity, entity) for entity in entities]

        def row(entity: Any) -> dict[str, Any]:
            return _serialize(repository, args.entity, entity)

        if args.command == "count":
            return _report(repository.get_total_rows(args.entity), lambda total: {"total": total})
        if args.command in ("list", "search"):
            try:
                offset = _offset(args)
            except InvalidPageError as exc:
                print(f"Error: {exc}", file=sys.stderr)
                return 1
            if args.command == "list":
                return _report(repository.get_entities(args.entity, offset, args.limit), rows)
            outcome = repository.get_by_like(
                args.entity, args.column, args.pattern, offset, args.limit
            )
            return _report(outcome, rows)
        if args.command == "get":
            return _report(repository.get_by_id(args.entity, args.id), row)
        if args.command == "delete":
            return _report(repository.delete(args.entity, args.id), row)

        parser.print_help()
        return 0
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
