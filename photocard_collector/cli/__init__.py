"""CLI entry point and subcommand assembly."""

import argparse
import logging
import sys

from photocard_collector.db import get_db_path
from photocard_collector.utils import get_user_id


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="pcard",
        description="Photocard Collector - Catalog photocards and manage your collection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--db",
        metavar="PATH",
        help="Database path (default: $HOME/.photocards/collection.sqlite, or PHOTOCARD_DB env var)",
    )
    parser.add_argument(
        "--user",
        metavar="ID",
        help="User whose collection to manage (default: PHOTOCARD_USER env var or login name)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    from photocard_collector.cli import (
        add,
        catalog_cmd,
        db_cmd,
        delete,
        edit,
        import_cmd,
        list_cmd,
        parse_cmd,
        show,
        stats,
    )

    modules = [db_cmd, parse_cmd, catalog_cmd, import_cmd, add, list_cmd, show, edit, delete, stats]

    for module in modules:
        module.register(subparsers)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    args.db_path = get_db_path(args.db)
    args.user_id = get_user_id(args.user)

    result = args.func(args)
    if isinstance(result, int):
        sys.exit(result)
