"""Database management commands: pcard db init"""

from photocard_collector.db import get_connection, init_db, SCHEMA_VERSION


def register(subparsers):
    """Register the db subcommand."""
    db_parser = subparsers.add_parser("db", help="Database management commands")
    db_subparsers = db_parser.add_subparsers(dest="db_command", metavar="<subcommand>")

    init_parser = db_subparsers.add_parser("init", help="Initialize the database")
    init_parser.add_argument(
        "--force", action="store_true", help="Drop and recreate all tables"
    )
    init_parser.set_defaults(func=run_init)

    db_parser.set_defaults(func=lambda args: db_parser.print_help())


def run_init(args):
    """Initialize the database."""
    conn = get_connection(args.db_path)

    if args.force:
        confirm = input("This deletes the catalog and all collections. Continue? (y/N): ")
        if confirm.strip().lower() != "y":
            print("Cancelled.")
            return

    created = init_db(conn, force=args.force)

    if created:
        print(f"Database initialized at: {args.db_path}")
        print(f"Schema version: {SCHEMA_VERSION}")
    else:
        print(f"Database already up to date (version {SCHEMA_VERSION})")
        print(f"Location: {args.db_path}")
