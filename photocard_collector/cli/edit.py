"""Edit command: pcard edit <id>"""

from photocard_collector.db import get_connection, init_db, NotFoundError, UserPhotocardRepository
from photocard_collector.utils import normalize_condition, parse_acquired_date


def register(subparsers):
    """Register the edit subcommand."""
    parser = subparsers.add_parser(
        "edit",
        help="Edit a collection entry",
        description="Change condition, acquired date or notes of a photocard in your collection.",
    )
    parser.add_argument("id", type=int, help="Collection entry ID")
    parser.add_argument(
        "--condition",
        metavar="COND",
        help="Set condition (MINT, NEAR_MINT, GOOD, FAIR, POOR or M/NM/G/F/P)",
    )
    parser.add_argument(
        "--acquired",
        metavar="YYYY-MM-DD",
        help="Set acquired date (empty string clears it)",
    )
    parser.add_argument("--notes", metavar="TEXT", help="Set notes (empty string clears them)")
    parser.set_defaults(func=run)


def run(args):
    """Run the edit command."""
    conn = get_connection(args.db_path)
    init_db(conn)

    collection_repo = UserPhotocardRepository(conn)

    changes = {}
    try:
        if args.condition:
            changes["condition"] = normalize_condition(args.condition)
        if args.acquired is not None:
            changes["acquired_date"] = parse_acquired_date(args.acquired)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if args.notes is not None:
        changes["notes"] = args.notes or None

    if not changes:
        print("No changes specified. Use --help to see available options.")
        return 0

    try:
        collection_repo.update(args.id, args.user_id, **changes)
    except NotFoundError:
        print(f"No collection entry found with ID: {args.id}")
        return 1
    conn.commit()

    summary = ", ".join(
        f"{k}={v}" if k != "notes" else "notes=..." for k, v in changes.items()
    )
    print(f"Updated entry #{args.id}: {summary}")
    return 0
