"""Show command: pcard show <id>"""

from photocard_collector.cli.parse_cmd import print_fields
from photocard_collector.db import get_connection, init_db, UserPhotocardRepository


def register(subparsers):
    """Register the show subcommand."""
    parser = subparsers.add_parser(
        "show",
        help="Show details for a collection entry",
        description="Display full details for a photocard in your collection.",
    )
    parser.add_argument("id", type=int, help="Collection entry ID")
    parser.set_defaults(func=run)


def run(args):
    """Run the show command."""
    conn = get_connection(args.db_path)
    init_db(conn)

    item = UserPhotocardRepository(conn).get_for_user(args.id, args.user_id)

    if not item:
        print(f"No collection entry found with ID: {args.id}")
        return 1

    entry, photocard = item.entry, item.photocard

    print()
    print("=" * 60)
    print(f"Collection Entry #{entry.id}")
    print("=" * 60)
    print_fields(photocard.to_dict())
    print()

    print(f"Condition:         {entry.condition}")
    print(f"Acquired:          {entry.acquired_date or 'N/A'}")
    if entry.notes:
        print(f"Notes:             {entry.notes}")
    print(f"Your Image:        {entry.user_image_url}")
    print()

    print(f"Added:             {entry.created_at}")
    print(f"Updated:           {entry.updated_at}")
    print(f"Catalog ID:        {photocard.id} ({photocard.filename})")
    print("=" * 60)
    return 0
