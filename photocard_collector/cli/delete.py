"""Delete command: pcard delete <id>"""

from photocard_collector.db import get_connection, init_db, UserPhotocardRepository


def register(subparsers):
    """Register the delete subcommand."""
    parser = subparsers.add_parser(
        "delete",
        help="Remove a photocard from your collection",
        description="Delete an entry from your collection. The catalog entry is kept.",
    )
    parser.add_argument("id", type=int, help="Collection entry ID to delete")
    parser.add_argument(
        "-y", "--yes", action="store_true", help="Skip confirmation prompt"
    )
    parser.set_defaults(func=run)


def run(args):
    """Run the delete command."""
    conn = get_connection(args.db_path)
    init_db(conn)

    collection_repo = UserPhotocardRepository(conn)

    item = collection_repo.get_for_user(args.id, args.user_id)

    if not item:
        print(f"No collection entry found with ID: {args.id}")
        return 1

    p = item.photocard
    card_desc = f"{p.member} - {p.album_name}" + (f" ({p.store})" if p.store else "")

    if not args.yes:
        print(f"About to delete: {card_desc}")
        print(f"  Condition: {item.entry.condition}")
        confirm = input("Are you sure? (y/N): ").strip().lower()
        if confirm != "y":
            print("Cancelled.")
            return 0

    deleted = collection_repo.remove(args.id, args.user_id)
    conn.commit()

    if deleted:
        print(f"Deleted entry #{args.id}: {card_desc}")
        return 0
    print(f"Failed to delete entry #{args.id}")
    return 1
