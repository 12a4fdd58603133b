"""List command: pcard list"""

import json

from photocard_collector.db import (
    get_connection,
    init_db,
    PhotocardFilter,
    UserPhotocardRepository,
)


def register(subparsers):
    """Register the list subcommand."""
    parser = subparsers.add_parser(
        "list",
        help="List photocards in your collection",
        description="Show your collection, newest first, with optional filters.",
    )
    parser.add_argument("--member", metavar="MEMBER", help="Filter by member")
    parser.add_argument("--category", metavar="CAT", help="Filter by category")
    parser.add_argument("--album", metavar="NAME", help="Filter by album name (partial match)")
    parser.add_argument("--store", metavar="NAME", help="Filter by store (partial match)")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.set_defaults(func=run)


def run(args):
    """Run the list command."""
    conn = get_connection(args.db_path)
    init_db(conn)

    collection_repo = UserPhotocardRepository(conn)

    card_filter = PhotocardFilter(
        member=args.member.upper() if args.member else None,
        category=args.category.upper() if args.category else None,
        album_name=args.album,
        store=args.store,
    )
    items = collection_repo.list_for_user(args.user_id, card_filter)

    if args.json:
        print(json.dumps([item.to_dict() for item in items], indent=2))
        return

    if not items:
        print(f"No photocards found in {args.user_id}'s collection.")
        return

    print(f"{'ID':>5}  {'Member':<7}  {'Album':<24}  {'Store':<20}  {'Version':<8}  {'Condition':<10}  {'Acquired':<10}")
    print("-" * 100)

    for item in items:
        e, p = item.entry, item.photocard
        print(
            f"{e.id:>5}  "
            f"{p.member:<7}  "
            f"{p.album_name[:24]:<24}  "
            f"{(p.store or '-')[:20]:<20}  "
            f"{p.version:<8}  "
            f"{e.condition:<10}  "
            f"{e.acquired_date or '-':<10}"
        )

    print("-" * 100)
    print(f"Showing {len(items)} photocard(s)")

    total = collection_repo.count(args.user_id)
    if total > len(items):
        print(f"(Total in collection: {total})")
