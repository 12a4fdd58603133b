"""Stats command: pcard stats"""

from photocard_collector.db import get_connection, init_db, PhotocardRepository, UserPhotocardRepository


def register(subparsers):
    """Register the stats subcommand."""
    parser = subparsers.add_parser(
        "stats",
        help="Show collection statistics",
        description="Display summary statistics about your collection.",
    )
    parser.set_defaults(func=run)


def run(args):
    """Run the stats command."""
    conn = get_connection(args.db_path)
    init_db(conn)

    stats = UserPhotocardRepository(conn).stats(args.user_id)
    catalog_total = PhotocardRepository(conn).count()

    print()
    print("=" * 50)
    print("COLLECTION STATISTICS".center(50))
    print("=" * 50)
    print()

    print(f"User:              {args.user_id}")
    print(f"Total Cards:       {stats['total_cards']:,}")
    print(f"Catalog Size:      {catalog_total:,}")
    if catalog_total:
        print(f"Completion:        {stats['total_cards'] / catalog_total:.1%}")
    print()

    for key, title in (
        ("by_member", "By Member:"),
        ("by_category", "By Category:"),
        ("by_release_structure", "By Release Structure:"),
        ("by_condition", "By Condition:"),
    ):
        if stats[key]:
            print(title)
            for value, count in sorted(stats[key].items()):
                print(f"  {value:<20} {count:,}")
            print()

    print("=" * 50)
