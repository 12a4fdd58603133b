"""Import command: pcard import"""

from photocard_collector.db import get_connection, init_db, PhotocardRepository
from photocard_collector.importers import get_importer, detect_format, IMPORTERS


def register(subparsers):
    """Register the import subcommand."""
    parser = subparsers.add_parser(
        "import",
        help="Bulk-import photocards into the catalog",
        description="Import a directory of images or a CSV manifest into the catalog.",
    )
    parser.add_argument("source", metavar="SOURCE", help="Image directory or CSV manifest")
    parser.add_argument(
        "-f",
        "--format",
        choices=list(IMPORTERS.keys()) + ["auto"],
        default="auto",
        help="Import format (default: auto-detect)",
    )
    parser.add_argument(
        "--no-recursive",
        action="store_true",
        help="Only scan the top level of an image directory",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview import without saving to database",
    )
    parser.set_defaults(func=run)


def run(args):
    """Run the import command."""
    conn = get_connection(args.db_path)
    init_db(conn)

    if args.format == "auto":
        try:
            format_name = detect_format(args.source)
            print(f"Auto-detected format: {format_name}")
        except ValueError as e:
            print(f"Error: {e}")
            return 1
    else:
        format_name = args.format

    importer = get_importer(format_name)
    if args.no_recursive and hasattr(importer, "recursive"):
        importer.recursive = False

    photocard_repo = PhotocardRepository(conn)

    print(f"Importing from {args.source} ({importer.format_name})...")
    if args.dry_run:
        print("(Dry run - no changes will be saved)")
    print()

    try:
        result = importer.import_source(
            source=args.source,
            conn=conn,
            photocard_repo=photocard_repo,
            dry_run=args.dry_run,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print()
    print("=" * 50)
    print("IMPORT SUMMARY".center(50))
    print("=" * 50)
    print(f"Total files:   {result.total_rows}")
    print(f"Cards added:   {result.cards_added}")
    print(f"Cards skipped: {result.cards_skipped}")

    if result.errors:
        print()
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors[:10]:
            print(f"  - {error}")
        if len(result.errors) > 10:
            print(f"  ... and {len(result.errors) - 10} more")

    print("=" * 50)

    if args.dry_run:
        print("\nDry run complete. No changes were saved.")
    else:
        print(f"\nImport complete. Database: {args.db_path}")
    return 0
