"""Catalog commands: pcard catalog add/list/show"""

import json

from photocard_collector.cli.parse_cmd import print_fields
from photocard_collector.db import (
    get_connection,
    init_db,
    PhotocardFilter,
    PhotocardRepository,
)
from photocard_collector.enums import (
    Category,
    Member,
    ReleaseStructure,
    ReleaseType,
    Version,
    enum_values,
)
from photocard_collector.services.catalog import register_photocard
from photocard_collector.services.filename_decoder import DecodeError


def _upper(value):
    return value.strip().upper().replace("-", "_").replace(" ", "_")


def _add_field_arguments(parser, for_filter=False):
    """Catalog field options shared by `catalog add` (overrides) and `catalog list` (filters)."""
    parser.add_argument("--category", type=_upper, choices=enum_values(Category))
    parser.add_argument("--member", type=_upper, choices=enum_values(Member))
    parser.add_argument("--version", type=_upper, choices=enum_values(Version))
    parser.add_argument("--release-type", type=_upper, choices=enum_values(ReleaseType))
    parser.add_argument(
        "--release-structure", type=_upper, choices=enum_values(ReleaseStructure)
    )
    match = " (partial match)" if for_filter else ""
    parser.add_argument("--album", metavar="NAME", help=f"Album name{match}")
    parser.add_argument("--store", metavar="NAME", help=f"Store name{match}")


def register(subparsers):
    """Register the catalog subcommand."""
    catalog_parser = subparsers.add_parser("catalog", help="Master photocard catalog")
    catalog_subparsers = catalog_parser.add_subparsers(dest="catalog_command", metavar="<subcommand>")

    # catalog add
    add_parser = catalog_subparsers.add_parser(
        "add",
        help="Add a photocard image to the catalog",
        description="Decode the image filename, preview the fields, and save on confirmation. "
                    "Field options override decoded values (or supply them when decoding fails).",
    )
    add_parser.add_argument("image", metavar="IMAGE", help="Image path (its filename is decoded)")
    add_parser.add_argument("--image-url", metavar="URL", help="Image reference to store instead of the path")
    _add_field_arguments(add_parser)
    add_parser.add_argument("--no-store", action="store_true", help="Card has no store (album card)")
    add_parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation prompt")
    add_parser.set_defaults(func=run_add)

    # catalog list
    list_parser = catalog_subparsers.add_parser(
        "list",
        help="Browse the catalog",
        description="List catalog entries with optional filters.",
    )
    _add_field_arguments(list_parser, for_filter=True)
    list_parser.add_argument(
        "--limit", type=int, default=50, metavar="N", help="Maximum results (default: 50)"
    )
    list_parser.add_argument("--offset", type=int, default=0, metavar="N", help="Skip first N results")
    list_parser.add_argument("--json", action="store_true", help="Print results as JSON")
    list_parser.set_defaults(func=run_list)

    # catalog show
    show_parser = catalog_subparsers.add_parser("show", help="Show a catalog entry")
    show_parser.add_argument("id", type=int, help="Catalog photocard ID")
    show_parser.set_defaults(func=run_show)

    catalog_parser.set_defaults(func=lambda args: catalog_parser.print_help())


def _filter_from_args(args) -> PhotocardFilter:
    return PhotocardFilter(
        category=args.category,
        release_type=args.release_type,
        release_structure=args.release_structure,
        member=args.member,
        version=args.version,
        album_name=args.album,
        store=args.store,
    )


def _preview_and_confirm(args):
    def confirm(photocard):
        print(f"Filename:          {photocard.filename}")
        print(f"Image:             {photocard.image_url}")
        print_fields(photocard.to_dict())
        if args.yes:
            return True
        return input("Add to catalog? (y/N): ").strip().lower() == "y"
    return confirm


def run_add(args):
    """Decode, preview and save a catalog entry."""
    conn = get_connection(args.db_path)
    init_db(conn)
    photocard_repo = PhotocardRepository(conn)

    overrides = {
        "category": args.category,
        "album_name": args.album,
        "store": "" if args.no_store else args.store,
        "version": args.version,
        "member": args.member,
        "release_type": args.release_type,
        "release_structure": args.release_structure,
    }

    try:
        photocard = register_photocard(
            photocard_repo,
            args.image,
            image_url=args.image_url,
            overrides=overrides,
            confirm=_preview_and_confirm(args),
        )
    except DecodeError as e:
        print(f"Could not decode filename ({e.kind.value}): {e}")
        print("Supply --category, --album and --member to add it manually.")
        return 1
    except ValueError as e:
        # DuplicateEntryError included
        print(f"Error: {e}")
        return 1

    if photocard is None:
        print("Cancelled.")
        return 0
    conn.commit()

    print(f"Added catalog photocard #{photocard.id}")
    return 0


def run_list(args):
    """List catalog entries."""
    conn = get_connection(args.db_path)
    init_db(conn)
    photocard_repo = PhotocardRepository(conn)

    card_filter = _filter_from_args(args)
    photocards = photocard_repo.list_all(card_filter, limit=args.limit, offset=args.offset)

    if args.json:
        print(json.dumps([p.to_dict() for p in photocards], indent=2))
        return

    if not photocards:
        print("No photocards found matching your criteria.")
        return

    print(f"{'ID':>5}  {'Member':<7}  {'Category':<16}  {'Album':<24}  {'Store':<20}  {'Version':<8}  {'Structure':<17}")
    print("-" * 110)

    for p in photocards:
        print(
            f"{p.id:>5}  "
            f"{p.member:<7}  "
            f"{p.category:<16}  "
            f"{p.album_name[:24]:<24}  "
            f"{(p.store or '-')[:20]:<20}  "
            f"{p.version:<8}  "
            f"{p.release_structure:<17}"
        )

    print("-" * 110)
    print(f"Showing {len(photocards)} photocard(s)")

    total = photocard_repo.count(card_filter)
    if total > len(photocards):
        print(f"(Total matching: {total})")


def run_show(args):
    """Show one catalog entry."""
    conn = get_connection(args.db_path)
    init_db(conn)

    photocard = PhotocardRepository(conn).get(args.id)
    if not photocard:
        print(f"No catalog photocard found with ID: {args.id}")
        return 1

    print()
    print("=" * 60)
    print(f"Catalog Photocard #{photocard.id}")
    print("=" * 60)
    print(f"Filename:          {photocard.filename}")
    print(f"Image:             {photocard.image_url}")
    print_fields(photocard.to_dict())
    print(f"Added:             {photocard.created_at}")
    print("=" * 60)
    return 0
