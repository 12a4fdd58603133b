"""Add command: pcard add <photocard>"""

from photocard_collector.db import (
    get_connection,
    init_db,
    DuplicateEntryError,
    NotFoundError,
    PhotocardRepository,
    UserPhotocard,
    UserPhotocardRepository,
)
from photocard_collector.services.images import resolve_image_reference
from photocard_collector.utils import normalize_condition, parse_acquired_date


def register(subparsers):
    """Register the add subcommand."""
    parser = subparsers.add_parser(
        "add",
        help="Add a catalog photocard to your collection",
        description="Add a photocard from the catalog (by ID or filename) to your collection.",
    )
    parser.add_argument("photocard", metavar="PHOTOCARD", help="Catalog ID or catalog filename")
    parser.add_argument(
        "--image",
        metavar="PATH_OR_URL",
        help="Photo of your copy (default: the catalog image)",
    )
    parser.add_argument(
        "--condition",
        metavar="COND",
        default="MINT",
        help="Condition: MINT, NEAR_MINT, GOOD, FAIR, POOR or M/NM/G/F/P (default: MINT)",
    )
    parser.add_argument("--acquired", metavar="YYYY-MM-DD", help="Date you got the card")
    parser.add_argument("--notes", metavar="TEXT", help="Notes")
    parser.set_defaults(func=run)


def resolve_photocard(photocard_repo, ref: str):
    """Look up a catalog photocard by numeric ID or by filename."""
    if ref.isdigit():
        return photocard_repo.get(int(ref))
    return photocard_repo.get_by_filename(ref)


def run(args):
    """Run the add command."""
    conn = get_connection(args.db_path)
    init_db(conn)

    photocard_repo = PhotocardRepository(conn)
    collection_repo = UserPhotocardRepository(conn)

    photocard = resolve_photocard(photocard_repo, args.photocard)
    if not photocard:
        print(f"No catalog photocard found: {args.photocard}")
        return 1

    try:
        condition = normalize_condition(args.condition)
        acquired = parse_acquired_date(args.acquired)
        image = resolve_image_reference(args.image) if args.image else photocard.image_url
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    entry = UserPhotocard(
        id=None,
        user_id=args.user_id,
        photocard_id=photocard.id,
        user_image_url=image,
        condition=condition,
        acquired_date=acquired,
        notes=args.notes,
    )

    try:
        new_id = collection_repo.add(entry)
    except (NotFoundError, DuplicateEntryError) as e:
        print(f"Error: {e}")
        return 1
    conn.commit()

    print(
        f"Added #{new_id}: {photocard.member} - {photocard.album_name}"
        f"{' (' + photocard.store + ')' if photocard.store else ''} [{condition}]"
    )
    return 0
