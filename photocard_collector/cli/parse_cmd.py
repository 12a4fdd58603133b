"""Parse command: pcard parse <filename>..."""

import json

from photocard_collector.services.filename_decoder import DecodeError, decode_filename

FIELD_LABELS = (
    ("category", "Category"),
    ("album_name", "Album"),
    ("store", "Store"),
    ("version", "Version"),
    ("member", "Member"),
    ("release_type", "Release Type"),
    ("release_structure", "Release Structure"),
)


def register(subparsers):
    """Register the parse subcommand."""
    parser = subparsers.add_parser(
        "parse",
        help="Show metadata decoded from photocard filenames",
        description="Decode one or more filenames without touching the database.",
    )
    parser.add_argument("filenames", nargs="+", metavar="FILENAME", help="Filename(s) to decode")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.set_defaults(func=run)


def print_fields(fields, indent=""):
    """Print decoded/catalog fields in aligned columns."""
    for key, label in FIELD_LABELS:
        value = fields.get(key)
        print(f"{indent}{label + ':':<19}{value if value is not None else '(none)'}")


def run(args):
    """Run the parse command."""
    results = []
    failures = 0

    for filename in args.filenames:
        try:
            parsed = decode_filename(filename)
        except DecodeError as e:
            failures += 1
            results.append({
                "filename": filename,
                "error": {"kind": e.kind.value, "token": e.token, "message": str(e)},
            })
            continue
        results.append({"filename": filename, **parsed.to_dict()})

    if args.json:
        print(json.dumps(results, indent=2))
    else:
        for r in results:
            print(r["filename"])
            if "error" in r:
                print(f"  Error: {r['error']['kind']}: {r['error']['message']}")
            else:
                print_fields(r, indent="  ")
            print()

    return 1 if failures else 0
