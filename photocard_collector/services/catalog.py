"""Turn an uploaded image into a catalog entry.

The decoded fields are only a suggestion: callers may override any of them,
and when decoding fails entirely an entry can still be built from explicit
fields alone. Release type and structure are recomputed from the final
category/album/store unless they are overridden too.
"""

import logging
import os
from typing import Callable, Dict, Optional

from photocard_collector.db.models import DuplicateEntryError, Photocard, PhotocardRepository
from photocard_collector.enums import Category, Version
from photocard_collector.services.filename_decoder import (
    DecodeError,
    FilenameDecoder,
    decode_filename,
)
from photocard_collector.services.images import resolve_image_reference
from photocard_collector.services.release_rules import derive_release_fields

log = logging.getLogger(__name__)

ENUM_FIELDS = ("category", "version", "member", "release_type", "release_structure")
TEXT_FIELDS = ("album_name", "store")

# Fields that must be supplied when the filename cannot be decoded
REQUIRED_MANUAL_FIELDS = ("category", "album_name", "member")


def clean_overrides(overrides: Optional[Dict[str, Optional[str]]]) -> Dict[str, Optional[str]]:
    """Drop unset values and unknown keys, upper-case enum values.

    An empty store string means "no store" and is kept as None.
    """
    cleaned = {}
    for key, value in (overrides or {}).items():
        if key == "store" and value is not None and not value.strip():
            cleaned[key] = None
            continue
        if value is None or not str(value).strip():
            continue
        if key in ENUM_FIELDS:
            cleaned[key] = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        elif key in TEXT_FIELDS:
            cleaned[key] = str(value).strip()
    return cleaned


def prepare_photocard(
    image: str,
    image_url: Optional[str] = None,
    overrides: Optional[Dict[str, Optional[str]]] = None,
    decoder: Optional[FilenameDecoder] = None,
    check_image: bool = True,
) -> Photocard:
    """
    Build an unsaved catalog entry for ``image``.

    Args:
        image: Image path or bare filename; its basename is the catalog key
        image_url: Stored image reference (defaults to ``image``)
        overrides: Field values that replace decoded ones
        decoder: Decoder to use (default dictionaries when None)
        check_image: Validate local image references with Pillow

    Raises:
        DecodeError: decoding failed and overrides don't cover the required fields
        ValueError: the image reference or a field value is invalid
    """
    filename = os.path.basename(image)
    reference = image_url or image
    if check_image:
        reference = resolve_image_reference(reference)

    overrides = clean_overrides(overrides)

    try:
        parsed = decoder.decode(filename) if decoder else decode_filename(filename)
        fields = parsed.to_dict()
    except DecodeError as e:
        if any(f not in overrides for f in REQUIRED_MANUAL_FIELDS):
            raise
        log.info("Could not decode %s (%s), using manual fields", filename, e.kind.value)
        fields = {"store": None, "version": Version.STANDARD.value}

    explicit_release = {
        k: overrides.pop(k) for k in ("release_type", "release_structure") if k in overrides
    }
    fields.update(overrides)

    release_type, release_structure = derive_release_fields(
        Category(fields["category"]), fields["album_name"], fields.get("store")
    )
    fields["release_type"] = release_type.value
    fields["release_structure"] = release_structure.value
    fields.update(explicit_release)

    photocard = Photocard(id=None, filename=filename, image_url=reference, **fields)
    photocard.validate()
    return photocard


def register_photocard(
    photocard_repo: PhotocardRepository,
    image: str,
    image_url: Optional[str] = None,
    overrides: Optional[Dict[str, Optional[str]]] = None,
    confirm: Optional[Callable[[Photocard], bool]] = None,
    decoder: Optional[FilenameDecoder] = None,
) -> Optional[Photocard]:
    """
    Decode, preview and persist a catalog entry.

    ``confirm`` receives the prepared entry before it is written; returning
    False cancels and None is returned. The caller owns the commit.

    Raises:
        DecodeError, ValueError: see prepare_photocard
        DuplicateEntryError: the filename is already in the catalog
    """
    photocard = prepare_photocard(image, image_url=image_url, overrides=overrides, decoder=decoder)

    if photocard_repo.exists_filename(photocard.filename):
        raise DuplicateEntryError(f"Already in catalog: {photocard.filename}")

    if confirm is not None and not confirm(photocard):
        log.info("Registration of %s cancelled", photocard.filename)
        return None

    photocard_repo.create(photocard)
    log.info("Registered %s as catalog photocard #%d", photocard.filename, photocard.id)
    return photocard
