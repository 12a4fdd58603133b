"""Image reference checks for catalog and collection entries.

Images are never copied or stored; entries keep a path or URL. Local paths
are opened with Pillow so a typo or a non-image file is caught before it is
written to the catalog.
"""

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")

# What Pillow raises for unreadable, truncated or corrupt files (a bad PNG
# chunk checksum surfaces as SyntaxError from verify())
_BROKEN_IMAGE_ERRORS = (OSError, SyntaxError, ValueError, EOFError, struct.error)


@dataclass
class ImageInfo:
    path: str
    format: Optional[str]
    width: int
    height: int


def is_remote(reference: str) -> bool:
    """True for http(s) image references, which are not probed."""
    return reference.lower().startswith(("http://", "https://"))


def is_image_file(path: Path) -> bool:
    """Check the extension only (used when scanning directories)."""
    return path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS


def probe_image(path: str) -> ImageInfo:
    """Open a local image and return its format and dimensions.

    Raises:
        ValueError: if the file is missing or is not a readable image.
    """
    from PIL import Image

    p = Path(path)
    if not p.is_file():
        raise ValueError(f"Image not found: {path}")

    try:
        with Image.open(p) as img:
            img.verify()
        # verify() leaves the image unusable, reopen for the size
        with Image.open(p) as img:
            info = ImageInfo(path=str(p), format=img.format, width=img.width, height=img.height)
    except _BROKEN_IMAGE_ERRORS + (Image.DecompressionBombError,) as e:
        raise ValueError(f"Not a readable image: {path} ({e})") from e

    log.debug("Probed %s: %s %dx%d", path, info.format, info.width, info.height)
    return info


def resolve_image_reference(reference: str) -> str:
    """Validate an image reference and return the form stored in the database.

    Local files are checked with Pillow and stored as absolute paths; URLs
    are stored unchanged.
    """
    if is_remote(reference):
        return reference
    probe_image(reference)
    return str(Path(reference).resolve())
