"""Import every image in a directory, decoding metadata from the filenames."""

from pathlib import Path
from typing import Any, Dict, List

from photocard_collector.importers.base import BaseImporter
from photocard_collector.services.images import is_image_file


class DirectoryImporter(BaseImporter):
    """Import .png/.jpg/.jpeg files from a directory tree."""

    def __init__(self, decoder=None, recursive: bool = True):
        super().__init__(decoder)
        self.recursive = recursive

    @property
    def format_name(self) -> str:
        return "Image directory"

    def parse_source(self, source: str) -> List[Dict[str, Any]]:
        root = Path(source)
        if not root.is_dir():
            raise ValueError(f"Not a directory: {source}")

        pattern = "**/*" if self.recursive else "*"
        images = sorted(p for p in root.glob(pattern) if is_image_file(p))
        return [{"image": str(p), "image_url": None, "overrides": {}} for p in images]
