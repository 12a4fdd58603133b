"""CSV manifest importer.

Columns:
    filename        required, the catalog key (decoded for metadata)
    image_url       optional, defaults to the file next to the manifest
    category, album_name, store, version, member,
    release_type, release_structure
                    optional, override the decoded values

A store cell of "none" forces the entry to have no store.
"""

import csv
from pathlib import Path
from typing import Any, Dict, List

from photocard_collector.importers.base import BaseImporter
from photocard_collector.services.catalog import ENUM_FIELDS, TEXT_FIELDS


class ManifestImporter(BaseImporter):
    """Import from a CSV listing filenames and optional explicit fields."""

    @property
    def format_name(self) -> str:
        return "CSV manifest"

    def parse_source(self, source: str) -> List[Dict[str, Any]]:
        base_dir = Path(source).resolve().parent
        rows = []
        with open(source, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            if not reader.fieldnames or "filename" not in [h.strip().lower() for h in reader.fieldnames]:
                raise ValueError(f"Manifest {source} has no 'filename' column")

            for raw in reader:
                row = {(k or "").strip().lower(): (v or "").strip() for k, v in raw.items()}
                filename = row.get("filename", "")
                if not filename:
                    continue
                rows.append({
                    "image": filename,
                    "image_url": row.get("image_url") or str(base_dir / filename),
                    "overrides": self._overrides(row),
                })
        return rows

    @staticmethod
    def _overrides(row: Dict[str, str]) -> Dict[str, str]:
        overrides = {}
        for key in ENUM_FIELDS + TEXT_FIELDS:
            value = row.get(key, "")
            if not value:
                continue
            if key == "store" and value.lower() == "none":
                value = ""
            overrides[key] = value
        return overrides
