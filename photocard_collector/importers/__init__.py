"""Bulk importers for the photocard catalog."""

import os

from photocard_collector.importers.base import BaseImporter, ImportResult
from photocard_collector.importers.directory import DirectoryImporter
from photocard_collector.importers.manifest import ManifestImporter

IMPORTERS = {
    "directory": DirectoryImporter,
    "manifest": ManifestImporter,
}


def get_importer(format_name: str) -> BaseImporter:
    """Get an importer by format name."""
    importer_class = IMPORTERS.get(format_name.lower())
    if not importer_class:
        raise ValueError(f"Unknown import format: {format_name}. Available: {', '.join(IMPORTERS.keys())}")
    return importer_class()


def detect_format(source: str) -> str:
    """Directories are imported image by image, .csv files as manifests."""
    if os.path.isdir(source):
        return "directory"
    if source.lower().endswith(".csv"):
        return "manifest"
    raise ValueError("Could not auto-detect format. Please specify format explicitly.")


__all__ = [
    "BaseImporter",
    "ImportResult",
    "DirectoryImporter",
    "ManifestImporter",
    "get_importer",
    "detect_format",
    "IMPORTERS",
]
