"""Base importer interface."""

import logging
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from photocard_collector.db.models import Photocard, PhotocardRepository
from photocard_collector.services.catalog import prepare_photocard
from photocard_collector.services.filename_decoder import DecodeError, FilenameDecoder

log = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Result of an import operation."""

    total_rows: int = 0
    cards_added: int = 0
    cards_skipped: int = 0
    errors: List[str] = field(default_factory=list)


class BaseImporter(ABC):
    """Abstract base class for bulk catalog importers.

    Subclasses turn a source (a directory, a CSV file) into rows of
    ``{"image": ..., "image_url": ..., "overrides": {...}}``; the shared
    import loop decodes each row and bulk-inserts the results.
    """

    check_images = True

    def __init__(self, decoder: Optional[FilenameDecoder] = None):
        self.decoder = decoder

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Human-readable format name."""

    @abstractmethod
    def parse_source(self, source: str) -> List[Dict[str, Any]]:
        """
        Read the import source and return one row per photocard.

        Args:
            source: Path to the directory or file to import

        Returns:
            List of row dicts with keys image, image_url, overrides
        """

    def row_to_photocard(self, row: Dict[str, Any]) -> Photocard:
        return prepare_photocard(
            row["image"],
            image_url=row.get("image_url"),
            overrides=row.get("overrides"),
            decoder=self.decoder,
            check_image=self.check_images,
        )

    def import_source(
        self,
        source: str,
        conn: sqlite3.Connection,
        photocard_repo: PhotocardRepository,
        dry_run: bool = False,
    ) -> ImportResult:
        """
        Import every photocard in ``source`` into the catalog.

        Args:
            source: Path to import from
            conn: Database connection
            photocard_repo: Catalog repository
            dry_run: If True, don't actually insert

        Returns:
            ImportResult with statistics
        """
        result = ImportResult()

        rows = self.parse_source(source)
        result.total_rows = len(rows)

        photocards = []
        first_source: Dict[str, str] = {}
        for row in rows:
            try:
                photocard = self.row_to_photocard(row)
            except DecodeError as e:
                result.errors.append(f"{e.filename}: {e.reason}")
                result.cards_skipped += 1
                continue
            except ValueError as e:
                result.errors.append(f"{row['image']}: {e}")
                result.cards_skipped += 1
                continue

            # Filenames are the catalog key: later images sharing a basename
            # with an earlier row are dropped
            if photocard.filename in first_source:
                message = (
                    f"{row['image']}: duplicate filename {photocard.filename!r}, "
                    f"already imported from {first_source[photocard.filename]}"
                )
                log.warning("%s", message)
                result.errors.append(message)
                result.cards_skipped += 1
                continue
            first_source[photocard.filename] = row["image"]
            photocards.append(photocard)

        if dry_run:
            for p in photocards:
                if photocard_repo.exists_filename(p.filename):
                    result.cards_skipped += 1
                else:
                    result.cards_added += 1
            return result

        bulk = photocard_repo.bulk_create(photocards)
        conn.commit()

        result.cards_added += len(bulk.added)
        result.cards_skipped += len(bulk.skipped) + len(bulk.failed)
        for filename in bulk.skipped:
            log.debug("Skipped %s: already in catalog", filename)
        for filename, error in bulk.failed:
            result.errors.append(f"{filename}: {error}")

        return result
