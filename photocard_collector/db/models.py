"""Database models and repositories."""

import logging
import sqlite3
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from photocard_collector.enums import (
    Category,
    Condition,
    Member,
    ReleaseStructure,
    ReleaseType,
    Version,
)
from photocard_collector.utils import now_iso

log = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """A referenced catalog or collection row does not exist (or is not the user's)."""


class DuplicateEntryError(ValueError):
    """A row with the same unique key already exists."""


_PHOTOCARD_COLUMNS = (
    "id", "filename", "image_url", "category", "release_type",
    "release_structure", "album_name", "store", "version", "member",
    "created_at", "updated_at",
)


@dataclass
class Photocard:
    """Master catalog entry for one photocard design."""
    id: Optional[int]
    filename: str
    image_url: str
    category: str
    release_type: str
    release_structure: str
    album_name: str
    store: Optional[str] = None
    version: str = Version.STANDARD.value
    member: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def validate(self) -> None:
        """Raise ValueError if any enum field holds an unknown value."""
        Category(self.category)
        ReleaseType(self.release_type)
        ReleaseStructure(self.release_structure)
        Version(self.version)
        Member(self.member)
        if not self.filename:
            raise ValueError("Photocard filename is required")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PhotocardFilter:
    """Catalog search criteria. Enum fields match exactly, text fields partially."""
    category: Optional[str] = None
    release_type: Optional[str] = None
    release_structure: Optional[str] = None
    member: Optional[str] = None
    version: Optional[str] = None
    album_name: Optional[str] = None
    store: Optional[str] = None

    def to_sql(self, alias: str = "") -> Tuple[str, List[Any]]:
        """Return (WHERE clause or '', params)."""
        prefix = f"{alias}." if alias else ""
        clauses = []
        params: List[Any] = []

        for column in ("category", "release_type", "release_structure", "member", "version"):
            value = getattr(self, column)
            if value:
                clauses.append(f"{prefix}{column} = ?")
                params.append(value)

        for column in ("album_name", "store"):
            value = getattr(self, column)
            if value:
                clauses.append(f"{prefix}{column} LIKE ? COLLATE NOCASE")
                params.append(f"%{value}%")

        if not clauses:
            return "", params
        return "WHERE " + " AND ".join(clauses), params


@dataclass
class BulkResult:
    """Outcome of a bulk catalog insert."""
    added: List[Photocard] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)          # duplicate filenames
    failed: List[Tuple[str, str]] = field(default_factory=list)  # (filename, error)


@dataclass
class UserPhotocard:
    """A photocard in one user's collection."""
    id: Optional[int]
    user_id: str
    photocard_id: int
    user_image_url: str
    condition: str = Condition.MINT.value
    acquired_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class CollectionItem:
    """A collection entry joined with its catalog details."""
    entry: UserPhotocard
    photocard: Photocard

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self.entry)
        data["photocard"] = self.photocard.to_dict()
        return data


def _row_to_photocard(row: sqlite3.Row, prefix: str = "") -> Photocard:
    return Photocard(**{col: row[prefix + col] for col in _PHOTOCARD_COLUMNS})


class PhotocardRepository:
    """CRUD operations for the photocards (master catalog) table."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def create(self, photocard: Photocard) -> int:
        """Insert a catalog entry. Returns the new ID."""
        photocard.validate()
        ts = now_iso()
        photocard.created_at = photocard.created_at or ts
        photocard.updated_at = photocard.updated_at or ts

        try:
            cursor = self.conn.execute(
                """
                INSERT INTO photocards
                (filename, image_url, category, release_type, release_structure,
                 album_name, store, version, member, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    photocard.filename,
                    photocard.image_url,
                    photocard.category,
                    photocard.release_type,
                    photocard.release_structure,
                    photocard.album_name,
                    photocard.store,
                    photocard.version,
                    photocard.member,
                    photocard.created_at,
                    photocard.updated_at,
                ),
            )
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateEntryError(
                    f"Photocard already in catalog: {photocard.filename}"
                ) from e
            raise

        photocard.id = cursor.lastrowid
        return photocard.id

    def get(self, photocard_id: int) -> Optional[Photocard]:
        """Get a catalog entry by ID."""
        cursor = self.conn.execute(
            "SELECT * FROM photocards WHERE id = ?", (photocard_id,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return _row_to_photocard(row)

    def get_by_filename(self, filename: str) -> Optional[Photocard]:
        """Get a catalog entry by its unique source filename."""
        cursor = self.conn.execute(
            "SELECT * FROM photocards WHERE filename = ?", (filename,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return _row_to_photocard(row)

    def exists_filename(self, filename: str) -> bool:
        cursor = self.conn.execute(
            "SELECT 1 FROM photocards WHERE filename = ?", (filename,)
        )
        return cursor.fetchone() is not None

    def list_all(
        self,
        filter: Optional[PhotocardFilter] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Photocard]:
        """List catalog entries matching ``filter`` (all entries when None)."""
        where, params = (filter or PhotocardFilter()).to_sql()
        query = f"SELECT * FROM photocards {where} ORDER BY id"

        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        return [_row_to_photocard(row) for row in self.conn.execute(query, params)]

    def count(self, filter: Optional[PhotocardFilter] = None) -> int:
        where, params = (filter or PhotocardFilter()).to_sql()
        cursor = self.conn.execute(f"SELECT COUNT(*) FROM photocards {where}", params)
        return cursor.fetchone()[0]

    def bulk_create(self, photocards: Iterable[Photocard]) -> BulkResult:
        """
        Insert many catalog entries.

        Filenames already in the catalog (or repeated in the input) are
        skipped. A failing entry is recorded and does not stop the rest.
        """
        result = BulkResult()
        seen = set()

        for photocard in photocards:
            if photocard.filename in seen or self.exists_filename(photocard.filename):
                result.skipped.append(photocard.filename)
                continue
            seen.add(photocard.filename)

            try:
                self.create(photocard)
            except (ValueError, sqlite3.IntegrityError) as e:
                log.warning("Failed to import %s: %s", photocard.filename, e)
                result.failed.append((photocard.filename, str(e)))
                continue
            result.added.append(photocard)

        log.info(
            "Bulk import completed: %d added, %d skipped, %d failed",
            len(result.added), len(result.skipped), len(result.failed),
        )
        return result


_UNSET = object()


class UserPhotocardRepository:
    """CRUD operations for user_photocards, always scoped to one user."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def add(self, entry: UserPhotocard) -> int:
        """Add a catalog photocard to a user's collection. Returns the new ID.

        Raises:
            NotFoundError: the photocard is not in the catalog
            DuplicateEntryError: the user already has this photocard
        """
        entry.condition = Condition(entry.condition).value

        exists = self.conn.execute(
            "SELECT 1 FROM photocards WHERE id = ?", (entry.photocard_id,)
        ).fetchone()
        if exists is None:
            raise NotFoundError(f"Photocard with ID {entry.photocard_id} not found in catalog")

        dup = self.conn.execute(
            "SELECT id FROM user_photocards WHERE user_id = ? AND photocard_id = ?",
            (entry.user_id, entry.photocard_id),
        ).fetchone()
        if dup is not None:
            raise DuplicateEntryError(
                f"Photocard {entry.photocard_id} is already in the collection (entry #{dup['id']})"
            )

        ts = now_iso()
        entry.created_at = entry.created_at or ts
        entry.updated_at = entry.updated_at or ts

        cursor = self.conn.execute(
            """
            INSERT INTO user_photocards
            (user_id, photocard_id, user_image_url, condition, acquired_date,
             notes, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.user_id,
                entry.photocard_id,
                entry.user_image_url,
                entry.condition,
                entry.acquired_date,
                entry.notes,
                entry.created_at,
                entry.updated_at,
            ),
        )
        entry.id = cursor.lastrowid
        return entry.id

    def get(self, entry_id: int, user_id: str) -> Optional[UserPhotocard]:
        """Get the bare collection row, or None if missing or owned by someone else."""
        cursor = self.conn.execute(
            "SELECT * FROM user_photocards WHERE id = ? AND user_id = ?",
            (entry_id, user_id),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return self._row_to_entry(row)

    def get_for_user(self, entry_id: int, user_id: str) -> Optional[CollectionItem]:
        """Get a collection entry with catalog details, scoped to ``user_id``."""
        cursor = self.conn.execute(
            self._joined_query("WHERE up.id = ? AND up.user_id = ?"),
            (entry_id, user_id),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return self._row_to_item(row)

    def list_for_user(
        self,
        user_id: str,
        filter: Optional[PhotocardFilter] = None,
    ) -> List[CollectionItem]:
        """List a user's collection, newest first, optionally filtered by catalog fields."""
        where, params = (filter or PhotocardFilter()).to_sql(alias="p")
        if where:
            where = where.replace("WHERE ", "WHERE up.user_id = ? AND ", 1)
        else:
            where = "WHERE up.user_id = ?"
        params.insert(0, user_id)

        query = self._joined_query(where) + " ORDER BY up.created_at DESC, up.id DESC"
        return [self._row_to_item(row) for row in self.conn.execute(query, params)]

    def update(
        self,
        entry_id: int,
        user_id: str,
        condition=_UNSET,
        acquired_date=_UNSET,
        notes=_UNSET,
    ) -> UserPhotocard:
        """
        Update user-owned fields. Only the fields passed are changed;
        pass None to clear acquired_date or notes.

        Raises:
            NotFoundError: no such entry for this user
        """
        entry = self.get(entry_id, user_id)
        if entry is None:
            raise NotFoundError(f"Collection entry #{entry_id} not found")

        if condition is not _UNSET:
            entry.condition = Condition(condition).value
        if acquired_date is not _UNSET:
            entry.acquired_date = acquired_date
        if notes is not _UNSET:
            entry.notes = notes
        entry.updated_at = now_iso()

        self.conn.execute(
            """
            UPDATE user_photocards SET
                condition = ?,
                acquired_date = ?,
                notes = ?,
                updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (
                entry.condition,
                entry.acquired_date,
                entry.notes,
                entry.updated_at,
                entry_id,
                user_id,
            ),
        )
        return entry

    def remove(self, entry_id: int, user_id: str) -> bool:
        """Remove an entry. Returns False if it is missing or not the user's."""
        cursor = self.conn.execute(
            "DELETE FROM user_photocards WHERE id = ? AND user_id = ?",
            (entry_id, user_id),
        )
        return cursor.rowcount > 0

    def count(self, user_id: str) -> int:
        cursor = self.conn.execute(
            "SELECT COUNT(*) FROM user_photocards WHERE user_id = ?", (user_id,)
        )
        return cursor.fetchone()[0]

    def stats(self, user_id: str) -> Dict[str, Any]:
        """Get collection statistics for one user."""
        stats: Dict[str, Any] = {"total_cards": self.count(user_id)}

        for key, column in (
            ("by_member", "p.member"),
            ("by_category", "p.category"),
            ("by_release_structure", "p.release_structure"),
            ("by_condition", "up.condition"),
        ):
            cursor = self.conn.execute(
                f"""
                SELECT {column} AS value, COUNT(*) AS cnt
                FROM user_photocards up
                JOIN photocards p ON up.photocard_id = p.id
                WHERE up.user_id = ?
                GROUP BY {column}
                """,
                (user_id,),
            )
            stats[key] = {row["value"]: row["cnt"] for row in cursor}

        return stats

    @staticmethod
    def _joined_query(where: str) -> str:
        photocard_cols = ", ".join(f"p.{col} AS pc_{col}" for col in _PHOTOCARD_COLUMNS)
        return (
            f"SELECT up.*, {photocard_cols} "
            f"FROM user_photocards up "
            f"JOIN photocards p ON up.photocard_id = p.id "
            f"{where}"
        )

    def _row_to_entry(self, row: sqlite3.Row) -> UserPhotocard:
        return UserPhotocard(
            id=row["id"],
            user_id=row["user_id"],
            photocard_id=row["photocard_id"],
            user_image_url=row["user_image_url"],
            condition=row["condition"],
            acquired_date=row["acquired_date"],
            notes=row["notes"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _row_to_item(self, row: sqlite3.Row) -> CollectionItem:
        return CollectionItem(
            entry=self._row_to_entry(row),
            photocard=_row_to_photocard(row, prefix="pc_"),
        )
