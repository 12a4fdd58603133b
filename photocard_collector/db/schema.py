"""Database schema."""

import sqlite3

from photocard_collector.enums import (
    Category,
    Condition,
    Member,
    ReleaseStructure,
    ReleaseType,
    Version,
)

SCHEMA_VERSION = 1


def _check_in(column: str, enum_cls) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"CHECK({column} IN ({values}))"


SCHEMA_SQL = f"""
-- Master catalog: one row per distinct photocard design
CREATE TABLE IF NOT EXISTS photocards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    filename TEXT NOT NULL UNIQUE,
    image_url TEXT NOT NULL,
    category TEXT NOT NULL {_check_in("category", Category)},
    release_type TEXT NOT NULL {_check_in("release_type", ReleaseType)},
    release_structure TEXT NOT NULL {_check_in("release_structure", ReleaseStructure)},
    album_name TEXT NOT NULL,
    store TEXT,                 -- NULL = card packed with the album
    version TEXT NOT NULL {_check_in("version", Version)},
    member TEXT NOT NULL {_check_in("member", Member)},
    created_at TEXT NOT NULL,   -- ISO 8601 timestamp
    updated_at TEXT NOT NULL
);

-- Per-user collection (one row per user per photocard)
CREATE TABLE IF NOT EXISTS user_photocards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    photocard_id INTEGER NOT NULL REFERENCES photocards(id),
    user_image_url TEXT NOT NULL,
    condition TEXT NOT NULL DEFAULT 'MINT' {_check_in("condition", Condition)},
    acquired_date TEXT,         -- YYYY-MM-DD, NULL = unknown
    notes TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE(user_id, photocard_id)
);

-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL
);

-- Indexes for common queries
CREATE INDEX IF NOT EXISTS idx_photocards_member ON photocards(member);
CREATE INDEX IF NOT EXISTS idx_photocards_category ON photocards(category);
CREATE INDEX IF NOT EXISTS idx_user_photocards_user ON user_photocards(user_id);
CREATE INDEX IF NOT EXISTS idx_user_photocards_photocard ON user_photocards(photocard_id);
"""


def get_current_version(conn: sqlite3.Connection) -> int:
    """Get the current schema version, or 0 if not initialized."""
    try:
        cursor = conn.execute(
            "SELECT MAX(version) FROM schema_version"
        )
        row = cursor.fetchone()
        return row[0] if row[0] is not None else 0
    except sqlite3.OperationalError:
        # Table doesn't exist
        return 0


def init_db(conn: sqlite3.Connection, force: bool = False) -> bool:
    """
    Initialize the database schema.

    Args:
        conn: Database connection
        force: If True, drop and recreate all tables

    Returns:
        True if schema was created, False if already up to date
    """
    from photocard_collector.utils import now_iso

    current = get_current_version(conn)

    if current >= SCHEMA_VERSION and not force:
        return False

    if force:
        drop_all_tables(conn)

    conn.executescript(SCHEMA_SQL)

    conn.execute(
        "INSERT OR REPLACE INTO schema_version (version, applied_at) VALUES (?, ?)",
        (SCHEMA_VERSION, now_iso())
    )
    conn.commit()

    return True


def drop_all_tables(conn: sqlite3.Connection):
    """Drop all tables (for testing/reset)."""
    conn.executescript("""
        DROP TABLE IF EXISTS user_photocards;
        DROP TABLE IF EXISTS photocards;
        DROP TABLE IF EXISTS schema_version;
    """)
    conn.commit()
