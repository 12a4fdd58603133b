"""SQLite connection shared by the catalog and collection repositories."""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Optional

from photocard_collector.utils import get_photocard_home

log = logging.getLogger(__name__)

DB_ENV_VAR = "PHOTOCARD_DB"
DB_FILENAME = "collection.sqlite"

# One connection per process, reused while the path stays the same
_connection: Optional[sqlite3.Connection] = None
_db_path: Optional[str] = None


def get_db_path(override: Optional[str] = None) -> str:
    """
    Resolve the database file.

    Priority:
    1. Explicit override (the CLI's --db)
    2. PHOTOCARD_DB environment variable
    3. $PHOTOCARD_HOME/collection.sqlite (~/.photocards by default)
    """
    if override:
        return override

    env_path = os.environ.get(DB_ENV_VAR)
    if env_path:
        log.debug("Database path from %s: %s", DB_ENV_VAR, env_path)
        return env_path

    return str(get_photocard_home() / DB_FILENAME)


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Return the cached connection for ``db_path``, opening it if needed.

    Rows come back as sqlite3.Row and foreign keys are enforced, so a
    collection entry can never point at a missing catalog photocard.
    """
    global _connection, _db_path

    path = get_db_path(db_path)
    if _connection is not None and _db_path == path:
        return _connection

    close_connection()

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    log.debug("Opening photocard database at %s", path)

    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    _connection, _db_path = conn, path
    return conn


def close_connection():
    """Close the cached connection, if any."""
    global _connection, _db_path

    if _connection is None:
        return
    log.debug("Closing photocard database at %s", _db_path)
    _connection.close()
    _connection = None
    _db_path = None
