"""Database layer for Photocard Collector."""

from photocard_collector.db.connection import close_connection, get_connection, get_db_path
from photocard_collector.db.models import (
    BulkResult,
    CollectionItem,
    DuplicateEntryError,
    NotFoundError,
    Photocard,
    PhotocardFilter,
    PhotocardRepository,
    UserPhotocard,
    UserPhotocardRepository,
)
from photocard_collector.db.schema import SCHEMA_VERSION, init_db

__all__ = [
    "get_db_path",
    "get_connection",
    "close_connection",
    "init_db",
    "SCHEMA_VERSION",
    "Photocard",
    "PhotocardFilter",
    "BulkResult",
    "UserPhotocard",
    "CollectionItem",
    "NotFoundError",
    "DuplicateEntryError",
    "PhotocardRepository",
    "UserPhotocardRepository",
]
