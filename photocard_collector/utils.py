"""Shared utilities for Photocard Collector."""

import getpass
import os
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from photocard_collector.enums import Condition


def get_photocard_home() -> Path:
    """Return the home directory (PHOTOCARD_HOME env or ~/.photocards)."""
    if "PHOTOCARD_HOME" in os.environ:
        return Path(os.environ["PHOTOCARD_HOME"])
    return Path.home() / ".photocards"


def get_user_id(override: Optional[str] = None) -> str:
    """
    Get the user identifier that scopes collection operations.

    Priority:
    1. Explicit override parameter
    2. PHOTOCARD_USER environment variable
    3. The OS login name
    """
    if override:
        return override

    env_user = os.environ.get("PHOTOCARD_USER")
    if env_user:
        return env_user

    return getpass.getuser()


def now_iso() -> str:
    """Return current time as ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def normalize_condition(condition: str) -> str:
    """Normalize condition strings (abbreviations or full names) to a Condition value.

    Raises ValueError for anything unrecognized.
    """
    key = condition.strip().upper().replace("-", "_").replace(" ", "_")

    abbrevs = {
        "M": Condition.MINT,
        "NM": Condition.NEAR_MINT,
        "G": Condition.GOOD,
        "GD": Condition.GOOD,
        "F": Condition.FAIR,
        "P": Condition.POOR,
    }
    if key in abbrevs:
        return abbrevs[key].value

    for c in Condition:
        if c.value == key:
            return c.value

    valid = ", ".join(c.value for c in Condition)
    raise ValueError(f"Unknown condition: {condition!r} (expected one of {valid})")


def parse_acquired_date(value: Optional[str]) -> Optional[str]:
    """Parse a YYYY-MM-DD date, returning it in ISO form (None/empty -> None)."""
    if not value or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError:
        raise ValueError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")
