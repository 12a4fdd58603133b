"""
Tests for shared helpers: conditions, dates, and environment config.

To run: pytest tests/test_utils.py -v
"""

from pathlib import Path

import pytest

from photocard_collector.db import close_connection, get_connection, get_db_path
from photocard_collector.utils import (
    get_photocard_home,
    get_user_id,
    normalize_condition,
    parse_acquired_date,
)


class TestNormalizeCondition:
    @pytest.mark.parametrize("raw, expected", [
        ("M", "MINT"),
        ("nm", "NEAR_MINT"),
        ("near mint", "NEAR_MINT"),
        ("Near-Mint", "NEAR_MINT"),
        ("GD", "GOOD"),
        ("g", "GOOD"),
        (" fair ", "FAIR"),
        ("P", "POOR"),
        ("POOR", "POOR"),
    ])
    def test_accepted(self, raw, expected):
        assert normalize_condition(raw) == expected

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown condition"):
            normalize_condition("LP")


class TestAcquiredDate:
    def test_valid(self):
        assert parse_acquired_date(" 2024-02-29 ") == "2024-02-29"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty(self, raw):
        assert parse_acquired_date(raw) is None

    @pytest.mark.parametrize("raw", ["2023-02-29", "02/03/2024", "yesterday"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError, match="Invalid date"):
            parse_acquired_date(raw)


class TestEnvironment:
    def test_user_priority(self, monkeypatch):
        monkeypatch.setenv("PHOTOCARD_USER", "from-env")
        assert get_user_id("explicit") == "explicit"
        assert get_user_id() == "from-env"

    def test_user_falls_back_to_login(self, monkeypatch):
        monkeypatch.delenv("PHOTOCARD_USER", raising=False)
        monkeypatch.setattr("getpass.getuser", lambda: "login-name")
        assert get_user_id() == "login-name"

    def test_db_path_priority(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PHOTOCARD_HOME", str(tmp_path))
        monkeypatch.delenv("PHOTOCARD_DB", raising=False)
        assert get_db_path() == str(tmp_path / "collection.sqlite")

        monkeypatch.setenv("PHOTOCARD_DB", "/data/cards.sqlite")
        assert get_db_path() == "/data/cards.sqlite"
        assert get_db_path("/tmp/override.sqlite") == "/tmp/override.sqlite"

    def test_default_home(self, monkeypatch):
        monkeypatch.delenv("PHOTOCARD_HOME", raising=False)
        assert get_photocard_home() == Path.home() / ".photocards"


class TestConnection:
    @pytest.fixture(autouse=True)
    def _fresh(self):
        close_connection()
        yield
        close_connection()

    def test_cached_per_path(self, tmp_path):
        first = get_connection(str(tmp_path / "one.sqlite"))
        assert get_connection(str(tmp_path / "one.sqlite")) is first

        other = get_connection(str(tmp_path / "two.sqlite"))
        assert other is not first
        assert get_connection(str(tmp_path / "two.sqlite")) is other

    def test_creates_parent_and_enables_foreign_keys(self, tmp_path):
        conn = get_connection(str(tmp_path / "nested" / "dir" / "cards.sqlite"))
        assert (tmp_path / "nested" / "dir").is_dir()
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_logs_resolved_path(self, tmp_path, monkeypatch, caplog):
        db_file = str(tmp_path / "env.sqlite")
        monkeypatch.setenv("PHOTOCARD_DB", db_file)

        with caplog.at_level("DEBUG", logger="photocard_collector.db.connection"):
            get_connection()

        assert f"Database path from PHOTOCARD_DB: {db_file}" in caplog.text
        assert f"Opening photocard database at {db_file}" in caplog.text
