"""
Tests for catalog registration and bulk imports.

Images are tiny files written with Pillow into a temp directory.

To run: pytest tests/test_importers.py -v
"""

import os
import tempfile

import pytest
from PIL import Image

from photocard_collector.db import (
    DuplicateEntryError,
    PhotocardRepository,
    get_connection,
    init_db,
)
from photocard_collector.db.connection import close_connection
from photocard_collector.importers import (
    DirectoryImporter,
    ManifestImporter,
    detect_format,
    get_importer,
)
from photocard_collector.services.catalog import (
    clean_overrides,
    prepare_photocard,
    register_photocard,
)
from photocard_collector.services.filename_decoder import DecodeError
from photocard_collector.services.images import probe_image, resolve_image_reference


def _make_image(path, size=(4, 6)):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (200, 30, 90)).save(path)
    return path


def _make_bad_checksum_png(path):
    """A PNG that opens but fails verify(): one IDAT data byte flipped."""
    _make_image(path)
    data = bytearray(path.read_bytes())
    data[data.index(b"IDAT") + 4] ^= 0xFF
    path.write_bytes(bytes(data))
    return path


# ── Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def test_db():
    """Create a temporary, empty database."""
    close_connection()
    with tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False) as f:
        db_path = f.name

    conn = get_connection(db_path)
    init_db(conn)

    yield conn, PhotocardRepository(conn)

    close_connection()
    os.unlink(db_path)


@pytest.fixture
def image_dir(tmp_path):
    _make_image(tmp_path / "albums_awe_standard_cocona.png")
    _make_image(tmp_path / "albums_awe_ktown4u_jurin.png")
    _make_image(tmp_path / "random.png")
    _make_image(tmp_path / "sub" / "events_kcon_2023_broadcast_standard_harvey.jpg")
    (tmp_path / "notes.txt").write_text("not an image")
    return tmp_path


# ── Images ───────────────────────────────────────────────────────────

class TestImages:
    def test_probe(self, tmp_path):
        info = probe_image(str(_make_image(tmp_path / "a.png", size=(8, 3))))
        assert info.format == "PNG"
        assert (info.width, info.height) == (8, 3)

    def test_probe_missing(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            probe_image(str(tmp_path / "missing.png"))

    def test_probe_not_an_image(self, tmp_path):
        fake = tmp_path / "albums_awe_standard_cocona.png"
        fake.write_text("definitely not a png")
        with pytest.raises(ValueError, match="Not a readable image"):
            probe_image(str(fake))

    def test_probe_bad_checksum(self, tmp_path):
        bad = _make_bad_checksum_png(tmp_path / "albums_awe_standard_cocona.png")
        with pytest.raises(ValueError, match="Not a readable image"):
            probe_image(str(bad))

    def test_urls_are_not_probed(self):
        url = "https://img.example/albums_awe_standard_cocona.png"
        assert resolve_image_reference(url) == url

    def test_local_paths_become_absolute(self, tmp_path, monkeypatch):
        _make_image(tmp_path / "a.png")
        monkeypatch.chdir(tmp_path)
        assert resolve_image_reference("a.png") == str(tmp_path.resolve() / "a.png")


# ── Registration ─────────────────────────────────────────────────────

class TestPrepareCatalogEntry:
    def test_decoded_fields(self, tmp_path):
        image = _make_image(tmp_path / "albums_awe_ktown4u_jurin.png")
        p = prepare_photocard(str(image))

        assert p.id is None
        assert p.filename == "albums_awe_ktown4u_jurin.png"
        assert p.image_url == str(image.resolve())
        assert p.album_name == "Awe"
        assert p.store == "Ktown4u"
        assert p.release_structure == "KTOWN4U"

    def test_override_member(self):
        p = prepare_photocard(
            "albums_awe_ktown4u_jurin.png",
            image_url="https://img.example/x.png",
            overrides={"member": "maya"},
        )
        assert p.member == "MAYA"
        assert p.store == "Ktown4u"

    def test_clearing_store_recomputes_structure(self):
        p = prepare_photocard(
            "albums_awe_ktown4u_jurin.png",
            image_url="https://img.example/x.png",
            overrides={"store": ""},
        )
        assert p.store is None
        assert p.release_structure == "ALBUM_CARD"

    def test_category_override_recomputes_type(self):
        p = prepare_photocard(
            "albums_2nd_anniversary_standard_chisa.png",
            image_url="https://img.example/x.png",
            overrides={"category": "merch"},
        )
        assert p.category == "MERCH"
        assert p.release_type == "ANNIVERSARY"

    def test_explicit_release_fields_win(self):
        p = prepare_photocard(
            "albums_awe_ktown4u_jurin.png",
            image_url="https://img.example/x.png",
            overrides={"release_type": "weverse", "release_structure": "lucky-draw"},
        )
        assert p.release_type == "WEVERSE"
        assert p.release_structure == "LUCKY_DRAW"

    def test_manual_fields_when_undecodable(self):
        p = prepare_photocard(
            "IMG_0042.png",
            image_url="https://img.example/IMG_0042.png",
            overrides={"category": "ALBUMS", "album_name": "Awe", "member": "Juria"},
        )
        assert p.filename == "IMG_0042.png"
        assert p.member == "JURIA"
        assert p.version == "STANDARD"
        assert p.store is None
        assert p.release_type == "ALBUM"
        assert p.release_structure == "ALBUM_CARD"

    def test_undecodable_without_manual_fields(self):
        with pytest.raises(DecodeError):
            prepare_photocard(
                "IMG_0042.png",
                image_url="https://img.example/IMG_0042.png",
                overrides={"category": "ALBUMS"},
            )

    def test_invalid_override(self):
        with pytest.raises(ValueError):
            prepare_photocard(
                "albums_awe_ktown4u_jurin.png",
                image_url="https://img.example/x.png",
                overrides={"version": "deluxe"},
            )

    def test_missing_image(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            prepare_photocard(str(tmp_path / "albums_awe_ktown4u_jurin.png"))

    def test_clean_overrides(self):
        cleaned = clean_overrides({
            "member": " hinata ",
            "album_name": "  ",
            "store": "",
            "notes": "ignored",
            "version": None,
        })
        assert cleaned == {"member": "HINATA", "store": None}


class TestRegisterPhotocard:
    URL = "https://img.example/albums_awe_ktown4u_jurin.png"

    def test_confirmed(self, test_db):
        conn, repo = test_db
        previewed = []

        def confirm(photocard):
            previewed.append(photocard.store)
            return True

        p = register_photocard(repo, "albums_awe_ktown4u_jurin.png", image_url=self.URL, confirm=confirm)

        assert previewed == ["Ktown4u"]
        assert p.id is not None
        assert repo.get(p.id).image_url == self.URL

    def test_declined(self, test_db):
        conn, repo = test_db
        result = register_photocard(
            repo, "albums_awe_ktown4u_jurin.png", image_url=self.URL, confirm=lambda p: False
        )
        assert result is None
        assert repo.count() == 0

    def test_already_registered(self, test_db):
        conn, repo = test_db
        register_photocard(repo, "albums_awe_ktown4u_jurin.png", image_url=self.URL)
        with pytest.raises(DuplicateEntryError):
            register_photocard(
                repo, "albums_awe_ktown4u_jurin.png", image_url=self.URL,
                confirm=lambda p: pytest.fail("should not be asked"),
            )


# ── Bulk import ──────────────────────────────────────────────────────

class TestDirectoryImport:
    def test_import(self, test_db, image_dir):
        conn, repo = test_db
        result = DirectoryImporter().import_source(str(image_dir), conn, repo)

        assert result.total_rows == 4
        assert result.cards_added == 3
        assert result.cards_skipped == 1
        assert len(result.errors) == 1
        assert result.errors[0].startswith("random.png:")

        kcon = repo.get_by_filename("events_kcon_2023_broadcast_standard_harvey.jpg")
        assert kcon.release_type == "KCON"
        assert kcon.release_structure == "BROADCAST"

    def test_non_recursive(self, test_db, image_dir):
        conn, repo = test_db
        result = DirectoryImporter(recursive=False).import_source(str(image_dir), conn, repo)
        assert result.total_rows == 3
        assert repo.get_by_filename("events_kcon_2023_broadcast_standard_harvey.jpg") is None

    def test_reimport_skips_existing(self, test_db, image_dir):
        conn, repo = test_db
        DirectoryImporter().import_source(str(image_dir), conn, repo)
        result = DirectoryImporter().import_source(str(image_dir), conn, repo)

        assert result.cards_added == 0
        assert result.cards_skipped == 4
        assert repo.count() == 3

    def test_dry_run_writes_nothing(self, test_db, image_dir):
        conn, repo = test_db
        result = DirectoryImporter().import_source(str(image_dir), conn, repo, dry_run=True)
        assert result.cards_added == 3
        assert repo.count() == 0

    def test_unreadable_image_reported(self, test_db, tmp_path):
        conn, repo = test_db
        (tmp_path / "albums_awe_standard_cocona.png").write_text("not a png")

        result = DirectoryImporter().import_source(str(tmp_path), conn, repo)

        assert result.cards_added == 0
        assert "Not a readable image" in result.errors[0]

    def test_bad_checksum_does_not_stop_import(self, test_db, tmp_path):
        conn, repo = test_db
        _make_image(tmp_path / "albums_awe_ktown4u_jurin.png")
        _make_bad_checksum_png(tmp_path / "albums_awe_standard_cocona.png")

        result = DirectoryImporter().import_source(str(tmp_path), conn, repo)

        assert result.cards_added == 1
        assert result.cards_skipped == 1
        assert "albums_awe_standard_cocona.png" in result.errors[0]
        assert "Not a readable image" in result.errors[0]
        assert repo.get_by_filename("albums_awe_ktown4u_jurin.png") is not None

    def test_same_basename_in_two_folders(self, test_db, tmp_path, caplog):
        conn, repo = test_db
        first = _make_image(tmp_path / "a" / "albums_awe_ktown4u_jurin.png")
        second = _make_image(tmp_path / "b" / "albums_awe_ktown4u_jurin.png")

        with caplog.at_level("WARNING", logger="photocard_collector.importers.base"):
            result = DirectoryImporter().import_source(str(tmp_path), conn, repo)

        assert result.cards_added == 1
        assert result.cards_skipped == 1
        assert result.errors == [
            f"{second}: duplicate filename 'albums_awe_ktown4u_jurin.png', "
            f"already imported from {first}"
        ]
        assert "duplicate filename" in caplog.text
        assert repo.get_by_filename("albums_awe_ktown4u_jurin.png").image_url == str(first.resolve())

    def test_same_basename_reported_in_dry_run(self, test_db, tmp_path):
        conn, repo = test_db
        _make_image(tmp_path / "a" / "albums_awe_ktown4u_jurin.png")
        _make_image(tmp_path / "b" / "albums_awe_ktown4u_jurin.png")

        result = DirectoryImporter().import_source(str(tmp_path), conn, repo, dry_run=True)

        assert result.cards_added == 1
        assert result.cards_skipped == 1
        assert len(result.errors) == 1

    def test_not_a_directory(self, test_db, tmp_path):
        conn, repo = test_db
        with pytest.raises(ValueError):
            DirectoryImporter().import_source(str(tmp_path / "nope"), conn, repo)


class TestManifestImport:
    def _write_manifest(self, tmp_path, text):
        path = tmp_path / "cards.csv"
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_import(self, test_db, tmp_path):
        conn, repo = test_db
        _make_image(tmp_path / "albums_awe_ktown4u_jurin.png")
        _make_image(tmp_path / "mystery.png")
        _make_image(tmp_path / "poster.png")
        manifest = self._write_manifest(tmp_path, (
            "Filename,image_url,category,album_name,store,member\n"
            "albums_awe_ktown4u_jurin.png,,,,none,\n"
            "albums_awe_standard_cocona.png,https://img.example/cocona.png,,,,\n"
            "mystery.png,,,,,\n"
            "poster.png,,albums,Awe,,chisa\n"
        ))

        result = ManifestImporter().import_source(manifest, conn, repo)

        assert result.total_rows == 4
        assert result.cards_added == 3
        assert result.cards_skipped == 1
        assert result.errors[0].startswith("mystery.png:")

        jurin = repo.get_by_filename("albums_awe_ktown4u_jurin.png")
        assert jurin.store is None
        assert jurin.release_structure == "ALBUM_CARD"
        assert jurin.image_url == str((tmp_path / "albums_awe_ktown4u_jurin.png").resolve())

        assert repo.get_by_filename("albums_awe_standard_cocona.png").image_url == (
            "https://img.example/cocona.png"
        )

        poster = repo.get_by_filename("poster.png")
        assert poster.member == "CHISA"
        assert poster.album_name == "Awe"

    def test_missing_filename_column(self, test_db, tmp_path):
        conn, repo = test_db
        manifest = self._write_manifest(tmp_path, "image,member\na.png,maya\n")
        with pytest.raises(ValueError, match="filename"):
            ManifestImporter().import_source(manifest, conn, repo)


class TestFormatDetection:
    def test_directory(self, tmp_path):
        assert detect_format(str(tmp_path)) == "directory"

    def test_csv(self, tmp_path):
        assert detect_format(str(tmp_path / "Cards.CSV")) == "manifest"

    def test_unknown(self, tmp_path):
        with pytest.raises(ValueError):
            detect_format(str(tmp_path / "cards.json"))

    def test_get_importer(self):
        assert isinstance(get_importer("Manifest"), ManifestImporter)
        with pytest.raises(ValueError):
            get_importer("zip")
