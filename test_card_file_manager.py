"""
Tests for ID card file naming, storage and cleanup
"""

import time

import pytest
from PIL import Image

from app.services.errors import CardFileError


def test_build_filename_sanitizes_player_id(file_manager):
    assert file_manager.build_filename("PS20250001", 1718000000000) == "idcard_PS20250001_1718000000000.pdf"
    assert file_manager.build_filename("../etc/passwd", 1) == "idcard_etc_passwd_1.pdf"
    assert file_manager.build_filename("///", 1) == "idcard_player_1.pdf"


def test_same_millisecond_gets_next_free_name(file_manager, monkeypatch):
    monkeypatch.setattr(time, "time", lambda: 1718000000.0)

    with file_manager.create_card_file("PS1") as (first, handle):
        handle.write(b"%PDF-first")
    with file_manager.create_card_file("PS1") as (second, handle):
        handle.write(b"%PDF-second")

    assert first.name == "idcard_PS1_1718000000000.pdf"
    assert second.name == "idcard_PS1_1718000000001.pdf"
    assert first.read_bytes() == b"%PDF-first"


def test_failed_write_discards_partial_file(file_manager):
    with pytest.raises(RuntimeError):
        with file_manager.create_card_file("PS1") as (file_path, handle):
            handle.write(b"%PDF-partial")
            raise RuntimeError("render failed")

    assert not file_path.exists()
    assert list(file_manager.cards_path.iterdir()) == []


def test_storage_path(file_manager):
    with file_manager.create_card_file("PS20250001") as (file_path, handle):
        handle.write(b"%PDF")
    assert file_manager.storage_path(file_path) == f"/idcards/{file_path.name}"


@pytest.mark.parametrize("filename", [
    "../secret.pdf",
    "idcard_PS1_123.txt",
    "idcard_../PS1_123.pdf",
    "report.pdf",
    "",
])
def test_resolve_rejects_foreign_names(file_manager, filename):
    with pytest.raises(CardFileError):
        file_manager.resolve_card_file(filename)


def test_get_content_and_delete(file_manager):
    with file_manager.create_card_file("PS20250001") as (file_path, handle):
        handle.write(b"%PDF-1.4 card")

    assert file_manager.get_file_content(file_path.name) == b"%PDF-1.4 card"

    result = file_manager.delete_card_file(file_path.name)
    assert result == {"filename": file_path.name, "deleted": True, "bytes_freed": 13}
    assert file_manager.get_file_content(file_path.name) is None

    again = file_manager.delete_card_file(file_path.name)
    assert again["deleted"] is False


def test_resolve_photo_path(file_manager, tmp_path):
    uploads = file_manager.base_path / "uploads"
    uploads.mkdir(parents=True)
    stored = uploads / "player.jpg"
    Image.new("RGB", (10, 10)).save(stored)
    outside = tmp_path / "absolute.png"
    Image.new("RGB", (10, 10)).save(outside)

    assert file_manager.resolve_photo_path("/uploads/player.jpg") == stored
    assert file_manager.resolve_photo_path("uploads/player.jpg") == stored
    assert file_manager.resolve_photo_path(str(outside)) == outside
    assert file_manager.resolve_photo_path("/uploads/missing.jpg") is None
    assert file_manager.resolve_photo_path("") is None
    assert file_manager.resolve_photo_path(None) is None


def test_cards_directory_comes_from_settings(file_manager, card_settings):
    assert file_manager.cards_path == card_settings.get_idcards_path()
    assert file_manager.ensure_cards_directory().is_dir()
