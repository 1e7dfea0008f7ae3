"""Tests for divine_admin/assets.py"""

from pathlib import Path

import pytest

from divine_admin import assets
from divine_admin.assets import (
    category_dir,
    ensure_category_dirs,
    remove_asset,
    remove_god_assets,
    remove_song_assets,
    store_asset,
)
from divine_admin.errors import CatalogIOError, SourceNotFoundError


@pytest.fixture
def staged(tmp_path):
    path = tmp_path / "uploads" / "shiva.png"
    path.parent.mkdir()
    path.write_bytes(b"\x89PNG fake")
    return path


def test_category_dir(tmp_path):
    assert category_dir(tmp_path, assets.LYRICS_TELUGU) == tmp_path / "lyrics" / "telugu"
    assert category_dir(tmp_path, assets.IMAGES) == tmp_path / "images"


def test_ensure_category_dirs(tmp_path):
    ensure_category_dirs(tmp_path)
    for sub in ("images", "audio", "lyrics/telugu", "lyrics/english"):
        assert (tmp_path / sub).is_dir()


def test_store_asset_moves_staged_file(tmp_path, staged):
    target = tmp_path / "assets" / "images"
    name = store_asset(staged, target)
    assert name == "shiva.png"
    assert (target / "shiva.png").read_bytes() == b"\x89PNG fake"
    assert not staged.exists()


def test_store_asset_keep_source(tmp_path, staged):
    store_asset(staged, tmp_path / "images", keep_source=True)
    assert staged.exists()
    assert (tmp_path / "images" / "shiva.png").exists()


def test_store_asset_overwrites(tmp_path, staged):
    target = tmp_path / "images"
    target.mkdir()
    (target / "shiva.png").write_bytes(b"old")
    store_asset(staged, target)
    assert (target / "shiva.png").read_bytes() == b"\x89PNG fake"


def test_store_asset_missing_source(tmp_path):
    with pytest.raises(SourceNotFoundError):
        store_asset(tmp_path / "nope.mp3", tmp_path / "audio")
    assert not (tmp_path / "audio").exists()


def test_store_asset_already_in_place(tmp_path):
    target = tmp_path / "images"
    target.mkdir()
    existing = target / "ganesha.png"
    existing.write_bytes(b"img")
    assert store_asset(existing, target) == "ganesha.png"
    assert existing.read_bytes() == b"img"


def test_remove_asset(tmp_path):
    (tmp_path / "a.mp3").write_bytes(b"x")
    assert remove_asset(tmp_path, "a.mp3") is True
    assert not (tmp_path / "a.mp3").exists()


def test_remove_asset_is_idempotent(tmp_path):
    assert remove_asset(tmp_path, "missing.mp3") is False
    assert remove_asset(tmp_path, "") is False
    assert remove_asset(tmp_path, None) is False
    assert remove_asset(tmp_path / "no_such_dir", "a.mp3") is False


def test_remove_asset_permission_error_is_raised(tmp_path, monkeypatch):
    (tmp_path / "a.mp3").write_bytes(b"x")

    def deny(self, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "unlink", deny)
    with pytest.raises(CatalogIOError):
        remove_asset(tmp_path, "a.mp3")


def _touch(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")


def test_remove_song_assets_only_audio(tmp_path):
    _touch(tmp_path / "audio" / "aarti.mp3")
    song = {"audioFileName": "aarti.mp3", "lyricsTeluguFileName": None, "lyricsEnglishFileName": None}
    assert remove_song_assets(tmp_path, song) == 1
    assert not (tmp_path / "audio" / "aarti.mp3").exists()


def test_remove_god_assets(tmp_path):
    _touch(tmp_path / "images" / "shiva.png")
    _touch(tmp_path / "audio" / "a.mp3")
    _touch(tmp_path / "lyrics" / "telugu" / "a_te.lrc")
    _touch(tmp_path / "lyrics" / "english" / "b_en.lrc")
    _touch(tmp_path / "audio" / "other.mp3")
    god = {
        "imageFileName": "shiva.png",
        "songs": [
            {"audioFileName": "a.mp3", "lyricsTeluguFileName": "a_te.lrc", "lyricsEnglishFileName": None},
            {"audioFileName": None, "lyricsTeluguFileName": None, "lyricsEnglishFileName": "b_en.lrc"},
        ],
    }
    assert remove_god_assets(tmp_path, god) == 4
    assert (tmp_path / "audio" / "other.mp3").exists()
    assert not (tmp_path / "images" / "shiva.png").exists()
