"""Tests for divine_admin/config.py"""

import json
from pathlib import Path

import pytest

from divine_admin.config import Config, ServerSettings, configure, init_config
from divine_admin.errors import (
    DocumentNotFoundError,
    MalformedDocumentError,
    ValidationError,
)


@pytest.fixture
def layout(tmp_path):
    assets = tmp_path / "assets"
    assets.mkdir()
    document = assets / "gods_songs.json"
    document.write_text('{"version": "20241008000000", "gods": []}')
    return document, assets


def test_default_config():
    c = Config()
    assert c.json_path == "assets/gods_songs.json"
    assert c.assets_path == "assets"
    assert c.server.host == "127.0.0.1"
    assert c.server.port == 3000
    assert c.version == "1.0"


def test_config_paths(tmp_path):
    c = Config(json_path=str(tmp_path / "g.json"), assets_path=str(tmp_path / "a"))
    assert c.document_path == (tmp_path / "g.json").resolve()
    assert c.asset_dir("images") == c.assets_root / "images"
    assert c.asset_dir("lyrics/english") == c.assets_root / "lyrics" / "english"


def test_config_roundtrip():
    c = Config(json_path="/tmp/x.json", server=ServerSettings(port=8080))
    c2 = Config.from_dict(c.to_dict())
    assert c2 == c


def test_config_legacy_assets_key():
    c = Config.from_dict({"android_project_path": "/srv/android/assets"})
    assert c.assets_path == "/srv/android/assets"


def test_config_save_load(tmp_path):
    path = tmp_path / "config.json"
    Config(json_path="/data/g.json").save(path)
    assert json.loads(path.read_text())["json_path"] == "/data/g.json"
    assert Config.load(path).json_path == "/data/g.json"


def test_config_load_missing(tmp_path):
    assert Config.load(tmp_path / "nope.json") == Config()


def test_configure_valid(layout):
    document, assets = layout
    original = Config()
    c = configure(original, json_path=f'  "{document}" ', assets_path=str(assets))
    assert Path(c.json_path) == document
    assert Path(c.assets_path) == assets
    assert original.json_path == "assets/gods_songs.json"


def test_configure_missing_document(layout, tmp_path):
    _, assets = layout
    with pytest.raises(DocumentNotFoundError):
        configure(Config(), json_path=str(tmp_path / "nope.json"), assets_path=str(assets))


def test_configure_missing_assets_dir(layout, tmp_path):
    document, _ = layout
    with pytest.raises(DocumentNotFoundError):
        configure(Config(), json_path=str(document), assets_path=str(tmp_path / "nope"))


def test_configure_empty_document(layout):
    document, assets = layout
    document.write_text("")
    with pytest.raises(ValidationError):
        configure(Config(), json_path=str(document), assets_path=str(assets))


def test_configure_invalid_json(layout):
    document, assets = layout
    document.write_text("{oops")
    with pytest.raises(MalformedDocumentError):
        configure(Config(), json_path=str(document), assets_path=str(assets))


def test_configure_defaults_for_blank(tmp_path, monkeypatch, layout):
    monkeypatch.chdir(tmp_path)
    c = configure(Config(), json_path="", assets_path="   ")
    assert Path(c.json_path) == Path.cwd() / "assets" / "gods_songs.json"
    assert Path(c.assets_path) == Path.cwd() / "assets"


def test_init_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    c = init_config(json_path="store/gods_songs.json", assets_path="store/assets")
    for sub in ("images", "audio", "lyrics/telugu", "lyrics/english"):
        assert (tmp_path / "store" / "assets" / sub).is_dir()
    data = json.loads((tmp_path / "store" / "gods_songs.json").read_text())
    assert data["gods"] == []
    assert len(data["version"]) == 14
    assert (tmp_path / "config.json").exists()
    assert Config.load(tmp_path / "config.json").json_path == c.json_path


def test_init_config_keeps_existing_document(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    doc = tmp_path / "gods_songs.json"
    doc.write_text('{"version": "20240101000000", "gods": [{"id": "god_rama"}]}')
    init_config(json_path=str(doc), assets_path="assets", config_path=tmp_path / "cfg.json")
    assert "god_rama" in doc.read_text()
    assert (tmp_path / "cfg.json").exists()


def test_configure_undecodable_document(layout):
    document, assets = layout
    document.write_bytes(b'{"gods": [], "x": "\xff"}')
    with pytest.raises(MalformedDocumentError):
        configure(Config(), json_path=str(document), assets_path=str(assets))
