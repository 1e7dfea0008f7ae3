"""Catalog operations: one load -> mutate -> save cycle per call.

CatalogService is what the HTTP routes and the CLI call. It validates input,
generates ids, moves asset files into place and persists the document.

Asset copies happen before the document is touched, so a failed copy never
leaves a half-populated record behind (copied files may be orphaned).
Operations are serialized within one process by a lock; separate processes
writing the same document can still lose updates.
"""

import logging
import threading
from pathlib import Path
from typing import Optional

from divine_admin import assets
from divine_admin.catalog import (
    delete_god,
    delete_song,
    find_god,
    find_song,
    insert_god,
    insert_song,
    load_catalog,
    load_catalog_or_empty,
    save_catalog,
    to_int,
)
from divine_admin.config import Config
from divine_admin.errors import NotFoundError, ValidationError
from divine_admin.ids import generate_god_id, generate_song_id

logger = logging.getLogger(__name__)

GOD_NAME_PREFIX = "Lord "
LANGUAGES = ("telugu", "english")
DEFAULT_LANGUAGE = "telugu"


def god_display_name(name: str) -> str:
    return f"{GOD_NAME_PREFIX}{name.strip()}"


def _clean(value) -> str:
    return str(value).strip() if value is not None else ""


def _language(value: Optional[str]) -> str:
    language = _clean(value).lower() or DEFAULT_LANGUAGE
    if language not in LANGUAGES:
        raise ValidationError(
            f"languageDefault must be one of {', '.join(LANGUAGES)}, got {value!r}"
        )
    return language


def _source(path) -> Optional[Path]:
    if path is None or _clean(path) == "":
        return None
    return Path(path)


class CatalogService:
    """Access layer over the configured document and assets root."""

    def __init__(self, config: Config):
        self._config = config
        self._lock = threading.Lock()

    @property
    def config(self) -> Config:
        return self._config

    def reconfigure(self, config: Config):
        """Point the service at a different document/assets root."""
        with self._lock:
            self._config = config
        logger.info("Configuration updated: %s, %s", config.json_path, config.assets_path)

    def _store(self, source: Optional[Path], category: str, keep: bool) -> Optional[str]:
        if source is None:
            return None
        return assets.store_asset(source, self._config.asset_dir(category), keep_source=keep)

    def get_data(self) -> dict:
        """Current document; an empty one when it cannot be read."""
        return load_catalog_or_empty(self._config.document_path)

    def add_god(self, name: str, display_order=0, image_path=None,
                keep_sources: bool = False) -> dict:
        """Create a god with a generated id and "Lord " name, store its image."""
        name = _clean(name)
        if not name:
            raise ValidationError("God name is required")

        with self._lock:
            path = self._config.document_path
            catalog = load_catalog(path)
            god_id = generate_god_id(name, catalog["gods"])
            image_file = self._store(_source(image_path), assets.IMAGES, keep_sources)

            god = {
                "id": god_id,
                "name": god_display_name(name),
                "imageFileName": image_file or "",
                "displayOrder": to_int(display_order),
                "songs": [],
            }
            insert_god(catalog, god)
            save_catalog(catalog, path)

        logger.info('God added: ID="%s", Name="%s"', god["id"], god["name"])
        return god

    def add_song(self, title: str, god_id: str, language_default: Optional[str] = None,
                 audio_path=None, lyrics_telugu_path=None, lyrics_english_path=None,
                 duration=0, display_order=0, keep_sources: bool = False) -> dict:
        """Create a song under ``god_id`` and store its audio/lyrics files."""
        title = _clean(title)
        god_id = _clean(god_id)
        if not title:
            raise ValidationError("Song title is required")
        if not god_id:
            raise ValidationError("God ID is required")
        language = _language(language_default)
        duration_ms = to_int(duration)
        if duration_ms < 0:
            raise ValidationError(f"duration must be non-negative, got {duration!r}")

        with self._lock:
            path = self._config.document_path
            catalog = load_catalog(path)
            if find_god(catalog, god_id) is None:
                raise NotFoundError(f"God not found: {god_id}")

            song_id = generate_song_id(god_id, catalog["gods"])
            audio_file = self._store(_source(audio_path), assets.AUDIO, keep_sources)
            telugu_file = self._store(_source(lyrics_telugu_path), assets.LYRICS_TELUGU, keep_sources)
            english_file = self._store(_source(lyrics_english_path), assets.LYRICS_ENGLISH, keep_sources)

            song = {
                "id": song_id,
                "title": title,
                "godId": god_id,
                "languageDefault": language,
                "audioFileName": audio_file,
                "lyricsTeluguFileName": telugu_file,
                "lyricsEnglishFileName": english_file,
                "duration": duration_ms,
                "displayOrder": to_int(display_order),
            }
            insert_song(catalog, god_id, song)
            save_catalog(catalog, path)

        logger.info('Song added: ID="%s", Title="%s"', song["id"], song["title"])
        return song

    def delete_god(self, god_id: str) -> dict:
        """Delete a god, all its songs, and every asset file they reference."""
        with self._lock:
            path = self._config.document_path
            catalog = load_catalog(path)
            god = find_god(catalog, god_id)
            if god is None:
                raise NotFoundError(f"God not found: {god_id}")

            assets.remove_god_assets(self._config.assets_root, god)
            delete_god(catalog, god_id)
            save_catalog(catalog, path)

        logger.info('God deleted: ID="%s" (%d songs)', god_id, len(god.get("songs") or []))
        return god

    def delete_song(self, song_id: str) -> dict:
        """Delete a song from whichever god owns it, with its asset files."""
        with self._lock:
            path = self._config.document_path
            catalog = load_catalog(path)
            found = find_song(catalog, song_id)
            if found is None:
                raise NotFoundError(f"Song not found: {song_id}")

            assets.remove_song_assets(self._config.assets_root, found[1])
            song = delete_song(catalog, song_id)
            save_catalog(catalog, path)

        logger.info('Song deleted: ID="%s"', song_id)
        return song

    def preview_god_id(self, name: str) -> str:
        """The id ``add_god(name)`` would generate now. Never fails on a bad document."""
        name = _clean(name)
        if not name:
            return ""
        catalog = load_catalog_or_empty(self._config.document_path)
        return generate_god_id(name, catalog["gods"])

    def preview_song_id(self, god_id: str) -> str:
        """The id ``add_song(..., god_id)`` would generate now."""
        god_id = _clean(god_id)
        if not god_id:
            return ""
        catalog = load_catalog_or_empty(self._config.document_path)
        return generate_song_id(god_id, catalog["gods"])
