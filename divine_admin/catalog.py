"""gods_songs.json loading, mutation and persistence.

The document is the single datastore read by the mobile app:

    {"version": "YYYYMMDDHHMMSS", "gods": [{..., "songs": [...]}]}

Functions here operate on the plain dict and know nothing about asset files.
"""

import json
import logging
import math
import os
import re
from pathlib import Path
from typing import Optional

from divine_admin.errors import (
    CatalogIOError,
    DocumentNotFoundError,
    MalformedDocumentError,
    NotFoundError,
)
from divine_admin.paths import is_version_stamp, version_stamp

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def create_catalog() -> dict:
    """Create a fresh empty document."""
    return {
        "version": version_stamp(),
        "gods": [],
    }


def parse_catalog(text: str) -> dict:
    """Parse document text, repairing a missing ``gods`` or ``version`` in memory."""
    if not text.strip():
        return create_catalog()

    try:
        catalog = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(f"Invalid JSON: {e}") from e

    if not isinstance(catalog, dict):
        raise MalformedDocumentError("Document root must be a JSON object")
    if catalog.get("gods") is None:
        catalog["gods"] = []
    if not isinstance(catalog["gods"], list):
        raise MalformedDocumentError("'gods' must be a list")
    if not catalog.get("version"):
        catalog["version"] = version_stamp()

    for god in catalog["gods"]:
        if not isinstance(god, dict):
            raise MalformedDocumentError("Every god must be a JSON object")
        if god.get("songs") is None:
            god["songs"] = []
        if not isinstance(god["songs"], list):
            raise MalformedDocumentError(f"'songs' of god {god.get('id')!r} must be a list")
        if not all(isinstance(song, dict) for song in god["songs"]):
            raise MalformedDocumentError(f"Every song of god {god.get('id')!r} must be a JSON object")
    return catalog


def load_catalog(path: Path) -> dict:
    """Load the document at ``path``.

    Raises:
        DocumentNotFoundError: the file does not exist.
        MalformedDocumentError: the content is not valid UTF-8 JSON of the
            expected shape.
        CatalogIOError: any other read failure.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DocumentNotFoundError(f"JSON file not found: {path}") from e
    except IsADirectoryError as e:
        raise DocumentNotFoundError(f"JSON path is a directory: {path}") from e
    except UnicodeDecodeError as e:
        raise MalformedDocumentError(f"JSON file is not valid UTF-8: {path}") from e
    except OSError as e:
        raise CatalogIOError(f"Failed to read {path}: {e}") from e
    return parse_catalog(text)


def load_catalog_or_empty(path: Optional[Path]) -> dict:
    """Load the document, or an empty one if it cannot be read."""
    if path is None:
        return create_catalog()
    try:
        return load_catalog(path)
    except (DocumentNotFoundError, MalformedDocumentError, CatalogIOError) as e:
        logger.warning("Using empty catalog: %s", e)
        return create_catalog()


def next_version(previous: Optional[str]) -> str:
    """Current stamp, never lower than ``previous``."""
    stamp = version_stamp()
    if is_version_stamp(previous) and previous > stamp:
        return previous
    return stamp


def save_catalog(catalog: dict, path: Path) -> dict:
    """Stamp a new version and overwrite ``path`` with pretty-printed JSON.

    The parent directory must already exist; it is never created here.
    """
    path = Path(path)
    if not path.parent.is_dir():
        raise DocumentNotFoundError(f"Directory for JSON file not found: {path.parent}")

    catalog["version"] = next_version(catalog.get("version"))
    if catalog.get("gods") is None:
        catalog["gods"] = []

    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_text(
            json.dumps(catalog, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        os.replace(tmp_path, path)
    except OSError as e:
        raise CatalogIOError(f"Failed to save {path}: {e}") from e

    logger.info("Data saved with version: %s", catalog["version"])
    return catalog


def _order_key(record: dict) -> int:
    return to_int(record.get("displayOrder"))


def to_int(value, default: int = 0) -> int:
    """Leading integer of ``value`` (``"12abc"`` -> 12); ``default`` when there is none."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    match = _LEADING_INT.match(value) if isinstance(value, str) else None
    return int(match.group(1)) if match else default


def find_god(catalog: dict, god_id: str) -> Optional[dict]:
    """Find a god by ID."""
    for god in catalog["gods"]:
        if god.get("id") == god_id:
            return god
    return None


def find_song(catalog: dict, song_id: str) -> Optional[tuple[dict, dict]]:
    """Find a song anywhere in the document. Returns ``(god, song)``."""
    for god in catalog["gods"]:
        for song in god.get("songs") or []:
            if song.get("id") == song_id:
                return god, song
    return None


def insert_god(catalog: dict, god: dict) -> dict:
    """Append ``god`` and keep ``gods`` sorted by displayOrder."""
    god.setdefault("songs", [])
    catalog["gods"].append(god)
    catalog["gods"].sort(key=_order_key)
    return god


def insert_song(catalog: dict, god_id: str, song: dict) -> dict:
    """Append ``song`` to the god ``god_id`` and keep its songs sorted."""
    god = find_god(catalog, god_id)
    if god is None:
        raise NotFoundError(f"God not found: {god_id}")
    songs = god.setdefault("songs", [])
    songs.append(song)
    songs.sort(key=_order_key)
    return song


def delete_god(catalog: dict, god_id: str) -> dict:
    """Remove and return the god ``god_id`` together with its songs."""
    for i, god in enumerate(catalog["gods"]):
        if god.get("id") == god_id:
            return catalog["gods"].pop(i)
    raise NotFoundError(f"God not found: {god_id}")


def delete_song(catalog: dict, song_id: str) -> dict:
    """Remove and return the first song with ``song_id`` in document order."""
    for god in catalog["gods"]:
        songs = god.get("songs") or []
        for i, song in enumerate(songs):
            if song.get("id") == song_id:
                return songs.pop(i)
    raise NotFoundError(f"Song not found: {song_id}")


def catalog_summary(catalog: dict) -> dict:
    """Return a summary of the document."""
    gods = catalog["gods"]
    return {
        "version": catalog["version"],
        "total_gods": len(gods),
        "total_songs": sum(len(g.get("songs") or []) for g in gods),
        "songs_by_god": {g.get("id"): len(g.get("songs") or []) for g in gods},
    }
