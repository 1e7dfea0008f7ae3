"""Asset file management.

Media files live in fixed category folders under the assets root and are
referenced from records by bare filename.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from divine_admin.errors import CatalogIOError, SourceNotFoundError

logger = logging.getLogger(__name__)

IMAGES = "images"
AUDIO = "audio"
LYRICS_TELUGU = "lyrics/telugu"
LYRICS_ENGLISH = "lyrics/english"

CATEGORIES = (IMAGES, AUDIO, LYRICS_TELUGU, LYRICS_ENGLISH)

# Song record field -> category folder
SONG_ASSET_FIELDS = {
    "audioFileName": AUDIO,
    "lyricsTeluguFileName": LYRICS_TELUGU,
    "lyricsEnglishFileName": LYRICS_ENGLISH,
}


def category_dir(assets_root: Path, category: str) -> Path:
    return Path(assets_root).joinpath(*category.split("/"))


def ensure_category_dirs(assets_root: Path):
    """Create every category folder under ``assets_root``."""
    for category in CATEGORIES:
        category_dir(assets_root, category).mkdir(parents=True, exist_ok=True)


def store_asset(source: Path, target_dir: Path, keep_source: bool = False) -> str:
    """Copy ``source`` into ``target_dir`` under its own base name.

    An existing file with the same name is overwritten. The source (normally a
    staged upload) is removed afterwards unless ``keep_source`` is set.

    Returns:
        The stored filename.
    """
    source = Path(source)
    target_dir = Path(target_dir)
    if not source.is_file():
        raise SourceNotFoundError(f"Source file not found: {source}")

    filename = source.name
    target = target_dir / filename
    if target.exists() and target.samefile(source):
        return filename

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
        if not keep_source:
            source.unlink()
    except OSError as e:
        raise CatalogIOError(f"Failed to store {source} in {target_dir}: {e}") from e

    logger.info("Stored asset %s in %s", filename, target_dir)
    return filename


def remove_asset(target_dir: Path, filename: Optional[str]) -> bool:
    """Delete ``filename`` from ``target_dir`` if present.

    Empty filenames and missing files are a no-op. Any other filesystem error
    is raised so a delete never reports success while leaving files behind.

    Returns:
        True if a file was removed.
    """
    if not filename:
        return False
    path = Path(target_dir) / Path(filename).name
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise CatalogIOError(f"Failed to remove {path}: {e}") from e

    logger.info("Removed asset %s", path)
    return True


def remove_god_assets(assets_root: Path, god: dict) -> int:
    """Remove a god's image and every asset of its songs."""
    removed = int(remove_asset(category_dir(assets_root, IMAGES), god.get("imageFileName")))
    for song in god.get("songs") or []:
        removed += remove_song_assets(assets_root, song)
    return removed


def remove_song_assets(assets_root: Path, song: dict) -> int:
    """Remove the audio and lyrics files referenced by ``song``."""
    removed = 0
    for field, category in SONG_ASSET_FIELDS.items():
        if remove_asset(category_dir(assets_root, category), song.get(field)):
            removed += 1
    return removed
