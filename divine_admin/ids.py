"""Human-readable id generation for gods and songs.

Ids are checked against the catalog snapshot passed in, never against a stored
counter. Strategy per id: a deterministic base candidate, then up to
``MAX_SUFFIX_ATTEMPTS`` random ``_<n>`` suffixes, then an ``_<epoch ms>``
fallback that is returned without checking.
"""

import random
import re
import time
from typing import Iterable, Optional

from divine_admin.paths import version_stamp

GOD_ID_PREFIX = "god_"
SONG_ID_PREFIX = "song_"
MAX_SUFFIX_ATTEMPTS = 100
SUFFIX_RANGE = (1, 999)


def slugify(name: str) -> str:
    """Lowercase ``name`` and collapse whitespace runs into single underscores."""
    return re.sub(r"\s+", "_", name.strip().lower())


def god_slug(god_id: str) -> str:
    """Strip the god id prefix, e.g. ``god_shiva`` -> ``shiva``."""
    if god_id.startswith(GOD_ID_PREFIX):
        return god_id[len(GOD_ID_PREFIX):]
    return god_id


def _unique_id(base: str, existing: set, rng: Optional[random.Random] = None) -> str:
    if base not in existing:
        return base

    rng = rng or random
    for _ in range(MAX_SUFFIX_ATTEMPTS):
        candidate = f"{base}_{rng.randint(*SUFFIX_RANGE)}"
        if candidate not in existing:
            return candidate

    return f"{base}_{int(time.time() * 1000)}"


def _all_songs(gods: Iterable[dict]) -> list[dict]:
    return [song for god in gods for song in (god.get("songs") or [])]


def generate_god_id(display_name: str, existing_gods: Iterable[dict],
                    rng: Optional[random.Random] = None) -> str:
    """Derive ``god_<slug>`` from a display name, unique among ``existing_gods``."""
    base = GOD_ID_PREFIX + slugify(display_name)
    existing = {god.get("id") for god in existing_gods}
    return _unique_id(base, existing, rng)


def generate_song_id(god_id: str, existing_gods: Iterable[dict],
                     stamp: Optional[str] = None,
                     rng: Optional[random.Random] = None) -> str:
    """Derive ``song_<godSlug>_<timestamp>``, unique across every god's songs."""
    base = f"{SONG_ID_PREFIX}{god_slug(god_id)}_{stamp or version_stamp()}"
    existing = {song.get("id") for song in _all_songs(existing_gods)}
    return _unique_id(base, existing, rng)
