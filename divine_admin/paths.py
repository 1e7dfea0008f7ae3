"""Version stamps and path normalization."""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

VERSION_FORMAT = "%Y%m%d%H%M%S"


def version_stamp(now: Optional[datetime] = None) -> str:
    """Format local wall-clock time as a 14-digit ``YYYYMMDDHHMMSS`` string."""
    return (now or datetime.now()).strftime(VERSION_FORMAT)


def is_version_stamp(value) -> bool:
    return isinstance(value, str) and len(value) == 14 and value.isdigit()


def normalize_path(candidate: Optional[str]) -> Optional[Path]:
    """Clean up a user-typed path.

    Trims whitespace, strips one layer of matching surrounding quotes (as left
    behind by "copy as path" in file managers), normalizes separators and
    resolves relative paths against the working directory.

    Returns None for an empty or whitespace-only candidate so the caller can
    substitute its default.
    """
    if candidate is None:
        return None
    cleaned = str(candidate).strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("'", '"'):
        cleaned = cleaned[1:-1].strip()
    if not cleaned:
        return None

    path = Path(os.path.expanduser(os.path.normpath(cleaned)))
    if not path.is_absolute():
        path = Path.cwd() / path
    return Path(os.path.normpath(path))
