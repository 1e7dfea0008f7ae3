"""Error kinds raised by the catalog store and its access layer.

Every class carries a stable ``kind`` string so the HTTP layer can report the
failure and the HTTP client can raise the same class on the other side.
"""

from typing import Optional


class CatalogError(RuntimeError):
    """Base class for all catalog failures."""

    kind = "CatalogError"


class ValidationError(CatalogError, ValueError):
    """A required field is missing, empty, or out of range."""

    kind = "ValidationError"


class NotFoundError(CatalogError, LookupError):
    """A referenced god or song does not exist."""

    kind = "NotFound"


class DocumentNotFoundError(CatalogError, FileNotFoundError):
    """The configured document path (or its parent directory) is missing."""

    kind = "DocumentNotFound"


class MalformedDocumentError(CatalogError, ValueError):
    """The document is not valid JSON or lacks the expected shape."""

    kind = "MalformedDocument"


class SourceNotFoundError(CatalogError, FileNotFoundError):
    """An asset source file is missing at copy time."""

    kind = "SourceNotFound"


class CatalogIOError(CatalogError, OSError):
    """Generic filesystem failure while copying, deleting, or saving."""

    kind = "IOFailure"


ERROR_KINDS = {
    cls.kind: cls
    for cls in (
        CatalogError,
        ValidationError,
        NotFoundError,
        DocumentNotFoundError,
        MalformedDocumentError,
        SourceNotFoundError,
        CatalogIOError,
    )
}


def error_for_kind(kind: Optional[str], message: str) -> CatalogError:
    """Build the exception matching ``kind``, falling back to CatalogError."""
    cls = ERROR_KINDS.get(kind or "", CatalogError)
    return cls(message)
