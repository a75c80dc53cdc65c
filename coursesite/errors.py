"""
Error types raised by the storage and export layers.

Each component raises its own narrow error and keeps the original exception
as `cause` (and as __cause__ via `raise ... from`), so callers can show a
short message while logs still have the full story.
"""

from __future__ import annotations

from pathlib import Path


class CourseSiteError(Exception):
    """Base class for all errors raised by coursesite."""


class MalformedDocument(CourseSiteError):
    """
    A JSON document does not have the expected shape.

    `key` names the offending field (dotted for nested objects) when known.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key


class PersistenceError(CourseSiteError):
    """Reading or writing a JSON file failed."""

    def __init__(self, path: str | Path, cause: BaseException) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


class ExportError(CourseSiteError):
    """Building or saving a course site failed."""

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message
        self.path = Path(path) if path is not None else None
        self.cause = cause
        text = message if self.path is None else f"{message} ({self.path})"
        if cause is not None:
            text = f"{text}: {cause}"
        super().__init__(text)
