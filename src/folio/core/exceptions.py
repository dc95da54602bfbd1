"""Core exceptions for the Folio application."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from folio.core.types import ErrorKind, FieldError


class FolioError(Exception):
    """Base exception for all Folio errors."""


class FieldValueError(FolioError, ValueError):
    """Raised by a format validator when a single value is rejected."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)

    def at(self, field: str) -> FieldError:
        """Attribute this failure to a record field."""
        return FieldError(field, self.kind, self.message)


class AuthorFieldErrors(FolioError):
    """Raised when one or more authorship entries on a post are malformed.

    ``refs`` holds the entries that did normalize, so callers can keep
    checking them.
    """

    def __init__(self, errors: Sequence[FieldError], refs: Sequence[Any] = ()) -> None:
        self.errors = list(errors)
        self.refs = list(refs)
        super().__init__(f"{len(self.errors)} malformed author reference(s)")


class RecordValidationError(FolioError):
    """Raised when a content record fails validation.

    Carries every violated field of the record, not just the first.
    """

    def __init__(self, collection: str, slug: str, errors: Sequence[FieldError]) -> None:
        self.collection = collection
        self.slug = slug
        self.errors = list(errors)
        super().__init__(f"{collection}/{slug}: validation failed with {len(self.errors)} error(s)")

    @property
    def kinds(self) -> set[ErrorKind]:
        return {error.kind for error in self.errors}


class ContentLoadError(FolioError):
    """Raised when a content file cannot be split into front matter and body."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load {path}: {reason}")


class ManifestError(FolioError):
    """Raised when an editing-tool manifest cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest {path}: {reason}")


class ConfigError(FolioError):
    """Base exception for all configuration-related errors."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration file fails validation."""

    def __init__(self, errors: Sequence[dict] | None = None) -> None:
        self.errors = list(errors or [])
        super().__init__(f"Configuration validation failed with {len(self.errors)} error(s).")


class ConfigFileError(ConfigError):
    """Raised when the configuration file cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration file {path}: {reason}")
