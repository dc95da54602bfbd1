"""Primitive value checks shared by every content collection.

Every validator here is a pure function. A rejected value raises
:class:`~folio.core.exceptions.FieldValueError`; the caller decides which
record field the failure belongs to.

Blank optional input (``None``, ``""`` or whitespace only) is always
normalized to ``None`` so downstream code never sees an empty string.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import Any
from urllib.parse import urlsplit

from folio.core.exceptions import FieldValueError
from folio.core.types import ErrorKind


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_non_empty_string(value: Any) -> str:
    """Return the trimmed string, rejecting missing and blank values.

    Integers are accepted and stringified, since YAML front matter turns
    unquoted numbers like ``2024`` into ``int``.

    Raises:
        FieldValueError: ``EMPTY_FIELD`` for blank input, ``INVALID_TYPE``
            for values that are not strings.

    """
    if _is_blank(value):
        raise FieldValueError(ErrorKind.EMPTY_FIELD, "Value is required and must not be blank")
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise FieldValueError(ErrorKind.INVALID_TYPE, f"Expected text, got {type(value).__name__}")
    return value.strip()


def optional_string(value: Any) -> str | None:
    """Like :func:`validate_non_empty_string`, but blank means absent."""
    if _is_blank(value):
        return None
    return validate_non_empty_string(value)


def _check_url(url: str, schemes: Iterable[str]) -> None:
    allowed = tuple(schemes)
    if not url.startswith(tuple(f"{scheme}://" for scheme in allowed)):
        raise FieldValueError(ErrorKind.INVALID_URL, f"URL must start with {' or '.join(f'{s}://' for s in allowed)}")
    if any(ch.isspace() for ch in url):
        raise FieldValueError(ErrorKind.INVALID_URL, "URL must not contain whitespace")
    try:
        parts = urlsplit(url)
        # Accessing .port validates it.
        parts.port  # noqa: B018
    except ValueError as exc:
        raise FieldValueError(ErrorKind.INVALID_URL, f"Malformed URL: {exc}") from exc
    if not parts.hostname:
        raise FieldValueError(ErrorKind.INVALID_URL, "URL has no host")


def _optional_url(value: Any, schemes: Iterable[str]) -> str | None:
    if _is_blank(value):
        return None
    if not isinstance(value, str):
        raise FieldValueError(ErrorKind.INVALID_URL, f"Expected a URL string, got {type(value).__name__}")
    url = value.strip()
    _check_url(url, schemes)
    return url


def validate_https_url(value: Any) -> str | None:
    """Validate an optional absolute ``https://`` URL.

    Examples:
        >>> validate_https_url("  https://jane.dev  ")
        'https://jane.dev'
        >>> validate_https_url("   ") is None
        True

    """
    return _optional_url(value, ("https",))


def validate_absolute_url(value: Any) -> str | None:
    """Validate an optional absolute ``http://`` or ``https://`` URL."""
    return _optional_url(value, ("http", "https"))


def coerce_date(value: Any) -> date:
    """Coerce a front-matter value to a calendar date.

    Accepts ``date`` and ``datetime`` objects (YAML parses unquoted dates
    itself) and ISO 8601 strings such as ``2026-01-01`` or
    ``2026-01-01T09:30:00Z``.

    Raises:
        FieldValueError: ``INVALID_DATE`` if the value cannot be read as a date.

    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise FieldValueError(ErrorKind.INVALID_DATE, f"Expected a date, got {type(value).__name__}")

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        msg = f"Invalid date '{value}'. Expected YYYY-MM-DD or an ISO 8601 timestamp."
        raise FieldValueError(ErrorKind.INVALID_DATE, msg) from exc
