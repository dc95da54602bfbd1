"""Folio: content metadata validation and author resolution for a static blog."""

from folio.core.catalog import build_catalog, load_site
from folio.core.reading_time import estimate_read_minutes, estimate_read_minutes_from_html
from folio.core.schema import validate_author, validate_post

__version__ = "0.1.0"
__all__ = [
    "build_catalog",
    "estimate_read_minutes",
    "estimate_read_minutes_from_html",
    "load_site",
    "validate_author",
    "validate_post",
]
