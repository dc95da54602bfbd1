"""Record-level validation for the authors and blog collections.

Validation is exhaustive: every violated field of a record is collected
before :class:`~folio.core.exceptions.RecordValidationError` is raised, so an
author sees every problem with a post at once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from folio.core.authors import AUTHOR_ID_FIELD, AUTHOR_INLINE_FIELD, AUTHOR_LIST_FIELD, locate_author_refs
from folio.core.config import ValidationSettings
from folio.core.exceptions import FieldValueError, RecordValidationError
from folio.core.formats import (
    coerce_date,
    optional_string,
    validate_absolute_url,
    validate_https_url,
    validate_non_empty_string,
)
from folio.core.types import AuthorById, AuthorEntity, ErrorKind, FieldError, PostRecord

logger = logging.getLogger(__name__)

AUTHORS_COLLECTION = "authors"
POSTS_COLLECTION = "blog"

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A front-matter key accepted by a collection.

    ``editable`` is False for legacy keys that are still read but that the
    editing tool no longer writes.
    """

    key: str
    required: bool
    editable: bool = True


AUTHOR_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("name", required=True),
    FieldSpec("avatarImage", required=False),
    FieldSpec("avatarUrl", required=False, editable=False),
    FieldSpec("website", required=False),
)

POST_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("title", required=True),
    FieldSpec("description", required=True),
    FieldSpec("category", required=True),
    FieldSpec("excerpt", required=True),
    FieldSpec("pubDate", required=True),
    FieldSpec("updatedDate", required=False),
    FieldSpec("heroImage", required=False),
    FieldSpec(AUTHOR_ID_FIELD, required=False),
    FieldSpec(AUTHOR_INLINE_FIELD, required=False),
    FieldSpec(AUTHOR_LIST_FIELD, required=False, editable=False),
)

_REQUIRED_POST_TEXT = ("title", "description", "category", "excerpt")


class _FieldCollector:
    """Runs field validators and keeps every failure."""

    def __init__(self, metadata: Mapping[str, Any]) -> None:
        self.metadata = metadata
        self.errors: list[FieldError] = []

    def check(self, key: str, validator: Callable[[Any], T]) -> T | None:
        try:
            return validator(self.metadata.get(key))
        except FieldValueError as exc:
            self.errors.append(exc.at(key))
            return None

    def add(self, error: FieldError) -> None:
        self.errors.append(error)


def validate_author(metadata: Mapping[str, Any], *, slug: str) -> AuthorEntity:
    """Validate an author record and return its canonical entity.

    Args:
        metadata: Raw front matter of the author record.
        slug: The record's storage slug, which becomes its canonical id.

    Raises:
        RecordValidationError: With every violated field.

    """
    fields = _FieldCollector(metadata)
    name = fields.check("name", validate_non_empty_string)
    avatar_image = fields.check("avatarImage", optional_string)
    avatar_url = fields.check("avatarUrl", validate_absolute_url)
    website = fields.check("website", validate_https_url)

    if fields.errors:
        raise RecordValidationError(AUTHORS_COLLECTION, slug, fields.errors)

    return AuthorEntity(
        id=slug,
        name=name,
        avatar_image=avatar_image,
        avatar_url=avatar_url,
        website=website,
    )


def _check_pub_date(value: Any):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise FieldValueError(ErrorKind.EMPTY_FIELD, "Publish date is required")
    return coerce_date(value)


def _check_updated_date(value: Any):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_date(value)


def validate_post(
    metadata: Mapping[str, Any],
    *,
    slug: str,
    known_author_ids: frozenset[str] | set[str],
    body: str = "",
    settings: ValidationSettings | None = None,
) -> PostRecord:
    """Validate a blog post record against the known author collection.

    Args:
        metadata: Raw front matter of the post.
        slug: The post's storage slug.
        known_author_ids: Snapshot of every valid author id. It is only read.
        body: Raw body text, kept for reading-time estimates.
        settings: Validation policies; defaults apply when omitted.

    Raises:
        RecordValidationError: With every violated field, including one
            ``DANGLING_AUTHOR_REFERENCE`` per unknown author id.

    """
    settings = settings or ValidationSettings()
    fields = _FieldCollector(metadata)

    text = {key: fields.check(key, validate_non_empty_string) for key in _REQUIRED_POST_TEXT}
    pub_date = fields.check("pubDate", _check_pub_date)
    updated_date = fields.check("updatedDate", _check_updated_date)
    hero_image = fields.check("heroImage", optional_string)

    if (
        settings.require_updated_after_published
        and pub_date is not None
        and updated_date is not None
        and updated_date < pub_date
    ):
        fields.add(
            FieldError(
                "updatedDate",
                ErrorKind.INVALID_DATE,
                f"Updated date {updated_date.isoformat()} precedes publish date {pub_date.isoformat()}",
            )
        )

    located, author_errors = locate_author_refs(metadata)
    fields.errors.extend(author_errors)

    for path, ref in located:
        if isinstance(ref, AuthorById) and ref.id not in known_author_ids:
            logger.debug("Post %s references unknown author %s", slug, ref.id)
            fields.add(
                FieldError(
                    path,
                    ErrorKind.DANGLING_AUTHOR_REFERENCE,
                    f"Post '{slug}' references unknown author '{ref.id}'",
                )
            )

    if fields.errors:
        raise RecordValidationError(POSTS_COLLECTION, slug, fields.errors)

    return PostRecord(
        id=slug,
        title=text["title"],
        description=text["description"],
        category=text["category"],
        excerpt=text["excerpt"],
        pub_date=pub_date,
        updated_date=updated_date,
        hero_image=hero_image,
        author_refs=tuple(ref for _, ref in located),
        body=body,
    )
