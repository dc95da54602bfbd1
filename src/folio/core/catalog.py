"""Site-wide validation of the authors and blog collections.

Authors are validated first; the ids of the valid ones form the immutable
snapshot every post is checked against. A rejected record is reported and
left out of the published set while the rest carry on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from folio.core.authors import resolve_display_authors
from folio.core.config import FolioConfig, ValidationSettings
from folio.core.exceptions import ContentLoadError, RecordValidationError
from folio.core.loader import ContentRecord, iter_content_files, load_record, slug_for
from folio.core.schema import AUTHORS_COLLECTION, POSTS_COLLECTION, validate_author, validate_post
from folio.core.types import AuthorEntity, FieldError, PostRecord, ResolvedAuthor

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RejectedRecord:
    """A record left out of the published set, with everything wrong with it."""

    collection: str
    slug: str
    path: Path | None = None
    errors: list[FieldError] = field(default_factory=list)
    reason: str | None = None


@dataclass(slots=True)
class SiteCatalog:
    authors: dict[str, AuthorEntity] = field(default_factory=dict)
    posts: list[PostRecord] = field(default_factory=list)
    rejected: list[RejectedRecord] = field(default_factory=list)
    settings: ValidationSettings = field(default_factory=ValidationSettings)

    @property
    def ok(self) -> bool:
        return not self.rejected

    @property
    def known_author_ids(self) -> frozenset[str]:
        return frozenset(self.authors)

    def display_authors(self, post: PostRecord) -> list[ResolvedAuthor]:
        return resolve_display_authors(post.author_refs, self.authors, self.settings.inline_author_policy)

    def read_minutes(self, post: PostRecord) -> int:
        return post.read_minutes(self.settings.words_per_minute)


def _reject(catalog: SiteCatalog, error: RecordValidationError, path: Path | None) -> None:
    for item in error.errors:
        logger.warning("%s/%s: %s [%s] %s", error.collection, error.slug, item.field, item.kind.value, item.message)
    catalog.rejected.append(
        RejectedRecord(collection=error.collection, slug=error.slug, path=path, errors=error.errors)
    )


def build_catalog(
    authors: Iterable[ContentRecord],
    posts: Iterable[ContentRecord],
    settings: ValidationSettings | None = None,
) -> SiteCatalog:
    """Validate both collections and split them into published and rejected records."""
    catalog = SiteCatalog(settings=settings or ValidationSettings())

    for record in authors:
        try:
            entity = validate_author(record.metadata, slug=record.slug)
        except RecordValidationError as exc:
            _reject(catalog, exc, record.path)
            continue
        catalog.authors[entity.id] = entity

    known_ids = catalog.known_author_ids
    for record in posts:
        try:
            post = validate_post(
                record.metadata,
                slug=record.slug,
                known_author_ids=known_ids,
                body=record.body,
                settings=catalog.settings,
            )
        except RecordValidationError as exc:
            _reject(catalog, exc, record.path)
            continue
        catalog.posts.append(post)

    catalog.posts.sort(key=lambda post: post.pub_date, reverse=True)
    logger.info(
        "Validated %d author(s) and %d post(s); rejected %d record(s)",
        len(catalog.authors),
        len(catalog.posts),
        len(catalog.rejected),
    )
    return catalog


def _load_collection(
    collection: str, root: Path, extensions: Iterable[str], rejected: list[RejectedRecord]
) -> list[ContentRecord]:
    records = []
    for path in iter_content_files(root, extensions):
        try:
            records.append(load_record(path, root))
        except ContentLoadError as exc:
            logger.warning("%s", exc)
            rejected.append(
                RejectedRecord(collection=collection, slug=slug_for(path, root), path=path, reason=exc.reason)
            )
    return records


def load_site(config: FolioConfig) -> SiteCatalog:
    """Load every content file under the configured directories and validate it."""
    settings = config.validation
    unreadable: list[RejectedRecord] = []
    authors = _load_collection(
        AUTHORS_COLLECTION, config.paths.abs_authors_dir, settings.content_extensions, unreadable
    )
    posts = _load_collection(POSTS_COLLECTION, config.paths.abs_posts_dir, settings.content_extensions, unreadable)

    catalog = build_catalog(authors, posts, settings)
    catalog.rejected[:0] = unreadable
    return catalog
