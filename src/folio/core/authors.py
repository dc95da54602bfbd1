"""Author identity resolution for posts.

Posts have declared their authors in several shapes over time:

* ``author: {name: ..., website: ...}`` - a single embedded author object;
* ``authorId: jane-doe`` - a relation to an author record by slug;
* ``authors: [jane-doe, {name: Guest}]`` - a list mixing both;
* ``{id: jane-doe, name: Jane D.}`` - anywhere above, a relation followed by
  inline overrides for it.

All of them fold into one ordered list of
:data:`~folio.core.types.AuthorReference` values. The shape is inferred only
from the structure of each raw value.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from folio.core.exceptions import AuthorFieldErrors, FieldValueError
from folio.core.formats import (
    optional_string,
    validate_absolute_url,
    validate_https_url,
    validate_non_empty_string,
)
from folio.core.types import (
    AuthorById,
    AuthorEntity,
    ErrorKind,
    FieldError,
    InlineAuthor,
    InlineAuthorPolicy,
    ResolvedAuthor,
)

logger = logging.getLogger(__name__)

AUTHOR_ID_FIELD = "authorId"
AUTHOR_LIST_FIELD = "authors"
AUTHOR_INLINE_FIELD = "author"

# Precedence order when a post carries more than one authorship field.
AUTHORSHIP_FIELDS = (AUTHOR_ID_FIELD, AUTHOR_LIST_FIELD, AUTHOR_INLINE_FIELD)

# (source path, reference), e.g. ("authors[1]", AuthorById(id="jane"))
LocatedReference = tuple[str, AuthorById | InlineAuthor]

# front-matter key -> (model attribute, validator)
INLINE_AUTHOR_KEYS: dict[str, tuple[str, Callable[[Any], str | None]]] = {
    "name": ("name", optional_string),
    "avatarImage": ("avatar_image", optional_string),
    "avatarUrl": ("avatar_url", validate_absolute_url),
    "website": ("website", validate_https_url),
}


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple):
        return not value
    return False


def _inline_from_mapping(entry: Mapping[str, Any], path: str, errors: list[FieldError]) -> InlineAuthor | None:
    values: dict[str, str | None] = {}
    failed = False
    for key, (attr, validator) in INLINE_AUTHOR_KEYS.items():
        try:
            values[attr] = validator(entry.get(key))
        except FieldValueError as exc:
            errors.append(exc.at(f"{path}.{key}"))
            failed = True

    unknown = set(entry) - set(INLINE_AUTHOR_KEYS) - {"kind"}
    if unknown:
        logger.debug("Ignoring unknown author keys at %s: %s", path, ", ".join(sorted(unknown)))

    if failed:
        return None
    inline = InlineAuthor(**values)
    if inline.is_empty:
        logger.debug("Dropping empty inline author at %s", path)
        return None
    return inline


def _id_from_mapping(
    entry: Mapping[str, Any], path: str, errors: list[FieldError]
) -> list[AuthorById | InlineAuthor]:
    """An object carrying an ``id`` is a relation, optionally with inline overrides."""
    raw_id = entry.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, str | int) or _is_absent(raw_id):
        errors.append(
            FieldError(f"{path}.id", ErrorKind.INVALID_TYPE, "Author object has an 'id' key but no usable author id")
        )
        return []

    refs: list[AuthorById | InlineAuthor] = [AuthorById(id=str(raw_id).strip())]
    overrides = {key: value for key, value in entry.items() if key not in ("id", "kind")}
    if overrides:
        inline = _inline_from_mapping(overrides, path, errors)
        if inline is not None:
            refs.append(inline)
    return refs


def _normalize_entry(entry: Any, path: str, errors: list[FieldError]) -> list[AuthorById | InlineAuthor]:
    if isinstance(entry, AuthorById | InlineAuthor):
        return [entry]

    if isinstance(entry, Mapping):
        if "id" in entry or entry.get("kind") == "id":
            return _id_from_mapping(entry, path, errors)
        inline = _inline_from_mapping(entry, path, errors)
        return [inline] if inline is not None else []

    if isinstance(entry, bool) or not isinstance(entry, str | int | None):
        errors.append(
            FieldError(path, ErrorKind.INVALID_TYPE, f"Expected an author id or object, got {type(entry).__name__}")
        )
        return []

    try:
        return [AuthorById(id=validate_non_empty_string(entry))]
    except FieldValueError as exc:
        errors.append(exc.at(path))
        return []


def normalize_author_entries(raw: Any, field: str = AUTHOR_LIST_FIELD) -> list[AuthorById | InlineAuthor]:
    """Normalize the raw value of one authorship field, keeping its order.

    A scalar is treated as a one-element list. Entries that already are
    author references pass through untouched, so normalizing a canonical
    list again returns an identical list.

    Raises:
        AuthorFieldErrors: If any entry is malformed. Every bad entry is
            reported, not just the first.

    """
    errors: list[FieldError] = []
    refs = [ref for _, ref in _collect(raw, field, errors)]
    if errors:
        raise AuthorFieldErrors(errors, refs)
    return refs


def _collect(raw: Any, field: str, errors: list[FieldError]) -> list[LocatedReference]:
    if _is_absent(raw):
        return []

    if isinstance(raw, Sequence) and not isinstance(raw, str):
        entries = [(f"{field}[{index}]", entry) for index, entry in enumerate(raw)]
    else:
        entries = [(field, raw)]

    located = []
    for path, entry in entries:
        located.extend((path, ref) for ref in _normalize_entry(entry, path, errors))
    return located


def locate_author_refs(metadata: Mapping[str, Any]) -> tuple[list[LocatedReference], list[FieldError]]:
    """Fold every authorship field and keep where each reference came from.

    Returns:
        Tuple of ``(path, reference)`` pairs in resolution order and the
        errors for malformed entries. Paths look like ``authorId`` or
        ``authors[1]``.

    """
    present = [field for field in AUTHORSHIP_FIELDS if not _is_absent(metadata.get(field))]

    errors: list[FieldError] = []
    located: list[LocatedReference] = []
    for field in present:
        located.extend(_collect(metadata[field], field, errors))

    if len(present) > 1:
        by_id = [item for item in located if isinstance(item[1], AuthorById)]
        inline = [item for item in located if isinstance(item[1], InlineAuthor)]
        located = by_id + inline

    return located, errors


def resolve_author_refs(metadata: Mapping[str, Any]) -> list[AuthorById | InlineAuthor]:
    """Fold every authorship field of a post into one ordered reference list.

    When only one authorship field is present its own order is kept. When
    several are present, id references come before inline ones; within each
    group the order follows :data:`AUTHORSHIP_FIELDS` and then the order of
    each field.

    Ids are not checked against the author collection here.

    Raises:
        AuthorFieldErrors: If any entry in any field is malformed.

    """
    located, errors = locate_author_refs(metadata)
    refs = [ref for _, ref in located]
    if errors:
        raise AuthorFieldErrors(errors, refs)
    return refs


def _from_entity(entity: AuthorEntity) -> ResolvedAuthor:
    return ResolvedAuthor(
        name=entity.name,
        avatar_image=entity.avatar_image,
        avatar_url=entity.avatar_url,
        website=entity.website,
        entity_id=entity.id,
    )


def _from_inline(inline: InlineAuthor) -> ResolvedAuthor:
    return ResolvedAuthor(
        name=inline.name,
        avatar_image=inline.avatar_image,
        avatar_url=inline.avatar_url,
        website=inline.website,
    )


def _overlay(base: ResolvedAuthor, inline: InlineAuthor) -> ResolvedAuthor:
    update = {
        attr: getattr(inline, attr)
        for attr, _ in INLINE_AUTHOR_KEYS.values()
        if getattr(inline, attr) is not None
    }
    return base.model_copy(update=update)


def resolve_display_authors(
    refs: Sequence[AuthorById | InlineAuthor],
    authors: Mapping[str, AuthorEntity],
    policy: InlineAuthorPolicy = InlineAuthorPolicy.OVERRIDE,
) -> list[ResolvedAuthor]:
    """Turn a post's references into the authors shown on the page.

    With the ``OVERRIDE`` policy and exactly one id reference, inline
    references overlay their fields onto that author, in order, and a single
    author comes back. Otherwise every reference is its own author.

    Raises:
        KeyError: If an id reference has no entry in ``authors``. Validated
            posts never trigger this.

    """
    by_id = [ref for ref in refs if isinstance(ref, AuthorById)]

    if policy is InlineAuthorPolicy.OVERRIDE and len(by_id) == 1:
        resolved = _from_entity(authors[by_id[0].id])
        for ref in refs:
            if isinstance(ref, InlineAuthor):
                resolved = _overlay(resolved, ref)
        return [resolved]

    result = []
    for ref in refs:
        if isinstance(ref, AuthorById):
            result.append(_from_entity(authors[ref.id]))
        else:
            result.append(_from_inline(ref))
    return result
