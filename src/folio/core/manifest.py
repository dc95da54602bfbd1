"""Field parity between the editing tool's manifest and the validators.

The content-editing tool is driven by a declarative manifest listing, for
each collection, the fields an editor can fill in. Every field the validators
accept must show up there with the same required flag, and the manifest must
not offer fields the validators would reject.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from folio.core.authors import AUTHOR_INLINE_FIELD, INLINE_AUTHOR_KEYS
from folio.core.exceptions import ManifestError
from folio.core.schema import AUTHOR_FIELDS, AUTHORS_COLLECTION, POST_FIELDS, POSTS_COLLECTION, FieldSpec

logger = logging.getLogger(__name__)

# The value key relation widgets must use to store an author's canonical id.
SLUG_VALUE_FIELD = "{{slug}}"
HTTPS_PATTERN = "^https://"

# Fields the editor exposes that are not front matter.
NON_METADATA_FIELDS = frozenset({"body"})

COLLECTION_FIELDS: dict[str, tuple[FieldSpec, ...]] = {
    AUTHORS_COLLECTION: AUTHOR_FIELDS,
    POSTS_COLLECTION: POST_FIELDS,
}


class ManifestField(BaseModel):
    """One editable field. ``required`` defaults to True, as in the tool."""

    model_config = ConfigDict(extra="allow")

    name: str
    label: str = ""
    widget: str = "string"
    required: bool = True
    pattern: list[str] | None = None
    collection: str | None = None
    value_field: str | None = None
    search_fields: list[str] = Field(default_factory=list)
    display_fields: list[str] = Field(default_factory=list)
    multiple: bool = False
    fields: list[ManifestField] = Field(default_factory=list)


class ManifestCollection(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    label: str = ""
    folder: str | None = None
    fields: list[ManifestField] = Field(default_factory=list)

    def field(self, name: str) -> ManifestField | None:
        return next((f for f in self.fields if f.name == name), None)


class ParityIssue(NamedTuple):
    collection: str
    field: str
    message: str


_WEBSITE_PATTERN = [HTTPS_PATTERN, "Must start with https://"]

DEFAULT_MANIFEST: tuple[ManifestCollection, ...] = (
    ManifestCollection(
        name=AUTHORS_COLLECTION,
        label="Authors",
        folder="src/content/authors",
        fields=[
            ManifestField(label="Name", name="name", widget="string", required=True),
            ManifestField(label="Avatar Image", name="avatarImage", widget="image", required=False),
            ManifestField(label="Website", name="website", widget="string", required=False, pattern=_WEBSITE_PATTERN),
            ManifestField(label="Body", name="body", widget="markdown", required=False),
        ],
    ),
    ManifestCollection(
        name=POSTS_COLLECTION,
        label="Blog Posts",
        folder="src/content/blog",
        fields=[
            ManifestField(label="Title", name="title", widget="string", required=True),
            ManifestField(label="Description", name="description", widget="string", required=True),
            ManifestField(label="Category", name="category", widget="string", required=True),
            ManifestField(label="Excerpt", name="excerpt", widget="text", required=True),
            ManifestField(label="Publish Date", name="pubDate", widget="datetime", required=True),
            ManifestField(label="Updated Date", name="updatedDate", widget="datetime", required=False),
            ManifestField(label="Hero Image", name="heroImage", widget="string", required=False),
            ManifestField(
                label="Author (pick from Authors)",
                name="authorId",
                widget="relation",
                collection=AUTHORS_COLLECTION,
                search_fields=["name"],
                display_fields=["name"],
                value_field=SLUG_VALUE_FIELD,
                multiple=False,
                required=False,
            ),
            ManifestField(
                label="Author",
                name=AUTHOR_INLINE_FIELD,
                widget="object",
                required=False,
                fields=[
                    ManifestField(label="Name", name="name", widget="string", required=False),
                    ManifestField(label="Avatar Image", name="avatarImage", widget="image", required=False),
                    ManifestField(
                        label="Website", name="website", widget="string", required=False, pattern=_WEBSITE_PATTERN
                    ),
                ],
            ),
            ManifestField(label="Body", name="body", widget="markdown", required=True),
        ],
    ),
)


def load_manifest(path: Path) -> list[ManifestCollection]:
    """Read the collections of an editing-tool manifest.

    Only ``collections`` is parsed; backend and media settings are ignored.

    Raises:
        ManifestError: If the file is missing, is not YAML, or has no
            well-formed ``collections`` list.

    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestError(path, str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ManifestError(path, f"not valid YAML: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("collections"), list):
        raise ManifestError(path, "expected a mapping with a 'collections' list")

    try:
        return [ManifestCollection.model_validate(item) for item in data["collections"]]
    except ValidationError as exc:
        raise ManifestError(path, str(exc)) from exc


def _check_website_pattern(collection: str, path: str, field: ManifestField, issues: list[ParityIssue]) -> None:
    if field.name != "website":
        return
    if not field.pattern or not field.pattern[0].startswith(HTTPS_PATTERN):
        issues.append(ParityIssue(collection, path, f"website field should carry a '{HTTPS_PATTERN}' pattern"))


def _check_inline_author(collection: str, field: ManifestField, issues: list[ParityIssue]) -> None:
    for sub in field.fields:
        path = f"{field.name}.{sub.name}"
        if sub.name not in INLINE_AUTHOR_KEYS:
            issues.append(ParityIssue(collection, path, "inline author field is not accepted by the validator"))
        if sub.required:
            issues.append(ParityIssue(collection, path, "inline author fields are optional"))
        _check_website_pattern(collection, path, sub, issues)


def _check_collection(manifest: ManifestCollection, specs: tuple[FieldSpec, ...]) -> list[ParityIssue]:
    issues: list[ParityIssue] = []
    name = manifest.name
    accepted = {spec.key for spec in specs}

    for spec in specs:
        if not spec.editable:
            continue
        field = manifest.field(spec.key)
        if field is None:
            issues.append(ParityIssue(name, spec.key, "accepted by the validator but missing from the manifest"))
        elif field.required != spec.required:
            expected = "required" if spec.required else "optional"
            issues.append(ParityIssue(name, spec.key, f"must be {expected} to match the validator"))

    for field in manifest.fields:
        if field.name in NON_METADATA_FIELDS:
            continue
        if field.name not in accepted:
            issues.append(ParityIssue(name, field.name, "not accepted by the validator"))
            continue
        if field.widget == "relation" and field.collection == AUTHORS_COLLECTION:
            if field.value_field != SLUG_VALUE_FIELD:
                issues.append(
                    ParityIssue(name, field.name, f"author relation must store '{SLUG_VALUE_FIELD}' as its value")
                )
        if field.name == AUTHOR_INLINE_FIELD and field.widget == "object":
            _check_inline_author(name, field, issues)
        _check_website_pattern(name, field.name, field, issues)

    return issues


def check_manifest_parity(collections: list[ManifestCollection] | tuple[ManifestCollection, ...]) -> list[ParityIssue]:
    """Compare a manifest against the fields the validators enforce.

    Returns every mismatch; an empty list means the manifest is in sync.
    """
    by_name = {collection.name: collection for collection in collections}
    issues: list[ParityIssue] = []
    for name, specs in COLLECTION_FIELDS.items():
        manifest = by_name.get(name)
        if manifest is None:
            issues.append(ParityIssue(name, "*", "collection is missing from the manifest"))
            continue
        issues.extend(_check_collection(manifest, specs))

    logger.debug("Manifest parity check found %d issue(s)", len(issues))
    return issues
