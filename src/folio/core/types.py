"""Core data types for Folio content records."""

from datetime import date
from enum import Enum
from typing import Annotated, Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from folio.core.reading_time import DEFAULT_WORDS_PER_MINUTE, estimate_read_minutes


class ErrorKind(str, Enum):
    EMPTY_FIELD = "EmptyField"
    INVALID_URL = "InvalidUrl"
    INVALID_DATE = "InvalidDate"
    INVALID_TYPE = "InvalidType"
    DANGLING_AUTHOR_REFERENCE = "DanglingAuthorReference"


class FieldError(NamedTuple):
    """One violated field of a record: ``(field, kind, message)``."""

    field: str
    kind: ErrorKind
    message: str


class InlineAuthorPolicy(str, Enum):
    """How an inline author on a post combines with an id reference."""

    OVERRIDE = "override"
    ADDITIONAL = "additional"


class _CanonicalModel(BaseModel):
    """Immutable model whose front-matter keys are the camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_frontmatter(self) -> dict[str, Any]:
        """Dump back to front-matter keys, leaving absent fields out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Author references ---
class AuthorById(_CanonicalModel):
    kind: Literal["id"] = "id"
    id: str

    def to_raw(self) -> str:
        return self.id


class InlineAuthor(_CanonicalModel):
    """A self-contained author description embedded in a post."""

    kind: Literal["inline"] = "inline"
    name: str | None = None
    avatar_image: str | None = None
    avatar_url: str | None = None
    website: str | None = None

    def to_raw(self) -> dict[str, str]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"kind"})

    @property
    def is_empty(self) -> bool:
        return not any((self.name, self.avatar_image, self.avatar_url, self.website))


AuthorReference = Annotated[AuthorById | InlineAuthor, Field(discriminator="kind")]


# --- Entities ---
class AuthorEntity(_CanonicalModel):
    id: str
    name: str
    avatar_image: str | None = None
    avatar_url: str | None = None
    website: str | None = None


class PostRecord(_CanonicalModel):
    id: str
    title: str
    description: str
    category: str
    excerpt: str
    pub_date: date
    updated_date: date | None = None
    hero_image: str | None = None
    author_refs: tuple[AuthorReference, ...] = ()
    body: str = ""

    def read_minutes(self, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
        """Estimated reading time of the body; derived, never stored."""
        return estimate_read_minutes(self.body, words_per_minute)


class ResolvedAuthor(BaseModel):
    """An author as it should be displayed on a post."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    avatar_image: str | None = None
    avatar_url: str | None = None
    website: str | None = None
    entity_id: str | None = None
