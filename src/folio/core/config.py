import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from folio.core.exceptions import ConfigFileError, ConfigValidationError
from folio.core.reading_time import DEFAULT_WORDS_PER_MINUTE
from folio.core.types import InlineAuthorPolicy

CONFIG_FILENAME = ".folio.toml"


def _deep_merge(destination: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge source into destination, with source values overwriting."""
    for key, value in source.items():
        if isinstance(value, Mapping) and key in destination and isinstance(destination[key], Mapping):
            destination[key] = _deep_merge(dict(destination[key]), dict(value))
        else:
            destination[key] = value
    return destination


class ValidationSettings(BaseModel):
    """Policies applied while validating content records."""

    words_per_minute: int = Field(default=DEFAULT_WORDS_PER_MINUTE, gt=0, description="Reading speed")
    inline_author_policy: InlineAuthorPolicy = Field(
        default=InlineAuthorPolicy.OVERRIDE,
        description="Whether an inline author overrides the id-referenced author or is listed beside it",
    )
    require_updated_after_published: bool = Field(
        default=False,
        description="Reject posts whose updatedDate precedes pubDate",
    )
    content_extensions: tuple[str, ...] = Field(default=(".md", ".mdx"), description="Content file suffixes")


class PathsSettings(BaseModel):
    """Path configuration.

    All paths are relative to the 'site_root' unless absolute.
    site_root defaults to current working directory.
    """

    site_root: Path = Field(
        default_factory=Path.cwd,
        description="Root directory of the site (defaults to current working directory)",
    )

    authors_dir: Path = Field(default=Path("src/content/authors"), description="Author records directory")
    posts_dir: Path = Field(default=Path("src/content/blog"), description="Blog post records directory")
    manifest_path: Path = Field(default=Path("public/admin/config.yml"), description="Editing tool manifest")

    @property
    def abs_authors_dir(self) -> Path:
        return self._resolve(self.authors_dir)

    @property
    def abs_posts_dir(self) -> Path:
        return self._resolve(self.posts_dir)

    @property
    def abs_manifest_path(self) -> Path:
        return self._resolve(self.manifest_path)

    def _resolve(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.site_root / path


class FolioConfig(BaseSettings):
    """Root configuration for Folio.

    Supports environment variable overrides with the pattern:
    FOLIO_SECTION__KEY (e.g., FOLIO_VALIDATION__WORDS_PER_MINUTE)
    """

    paths: PathsSettings = Field(default_factory=PathsSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="FOLIO_",
        env_nested_delimiter="__",
    )

    @classmethod
    def load(cls, site_root: Path | None = None) -> "FolioConfig":
        """Loads configuration from .folio.toml and environment variables.

        Priority (highest to lowest):
        1. Environment variables (FOLIO_SECTION__KEY)
        2. Config file (.folio.toml)
        3. Defaults

        Raises:
            ConfigFileError: If the config file is not valid TOML.
            ConfigValidationError: If the merged settings are invalid.

        """
        root_path = site_root if site_root is not None else Path.cwd()
        config_file = root_path / CONFIG_FILENAME

        file_settings: dict[str, Any] = {}
        if config_file.is_file():
            try:
                with config_file.open("rb") as f:
                    file_settings = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigFileError(config_file, str(exc)) from exc

        try:
            env_settings = cls().model_dump(exclude_unset=True)
            merged_config = _deep_merge(file_settings, env_settings)
            merged_config.setdefault("paths", {})["site_root"] = root_path
            return cls.model_validate(merged_config)
        except ValidationError as exc:
            raise ConfigValidationError(exc.errors()) from exc
