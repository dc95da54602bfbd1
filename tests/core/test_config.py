import os
from pathlib import Path

import pytest

from folio.core.config import FolioConfig, PathsSettings, ValidationSettings
from folio.core.exceptions import ConfigError, ConfigFileError, ConfigValidationError
from folio.core.types import InlineAuthorPolicy


@pytest.fixture(autouse=True)
def chdir_to_tmp_path(tmp_path: Path):
    """Ensure tests run in a clean directory."""
    original_dir = Path.cwd()
    os.chdir(tmp_path)
    yield
    os.chdir(original_dir)


def test_folio_config_load_defaults(tmp_path: Path):
    """It should load default settings when no config file or env vars are present."""
    config = FolioConfig.load(tmp_path)

    assert isinstance(config.paths, PathsSettings)
    assert isinstance(config.validation, ValidationSettings)
    assert config.paths.site_root == tmp_path
    assert config.paths.abs_authors_dir == tmp_path / "src" / "content" / "authors"
    assert config.paths.abs_posts_dir == tmp_path / "src" / "content" / "blog"
    assert config.validation.words_per_minute == 200
    assert config.validation.inline_author_policy is InlineAuthorPolicy.OVERRIDE
    assert config.validation.require_updated_after_published is False


def test_folio_config_load_from_toml_file(tmp_path: Path):
    """It should load settings from a .folio.toml file."""
    (tmp_path / ".folio.toml").write_text(
        """
[paths]
posts_dir = "content/posts"

[validation]
inline_author_policy = "additional"
require_updated_after_published = true
"""
    )

    config = FolioConfig.load(tmp_path)

    assert config.paths.abs_posts_dir == tmp_path / "content" / "posts"
    assert config.paths.authors_dir == Path("src/content/authors")
    assert config.validation.inline_author_policy is InlineAuthorPolicy.ADDITIONAL
    assert config.validation.require_updated_after_published is True


def test_folio_config_env_overrides_toml(tmp_path: Path, monkeypatch):
    """Environment variables should take precedence over the TOML file."""
    (tmp_path / ".folio.toml").write_text("[validation]\nwords_per_minute = 250\n")
    monkeypatch.setenv("FOLIO_VALIDATION__WORDS_PER_MINUTE", "300")

    config = FolioConfig.load(tmp_path)

    assert config.validation.words_per_minute == 300


def test_absolute_paths_are_not_rebased(tmp_path: Path):
    elsewhere = tmp_path / "elsewhere"
    paths = PathsSettings(site_root=tmp_path / "site", authors_dir=elsewhere)

    assert paths.abs_authors_dir == elsewhere


def test_invalid_settings_raise_config_error(tmp_path: Path):
    (tmp_path / ".folio.toml").write_text("[validation]\nwords_per_minute = 0\n")

    with pytest.raises(ConfigValidationError) as exc_info:
        FolioConfig.load(tmp_path)

    assert exc_info.value.errors


def test_malformed_toml_raises_config_error(tmp_path: Path):
    config_file = tmp_path / ".folio.toml"
    config_file.write_text("[validation\nwords_per_minute = 250\n")

    with pytest.raises(ConfigFileError) as exc_info:
        FolioConfig.load(tmp_path)

    assert isinstance(exc_info.value, ConfigError)
    assert exc_info.value.path == config_file
