"""Shared fixtures for Folio tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml


def write_record(directory: Path, slug: str, metadata: dict[str, Any], body: str = "") -> Path:
    """Write a Markdown content file with YAML front matter."""
    path = directory / f"{slug}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    header = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True)
    path.write_text(f"---\n{header}---\n{body}", encoding="utf-8")
    return path


@pytest.fixture
def post_metadata() -> dict[str, Any]:
    return {
        "title": "T",
        "description": "D",
        "category": "C",
        "excerpt": "E",
        "pubDate": "2026-01-01",
    }


@pytest.fixture
def jane_metadata() -> dict[str, Any]:
    return {"name": "Jane Doe", "website": "https://jane.dev"}


@pytest.fixture
def site_root(tmp_path: Path, jane_metadata: dict[str, Any], post_metadata: dict[str, Any]) -> Path:
    """A small site with one author and one post that references that author by id."""
    authors_dir = tmp_path / "src" / "content" / "authors"
    posts_dir = tmp_path / "src" / "content" / "blog"
    write_record(authors_dir, "jane-doe", jane_metadata, "Jane writes about compilers.")
    write_record(posts_dir, "hello-world", {**post_metadata, "authorId": "jane-doe"}, "word " * 250)
    return tmp_path


@pytest.fixture
def write_content():
    """Return the helper that writes a content file, for tests that add records."""
    return write_record
