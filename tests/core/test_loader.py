from datetime import date
from pathlib import Path

import pytest

from folio.core.exceptions import ContentLoadError
from folio.core.loader import iter_content_files, load_record, parse_frontmatter, slug_for


def test_parse_frontmatter_splits_metadata_and_body():
    metadata, body = parse_frontmatter("---\ntitle: Hello\npubDate: 2026-01-01\n---\nBody text\n", source=Path("x.md"))

    assert metadata == {"title": "Hello", "pubDate": date(2026, 1, 1)}
    assert body == "Body text"


def test_parse_frontmatter_without_header_has_empty_metadata():
    metadata, body = parse_frontmatter("Just a body", source=Path("x.md"))

    assert metadata == {}
    assert body == "Just a body"


def test_non_mapping_frontmatter_is_a_load_error():
    with pytest.raises(ContentLoadError, match="not a mapping"):
        parse_frontmatter("---\n- a\n- b\n---\nBody", source=Path("x.md"))


def test_invalid_yaml_is_a_load_error():
    with pytest.raises(ContentLoadError, match="YAML"):
        parse_frontmatter("---\ntitle: [unclosed\n---\nBody", source=Path("x.md"))


def test_slug_is_the_relative_path_without_extension(tmp_path):
    assert slug_for(tmp_path / "jane-doe.md", tmp_path) == "jane-doe"
    assert slug_for(tmp_path / "2026" / "launch.mdx", tmp_path) == "2026/launch"


def test_load_record_reads_file(tmp_path):
    path = tmp_path / "jane-doe.md"
    path.write_text("---\nname: Jane Doe\n---\nBio\n", encoding="utf-8")

    record = load_record(path, tmp_path)

    assert record.slug == "jane-doe"
    assert record.metadata == {"name": "Jane Doe"}
    assert record.body == "Bio"
    assert record.path == path


def test_iter_content_files_filters_by_extension(tmp_path):
    for name in ["b.md", "a.mdx", "notes.txt", "nested/c.MD"]:
        (tmp_path / name).parent.mkdir(parents=True, exist_ok=True)
        (tmp_path / name).write_text("", encoding="utf-8")

    found = [p.relative_to(tmp_path).as_posix() for p in iter_content_files(tmp_path)]

    assert found == ["a.mdx", "b.md", "nested/c.MD"]


def test_iter_content_files_tolerates_missing_directory(tmp_path):
    assert list(iter_content_files(tmp_path / "missing")) == []
