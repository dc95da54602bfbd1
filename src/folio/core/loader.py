"""Load content collections from Markdown files with YAML front matter."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler

from folio.core.exceptions import ContentLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ContentRecord:
    """A content file split into its raw front matter and body."""

    slug: str
    path: Path
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""


def parse_frontmatter(content: str, *, source: Path) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter using python-frontmatter's YAML handler.

    ``frontmatter.loads`` quietly drops a header that is not a mapping, so the
    header is split and loaded here to report it instead.

    Returns:
        Tuple of (metadata dict, body string). Content without a front-matter
        block yields an empty dict and the content unchanged.

    Raises:
        ContentLoadError: If the front matter is not valid YAML or is not a mapping.

    """
    handler = YAMLHandler()
    if not handler.detect(content):
        return {}, content

    try:
        header, body = handler.split(content)
        raw_metadata = handler.load(header)
    except yaml.YAMLError as exc:
        raise ContentLoadError(source, f"front matter is not valid YAML: {exc}") from exc
    except ValueError as exc:
        raise ContentLoadError(source, f"front matter block is not closed: {exc}") from exc

    if raw_metadata is None:
        raw_metadata = {}
    if not isinstance(raw_metadata, dict):
        raise ContentLoadError(source, f"front matter is a {type(raw_metadata).__name__}, not a mapping")

    return dict(raw_metadata), body.strip()


def slug_for(path: Path, root: Path) -> str:
    """Derive a record's canonical id from its path inside the collection.

    Examples:
        >>> slug_for(Path("authors/jane-doe.md"), Path("authors"))
        'jane-doe'
        >>> slug_for(Path("blog/2026/launch.mdx"), Path("blog"))
        '2026/launch'

    """
    return path.relative_to(root).with_suffix("").as_posix()


def load_record(path: Path, root: Path, *, encoding: str = "utf-8") -> ContentRecord:
    """Read one content file.

    Raises:
        ContentLoadError: If the file cannot be read or parsed.

    """
    try:
        content = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentLoadError(path, str(exc)) from exc

    metadata, body = parse_frontmatter(content, source=path)
    return ContentRecord(slug=slug_for(path, root), path=path, metadata=metadata, body=body)


def iter_content_files(root: Path, extensions: Iterable[str] = (".md", ".mdx")) -> Iterator[Path]:
    """Yield content files under ``root`` in a stable order."""
    suffixes = {ext.lower() for ext in extensions}
    if not root.is_dir():
        logger.warning("Content directory %s does not exist", root)
        return
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in suffixes:
            yield path
