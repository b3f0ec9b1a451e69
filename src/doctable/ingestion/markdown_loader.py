"""Markdown note loading.

Builds table documents from the notes of a vault: front matter is parsed with
python-frontmatter, tags come from the ``tags`` field and inline ``#tags``,
links from ``[[wikilinks]]`` and internal markdown links.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List

import frontmatter
import yaml

from doctable.models import Document, DocumentMetadata
from doctable.utils.files import iter_markdown_paths, vault_relative_path
from doctable.utils.text import make_preview

LOGGER = logging.getLogger(__name__)

_INLINE_TAG = re.compile(r"(?:^|\s)#([\w\-/]+)")
_WIKILINK = re.compile(r"\[\[([^\]|]+)(?:\|([^\]]+))?\]\]")
_MARKDOWN_LINK = re.compile(r"\[([^\]]*)\]\(([^)]+)\)")
_EXTERNAL_LINK = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(value for value in values if value))


def extract_tags(metadata: Dict[str, Any], body: str) -> List[str]:
    """Front matter tags first, then inline ``#tags`` in order of appearance."""
    raw = metadata.get("tags")
    if raw is None:
        declared: List[Any] = []
    elif isinstance(raw, (list, tuple)):
        declared = list(raw)
    else:
        declared = [raw]

    tags = [str(tag).strip().lstrip("#") for tag in declared if tag is not None]
    tags.extend(match.group(1) for match in _INLINE_TAG.finditer(body))
    return _unique(tags)


def extract_links(body: str) -> List[str]:
    """Link targets from wikilinks and internal markdown links."""
    links = [match.group(1).strip() for match in _WIKILINK.finditer(body)]
    for match in _MARKDOWN_LINK.finditer(body):
        target = match.group(2).strip()
        if not _EXTERNAL_LINK.match(target):
            links.append(target)
    return _unique(links)


def load_document(path: Path, vault_root: Path | None = None) -> Document:
    """Read a markdown note and build its table document.

    Raises ``OSError``, ``UnicodeDecodeError`` or ``yaml.YAMLError`` when the
    note cannot be read or its front matter is malformed.
    """
    path = Path(path)
    post = frontmatter.loads(path.read_text(encoding="utf-8"))
    stat = path.stat()
    metadata = dict(post.metadata)

    return Document(
        path=vault_relative_path(path, vault_root),
        full_path=str(path.resolve()),
        metadata=DocumentMetadata(
            name=path.stem,
            size=stat.st_size,
            modified=stat.st_mtime,
            frontmatter=metadata,
            tags=extract_tags(metadata, post.content),
            links=extract_links(post.content),
        ),
    )


def load_vault(inputs: Iterable[Path]) -> List[Document]:
    """Load every markdown note found under ``inputs``, skipping unreadable ones."""
    documents: List[Document] = []
    for root in inputs:
        root = Path(root)
        vault_root = root if root.is_dir() else root.parent
        for path in iter_markdown_paths([root]):
            try:
                documents.append(load_document(path, vault_root))
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.warning("Failed to read %s: %s", path, exc)
            except yaml.YAMLError as exc:
                LOGGER.error("Malformed front matter in %s: %s", path, exc)
    LOGGER.info("Loaded %d documents", len(documents))
    return documents


def load_preview(path: Path, *, max_chars: int = 500) -> str:
    """Body text of a note without front matter, trimmed for previews."""
    post = frontmatter.loads(Path(path).read_text(encoding="utf-8"))
    return make_preview(post.content, max_chars=max_chars)
