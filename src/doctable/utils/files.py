"""Utility helpers for working with vault files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

MARKDOWN_SUFFIXES = {".md", ".markdown"}


def _is_hidden(path: Path, root: Path) -> bool:
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts
    return any(part.startswith(".") for part in parts[:-1])


def iter_markdown_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield markdown paths from input paths, descending into directories.

    Hidden directories such as ``.obsidian`` or ``.git`` are skipped.
    """
    for item in inputs:
        if item.is_dir():
            for child in sorted(item.rglob("*")):
                if child.is_file() and child.suffix.lower() in MARKDOWN_SUFFIXES and not _is_hidden(child, item):
                    yield child
        elif item.is_file() and item.suffix.lower() in MARKDOWN_SUFFIXES:
            yield item


def vault_relative_path(path: Path, vault_root: Path | None) -> str:
    """Return ``path`` relative to the vault root with a leading slash."""
    if vault_root is not None:
        try:
            return "/" + path.relative_to(vault_root).as_posix()
        except ValueError:
            pass
    posix = path.as_posix()
    return posix if posix.startswith("/") else "/" + posix
