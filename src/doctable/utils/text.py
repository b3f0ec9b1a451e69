"""Text helpers for note previews."""

from __future__ import annotations

from typing import Iterable


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())


def make_preview(text: str, *, max_chars: int = 500) -> str:
    """Return the first ``max_chars`` characters of normalised text.

    Truncated previews end with an ellipsis.
    """
    if not text:
        return ""
    normalized = normalize_whitespace(text.splitlines())
    if len(normalized) <= max_chars:
        return normalized
    return normalized[: max(max_chars, 0)].rstrip() + "…"
