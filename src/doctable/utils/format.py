"""Display formatting for table cells."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from doctable.models import ModifiedTime


@dataclass(slots=True)
class MetadataDisplay:
    property_names: List[str] = field(default_factory=list)
    tooltip_text: str = ""


def format_file_size(size_in_bytes: float) -> str:
    return f"{(size_in_bytes or 0) / 1024:.1f}K"


def format_date(modified: Any) -> str:
    """Render a modification time as ``M/D/YYYY``, or ``-`` when unusable."""
    value = ModifiedTime.parse(modified).value
    if value is None:
        return "-"
    return f"{value.month}/{value.day}/{value.year}"


def _display_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def metadata_display(frontmatter: Dict[str, Any] | None, tags: Sequence[str] = ()) -> MetadataDisplay:
    """Summarise front matter as property names plus a ``key: value`` tooltip.

    Null values and empty lists are left out. Without front matter the tooltip
    lists the tags instead.
    """
    if not frontmatter:
        return MetadataDisplay(tooltip_text=", ".join(tags))

    names = [
        key
        for key, value in frontmatter.items()
        if value is not None and not (isinstance(value, (list, tuple)) and len(value) == 0)
    ]
    tooltip = "\n".join(f"{key}: {_display_value(frontmatter[key])}" for key in names)
    return MetadataDisplay(property_names=names, tooltip_text=tooltip)
