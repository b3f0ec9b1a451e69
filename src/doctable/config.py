"""Table configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from doctable.models import SortOrder, SortState

DEFAULT_COLUMNS = ["name", "path", "modified", "size", "tags"]

DEFAULT_COLUMN_SIZES = {
    "name": 200,
    "path": 300,
    "modified": 80,
    "size": 60,
    "tags": 200,
    "properties": 200,
}


@dataclass(slots=True)
class TableConfig:
    default_columns: List[str] = field(default_factory=lambda: list(DEFAULT_COLUMNS))
    default_sort: SortState | None = field(
        default_factory=lambda: SortState("modified", SortOrder.DESC)
    )
    default_column_size: float = 100
    column_sizes: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_COLUMN_SIZES))
    preview_chars: int = 500

    def column_size(self, column_id: str) -> float:
        """Configured width for a column, falling back to the default width."""
        return self.column_sizes.get(column_id, self.default_column_size)
