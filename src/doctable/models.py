"""Core doctable data models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List

import pendulum
from pendulum.parsing.exceptions import ParserError


def _parse_text(text: str) -> datetime | None:
    try:
        parsed = pendulum.parse(text, tz="UTC", strict=False)
    except (ParserError, ValueError, OverflowError):
        return None
    if isinstance(parsed, datetime):
        return parsed
    if isinstance(parsed, date):
        return datetime(parsed.year, parsed.month, parsed.day)
    # Durations, intervals and bare times carry no calendar date.
    return None


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = _parse_text(text)
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        utc = parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None
    # Normalise pendulum results to a stdlib datetime.
    return datetime(
        utc.year, utc.month, utc.day, utc.hour, utc.minute, utc.second, utc.microsecond, tzinfo=timezone.utc
    )


@dataclass(frozen=True, slots=True)
class ModifiedTime:
    """Modification time of a document, resolved once at ingestion.

    ``kind`` is ``"missing"`` (no value), ``"invalid"`` (a value that does not
    parse as a date) or ``"valid"``. Missing and invalid times sort as the
    epoch, so they come first in ascending order and last in descending order.
    """

    kind: str
    raw: Any = None
    value: datetime | None = None

    MISSING = "missing"
    INVALID = "invalid"
    VALID = "valid"

    @classmethod
    def parse(cls, raw: Any) -> "ModifiedTime":
        if isinstance(raw, ModifiedTime):
            return raw
        if raw is None:
            return cls(cls.MISSING)
        parsed = _parse_datetime(raw)
        if parsed is None:
            return cls(cls.INVALID, raw=raw)
        return cls(cls.VALID, raw=raw, value=parsed)

    @property
    def is_valid(self) -> bool:
        return self.kind == self.VALID

    @property
    def sort_key(self) -> float:
        if self.value is None:
            return 0.0
        return self.value.timestamp()

    def isoformat(self) -> str:
        """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ``, or ``""`` when not valid."""
        if self.value is None:
            return ""
        millis = self.value.microsecond // 1000
        return f"{self.value.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


@dataclass(slots=True)
class DocumentMetadata:
    """Metadata describing a vault document."""

    name: str
    size: int | float = 0
    modified: Any = None
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.modified = ModifiedTime.parse(self.modified)


@dataclass(slots=True)
class Document:
    """One file of the vault as seen by the table."""

    path: str
    metadata: DocumentMetadata
    full_path: str | None = None

    @property
    def id(self) -> str:
        return document_id(self)


def document_id(document: Document) -> str:
    """Return the identifier used for selection and caching."""
    return document.full_path or document.path


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class SortState:
    field: str
    order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        object.__setattr__(self, "order", SortOrder(self.order))


@dataclass(frozen=True, slots=True)
class OperationRequest:
    """Bulk operation requested on the currently selected documents."""

    operation: str
    document_paths: List[str]


@dataclass(slots=True)
class TableState:
    """Snapshot of the table state returned by ``TableCore.get_state``."""

    sorting: SortState | None
    selected_rows: set[str]
    visible_columns: set[str]
    column_sizes: Dict[str, float]
    last_selected_index: int = -1


@dataclass(frozen=True, slots=True)
class ContextMenuState:
    can_delete: bool
    can_rename: bool
    can_export: bool
    can_select_all: bool
    can_deselect_all: bool
    row_id: str | None = None
    column_id: str | None = None
