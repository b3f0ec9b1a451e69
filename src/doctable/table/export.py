"""JSON and CSV serialisation of table rows."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence

from doctable.models import Document, ModifiedTime

LOGGER = logging.getLogger(__name__)

CSV_HEADER = ["Path", "Name", "Size", "Modified", "Tags"]


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def _format_size(size: Any) -> Any:
    if isinstance(size, float) and size.is_integer():
        return int(size)
    return size


def _modified_value(modified: ModifiedTime) -> Any:
    if modified.is_valid:
        return modified.isoformat()
    if modified.kind == ModifiedTime.INVALID:
        return str(modified.raw)
    return None


def document_to_dict(document: Document) -> Dict[str, Any]:
    """Plain mapping of a document, mirroring its wire shape."""
    meta = document.metadata
    metadata: Dict[str, Any] = {"name": meta.name, "size": _format_size(meta.size or 0)}
    modified = _modified_value(meta.modified)
    if modified is not None:
        metadata["modified"] = modified
    metadata["frontmatter"] = dict(meta.frontmatter)
    metadata["tags"] = list(meta.tags)
    metadata["links"] = list(meta.links)

    data: Dict[str, Any] = {"path": document.path}
    if document.full_path:
        data["fullPath"] = document.full_path
    data["metadata"] = metadata
    return data


def to_json(documents: Iterable[Document]) -> str:
    payload = [document_to_dict(doc) for doc in documents]
    return json.dumps(payload, indent=2, ensure_ascii=False, default=_json_default)


def escape_csv_cell(value: Any) -> str:
    """Quote a cell only when it holds a comma, a quote or a newline."""
    text = "" if value is None else str(value)
    if any(char in text for char in (",", '"', "\n")):
        return '"' + text.replace('"', '""') + '"'
    return text


def _csv_row(document: Document) -> List[str]:
    meta = document.metadata
    return [
        document.path,
        meta.name or "",
        str(_format_size(meta.size or 0)),
        meta.modified.isoformat(),
        ";".join(meta.tags),
    ]


def to_csv(documents: Sequence[Document]) -> str:
    """Render ``documents`` as CSV; an empty list renders as ``""``."""
    if not documents:
        return ""
    lines = [",".join(CSV_HEADER)]
    for doc in documents:
        lines.append(",".join(escape_csv_cell(cell) for cell in _csv_row(doc)))
    return "\n".join(lines)


def export_documents(documents: Sequence[Document], fmt: ExportFormat | str) -> str:
    try:
        export_format = ExportFormat(fmt)
    except ValueError:
        LOGGER.warning("Unsupported export format: %s", fmt)
        return ""
    if export_format is ExportFormat.JSON:
        return to_json(documents)
    return to_csv(documents)
