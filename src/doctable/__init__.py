"""doctable - sortable, selectable tables over a vault of markdown documents."""

from doctable.models import Document, DocumentMetadata, SortOrder, SortState, document_id
from doctable.table.core import TableCore

__all__ = [
    "Document",
    "DocumentMetadata",
    "SortOrder",
    "SortState",
    "TableCore",
    "document_id",
]

__version__ = "0.1.0"
