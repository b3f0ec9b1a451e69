"""Document ordering and the three-state sort toggle."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Sequence

from doctable.models import Document, SortOrder, SortState


def _name_key(doc: Document) -> Any:
    name = doc.metadata.name or ""
    return (name.casefold(), name)


def _path_key(doc: Document) -> Any:
    return doc.path


def _modified_key(doc: Document) -> Any:
    return doc.metadata.modified.sort_key


def _size_key(doc: Document) -> Any:
    return doc.metadata.size or 0


SORT_KEYS: Dict[str, Callable[[Document], Any]] = {
    "name": _name_key,
    "path": _path_key,
    "modified": _modified_key,
    "size": _size_key,
}


def sort_documents(documents: Sequence[Document], sorting: SortState | None) -> List[Document]:
    """Return a new list ordered by ``sorting``.

    The sort is stable in both directions: documents with equal keys keep
    their input order. Unknown fields and ``None`` keep the input order.
    """
    if sorting is None:
        return list(documents)
    key = SORT_KEYS.get(sorting.field)
    if key is None:
        return list(documents)
    # sorted(reverse=True) keeps equal elements in their original order
    return sorted(documents, key=key, reverse=sorting.order == SortOrder.DESC)


def next_sort_state(current: SortState | None, field: str) -> SortState | None:
    """Advance the header-click cycle: unsorted -> asc -> desc -> unsorted."""
    if current is None or current.field != field:
        return SortState(field, SortOrder.ASC)
    if current.order == SortOrder.ASC:
        return SortState(field, SortOrder.DESC)
    return None
