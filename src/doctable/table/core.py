"""Framework-independent table state machine.

``TableCore`` owns the document list, the selection, the sort state, column
visibility and sizes, and a small content cache. It never fetches or renders
anything: the host feeds it documents, calls its methods in response to user
input and reads state back. Unknown ids are silent no-ops.

Row indices are always positions within ``get_sorted_documents()``.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from doctable.config import TableConfig
from doctable.models import (
    ContextMenuState,
    Document,
    OperationRequest,
    SortOrder,
    SortState,
    TableState,
    document_id,
)
from doctable.table.export import ExportFormat, export_documents
from doctable.table.notifications import CallbackSink, NotificationSink
from doctable.table.operations import can_perform_operation, context_menu_state
from doctable.table.sorting import next_sort_state, sort_documents

LOGGER = logging.getLogger(__name__)

_USE_DEFAULT: Any = object()


class TableCore:
    """Selection, sorting and column state over a list of documents."""

    def __init__(
        self,
        documents: Sequence[Document] = (),
        *,
        initial_columns: Optional[Iterable[str]] = None,
        initial_sort: SortState | None = _USE_DEFAULT,
        on_selection_change: Optional[Callable[[List[str]], None]] = None,
        on_sort_change: Optional[Callable[[str, SortOrder], None]] = None,
        on_operation_request: Optional[Callable[[OperationRequest], None]] = None,
        sink: NotificationSink | None = None,
        config: TableConfig | None = None,
    ) -> None:
        self.config = config or TableConfig()
        self._sink: NotificationSink = sink or CallbackSink(
            on_selection_change, on_sort_change, on_operation_request
        )
        self._documents: List[Document] = list(documents)
        self._warn_duplicate_ids(self._documents)

        if initial_sort is _USE_DEFAULT:
            initial_sort = self.config.default_sort
        columns = initial_columns if initial_columns is not None else self.config.default_columns

        self._sorting: SortState | None = initial_sort
        # dict keys keep insertion order, unlike set
        self._selected: Dict[str, None] = {}
        self._visible_columns: Dict[str, None] = dict.fromkeys(columns)
        self._column_sizes: Dict[str, float] = {}
        self._last_selected_index = -1
        self._content_cache: Dict[str, str] = {}

    # --- Document management ---

    def update_documents(self, documents: Sequence[Document]) -> None:
        """Replace the documents and drop selected ids that no longer exist."""
        self._documents = list(documents)
        self._warn_duplicate_ids(self._documents)
        self._last_selected_index = -1

        valid_ids = {document_id(doc) for doc in self._documents}
        stale = [doc_id for doc_id in self._selected if doc_id not in valid_ids]
        for doc_id in stale:
            del self._selected[doc_id]
        if stale:
            LOGGER.debug("Pruned %d stale selected ids", len(stale))
            self._notify_selection_change()

    def get_documents(self) -> List[Document]:
        return list(self._documents)

    def get_sorted_documents(self) -> List[Document]:
        return sort_documents(self._documents, self._sorting)

    def get_document_by_id(self, doc_id: str) -> Document | None:
        for doc in self._documents:
            if document_id(doc) == doc_id:
                return doc
        return None

    def get_document_index(self, doc_id: str) -> int:
        """Position of ``doc_id`` in the sorted view, or -1."""
        return self._sorted_index(self.get_sorted_documents(), doc_id)

    # --- Sorting ---

    def get_sorting(self) -> SortState | None:
        return self._sorting

    def set_sorting(self, field: str | None, order: SortOrder | str | None = SortOrder.ASC) -> None:
        """Sort by ``field``, or clear the sort when ``field`` is None.

        An omitted (None) order means ascending. An unrecognised order is
        ignored and the current sort is kept.
        """
        if field is None:
            self._sorting = None
            return
        try:
            resolved = SortOrder(order) if order is not None else SortOrder.ASC
        except ValueError:
            LOGGER.debug("Ignoring unknown sort order %r for %s", order, field)
            return
        self._sorting = SortState(field, resolved)
        self._sink.sort_changed(self._sorting.field, self._sorting.order)

    def toggle_sort(self, field: str) -> None:
        state = next_sort_state(self._sorting, field)
        if state is None:
            self.set_sorting(None)
        else:
            self.set_sorting(state.field, state.order)

    # --- Selection ---

    def is_row_selected(self, doc_id: str) -> bool:
        return doc_id in self._selected

    def toggle_row_selection(self, doc_id: str) -> None:
        if doc_id in self._selected:
            del self._selected[doc_id]
        elif self.get_document_by_id(doc_id) is not None:
            self._selected[doc_id] = None
        else:
            LOGGER.debug("Ignoring toggle of unknown document %s", doc_id)
            return
        self._notify_selection_change()

    def select_row(self, doc_id: str, shift_key: bool = False) -> None:
        """Select ``doc_id`` alone, or the range from the anchor on shift."""
        sorted_docs = self.get_sorted_documents()
        index = self._sorted_index(sorted_docs, doc_id)
        if index == -1:
            LOGGER.debug("Ignoring selection of unknown document %s", doc_id)
            return
        self._click(sorted_docs, index, shift_key)

    def deselect_row(self, doc_id: str) -> None:
        if doc_id not in self._selected:
            return
        del self._selected[doc_id]
        self._notify_selection_change()

    def handle_row_click(self, index: int, shift_key: bool = False) -> None:
        """Click on the row at ``index`` of the sorted view.

        The anchor always moves to the clicked row, so consecutive
        shift-clicks range from the previous click, not the first one.
        """
        sorted_docs = self.get_sorted_documents()
        if not 0 <= index < len(sorted_docs):
            LOGGER.debug("Ignoring click on row %d of %d", index, len(sorted_docs))
            return
        self._click(sorted_docs, index, shift_key)

    def select_range(self, from_id: str, to_id: str) -> None:
        """Add every row between two documents (inclusive) to the selection."""
        sorted_docs = self.get_sorted_documents()
        start = self._sorted_index(sorted_docs, from_id)
        end = self._sorted_index(sorted_docs, to_id)
        if start == -1 or end == -1:
            LOGGER.debug("Ignoring range %s..%s with unknown endpoint", from_id, to_id)
            return
        self._add_range(sorted_docs, start, end)
        self._notify_selection_change()

    def select_all(self) -> None:
        for doc in self._documents:
            self._selected[document_id(doc)] = None
        self._notify_selection_change()

    def deselect_all(self) -> None:
        self._selected.clear()
        self._last_selected_index = -1
        self._notify_selection_change()

    clear_selection = deselect_all

    def toggle_all_selection(self) -> None:
        if self.is_all_selected():
            self.deselect_all()
        else:
            self.select_all()

    def is_all_selected(self) -> bool:
        return bool(self._documents) and all(
            document_id(doc) in self._selected for doc in self._documents
        )

    def is_some_selected(self) -> bool:
        return bool(self._selected) and not self.is_all_selected()

    def get_selected_paths(self) -> List[str]:
        return list(self._selected)

    get_selected_rows = get_selected_paths

    def get_selected_documents(self) -> List[Document]:
        return [doc for doc in self._documents if document_id(doc) in self._selected]

    # --- Column visibility and sizing ---

    def is_column_visible(self, column_id: str) -> bool:
        return column_id in self._visible_columns

    def set_column_visibility(self, column_id: str, visible: bool) -> None:
        if visible:
            self._visible_columns[column_id] = None
        else:
            self._visible_columns.pop(column_id, None)

    def toggle_column_visibility(self, column_id: str) -> None:
        self.set_column_visibility(column_id, not self.is_column_visible(column_id))

    def get_visible_columns(self) -> List[str]:
        return list(self._visible_columns)

    def set_column_size(self, column_id: str, size: float) -> None:
        self._column_sizes[column_id] = size

    def get_column_size(self, column_id: str, default: float = 100) -> float:
        return self._column_sizes.get(column_id, default)

    # --- Content cache ---

    def cache_content(self, doc_id: str, content: str) -> None:
        self._content_cache[doc_id] = content

    def get_cached_content(self, doc_id: str) -> str | None:
        """Cached text for ``doc_id``; ``None`` means not cached, ``""`` is cached."""
        return self._content_cache.get(doc_id)

    def clear_content_cache(self) -> None:
        self._content_cache.clear()

    # --- Operations and export ---

    def request_operation(self, operation: str) -> None:
        request = OperationRequest(operation=operation, document_paths=self.get_selected_paths())
        LOGGER.debug("Operation %s requested on %d documents", operation, len(request.document_paths))
        self._sink.operation_requested(request)

    def can_perform_operation(self, operation: str, selection: Sequence[str] | None = None) -> bool:
        if selection is None:
            selection = self.get_selected_paths()
        return can_perform_operation(operation, selection)

    def get_context_menu_state(
        self, row_id: str | None = None, column_id: str | None = None
    ) -> ContextMenuState:
        return context_menu_state(
            len(self._selected),
            len(self._documents),
            all_selected=self.is_all_selected(),
            row_id=row_id,
            column_id=column_id,
        )

    def export_selected_rows(self, fmt: ExportFormat | str = ExportFormat.JSON) -> str:
        selected = [doc for doc in self.get_sorted_documents() if document_id(doc) in self._selected]
        return export_documents(selected, fmt)

    def export_all_rows(self, fmt: ExportFormat | str = ExportFormat.JSON) -> str:
        return export_documents(self.get_sorted_documents(), fmt)

    # --- State ---

    def get_state(self) -> TableState:
        """Snapshot of the state; mutating it never affects the table."""
        return TableState(
            sorting=self._sorting,
            selected_rows=set(self._selected),
            visible_columns=set(self._visible_columns),
            column_sizes=dict(self._column_sizes),
            last_selected_index=self._last_selected_index,
        )

    # --- Internals ---

    @staticmethod
    def _sorted_index(sorted_docs: Sequence[Document], doc_id: str) -> int:
        for index, doc in enumerate(sorted_docs):
            if document_id(doc) == doc_id:
                return index
        return -1

    def _click(self, sorted_docs: Sequence[Document], index: int, shift_key: bool) -> None:
        anchor = self._last_selected_index
        self._selected.clear()
        if shift_key and anchor != -1:
            self._add_range(sorted_docs, anchor, index)
        else:
            self._selected[document_id(sorted_docs[index])] = None
        self._last_selected_index = index
        self._notify_selection_change()

    def _add_range(self, sorted_docs: Sequence[Document], start: int, end: int) -> None:
        low, high = min(start, end), max(start, end)
        for doc in sorted_docs[max(low, 0) : high + 1]:
            self._selected[document_id(doc)] = None

    def _notify_selection_change(self) -> None:
        self._sink.selection_changed(self.get_selected_paths())

    @staticmethod
    def _warn_duplicate_ids(documents: Sequence[Document]) -> None:
        counts = Counter(document_id(doc) for doc in documents)
        duplicates = [doc_id for doc_id, count in counts.items() if count > 1]
        if duplicates:
            LOGGER.warning(
                "%d document ids are shared by several documents: %s",
                len(duplicates),
                ", ".join(sorted(duplicates)[:5]),
            )
