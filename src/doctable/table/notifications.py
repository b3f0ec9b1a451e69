"""Observer contract between the table core and its host."""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol, runtime_checkable

from doctable.models import OperationRequest, SortOrder


@runtime_checkable
class NotificationSink(Protocol):
    """Receives table events synchronously, inside the triggering call."""

    def selection_changed(self, ids: List[str]) -> None:
        """Called with every selected id after a selection change."""
        ...

    def sort_changed(self, field: str, order: SortOrder) -> None:
        """Called when a sort field is set (not when sorting is cleared)."""
        ...

    def operation_requested(self, request: OperationRequest) -> None:
        """Called when the host asks for a bulk operation on the selection."""
        ...


class CallbackSink:
    """Adapts optional plain callables to ``NotificationSink``."""

    def __init__(
        self,
        on_selection_change: Optional[Callable[[List[str]], None]] = None,
        on_sort_change: Optional[Callable[[str, SortOrder], None]] = None,
        on_operation_request: Optional[Callable[[OperationRequest], None]] = None,
    ) -> None:
        self.on_selection_change = on_selection_change
        self.on_sort_change = on_sort_change
        self.on_operation_request = on_operation_request

    def selection_changed(self, ids: List[str]) -> None:
        if self.on_selection_change is not None:
            self.on_selection_change(ids)

    def sort_changed(self, field: str, order: SortOrder) -> None:
        if self.on_sort_change is not None:
            self.on_sort_change(field, order)

    def operation_requested(self, request: OperationRequest) -> None:
        if self.on_operation_request is not None:
            self.on_operation_request(request)
