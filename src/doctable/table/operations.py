"""Rules deciding which bulk operations apply to a selection."""

from __future__ import annotations

from typing import Callable, Dict, Sequence

from doctable.models import ContextMenuState

# Minimum/exact selection sizes per operation name.
_OPERATION_RULES: Dict[str, Callable[[int], bool]] = {
    "delete": lambda count: count >= 1,
    "export": lambda count: count >= 1,
    "move": lambda count: count >= 1,
    "rename": lambda count: count == 1,
    "edit": lambda count: count == 1,
    "bulk-edit": lambda count: count > 1,
}

KNOWN_OPERATIONS = tuple(_OPERATION_RULES)


def can_perform_operation(operation: str, selection: Sequence[str]) -> bool:
    """Return whether ``operation`` applies to ``selection``.

    Unknown operation names and empty selections are never allowed.
    """
    count = len(selection)
    if count == 0:
        return False
    rule = _OPERATION_RULES.get(operation)
    if rule is None:
        return False
    return rule(count)


def context_menu_state(
    selected_count: int,
    document_count: int,
    *,
    all_selected: bool | None = None,
    row_id: str | None = None,
    column_id: str | None = None,
) -> ContextMenuState:
    """Derive menu enablement from the selection size alone."""
    if all_selected is None:
        all_selected = document_count > 0 and selected_count >= document_count
    return ContextMenuState(
        can_delete=selected_count >= 1,
        can_rename=selected_count == 1,
        can_export=selected_count >= 1,
        can_select_all=document_count > 0 and not all_selected,
        can_deselect_all=selected_count > 0,
        row_id=row_id,
        column_id=column_id,
    )
