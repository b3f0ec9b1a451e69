"""Table state machine: selection, sorting, columns and export."""

from doctable.table.core import TableCore
from doctable.table.export import ExportFormat
from doctable.table.notifications import CallbackSink, NotificationSink

__all__ = ["TableCore", "ExportFormat", "CallbackSink", "NotificationSink"]
