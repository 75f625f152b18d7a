"""Application/UI layer package."""

from .facade import (
    DashboardView,
    JobOpsFacade,
    KanbanColumn,
    TableRow,
    TableState,
    TimelineView,
)

__all__ = [
    "JobOpsFacade",
    "TableState",
    "TableRow",
    "KanbanColumn",
    "DashboardView",
    "TimelineView",
]
