"""Timesheet Grid - weekly timesheet entry against a timesheet REST backend.

This package keeps one employee's Monday-Sunday grid in memory, decides which
cells may be edited, and flushes new entries to the backend on submit.
"""

__version__ = "0.1.0"

from .grid.reconciliation import ReconciliationEngine
from .grid.store import TimesheetRowStore
from .grid.submit import SubmitCoordinator
from .session import TimesheetSession
from .week import WeekWindow


__all__ = [
    "ReconciliationEngine",
    "SubmitCoordinator",
    "TimesheetRowStore",
    "TimesheetSession",
    "WeekWindow",
]
