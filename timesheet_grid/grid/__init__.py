from .errors import (
    LockedCellError,
    LockReason,
    NothingToSubmitError,
    RowNotFoundError,
    StaleSubmitError,
    SubmitInProgressError,
    SubmitPartialFailure,
    TimesheetGridError,
)
from .models import CellState, ProjectCatalog, TimesheetCell, TimesheetRow, WeekTotals
from .reconciliation import ReconciliationEngine, normalize_hours
from .store import TimesheetRowStore, build_rows
from .submit import SubmitCoordinator, SubmitResult


__all__ = [
    "CellState",
    "LockReason",
    "LockedCellError",
    "NothingToSubmitError",
    "ProjectCatalog",
    "ReconciliationEngine",
    "RowNotFoundError",
    "StaleSubmitError",
    "SubmitCoordinator",
    "SubmitInProgressError",
    "SubmitPartialFailure",
    "SubmitResult",
    "TimesheetCell",
    "TimesheetGridError",
    "TimesheetRow",
    "TimesheetRowStore",
    "WeekTotals",
    "build_rows",
    "normalize_hours",
]
