from datetime import date
from enum import Enum


class LockReason(Enum):
    """Why a grid cell cannot be edited"""

    FUTURE_DATE = "future-date"
    ALREADY_PERSISTED = "already-persisted"
    SAVING = "saving"


LOCK_MESSAGES = {
    LockReason.FUTURE_DATE: "Cannot edit timesheets for future dates.",
    LockReason.ALREADY_PERSISTED: "Cannot edit existing timesheet entries.",
    LockReason.SAVING: "This entry is being saved.",
}


class TimesheetGridError(Exception):
    """Base exception for weekly grid errors"""


class LockedCellError(TimesheetGridError):
    """Raised when an edit targets a locked cell"""

    def __init__(self, reason: LockReason, day: date):
        super().__init__(LOCK_MESSAGES[reason])
        self.reason = reason
        self.day = day


class RowNotFoundError(TimesheetGridError, KeyError):
    def __init__(self, row_id: str):
        super().__init__(f"No timesheet row with id {row_id!r}")
        self.row_id = row_id

    def __str__(self) -> str:
        return self.args[0]


class NothingToSubmitError(TimesheetGridError):
    def __init__(self) -> None:
        super().__init__("No valid timesheet entries to submit")


class SubmitInProgressError(TimesheetGridError):
    def __init__(self) -> None:
        super().__init__("A timesheet submission is already in progress")


class SubmitPartialFailure(TimesheetGridError):
    """A create call failed mid-batch; earlier cells stay persisted"""

    def __init__(self, entry_date: date, cause: Exception):
        super().__init__(f"Failed to save timesheet for {entry_date.isoformat()}: {cause}")
        self.entry_date = entry_date
        self.cause = cause


class StaleSubmitError(TimesheetGridError):
    """The week was reloaded or changed while a submission was running"""

    def __init__(self) -> None:
        super().__init__("The timesheet changed while saving; reload to see the saved entries")
