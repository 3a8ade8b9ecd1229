from .client import (
    AuthError,
    BackendError,
    BackendValidationError,
    NetworkError,
    TimesheetBackendClient,
)
from .models import (
    CreatedTimesheetEntry,
    CreateTimesheetEntryRequest,
    CurrentUser,
    Project,
    TimesheetEntry,
)


__all__ = [
    "AuthError",
    "BackendError",
    "BackendValidationError",
    "CreateTimesheetEntryRequest",
    "CreatedTimesheetEntry",
    "CurrentUser",
    "NetworkError",
    "Project",
    "TimesheetBackendClient",
    "TimesheetEntry",
]
