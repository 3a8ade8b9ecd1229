from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..backend.client import AuthError, BackendError, BackendValidationError
from ..grid.errors import (
    LockedCellError,
    RowNotFoundError,
    SubmitPartialFailure,
    TimesheetGridError,
)


async def locked_cell_handler(_request: Request, exc: LockedCellError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "reason": exc.reason.value, "date": exc.day.isoformat()},
    )


async def row_not_found_handler(_request: Request, exc: RowNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def submit_failure_handler(_request: Request, exc: SubmitPartialFailure) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc), "date": exc.entry_date.isoformat()})


async def grid_error_handler(_request: Request, exc: TimesheetGridError) -> JSONResponse:
    # Nothing to submit, submit in progress, stale submit
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def backend_error_handler(_request: Request, exc: BackendError) -> JSONResponse:
    if isinstance(exc, AuthError):
        status_code = 401
    elif isinstance(exc, BackendValidationError):
        status_code = 422
    else:
        status_code = 502
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def payload_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": exc.errors(include_url=False, include_context=False)})


def register_exception_handlers(app: FastAPI) -> None:
    """Map grid and backend errors to HTTP responses"""
    app.add_exception_handler(LockedCellError, locked_cell_handler)
    app.add_exception_handler(RowNotFoundError, row_not_found_handler)
    app.add_exception_handler(SubmitPartialFailure, submit_failure_handler)
    app.add_exception_handler(TimesheetGridError, grid_error_handler)
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(ValidationError, payload_error_handler)
