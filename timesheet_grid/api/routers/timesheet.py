from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Path, Request
from pydantic import BaseModel, Field

from ...backend.models import CurrentUser, Project
from ...grid.models import TimesheetRow
from ...grid.submit import SubmitResult
from ...session import TimesheetSession


router = APIRouter(prefix="/timesheet", tags=["timesheet"])


def get_session(request: Request) -> TimesheetSession:
    return request.app.state.session


class CellView(BaseModel):
    date: date
    hours: float
    state: str
    server_id: int | None
    editable: bool
    lock_reason: str | None


class RowView(BaseModel):
    row_id: str
    project_id: int
    project_name: str
    activity: str
    billable: bool
    total: float
    has_unsaved_changes: bool
    is_existing: bool
    cells: list[CellView]


class TotalsView(BaseModel):
    total: float
    billable: float
    non_billable: float
    regular: float
    overtime: float


class GridView(BaseModel):
    user: CurrentUser | None
    is_admin: bool
    week_label: str
    week_start: date
    week_end: date
    day_names: list[str]
    rows: list[RowView]
    totals: TotalsView
    projects: list[Project]
    activities: dict[int, list[str]]
    has_unsaved_changes: bool
    is_submitting: bool
    loading: bool
    error: str


class NavigateRequest(BaseModel):
    unit: Literal["week", "month"] = "week"
    direction: int = 1


class CellUpdate(BaseModel):
    hours: float


class RowUpdate(BaseModel):
    project_name: str | None = None
    activity: str | None = None


class EntryUpdate(BaseModel):
    project: int = Field(gt=0)
    activity_type: str = Field(min_length=1)
    date: date
    hours_worked: float = Field(gt=0, le=24)
    description: str = ""


class SubmitSummary(BaseModel):
    rows_saved: int
    entries_created: int
    grid: GridView


def _row_view(session: TimesheetSession, row: TimesheetRow) -> RowView:
    cells = []
    for day_index, cell in enumerate(row.cells):
        reason = session.engine.lock_reason(row, day_index)
        cells.append(
            CellView(
                date=cell.date,
                hours=cell.hours,
                state=cell.state.value,
                server_id=cell.server_id,
                editable=reason is None,
                lock_reason=reason.value if reason else None,
            )
        )
    return RowView(
        row_id=row.row_id,
        project_id=row.project_id,
        project_name=row.project_name,
        activity=row.activity,
        billable=row.billable,
        total=row.total,
        has_unsaved_changes=row.has_unsaved_changes,
        is_existing=row.is_existing,
        cells=cells,
    )


def grid_view(session: TimesheetSession) -> GridView:
    """Snapshot the session into the shape the front end renders"""
    totals = session.totals()
    return GridView(
        user=session.current_user,
        is_admin=session.is_admin,
        week_label=session.window.format_range(),
        week_start=session.window.dates[0],
        week_end=session.window.dates[-1],
        day_names=list(session.window.day_names),
        rows=[_row_view(session, row) for row in session.rows],
        totals=TotalsView(
            total=totals.total,
            billable=totals.billable,
            non_billable=totals.non_billable,
            regular=totals.regular,
            overtime=totals.overtime,
        ),
        projects=session.catalog.projects,
        activities=session.catalog.activities,
        has_unsaved_changes=session.has_unsaved_changes,
        is_submitting=session.is_submitting,
        loading=session.loading,
        error=session.error,
    )


@router.get("")
async def get_timesheet(session: TimesheetSession = Depends(get_session)) -> GridView:
    """Return the current week's grid."""
    return grid_view(session)


@router.post("/reload")
async def reload_timesheet(session: TimesheetSession = Depends(get_session)) -> GridView:
    """Rebuild the grid from the backend, discarding local edits."""
    await session.load_week()
    return grid_view(session)


@router.post("/navigate")
async def navigate(body: NavigateRequest, session: TimesheetSession = Depends(get_session)) -> GridView:
    """Move to another week or month and load it."""
    if body.unit == "month":
        await session.navigate_month(body.direction)
    else:
        await session.navigate_week(body.direction)
    return grid_view(session)


@router.post("/rows")
async def add_row(session: TimesheetSession = Depends(get_session)) -> GridView:
    session.add_row()
    return grid_view(session)


@router.delete("/rows/{row_id}")
async def remove_row(row_id: str, session: TimesheetSession = Depends(get_session)) -> GridView:
    """Remove a row; the last remaining row is kept."""
    session.remove_row(row_id)
    return grid_view(session)


@router.patch("/rows/{row_id}")
async def update_row(row_id: str, body: RowUpdate, session: TimesheetSession = Depends(get_session)) -> GridView:
    """Change a row's project and/or activity."""
    if body.project_name is not None:
        session.select_project(row_id, body.project_name)
    if body.activity is not None:
        session.select_activity(row_id, body.activity)
    return grid_view(session)


@router.put("/rows/{row_id}/cells/{day_index}")
async def update_cell(
    row_id: str,
    body: CellUpdate,
    day_index: int = Path(ge=0, le=6),
    session: TimesheetSession = Depends(get_session),
) -> GridView:
    """Set one day's hours for a row."""
    session.update_hour(row_id, day_index, body.hours)
    return grid_view(session)


@router.post("/submit")
async def submit(session: TimesheetSession = Depends(get_session)) -> SubmitSummary:
    """Create backend entries for every unsaved cell."""
    result: SubmitResult = await session.submit()
    return SubmitSummary(
        rows_saved=result.rows_saved,
        entries_created=len(result.saved_cells),
        grid=grid_view(session),
    )


@router.put("/entries/{entry_id}")
async def update_entry(
    entry_id: int, body: EntryUpdate, session: TimesheetSession = Depends(get_session)
) -> GridView:
    """Replace a saved entry and reload the week."""
    await session.update_entry(
        entry_id,
        project_id=body.project,
        activity_type=body.activity_type,
        entry_date=body.date,
        hours_worked=body.hours_worked,
        description=body.description,
    )
    return grid_view(session)


@router.delete("/entries/{entry_id}")
async def delete_entry(entry_id: int, session: TimesheetSession = Depends(get_session)) -> GridView:
    """Delete a saved entry and reload the week."""
    await session.delete_entry(entry_id)
    return grid_view(session)
