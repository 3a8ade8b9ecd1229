import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable

from pydantic import ValidationError

from ..backend.client import BackendError
from ..backend.models import CreatedTimesheetEntry, CreateTimesheetEntryRequest
from .errors import NothingToSubmitError, StaleSubmitError, SubmitInProgressError, SubmitPartialFailure
from .models import CellState, TimesheetRow
from .reconciliation import ReconciliationEngine

logger = logging.getLogger(__name__)

CreateEntry = Callable[[CreateTimesheetEntryRequest], Awaitable[CreatedTimesheetEntry]]


@dataclass(frozen=True)
class SavedCell:
    row_id: str
    date: date
    server_id: int


@dataclass
class SubmitResult:
    rows_saved: int = 0
    saved_cells: list[SavedCell] = field(default_factory=list)


def _always_current() -> bool:
    return True


class SubmitCoordinator:
    """Flushes unsaved grid cells to the backend, one create call per cell"""

    def __init__(self, engine: ReconciliationEngine, create_entry: CreateEntry, employee_id: str):
        self.engine = engine
        self.create_entry = create_entry
        self.employee_id = employee_id
        self.submitting = False

    async def submit(self, is_current: Callable[[], bool] = _always_current) -> SubmitResult:
        """Create entries for every new, non-zero cell of the rows ready to submit.

        Stops at the first failing cell. Cells saved before the failure stay
        persisted and the failing row keeps its unsaved flag, so calling submit
        again picks up where this one stopped.

        Args:
            is_current: returns False once the grid has been rebuilt, after
                which no further create calls are issued

        """
        if self.submitting:
            raise SubmitInProgressError()

        rows = self.engine.pending_rows()
        if not rows:
            raise NothingToSubmitError()

        self.submitting = True
        result = SubmitResult()
        try:
            for row in rows:
                await self._submit_row(row, is_current, result)
                result.rows_saved += 1
        finally:
            self.submitting = False

        logger.info(f"Submitted {len(result.saved_cells)} entries across {result.rows_saved} rows")
        return result

    async def _submit_row(self, row: TimesheetRow, is_current: Callable[[], bool], result: SubmitResult) -> None:
        for day_index, cell in enumerate(row.cells):
            if cell.is_persisted or cell.hours <= 0:
                continue
            if not is_current():
                raise StaleSubmitError()

            key = (row.row_id, day_index)
            self.engine.saving.add(key)
            try:
                request = CreateTimesheetEntryRequest(
                    employee_id=self.employee_id,
                    project=row.project_id,
                    activity_type=row.activity,
                    date=cell.date,
                    hours_worked=cell.hours,
                    description="",
                )
                created = await self.create_entry(request)
            except (BackendError, ValidationError) as e:
                logger.exception(f"Failed to create timesheet entry for row {row.row_id} on {cell.date}")
                raise SubmitPartialFailure(cell.date, e) from e
            finally:
                self.engine.saving.discard(key)

            if not is_current():
                logger.warning(f"Discarding entry {created.id} for {cell.date}: the grid was rebuilt mid-submit")
                raise StaleSubmitError()

            row.cells[day_index] = cell.persist(created.id)
            result.saved_cells.append(SavedCell(row_id=row.row_id, date=cell.date, server_id=created.id))

        # Cells edited while the row was being saved still need a submit
        row.has_unsaved_changes = any(cell.state is CellState.EDITED for cell in row.cells)
        row.is_existing = True
