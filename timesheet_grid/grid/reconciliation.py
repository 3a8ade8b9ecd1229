import logging
import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from ..backend.models import MAX_HOURS_PER_DAY
from ..week import DAYS_IN_WEEK
from .errors import LockedCellError, LockReason
from .models import ProjectCatalog, TimesheetRow, WeekTotals
from .store import TimesheetRowStore

logger = logging.getLogger(__name__)


def normalize_hours(value: float) -> float:
    """Clamp to [0, 24] and round to the nearest quarter hour, halves rounding up"""
    if math.isnan(value):
        return 0.0
    clamped = min(max(value, 0.0), MAX_HOURS_PER_DAY)
    quarters = (Decimal(str(clamped)) * 4).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return float(quarters / 4)


class ReconciliationEngine:
    """Decides which cells are editable and applies local edits to the rows"""

    def __init__(
        self,
        store: TimesheetRowStore,
        catalog: ProjectCatalog,
        clock: Callable[[], date] = date.today,
    ):
        self.store = store
        self.catalog = catalog
        self.clock = clock
        # (row_id, day_index) of cells whose create call is awaiting the backend
        self.saving: set[tuple[str, int]] = set()

    @property
    def rows(self) -> list[TimesheetRow]:
        return self.store.rows

    @property
    def has_unsaved_changes(self) -> bool:
        return any(row.has_unsaved_changes for row in self.rows)

    @staticmethod
    def _check_day_index(day_index: int) -> None:
        if not 0 <= day_index < DAYS_IN_WEEK:
            raise IndexError(f"day_index must be between 0 and {DAYS_IN_WEEK - 1}, got {day_index}")

    def lock_reason(self, row: TimesheetRow, day_index: int) -> Optional[LockReason]:
        self._check_day_index(day_index)
        cell = row.cells[day_index]
        if cell.is_persisted:
            return LockReason.ALREADY_PERSISTED
        if (row.row_id, day_index) in self.saving:
            return LockReason.SAVING
        if cell.date > self.clock():
            return LockReason.FUTURE_DATE
        return None

    def can_edit(self, row: TimesheetRow, day_index: int) -> bool:
        return self.lock_reason(row, day_index) is None

    def update_hour(self, row_id: str, day_index: int, value: float) -> TimesheetRow:
        """Apply a local edit to one cell; nothing is sent to the backend"""
        row = self.store.get(row_id)
        reason = self.lock_reason(row, day_index)
        if reason is not None:
            raise LockedCellError(reason, row.cells[day_index].date)

        hours = normalize_hours(value)
        cell = row.cells[day_index]
        if hours != cell.hours:
            row.cells[day_index] = cell.with_hours(hours)
            row.has_unsaved_changes = True
            logger.debug(f"Row {row_id} {cell.date}: {cell.hours} -> {hours}")
        return row

    def select_project(self, row_id: str, project_name: str) -> TimesheetRow:
        row = self.store.get(row_id)
        project = self.catalog.find_by_name(project_name)
        row.project_name = project_name
        row.activity = ""
        if project is not None:
            row.project_id = project.id
            row.billable = project.billable
        else:
            row.project_id = 0
            row.billable = True
        return row

    def select_activity(self, row_id: str, activity: str) -> TimesheetRow:
        row = self.store.get(row_id)
        row.activity = activity
        return row

    def pending_rows(self) -> list[TimesheetRow]:
        return [row for row in self.rows if row.is_ready_to_submit]

    def totals(self) -> WeekTotals:
        return WeekTotals.from_rows(self.rows)
