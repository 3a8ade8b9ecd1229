import itertools
import logging
from typing import Iterable

from ..backend.models import TimesheetEntry
from ..week import WeekWindow
from .errors import RowNotFoundError
from .models import PLACEHOLDER_ROW_ID, ProjectCatalog, TimesheetCell, TimesheetRow

logger = logging.getLogger(__name__)


def build_rows(
    entries: Iterable[TimesheetEntry], window: WeekWindow, catalog: ProjectCatalog
) -> list[TimesheetRow]:
    """Group server entries by (project, activity) into rows for the window.

    Each entry fills the cell for its date and makes it persisted. Entries dated
    outside the window are dropped. An empty result yields a single placeholder
    row so the grid always has something to edit.
    """
    rows: dict[tuple[int, str], TimesheetRow] = {}

    for entry in entries:
        day_index = window.index_of(entry.date)
        if day_index is None:
            logger.warning(f"Ignoring entry {entry.id} dated {entry.date}, outside {window.first}..{window.last}")
            continue

        key = (entry.project, entry.activity_type)
        row = rows.get(key)
        if row is None:
            project = catalog.find_by_id(entry.project)
            row = TimesheetRow.blank(row_id=f"{entry.project}-{entry.activity_type}", window=window)
            row.project_id = entry.project
            row.project_name = project.name if project else entry.project_name
            row.activity = entry.activity_type
            row.billable = project.billable if project else False
            row.is_existing = True
            rows[key] = row

        row.cells[day_index] = TimesheetCell.persisted(
            day=row.cells[day_index].date, hours=entry.hours_worked, server_id=entry.id
        )

    if not rows:
        return [TimesheetRow.blank(row_id=PLACEHOLDER_ROW_ID, window=window)]
    return list(rows.values())


class TimesheetRowStore:
    """In-memory grid rows for the visible week"""

    def __init__(self, window: WeekWindow):
        self.window = window
        self.rows: list[TimesheetRow] = []
        self._new_row_ids = itertools.count(2)
        self.reset()

    def switch_window(self, window: WeekWindow) -> None:
        """Drop the current rows and start over on another week"""
        self.window = window
        self.reset()

    def reset(self) -> None:
        self.rows = [TimesheetRow.blank(row_id=PLACEHOLDER_ROW_ID, window=self.window)]

    def load(self, entries: Iterable[TimesheetEntry], catalog: ProjectCatalog) -> None:
        self.rows = build_rows(entries, self.window, catalog)
        logger.info(f"Loaded {len(self.rows)} rows for week {self.window.first}..{self.window.last}")

    def get(self, row_id: str) -> TimesheetRow:
        for row in self.rows:
            if row.row_id == row_id:
                return row
        raise RowNotFoundError(row_id)

    def add_row(self) -> TimesheetRow:
        row = TimesheetRow.blank(row_id=f"new-{next(self._new_row_ids)}", window=self.window)
        self.rows.append(row)
        return row

    def remove_row(self, row_id: str) -> bool:
        """Remove a row unless it is the last one left"""
        row = self.get(row_id)
        if len(self.rows) <= 1:
            return False
        self.rows.remove(row)
        return True
