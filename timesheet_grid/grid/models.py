from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from ..backend.models import Project
from ..week import WeekWindow

STANDARD_WEEK_HOURS = 40.0
PLACEHOLDER_ROW_ID = "new-1"


class CellState(Enum):
    """Lifecycle of a grid cell: EMPTY -> EDITED -> PERSISTED"""

    EMPTY = "empty"
    EDITED = "edited"
    PERSISTED = "persisted"


@dataclass(frozen=True)
class TimesheetCell:
    """One day's hours for one row"""

    date: date
    hours: float = 0.0
    state: CellState = CellState.EMPTY
    server_id: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.state is CellState.PERSISTED) != (self.server_id is not None):
            raise ValueError("Only persisted cells carry a server id")
        if self.state is CellState.EMPTY and self.hours != 0:
            raise ValueError("An empty cell cannot hold hours")
        if self.state is CellState.EDITED and self.hours <= 0:
            raise ValueError("An edited cell must hold positive hours")

    @classmethod
    def persisted(cls, day: date, hours: float, server_id: int) -> "TimesheetCell":
        return cls(date=day, hours=hours, state=CellState.PERSISTED, server_id=server_id)

    @property
    def is_persisted(self) -> bool:
        return self.state is CellState.PERSISTED

    def with_hours(self, hours: float) -> "TimesheetCell":
        if self.is_persisted:
            raise ValueError("Persisted cells are immutable in the grid")
        state = CellState.EDITED if hours > 0 else CellState.EMPTY
        return replace(self, hours=hours, state=state)

    def persist(self, server_id: int) -> "TimesheetCell":
        if self.state is not CellState.EDITED:
            raise ValueError(f"Cannot persist a cell in state {self.state.value}")
        return replace(self, state=CellState.PERSISTED, server_id=server_id)


@dataclass
class TimesheetRow:
    """A project + activity pairing across the visible week"""

    row_id: str
    cells: list[TimesheetCell]
    project_id: int = 0
    project_name: str = ""
    activity: str = ""
    billable: bool = True
    has_unsaved_changes: bool = False
    is_existing: bool = False

    @classmethod
    def blank(cls, row_id: str, window: WeekWindow) -> "TimesheetRow":
        return cls(row_id=row_id, cells=[TimesheetCell(date=day) for day in window.dates])

    @property
    def hours(self) -> list[float]:
        return [cell.hours for cell in self.cells]

    @property
    def total(self) -> float:
        return sum(self.hours)

    @property
    def is_ready_to_submit(self) -> bool:
        return (
            self.has_unsaved_changes
            and bool(self.project_id)
            and bool(self.activity)
            and any(hours > 0 for hours in self.hours)
        )


@dataclass
class ProjectCatalog:
    """Active projects and the activity labels available for each"""

    projects: list[Project] = field(default_factory=list)
    activities: dict[int, list[str]] = field(default_factory=dict)

    def find_by_name(self, name: str) -> Optional[Project]:
        return next((project for project in self.projects if project.name == name), None)

    def find_by_id(self, project_id: int) -> Optional[Project]:
        return next((project for project in self.projects if project.id == project_id), None)

    def activities_for(self, project_id: int) -> list[str]:
        return self.activities.get(project_id, [])


@dataclass(frozen=True)
class WeekTotals:
    total: float = 0.0
    billable: float = 0.0
    non_billable: float = 0.0
    regular: float = 0.0
    overtime: float = 0.0

    @classmethod
    def from_rows(cls, rows: Iterable[TimesheetRow]) -> "WeekTotals":
        billable = 0.0
        non_billable = 0.0
        for row in rows:
            if row.billable:
                billable += row.total
            else:
                non_billable += row.total
        total = billable + non_billable
        return cls(
            total=total,
            billable=billable,
            non_billable=non_billable,
            regular=min(total, STANDARD_WEEK_HOURS),
            overtime=max(total - STANDARD_WEEK_HOURS, 0.0),
        )
