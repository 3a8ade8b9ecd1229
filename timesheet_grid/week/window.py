import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

DAYS_IN_WEEK = 7
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class WeekWindow:
    """The Monday-Sunday week shown in the grid"""

    anchor: date

    @classmethod
    def containing(cls, anchor: date) -> "WeekWindow":
        return cls(anchor=anchor)

    @property
    def monday(self) -> date:
        return self.anchor - timedelta(days=self.anchor.weekday())

    @property
    def dates(self) -> tuple[date, ...]:
        """The 7 dates of the week, Monday first"""
        monday = self.monday
        return tuple(monday + timedelta(days=offset) for offset in range(DAYS_IN_WEEK))

    @property
    def first(self) -> str:
        return self.dates[0].isoformat()

    @property
    def last(self) -> str:
        return self.dates[-1].isoformat()

    @property
    def day_names(self) -> tuple[str, ...]:
        return DAY_NAMES

    def index_of(self, day: date) -> Optional[int]:
        """Return the column index of a date, or None when it falls outside the week"""
        offset = (day - self.monday).days
        if 0 <= offset < DAYS_IN_WEEK:
            return offset
        return None

    def shift_weeks(self, weeks: int) -> "WeekWindow":
        return WeekWindow(anchor=self.anchor + timedelta(days=7 * weeks))

    def shift_months(self, months: int) -> "WeekWindow":
        """Move the anchor by calendar months, clamping the day to the target month"""
        month_index = self.anchor.month - 1 + months
        year = self.anchor.year + month_index // 12
        month = month_index % 12 + 1
        day = min(self.anchor.day, calendar.monthrange(year, month)[1])
        return WeekWindow(anchor=date(year, month, day))

    def format_range(self) -> str:
        dates = self.dates
        return f"{dates[0].strftime('%d/%m/%Y')} - {dates[-1].strftime('%d/%m/%Y')}"
