from .window import DAY_NAMES, DAYS_IN_WEEK, WeekWindow


__all__ = [
    "DAYS_IN_WEEK",
    "DAY_NAMES",
    "WeekWindow",
]
