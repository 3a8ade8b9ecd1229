from datetime import date as date_type

from pydantic import BaseModel, Field, field_serializer, field_validator


ADMIN_ROLES = frozenset({"admin", "manager"})
MAX_HOURS_PER_DAY = 24.0


class CurrentUser(BaseModel):
    """The logged in employee, as reported by the backend"""

    employee_id: str
    employee_name: str
    department: str = ""
    role: str = "employee"
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


class Project(BaseModel):
    id: int
    name: str
    billable: bool = True


class TimesheetEntry(BaseModel):
    """A persisted timesheet entry returned by the my-timesheets endpoint"""

    id: int
    project: int
    project_name: str = ""
    activity_type: str
    date: date_type
    hours_worked: float
    description: str | None = None


class CreateTimesheetEntryRequest(BaseModel):
    """Payload for creating (or replacing) a single day's entry"""

    employee_id: str = Field(min_length=1)
    project: int = Field(gt=0)
    activity_type: str = Field(min_length=1)
    date: date_type
    hours_worked: float = Field(gt=0, le=MAX_HOURS_PER_DAY)
    description: str = ""

    @field_validator("hours_worked")
    @classmethod
    def check_quarter_hours(cls, value: float) -> float:
        if (value * 4) != int(value * 4):
            raise ValueError("hours_worked must be a multiple of 0.25")
        return value

    @field_serializer("date")
    def serialize_date(self, value: date_type) -> str:
        return value.isoformat()

    @field_serializer("hours_worked")
    def serialize_hours(self, value: float) -> str:
        return format(value, "g")


class CreatedTimesheetEntry(BaseModel):
    id: int
