"""
Attendance ledger models and schemas.

One check-in per employee per calendar day: ``(employee_id, date)`` is unique
and a repeated check-in for the same day overwrites ``check_in_time``.
"""

import datetime as dt
import re
from typing import Any, Optional

from pydantic import BaseModel, field_validator, model_validator
from pydantic import Field as PydanticField
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

# Check-ins strictly after this time of day count as late
LATE_THRESHOLD = dt.time(9, 45, 0)

CHECK_IN_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(:[0-5]\d)?$")
CHECK_IN_TIME_MESSAGE = "Check-in time must be in HH:MM or HH:MM:SS format"


def check_in_time_format(value: Any) -> Any:
    """Accept only wall-clock ``HH:MM`` or ``HH:MM:SS`` with no offset or fraction."""
    if isinstance(value, str):
        if not CHECK_IN_TIME_PATTERN.match(value):
            raise ValueError(CHECK_IN_TIME_MESSAGE)
    elif isinstance(value, dt.time):
        if value.tzinfo is not None or value.microsecond:
            raise ValueError(CHECK_IN_TIME_MESSAGE)
    return value


# Database Model


class Attendance(SQLModel, table=True):
    """ORM model for the attendance table."""

    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    employee_id: int = Field(foreign_key="employees.id", index=True, nullable=False)
    date: dt.date = Field(index=True, nullable=False)
    check_in_time: dt.time = Field(nullable=False)


# Request Schemas


class AttendanceCreate(SQLModel):
    """Schema for recording (or re-recording) a check-in."""

    employee_id: int = Field(gt=0)
    date: dt.date
    check_in_time: dt.time

    @field_validator("check_in_time", mode="before")
    @classmethod
    def check_time_format(cls, value: Any) -> Any:
        return check_in_time_format(value)


class AttendanceUpdate(BaseModel):
    """Partial update of an attendance record."""

    employee_id: Optional[int] = PydanticField(default=None, gt=0)
    date: Optional[dt.date] = None
    check_in_time: Optional[dt.time] = None

    @field_validator("check_in_time", mode="before")
    @classmethod
    def check_time_format(cls, value: Any) -> Any:
        return check_in_time_format(value)

    @model_validator(mode="after")
    def check_not_empty(self) -> "AttendanceUpdate":
        if not self.model_dump(exclude_unset=True, exclude_none=True):
            raise ValueError("At least one field must be provided")
        return self


# Response Schemas


class AttendancePublic(SQLModel):
    """Schema for attendance responses."""

    id: int
    employee_id: int
    date: dt.date
    check_in_time: dt.time


class AttendanceReportItem(BaseModel):
    """One row of the monthly attendance report."""

    employee_id: int
    name: str
    days_present: int
    times_late: int
