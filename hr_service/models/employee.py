"""
Employee directory models and schemas.

Employees are never physically removed: deleting one stamps ``deleted_at``.
Every query for "active" employees must go through ``active_clause()`` /
``active_employees()`` so the soft-delete filter is applied consistently.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, model_validator
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel, col, select

from hr_service.models.common import utc_now


class Employee(SQLModel, table=True):
    """ORM model for the employees table."""

    __tablename__ = "employees"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, nullable=False, index=True)
    age: int = Field(nullable=False)
    designation: str = Field(max_length=100, nullable=False)
    hiring_date: date = Field(nullable=False)
    date_of_birth: date = Field(nullable=False)
    salary: Decimal = Field(max_digits=12, decimal_places=2, nullable=False)
    photo_reference: Optional[str] = Field(default=None, max_length=500)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(default_factory=utc_now, nullable=False)
    deleted_at: Optional[datetime] = Field(default=None, index=True)

    @classmethod
    def active_clause(cls):
        """SQL predicate matching employees that are not soft-deleted."""
        return col(cls.deleted_at).is_(None)


def active_employees():
    """SELECT over active (non soft-deleted) employees."""
    return select(Employee).where(Employee.active_clause())


# Request Schemas


class EmployeeCreate(SQLModel):
    """Schema for creating an employee. Unknown fields are dropped."""

    name: str = Field(min_length=2, max_length=100)
    age: int = Field(ge=18, le=65)
    designation: str = Field(min_length=2, max_length=100)
    hiring_date: date
    date_of_birth: date
    salary: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    photo_reference: Optional[str] = Field(default=None, max_length=500)


class EmployeeUpdate(BaseModel):
    """Partial update; at least one recognized field is required."""

    name: Optional[str] = PydanticField(default=None, min_length=2, max_length=100)
    age: Optional[int] = PydanticField(default=None, ge=18, le=65)
    designation: Optional[str] = PydanticField(
        default=None, min_length=2, max_length=100
    )
    hiring_date: Optional[date] = None
    date_of_birth: Optional[date] = None
    salary: Optional[Decimal] = PydanticField(
        default=None, gt=0, max_digits=12, decimal_places=2
    )
    photo_reference: Optional[str] = PydanticField(default=None, max_length=500)

    @model_validator(mode="after")
    def check_not_empty(self) -> "EmployeeUpdate":
        if not self.changes():
            raise ValueError("At least one field must be provided")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# Response Schemas


class EmployeePublic(SQLModel):
    """Schema for employee responses."""

    id: int
    name: str
    age: int
    designation: str
    hiring_date: date
    date_of_birth: date
    salary: float
    photo_reference: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
