"""
Attendance ledger service.

Check-ins are upserted on ``(employee_id, date)``: recording a second
check-in for the same employee and day overwrites ``check_in_time`` on the
existing row. The uniqueness constraint makes concurrent duplicates safe.
"""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Optional

from sqlalchemy import case
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlmodel import Session, col, func, select

from hr_service.core.exceptions import NotFound, ValidationError
from hr_service.core.logging import get_logger
from hr_service.models.attendance import (
    LATE_THRESHOLD,
    Attendance,
    AttendanceCreate,
    AttendanceReportItem,
    AttendanceUpdate,
)
from hr_service.models.employee import Employee, active_employees

logger = get_logger(__name__)

ATTENDANCE_NOT_FOUND = "Attendance record not found"
INVALID_MONTH_MESSAGE = "month: Month must be in YYYY-MM format"

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def month_bounds(month: str) -> tuple[dt.date, dt.date]:
    """
    First and last calendar day of a ``YYYY-MM`` month.

    Raises:
        ValidationError: if ``month`` is not a representable calendar month
    """
    try:
        year, month_number = (int(part) for part in month.split("-"))
        last_day = calendar.monthrange(year, month_number)[1]
        return dt.date(year, month_number, 1), dt.date(year, month_number, last_day)
    except ValueError:
        raise ValidationError(INVALID_MONTH_MESSAGE)


class AttendanceService:
    """Service for attendance records and monthly reporting."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @staticmethod
    def _get(session: Session, attendance_id: int) -> Attendance:
        record = session.get(Attendance, attendance_id)
        if not record:
            logger.warning(f"Attendance record with ID {attendance_id} not found")
            raise NotFound(ATTENDANCE_NOT_FOUND)
        return record

    def _upsert_statement(self, payload: AttendanceCreate):
        dialect = self.engine.dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Attendance upsert is not supported on {dialect}")

        statement = insert(Attendance).values(
            employee_id=payload.employee_id,
            date=payload.date,
            check_in_time=payload.check_in_time,
        )
        return statement.on_conflict_do_update(
            index_elements=["employee_id", "date"],
            set_={"check_in_time": statement.excluded.check_in_time},
        )

    def list(
        self,
        page: int = 1,
        limit: int = 10,
        employee_id: Optional[int] = None,
        date: Optional[dt.date] = None,
        date_from: Optional[dt.date] = None,
        date_to: Optional[dt.date] = None,
    ) -> tuple[list[Attendance], int]:
        """
        List attendance records, newest date first.

        Filters combine with AND; ``date_from``/``date_to`` are inclusive.
        """
        conditions = []
        if employee_id is not None:
            conditions.append(Attendance.employee_id == employee_id)
        if date is not None:
            conditions.append(Attendance.date == date)
        if date_from is not None:
            conditions.append(col(Attendance.date) >= date_from)
        if date_to is not None:
            conditions.append(col(Attendance.date) <= date_to)

        with Session(self.engine) as session:
            total = session.exec(
                select(func.count()).select_from(Attendance).where(*conditions)
            ).one()
            records = session.exec(
                select(Attendance)
                .where(*conditions)
                .order_by(col(Attendance.date).desc(), col(Attendance.id).desc())
                .offset((page - 1) * limit)
                .limit(limit)
            ).all()

        logger.info(
            f"Listed {len(records)} of {total} attendance record(s) "
            f"(page={page}, limit={limit})"
        )
        return list(records), total

    def get_by_id(self, attendance_id: int) -> Attendance:
        with Session(self.engine) as session:
            return self._get(session, attendance_id)

    def create(self, payload: AttendanceCreate) -> Attendance:
        """
        Record a check-in, overwriting the check-in time when the employee
        already has a record for that date.

        Raises:
            NotFound: if the employee does not exist or is soft-deleted
        """
        with Session(self.engine) as session:
            employee = session.exec(
                active_employees().where(Employee.id == payload.employee_id)
            ).first()
            if not employee:
                logger.warning(
                    f"Check-in attempted for missing employee {payload.employee_id}"
                )
                raise NotFound("Employee not found")

            session.connection().execute(self._upsert_statement(payload))
            session.commit()

            record = session.exec(
                select(Attendance).where(
                    Attendance.employee_id == payload.employee_id,
                    Attendance.date == payload.date,
                )
            ).one()

        logger.info(
            f"Employee {payload.employee_id} checked in on {payload.date} "
            f"at {payload.check_in_time} (record {record.id})"
        )
        return record

    def update(self, attendance_id: int, payload: AttendanceUpdate) -> Attendance:
        with Session(self.engine) as session:
            record = self._get(session, attendance_id)
            changes = payload.model_dump(exclude_unset=True, exclude_none=True)
            for field, value in changes.items():
                setattr(record, field, value)
            session.add(record)
            session.commit()
            session.refresh(record)

        logger.info(f"Updated attendance record {attendance_id}: {sorted(changes)}")
        return record

    def delete(self, attendance_id: int) -> None:
        with Session(self.engine) as session:
            record = self._get(session, attendance_id)
            session.delete(record)
            session.commit()
        logger.info(f"Deleted attendance record {attendance_id}")

    def monthly_report(
        self, month: str, employee_id: Optional[int] = None
    ) -> list[AttendanceReportItem]:
        """
        Per-employee attendance totals for a ``YYYY-MM`` month.

        Only active employees with at least one record in the month appear.
        ``times_late`` counts check-ins strictly after 09:45:00.
        """
        start_date, end_date = month_bounds(month)
        times_late = func.sum(
            case((col(Attendance.check_in_time) > LATE_THRESHOLD, 1), else_=0)
        )

        statement = (
            select(
                Attendance.employee_id,
                Employee.name,
                func.count(col(Attendance.id)).label("days_present"),
                times_late.label("times_late"),
            )
            .join(Employee, col(Attendance.employee_id) == col(Employee.id))
            .where(Employee.active_clause())
            .where(col(Attendance.date).between(start_date, end_date))
        )
        if employee_id is not None:
            statement = statement.where(Attendance.employee_id == employee_id)
        statement = statement.group_by(
            col(Attendance.employee_id), col(Employee.name)
        ).order_by(col(Attendance.employee_id).asc())

        with Session(self.engine) as session:
            rows = session.exec(statement).all()

        logger.info(
            f"Monthly report for {month} ({start_date} to {end_date}): "
            f"{len(rows)} employee(s)"
        )
        return [
            AttendanceReportItem(
                employee_id=row.employee_id,
                name=row.name,
                days_present=row.days_present,
                times_late=row.times_late or 0,
            )
            for row in rows
        ]
