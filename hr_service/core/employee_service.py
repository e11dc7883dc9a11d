"""
Employee directory service.

CRUD and paginated search over active employees. Deletion is a soft delete;
all reads go through ``active_employees()`` so soft-deleted rows never leak.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, col, func, select

from hr_service.core.exceptions import NotFound
from hr_service.core.logging import get_logger
from hr_service.models.common import utc_now
from hr_service.models.employee import Employee, EmployeeCreate, active_employees

logger = get_logger(__name__)

EMPLOYEE_NOT_FOUND = "Employee not found"


class EmployeeService:
    """Service for creating, reading, updating and soft-deleting employees."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @staticmethod
    def _get_active(session: Session, employee_id: int) -> Employee:
        employee = session.exec(
            active_employees().where(Employee.id == employee_id)
        ).first()
        if not employee:
            logger.warning(f"Employee {employee_id} not found")
            raise NotFound(EMPLOYEE_NOT_FOUND)
        return employee

    def list(
        self, page: int = 1, limit: int = 10, search: Optional[str] = None
    ) -> tuple[list[Employee], int]:
        """
        List active employees, optionally filtered by a case-insensitive
        substring of the name.

        Returns:
            The requested page ordered by ascending id and the total number
            of matching employees
        """
        conditions = [Employee.active_clause()]
        if search:
            conditions.append(col(Employee.name).ilike(f"%{search}%"))

        with Session(self.engine) as session:
            total = session.exec(
                select(func.count()).select_from(Employee).where(*conditions)
            ).one()
            employees = session.exec(
                select(Employee)
                .where(*conditions)
                .order_by(col(Employee.id).asc())
                .offset((page - 1) * limit)
                .limit(limit)
            ).all()

        logger.info(
            f"Listed {len(employees)} of {total} employee(s) "
            f"(page={page}, limit={limit}, search={search!r})"
        )
        return list(employees), total

    def get_by_id(self, employee_id: int) -> Employee:
        with Session(self.engine) as session:
            return self._get_active(session, employee_id)

    def create(self, payload: EmployeeCreate) -> Employee:
        employee = Employee.model_validate(payload)
        with Session(self.engine) as session:
            session.add(employee)
            session.commit()
            session.refresh(employee)
        logger.info(f"Created employee {employee.id} ({employee.name})")
        return employee

    def update(self, employee_id: int, changes: dict[str, Any]) -> Employee:
        """
        Apply a partial update to an active employee.

        Raises:
            NotFound: if the employee does not exist or is soft-deleted
        """
        with Session(self.engine) as session:
            employee = self._get_active(session, employee_id)
            for field, value in changes.items():
                setattr(employee, field, value)
            employee.updated_at = utc_now()
            session.add(employee)
            session.commit()
            session.refresh(employee)

        logger.info(f"Updated employee {employee_id}: {sorted(changes)}")
        return employee

    def delete(self, employee_id: int) -> None:
        """Soft-delete an active employee by stamping ``deleted_at``."""
        with Session(self.engine) as session:
            employee = self._get_active(session, employee_id)
            employee.deleted_at = utc_now()
            session.add(employee)
            session.commit()
        logger.info(f"Soft-deleted employee {employee_id}")
