"""
Database models and schemas module.
Contains all SQLModel table definitions and Pydantic schemas.
"""

from hr_service.models.attendance import (
    LATE_THRESHOLD,
    Attendance,
    AttendanceCreate,
    AttendancePublic,
    AttendanceReportItem,
    AttendanceUpdate,
)
from hr_service.models.common import ApiResponse, HealthStatus, PaginationMeta
from hr_service.models.employee import (
    Employee,
    EmployeeCreate,
    EmployeePublic,
    EmployeeUpdate,
    active_employees,
)
from hr_service.models.operator import LoginRequest, LoginResponse, Operator

__all__ = [
    "ApiResponse",
    "HealthStatus",
    "PaginationMeta",
    "Operator",
    "LoginRequest",
    "LoginResponse",
    "Employee",
    "EmployeeCreate",
    "EmployeeUpdate",
    "EmployeePublic",
    "active_employees",
    "Attendance",
    "AttendanceCreate",
    "AttendanceUpdate",
    "AttendancePublic",
    "AttendanceReportItem",
    "LATE_THRESHOLD",
]
