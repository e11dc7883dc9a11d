"""
Shared API dependencies.
Contains reusable dependency functions for FastAPI endpoints.
Services are built once by the application factory and stored on
``app.state``; these helpers hand them to route handlers.
"""

from typing import Annotated

from fastapi import Depends, Request

from hr_service.core.attendance_service import AttendanceService
from hr_service.core.auth_service import AuthService
from hr_service.core.config import Settings
from hr_service.core.employee_service import EmployeeService
from hr_service.core.security import TokenData, get_current_operator
from hr_service.core.storage import PhotoStorage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_employee_service(request: Request) -> EmployeeService:
    return request.app.state.employee_service


def get_attendance_service(request: Request) -> AttendanceService:
    return request.app.state.attendance_service


def get_photo_storage(request: Request) -> PhotoStorage:
    return request.app.state.photo_storage


SettingsDep = Annotated[Settings, Depends(get_settings)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
EmployeeServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]
AttendanceServiceDep = Annotated[AttendanceService, Depends(get_attendance_service)]
PhotoStorageDep = Annotated[PhotoStorage, Depends(get_photo_storage)]

# Current operator dependency for the Access Gate
CurrentOperatorDep = Annotated[TokenData, Depends(get_current_operator)]
