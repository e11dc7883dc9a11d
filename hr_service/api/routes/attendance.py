import datetime as dt
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from hr_service.api.dependencies import AttendanceServiceDep, CurrentOperatorDep
from hr_service.core.logging import get_logger
from hr_service.core.security import get_current_operator
from hr_service.models.attendance import (
    AttendanceCreate,
    AttendancePublic,
    AttendanceUpdate,
)
from hr_service.models.common import MAX_LIMIT, MAX_PAGE, ApiResponse, PaginationMeta

logger = get_logger(__name__)

# Create router with prefix and tags for better organization
router = APIRouter(
    prefix="/attendance",
    tags=["attendance"],
    dependencies=[Depends(get_current_operator)],
    responses={404: {"description": "Attendance record not found"}},
)


@router.get("", response_model=ApiResponse[list[AttendancePublic]])
def list_attendance(
    attendance_service: AttendanceServiceDep,
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = 10,
    employee_id: Annotated[Optional[int], Query(gt=0)] = None,
    date: Optional[dt.date] = None,
    date_from: Annotated[Optional[dt.date], Query(alias="from")] = None,
    date_to: Annotated[Optional[dt.date], Query(alias="to")] = None,
) -> ApiResponse[list[AttendancePublic]]:
    """
    List attendance records, newest date first.

    Args:
        page: 1-based page number
        limit: Page size (max 100)
        employee_id: Only records of this employee
        date: Only records on this day (YYYY-MM-DD)
        date_from: Inclusive lower bound on the date (query name ``from``)
        date_to: Inclusive upper bound on the date (query name ``to``)
    """
    records, total = attendance_service.list(
        page=page,
        limit=limit,
        employee_id=employee_id,
        date=date,
        date_from=date_from,
        date_to=date_to,
    )
    return ApiResponse(
        message="Attendance records fetched successfully",
        data=[AttendancePublic.model_validate(r) for r in records],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.get("/{attendance_id}", response_model=ApiResponse[AttendancePublic])
def get_attendance(
    attendance_id: int, attendance_service: AttendanceServiceDep
) -> ApiResponse[AttendancePublic]:
    """
    Get a specific attendance record by ID.
    Records of soft-deleted employees remain retrievable here.
    """
    logger.info(f"Fetching attendance record with ID: {attendance_id}")
    record = attendance_service.get_by_id(attendance_id)
    return ApiResponse(
        message="Attendance record fetched successfully",
        data=AttendancePublic.model_validate(record),
    )


@router.post("", response_model=ApiResponse[AttendancePublic], status_code=201)
def create_attendance(
    request: AttendanceCreate,
    attendance_service: AttendanceServiceDep,
    current_operator: CurrentOperatorDep,
) -> ApiResponse[AttendancePublic]:
    """
    Record a check-in.

    A second check-in for the same employee and date overwrites the
    existing record's check-in time instead of failing.

    Raises:
        NotFound: 404 if the employee does not exist or was deleted
    """
    logger.info(
        f"Check-in for employee {request.employee_id} on {request.date} "
        f"recorded by {current_operator.email}"
    )
    record = attendance_service.create(request)
    return ApiResponse(
        message="Attendance recorded successfully",
        data=AttendancePublic.model_validate(record),
    )


@router.put("/{attendance_id}", response_model=ApiResponse[AttendancePublic])
def update_attendance(
    attendance_id: int,
    request: AttendanceUpdate,
    attendance_service: AttendanceServiceDep,
) -> ApiResponse[AttendancePublic]:
    record = attendance_service.update(attendance_id, request)
    return ApiResponse(
        message="Attendance record updated successfully",
        data=AttendancePublic.model_validate(record),
    )


@router.delete("/{attendance_id}", response_model=ApiResponse[None])
def delete_attendance(
    attendance_id: int, attendance_service: AttendanceServiceDep
) -> ApiResponse[None]:
    attendance_service.delete(attendance_id)
    return ApiResponse(message="Attendance record deleted successfully")
