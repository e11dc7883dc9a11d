from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from hr_service.api.dependencies import AttendanceServiceDep
from hr_service.core.security import get_current_operator
from hr_service.models.attendance import AttendanceReportItem
from hr_service.models.common import ApiResponse

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(get_current_operator)],
)


@router.get("/attendance", response_model=ApiResponse[list[AttendanceReportItem]])
def monthly_attendance_report(
    attendance_service: AttendanceServiceDep,
    month: Annotated[str, Query(pattern=MONTH_PATTERN)],
    employee_id: Annotated[Optional[int], Query(gt=0)] = None,
) -> ApiResponse[list[AttendanceReportItem]]:
    """
    Monthly attendance summary per active employee.

    Args:
        month: Month in YYYY-MM format
        employee_id: Restrict the report to one employee
    """
    report = attendance_service.monthly_report(month, employee_id=employee_id)
    return ApiResponse(
        message="Monthly attendance report generated successfully",
        data=report,
    )
