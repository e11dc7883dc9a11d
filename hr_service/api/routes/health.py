from fastapi import APIRouter

from hr_service.api.dependencies import SettingsDep
from hr_service.models.common import ApiResponse, HealthStatus

router = APIRouter(tags=["health"])


@router.get("/health", response_model=ApiResponse[HealthStatus])
def health_check(settings: SettingsDep) -> ApiResponse[HealthStatus]:
    """
    Liveness endpoint for container orchestration and monitoring.
    """
    return ApiResponse(
        message="Server is running",
        data=HealthStatus(service=settings.APP_NAME, version=settings.APP_VERSION),
    )
