from fastapi import APIRouter

from hr_service.api.dependencies import AuthServiceDep
from hr_service.core.logging import get_logger
from hr_service.models.common import ApiResponse
from hr_service.models.operator import LoginRequest, LoginResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=ApiResponse[LoginResponse])
def login(request: LoginRequest, auth_service: AuthServiceDep) -> ApiResponse[LoginResponse]:
    """
    Operator login.

    Returns a signed bearer token for the protected endpoints. Unknown
    emails and wrong passwords produce the same 401 response.
    """
    logger.info(f"Login attempt for {request.email}")
    token = auth_service.login(request.email, request.password)
    return ApiResponse(message="Login successful", data=LoginResponse(token=token))
