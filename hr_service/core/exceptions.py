"""
Typed error taxonomy and the handlers that turn errors into the uniform
response envelope.

- ValidationError  -> 400, message is the first violated rule
- Unauthenticated  -> 401
- NotFound         -> 404
- anything else    -> 500 "Internal server error" (logged server-side)
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hr_service.core.logging import get_logger

logger = get_logger(__name__)

# Location segments FastAPI prefixes onto request validation errors
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class AppError(Exception):
    """Base class for errors that carry their own HTTP status."""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    kind = "validation"
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthenticated(AppError):
    kind = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(AppError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


def first_error_message(errors) -> str:
    """Render the first pydantic/FastAPI error as ``"<field>: <reason>"``."""
    if not errors:
        return "Invalid request"

    error = errors[0]
    location = [
        str(part)
        for part in error.get("loc", ())
        if part not in _LOCATION_PREFIXES
    ]
    message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


def validation_error_from(exc: PydanticValidationError) -> ValidationError:
    return ValidationError(first_error_message(exc.errors()))


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "message": message}
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(
            f"{request.method} {request.url.path} -> {exc.status_code} ({exc.kind}): {exc.message}"
        )
    return _envelope(exc.status_code, exc.message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = first_error_message(exc.errors())
    logger.info(f"{request.method} {request.url.path} -> 400: {message}")
    return _envelope(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code in (
        status.HTTP_404_NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED,
    ):
        return _envelope(status.HTTP_404_NOT_FOUND, "Route not found")
    return _envelope(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc
    )
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
