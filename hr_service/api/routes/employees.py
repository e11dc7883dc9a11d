import json
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from hr_service.api.dependencies import (
    CurrentOperatorDep,
    EmployeeServiceDep,
    PhotoStorageDep,
    SettingsDep,
)
from hr_service.core.exceptions import ValidationError, validation_error_from
from hr_service.core.logging import get_logger
from hr_service.core.security import get_current_operator
from hr_service.core.storage import PhotoStorage, discard_photo, read_photo
from hr_service.models.common import MAX_LIMIT, MAX_PAGE, ApiResponse, PaginationMeta
from hr_service.models.employee import EmployeeCreate, EmployeePublic, EmployeeUpdate

logger = get_logger(__name__)

PHOTO_FIELD = "photo"

# All employee routes require a valid bearer token
router = APIRouter(
    prefix="/employees",
    tags=["employees"],
    dependencies=[Depends(get_current_operator)],
)


async def read_employee_form(
    request: Request,
) -> tuple[dict[str, Any], Optional[UploadFile]]:
    """
    Read an employee payload from a multipart/urlencoded form or a JSON body.

    Returns:
        The plain body fields and the uploaded ``photo`` file, if any
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except json.JSONDecodeError:
            raise ValidationError("Request body must be valid JSON")
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body, None

    form = await request.form()
    fields: dict[str, Any] = {}
    photo: Optional[UploadFile] = None
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            # Browsers send an empty part when no file is chosen
            if key == PHOTO_FIELD and value.filename:
                photo = value
        else:
            fields[key] = value
    return fields, photo


async def store_photo(photo: UploadFile, storage: PhotoStorage, max_size: int) -> str:
    content = await read_photo(photo, max_size)
    return await storage.save(
        content, photo.filename or "photo", photo.content_type or ""
    )


@router.get("", response_model=ApiResponse[list[EmployeePublic]])
def list_employees(
    employee_service: EmployeeServiceDep,
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = 10,
    search: Optional[str] = None,
) -> ApiResponse[list[EmployeePublic]]:
    """
    List active employees with pagination and an optional name search.
    """
    employees, total = employee_service.list(page=page, limit=limit, search=search)
    return ApiResponse(
        message="Employees fetched successfully",
        data=[EmployeePublic.model_validate(e) for e in employees],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.get("/{employee_id}", response_model=ApiResponse[EmployeePublic])
def get_employee(
    employee_id: int, employee_service: EmployeeServiceDep
) -> ApiResponse[EmployeePublic]:
    employee = employee_service.get_by_id(employee_id)
    return ApiResponse(
        message="Employee fetched successfully",
        data=EmployeePublic.model_validate(employee),
    )


@router.post("", response_model=ApiResponse[EmployeePublic], status_code=201)
async def create_employee(
    request: Request,
    employee_service: EmployeeServiceDep,
    photo_storage: PhotoStorageDep,
    settings: SettingsDep,
    current_operator: CurrentOperatorDep,
) -> ApiResponse[EmployeePublic]:
    """
    Create an employee.

    Accepts ``multipart/form-data`` (with an optional ``photo`` image part)
    or JSON. Unrecognized fields are ignored.
    """
    fields, photo = await read_employee_form(request)
    try:
        payload = EmployeeCreate.model_validate(fields)
    except PydanticValidationError as e:
        raise validation_error_from(e)

    stored_photo: Optional[str] = None
    if photo is not None:
        stored_photo = await store_photo(photo, photo_storage, settings.MAX_PHOTO_SIZE)
        payload.photo_reference = stored_photo

    logger.info(f"Employee creation requested by {current_operator.email}")
    try:
        employee = employee_service.create(payload)
    except Exception:
        if stored_photo:
            await discard_photo(photo_storage, stored_photo)
        raise
    return ApiResponse(
        message="Employee created successfully",
        data=EmployeePublic.model_validate(employee),
    )


@router.put("/{employee_id}", response_model=ApiResponse[EmployeePublic])
async def update_employee(
    employee_id: int,
    request: Request,
    employee_service: EmployeeServiceDep,
    photo_storage: PhotoStorageDep,
    settings: SettingsDep,
    current_operator: CurrentOperatorDep,
) -> ApiResponse[EmployeePublic]:
    """
    Partially update an employee and/or replace their photo.

    A request carrying only a new photo skips body validation.
    """
    fields, photo = await read_employee_form(request)

    changes: dict[str, Any] = {}
    if fields or photo is None:
        try:
            changes = EmployeeUpdate.model_validate(fields).changes()
        except PydanticValidationError as e:
            raise validation_error_from(e)

    # Fail before storing a photo for an employee that cannot be updated
    employee_service.get_by_id(employee_id)

    stored_photo: Optional[str] = None
    if photo is not None:
        stored_photo = await store_photo(photo, photo_storage, settings.MAX_PHOTO_SIZE)
        changes["photo_reference"] = stored_photo

    logger.info(
        f"Employee {employee_id} update requested by {current_operator.email}"
    )
    try:
        employee = employee_service.update(employee_id, changes)
    except Exception:
        # Row vanished or the write failed after the photo was stored
        if stored_photo:
            await discard_photo(photo_storage, stored_photo)
        raise
    return ApiResponse(
        message="Employee updated successfully",
        data=EmployeePublic.model_validate(employee),
    )


@router.delete("/{employee_id}", response_model=ApiResponse[None])
def delete_employee(
    employee_id: int,
    employee_service: EmployeeServiceDep,
    current_operator: CurrentOperatorDep,
) -> ApiResponse[None]:
    """
    Soft-delete an employee. Their attendance history is kept.
    """
    logger.info(
        f"Employee {employee_id} deletion requested by {current_operator.email}"
    )
    employee_service.delete(employee_id)
    return ApiResponse(message="Employee deleted successfully")
