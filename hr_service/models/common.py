"""
Uniform response envelope shared by every endpoint.

    { success, message, data?, meta?: {page, limit, total, totalPages} }
"""

import math
from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_serializer

T = TypeVar("T")

# Envelope keys omitted from the JSON body when they carry no value
_OPTIONAL_KEYS = ("data", "meta")

# Upper bound on the page query parameter; keeps the row offset within a
# 64-bit database integer for any allowed limit
MAX_PAGE = 1_000_000_000
MAX_LIMIT = 100


class PaginationMeta(BaseModel):
    """Pagination metadata attached to list responses."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapping every JSON response."""

    success: bool = True
    message: str
    data: Optional[T] = None
    meta: Optional[PaginationMeta] = None

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler) -> dict[str, Any]:
        serialized = handler(self)
        return {
            key: value
            for key, value in serialized.items()
            if key not in _OPTIONAL_KEYS or value is not None
        }


class HealthStatus(BaseModel):
    service: str
    version: str


def utc_now() -> datetime:
    """Timezone-aware current time in UTC, used for row timestamps."""
    return datetime.now(timezone.utc)
