"""
Operator (HR user) accounts.

Rows are provisioned out of band (see ``hr_service.core.seed``); the service
only reads them to verify logins.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel

from hr_service.models.common import utc_now


class Operator(SQLModel, table=True):
    """ORM model for the hr_users credential table."""

    __tablename__ = "hr_users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True, max_length=255, nullable=False)
    password_hash: str = Field(max_length=255, nullable=False)
    name: str = Field(max_length=255, nullable=False)

    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    updated_at: datetime = Field(default_factory=utc_now, nullable=False)


class LoginRequest(BaseModel):
    """Schema for POST /auth/login."""

    email: EmailStr
    password: str = PydanticField(min_length=1)


class LoginResponse(BaseModel):
    token: str
