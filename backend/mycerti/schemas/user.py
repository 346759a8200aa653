"""Schemas for admin user management."""
from typing import Literal, Optional

from pydantic import BaseModel, Field

from mycerti.constants import MIN_PASSWORD_LENGTH
from mycerti.schemas.auth import Email

Status = Literal["active", "suspended"]


class AdminUserCreate(BaseModel):
    """Request schema for POST /admin/users."""
    email: Email
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    name: Optional[str] = None
    status: Status = "active"


class AdminUserUpdate(BaseModel):
    """Request schema for PUT /admin/users/{id}."""
    name: Optional[str] = None
    status: Optional[Status] = None


class PasswordResetRequest(BaseModel):
    """Request schema for POST /admin/users/{id}/reset-password."""
    newPassword: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
