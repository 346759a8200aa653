"""Schemas for signup, login and the current user."""
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field
from typing import Annotated, Optional

from mycerti.constants import MIN_PASSWORD_LENGTH
from mycerti.models import User
from mycerti.utils.serialization import serialize_datetime


def _check_email(value: str) -> str:
    """Reject malformed addresses but keep the address exactly as typed."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}")
    return value


# Compared and stored verbatim, so no normalization of the domain part
Email = Annotated[str, AfterValidator(_check_email)]


class SignupRequest(BaseModel):
    """Request schema for /auth/signup."""
    email: Email
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    name: Optional[str] = None


class LoginRequest(BaseModel):
    """Request schema for /auth/login and /admin/login."""
    email: Email
    password: str


class UserSummary(BaseModel):
    """Public part of a user returned with a token."""
    id: int
    email: str
    name: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj: User) -> "UserSummary":
        """Convert SQLAlchemy model to response model."""
        return cls(id=obj.id, email=obj.email, name=obj.name)


class AuthResponse(BaseModel):
    """Response schema for signup and login."""
    message: str
    user: UserSummary
    token: str


class UserProfile(BaseModel):
    """The caller's own account."""
    id: int
    email: str
    name: Optional[str] = None
    status: str
    created_at: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj: User) -> "UserProfile":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=obj.id,
            email=obj.email,
            name=obj.name,
            status=obj.status,
            created_at=serialize_datetime(obj.created_at),
        )


class MeResponse(BaseModel):
    """Response schema for GET /auth/me."""
    user: UserProfile
    sites_count: int
