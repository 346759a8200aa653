"""Pydantic schemas for request/response validation."""
from mycerti.schemas.auth import AuthResponse, LoginRequest, MeResponse, SignupRequest, UserProfile, UserSummary
from mycerti.schemas.site import (
    AdminSiteUpdate,
    SiteCreate,
    SiteResponse,
    SiteSuspendRequest,
    SiteTransferRequest,
    SiteUpdate,
)
from mycerti.schemas.user import AdminUserCreate, AdminUserUpdate, PasswordResetRequest

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "MeResponse",
    "SignupRequest",
    "UserProfile",
    "UserSummary",
    "AdminSiteUpdate",
    "SiteCreate",
    "SiteResponse",
    "SiteSuspendRequest",
    "SiteTransferRequest",
    "SiteUpdate",
    "AdminUserCreate",
    "AdminUserUpdate",
    "PasswordResetRequest",
]
