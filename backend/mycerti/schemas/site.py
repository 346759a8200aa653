"""Schemas for site management."""
from typing import Literal, Optional

from pydantic import BaseModel, Field

from mycerti.constants import SUBDOMAIN_PATTERN
from mycerti.models import Site
from mycerti.utils.serialization import serialize_datetime

Plan = Literal["free", "pro", "enterprise"]
Status = Literal["active", "suspended"]


class SiteCreate(BaseModel):
    """Request schema for POST /sites."""
    name: str = Field(..., min_length=1)
    subdomain: str = Field(..., min_length=1, pattern=SUBDOMAIN_PATTERN)
    plan: Plan = "free"


class SiteUpdate(BaseModel):
    """Request schema for PUT /sites/{id} (owner only)."""
    name: Optional[str] = Field(None, min_length=1)
    plan: Optional[Plan] = None


class AdminSiteUpdate(BaseModel):
    """Request schema for PUT /admin/sites/{id}."""
    name: Optional[str] = None
    plan: Optional[Plan] = None
    status: Optional[Status] = None
    quota_pages: Optional[int] = Field(None, ge=0)
    quota_assets_mb: Optional[int] = Field(None, ge=0)


class SiteTransferRequest(BaseModel):
    """Request schema for POST /admin/sites/{id}/transfer."""
    newOwnerId: int = Field(..., description="ID of the user receiving the site")
    transferReason: Optional[str] = None


class SiteSuspendRequest(BaseModel):
    """Request schema for POST /admin/sites/{id}/suspend."""
    reason: Optional[str] = None


class SiteResponse(BaseModel):
    """Site as returned right after creation."""
    id: int
    name: str
    subdomain: str
    plan: str
    status: str
    quota_pages: int
    quota_assets_mb: int
    created_at: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj: Site) -> "SiteResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=obj.id,
            name=obj.name,
            subdomain=obj.subdomain,
            plan=obj.plan,
            status=obj.status,
            quota_pages=obj.quota_pages,
            quota_assets_mb=obj.quota_assets_mb,
            created_at=serialize_datetime(obj.created_at),
        )
