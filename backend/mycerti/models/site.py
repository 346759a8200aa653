"""Site model."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from mycerti.database import Base
from mycerti.constants import SitePlan, SiteStatus


class Site(Base):
    """A tenant website served under its own subdomain."""
    __tablename__ = "sites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    subdomain = Column(String, unique=True, nullable=False, index=True)
    plan = Column(String(20), default=SitePlan.FREE, nullable=False, index=True)  # free|pro|enterprise
    status = Column(String(20), default=SiteStatus.ACTIVE, nullable=False)  # active|suspended
    suspended_reason = Column(String, nullable=True)
    quota_pages = Column(Integer, nullable=False)
    quota_assets_mb = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship("User", backref="owned_sites")
    members = relationship("SiteUser", back_populates="site", cascade="all, delete-orphan")
    pages = relationship("Page", back_populates="site", cascade="all, delete-orphan")
    assets = relationship("Asset", back_populates="site", cascade="all, delete-orphan")
    publish_jobs = relationship("PublishJob", back_populates="site", cascade="all, delete-orphan")
