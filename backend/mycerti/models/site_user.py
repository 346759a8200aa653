"""Site membership model."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from mycerti.database import Base


class SiteUser(Base):
    """Links a user to a site with a role (owner|admin|member)."""
    __tablename__ = "site_users"

    site_id = Column(Integer, ForeignKey("sites.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True, index=True)
    role = Column(String(20), nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    site = relationship("Site", back_populates="members")
    user = relationship("User")
