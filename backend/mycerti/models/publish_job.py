"""Publish job model."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from mycerti.database import Base
from mycerti.constants import PublishJobStatus


class PublishJob(Base):
    """Record of a publish attempt, kept for auditing and statistics."""
    __tablename__ = "publish_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    scope = Column(String(20), nullable=False)  # site|page
    status = Column(String(20), default=PublishJobStatus.QUEUED, nullable=False)  # queued|running|success|failed
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    site = relationship("Site", back_populates="publish_jobs")
    creator = relationship("User")
