"""Page model."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from mycerti.database import Base
from mycerti.constants import PageStatus


class Page(Base):
    """A page of a site, addressed by path."""
    __tablename__ = "pages"
    __table_args__ = (UniqueConstraint("site_id", "path", name="uq_pages_site_path"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    path = Column(String, nullable=False)
    title = Column(String, nullable=True)
    content_html = Column(Text, nullable=True)
    status = Column(String(20), default=PageStatus.DRAFT, nullable=False)  # draft|published
    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    site = relationship("Site", back_populates="pages")
    editor = relationship("User")
