"""User model for site owners and members."""
from sqlalchemy import Column, Integer, String, DateTime, func
from mycerti.database import Base
from mycerti.constants import UserStatus


class User(Base):
    """Platform user account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    status = Column(String(20), default=UserStatus.ACTIVE, nullable=False, index=True)  # active|suspended
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
