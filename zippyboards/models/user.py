"""
User Model
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from zippyboards.database import Base
from zippyboards.utils.timestamps import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    # Stored case-folded; lookups go through the unique index
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    email_confirmed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    project_memberships = relationship("ProjectMember", back_populates="user", cascade="all, delete-orphan")
    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan")
