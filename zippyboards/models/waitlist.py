"""
Waitlist Model
"""
from sqlalchemy import Column, String, DateTime

from zippyboards.database import Base
from zippyboards.utils.timestamps import utcnow


class WaitlistEntry(Base):
    __tablename__ = "waitlist"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
