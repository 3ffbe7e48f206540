"""Schemas for the waitlist"""
from datetime import datetime

from pydantic import BaseModel


class WaitlistJoin(BaseModel):
    email: str


class WaitlistResponse(BaseModel):
    id: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True
