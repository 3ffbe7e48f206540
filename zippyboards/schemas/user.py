"""Schemas for users and sessions"""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserSummary(BaseModel):
    id: str
    email: str

    class Config:
        from_attributes = True


class SignInRequest(BaseModel):
    email: str
    password: str
    redirect_to: str = "/dashboard"


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserSummary

    class Config:
        from_attributes = True
