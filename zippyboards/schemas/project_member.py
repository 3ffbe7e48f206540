"""Schemas for project members"""
from pydantic import BaseModel, EmailStr

from zippyboards.models.project_member import MemberRole


class MemberAdd(BaseModel):
    email: EmailStr


class ProjectMemberResponse(BaseModel):
    user_id: str
    role: MemberRole
    email: str

    class Config:
        from_attributes = True
