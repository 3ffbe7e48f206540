"""Schemas for projects"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from zippyboards.schemas.project_member import ProjectMemberResponse
from zippyboards.schemas.task import TaskResponse


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectPage(BaseModel):
    """Everything the project page renders: details, members and board lanes."""

    project: ProjectResponse
    members: List[ProjectMemberResponse]
    lanes: Dict[str, List[TaskResponse]]
