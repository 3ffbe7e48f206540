"""Schemas for tasks"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from zippyboards.models.task import TaskLane, TaskPriority


class TaskCreate(BaseModel):
    project_id: str
    title: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    priority: Optional[TaskPriority] = None
    lane: Optional[TaskLane] = None
    due_date: Optional[date] = None
    assigned_to: Optional[str] = None

    @field_validator("title", "priority", "lane")
    @classmethod
    def reject_null(cls, value):
        # description, due_date and assigned_to may be cleared; these may not
        if value is None:
            raise ValueError("may not be null")
        return value


class TaskLaneUpdate(BaseModel):
    lane: TaskLane


class TaskResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    lane: TaskLane
    priority: TaskPriority
    due_date: Optional[date] = None
    project_id: str
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
