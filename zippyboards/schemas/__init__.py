"""
Pydantic schemas for request/response validation
"""
from zippyboards.schemas.user import SessionResponse, SignInRequest, SignUpRequest, UserSummary
from zippyboards.schemas.task import TaskCreate, TaskLaneUpdate, TaskResponse, TaskUpdate
from zippyboards.schemas.project_member import MemberAdd, ProjectMemberResponse
from zippyboards.schemas.project import ProjectCreate, ProjectPage, ProjectResponse
from zippyboards.schemas.waitlist import WaitlistJoin, WaitlistResponse
from zippyboards.schemas.action import ActionResult, validation_message

__all__ = [
    "SessionResponse",
    "SignInRequest",
    "SignUpRequest",
    "UserSummary",
    "TaskCreate",
    "TaskLaneUpdate",
    "TaskResponse",
    "TaskUpdate",
    "MemberAdd",
    "ProjectMemberResponse",
    "ProjectCreate",
    "ProjectPage",
    "ProjectResponse",
    "WaitlistJoin",
    "WaitlistResponse",
    "ActionResult",
    "validation_message",
]
