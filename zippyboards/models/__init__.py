"""ZippyBoards Database Models"""
from zippyboards.models.user import User
from zippyboards.models.project import Project
from zippyboards.models.project_member import MemberRole, ProjectMember
from zippyboards.models.task import Task, TaskLane, TaskPriority
from zippyboards.models.waitlist import WaitlistEntry
from zippyboards.models.auth_session import AuthCode, AuthSession
from zippyboards.utils.primary_keys import register_uuid_pk_listener

__all__ = [
    "User",
    "Project",
    "ProjectMember",
    "MemberRole",
    "Task",
    "TaskLane",
    "TaskPriority",
    "WaitlistEntry",
    "AuthSession",
    "AuthCode",
]


for _model in (
    User,
    Project,
    Task,
    WaitlistEntry,
    AuthSession,
):
    register_uuid_pk_listener(_model)
