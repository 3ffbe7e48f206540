"""Remote procedures callable through ``DataServiceClient.rpc``.

Procedures run inside one database session and commit once, so multi-row
writes either all land or none do.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from zippyboards.data_service.policies import is_member
from zippyboards.data_service.query import serialize_row
from zippyboards.errors import INSUFFICIENT_PRIVILEGE, DataServiceError
from zippyboards.models import MemberRole, Project, ProjectMember, User
from zippyboards.utils.primary_keys import new_id


@dataclass(frozen=True)
class RpcContext:
    user_id: Optional[str]
    elevated: bool = False


Procedure = Callable[..., Any]

PROCEDURES: Dict[str, Procedure] = {}


def procedure(name: str):
    def register(func: Procedure) -> Procedure:
        PROCEDURES[name] = func
        return func

    return register


_ROLE_ORDER = {MemberRole.OWNER: 0, MemberRole.MEMBER: 1}


@procedure("get_project_members_if_allowed")
def get_project_members_if_allowed(
    db: Session, context: RpcContext, *, p_project_id: str, p_user_id: Optional[str]
) -> List[Dict[str, Any]]:
    """Return ``{user_id, role, email}`` for every member, or nothing when
    ``p_user_id`` is not the caller or not a member of the project."""
    if p_user_id is None:
        return []
    if not context.elevated and context.user_id != p_user_id:
        return []
    if not is_member(db, p_project_id, p_user_id):
        return []

    rows = (
        db.query(ProjectMember, User.email)
        .join(User, User.id == ProjectMember.user_id)
        .filter(ProjectMember.project_id == p_project_id)
        .all()
    )
    rows.sort(key=lambda item: (_ROLE_ORDER[item[0].role], item[1]))
    return [
        {"user_id": member.user_id, "role": member.role.value, "email": email}
        for member, email in rows
    ]


@procedure("create_project_with_owner")
def create_project_with_owner(
    db: Session, context: RpcContext, *, p_name: str, p_description: Optional[str] = None
) -> Dict[str, Any]:
    """Create a project and its owner membership in a single transaction."""
    if context.user_id is None:
        raise DataServiceError(
            "permission denied for function create_project_with_owner",
            code=INSUFFICIENT_PRIVILEGE,
        )

    project = Project(id=new_id(), name=p_name, description=p_description, created_by=context.user_id)
    owner = ProjectMember(project_id=project.id, user_id=context.user_id, role=MemberRole.OWNER)
    db.add(project)
    db.add(owner)
    db.commit()
    return serialize_row(project)
