"""
Row-level security policies for the tables the data service exposes.

Each policy turns the acting user's id into SQL predicates (which rows can be
read, updated or deleted) and into checks on rows being written. Anonymous
callers get ``user_id=None``. Elevated clients skip policies entirely.
"""
from typing import Any, Dict, Optional

from sqlalchemy import false, select
from sqlalchemy.orm import Session

from zippyboards.models import MemberRole, Project, ProjectMember, Task, User, WaitlistEntry


def member_project_ids(user_id: str):
    return select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)


def owner_project_ids(user_id: str):
    return select(ProjectMember.project_id).where(
        ProjectMember.user_id == user_id,
        ProjectMember.role == MemberRole.OWNER,
    )


def is_member(db: Session, project_id: Optional[str], user_id: str) -> bool:
    if project_id is None:
        return False
    membership = db.query(ProjectMember).filter(
        ProjectMember.project_id == project_id,
        ProjectMember.user_id == user_id,
    ).first()
    return membership is not None


class TablePolicy:
    """Deny-all base policy."""

    def visible(self, user_id: Optional[str]):
        return false()

    def updatable(self, user_id: Optional[str]):
        return false()

    def deletable(self, user_id: Optional[str]):
        return false()

    def insert_check(self, db: Session, user_id: Optional[str], row: Dict[str, Any]) -> bool:
        return False

    def update_check(self, db: Session, user_id: Optional[str], row: Dict[str, Any]) -> bool:
        return True


class ProjectPolicy(TablePolicy):
    def visible(self, user_id):
        if user_id is None:
            return false()
        return Project.id.in_(member_project_ids(user_id))

    def updatable(self, user_id):
        return self.visible(user_id)

    def deletable(self, user_id):
        if user_id is None:
            return false()
        return Project.id.in_(owner_project_ids(user_id))

    def insert_check(self, db, user_id, row):
        return user_id is not None and row.get("created_by") == user_id


class ProjectMemberPolicy(TablePolicy):
    """Members see their fellow members. Only the first (owner) row of a
    project can be written by a regular user; everything else goes through an
    elevated client after an ownership check."""

    def visible(self, user_id):
        if user_id is None:
            return false()
        return ProjectMember.project_id.in_(member_project_ids(user_id))

    def insert_check(self, db, user_id, row):
        if user_id is None or row.get("user_id") != user_id:
            return False
        if row.get("role") != MemberRole.OWNER:
            return False
        existing = db.query(ProjectMember).filter(ProjectMember.project_id == row.get("project_id")).first()
        return existing is None


class TaskPolicy(TablePolicy):
    def visible(self, user_id):
        if user_id is None:
            return false()
        return Task.project_id.in_(member_project_ids(user_id))

    def updatable(self, user_id):
        return self.visible(user_id)

    def deletable(self, user_id):
        return self.visible(user_id)

    def insert_check(self, db, user_id, row):
        return user_id is not None and is_member(db, row.get("project_id"), user_id)

    def update_check(self, db, user_id, row):
        return self.insert_check(db, user_id, row)


class UserPolicy(TablePolicy):
    def visible(self, user_id):
        if user_id is None:
            return false()
        return User.id == user_id


class WaitlistPolicy(TablePolicy):
    def insert_check(self, db, user_id, row):
        return True


TABLE_POLICIES: Dict[str, TablePolicy] = {
    Project.__tablename__: ProjectPolicy(),
    ProjectMember.__tablename__: ProjectMemberPolicy(),
    Task.__tablename__: TaskPolicy(),
    User.__tablename__: UserPolicy(),
    WaitlistEntry.__tablename__: WaitlistPolicy(),
}
