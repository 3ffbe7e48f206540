"""
Owner-only membership management.

Ownership is checked with the caller's own client; the membership rows are
then written with the elevated client, since row-level security does not let
regular users insert or delete other people's memberships.
"""
import logging
from typing import Optional

from zippyboards.actions.common import action, require_owner, require_user, revalidate_project
from zippyboards.cache import PageCache
from zippyboards.data_service import DataServiceClient
from zippyboards.errors import UNIQUE_VIOLATION, AlreadyMember, DataServiceError, NotFound, SelfRemovalForbidden
from zippyboards.models import MemberRole
from zippyboards.schemas.project_member import MemberAdd, ProjectMemberResponse

logger = logging.getLogger(__name__)


@action
def add_member(
    client: DataServiceClient,
    admin: DataServiceClient,
    project_id: str,
    email: str,
    cache: Optional[PageCache] = None,
):
    current_user = require_user(client)
    require_owner(client, project_id, current_user.id, "add")

    email = MemberAdd(email=email).email
    target = admin.auth.admin.get_user_by_email(email)
    if target is None:
        raise NotFound("User with this email not found.")

    existing = (
        admin.table("project_members")
        .eq("project_id", project_id)
        .eq("user_id", target.id)
        .maybe_single("user_id")
    )
    if existing:
        raise AlreadyMember()

    try:
        admin.table("project_members").insert(
            {"project_id": project_id, "user_id": target.id, "role": MemberRole.MEMBER.value}
        )
    except DataServiceError as exc:
        # lost a race with a concurrent add
        if exc.code == UNIQUE_VIOLATION:
            raise AlreadyMember() from exc
        raise

    revalidate_project(cache, project_id)
    logger.info("User %s added %s to project %s", current_user.id, target.id, project_id)
    return ProjectMemberResponse(user_id=target.id, role=MemberRole.MEMBER, email=target.email)


@action
def remove_member(
    client: DataServiceClient,
    admin: DataServiceClient,
    project_id: str,
    user_id: str,
    cache: Optional[PageCache] = None,
):
    current_user = require_user(client)
    require_owner(client, project_id, current_user.id, "remove")

    if user_id == current_user.id:
        raise SelfRemovalForbidden()

    removed = (
        admin.table("project_members")
        .eq("project_id", project_id)
        .eq("user_id", user_id)
        .delete()
    )

    revalidate_project(cache, project_id)
    logger.info("User %s removed %s from project %s (%d rows)", current_user.id, user_id, project_id, len(removed))
    return None
