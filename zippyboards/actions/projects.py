"""Project actions: creation, dashboard listing and the project page."""
import logging
from typing import List, Optional

from zippyboards.actions.common import action, require_user
from zippyboards.board.state import partition
from zippyboards.cache import PageCache, project_path
from zippyboards.data_service import DataServiceClient
from zippyboards.errors import NotFound
from zippyboards.schemas.project import ProjectCreate, ProjectPage, ProjectResponse
from zippyboards.schemas.project_member import ProjectMemberResponse
from zippyboards.schemas.task import TaskResponse

logger = logging.getLogger(__name__)


@action
def create_project(client: DataServiceClient, name: str, description: Optional[str] = None):
    user = require_user(client)
    project_in = ProjectCreate(name=name, description=description)
    row = client.rpc(
        "create_project_with_owner",
        {"p_name": project_in.name, "p_description": project_in.description},
    )
    logger.info("User %s created project %s", user.id, row["id"])
    return ProjectResponse.model_validate(row)


def _project_ids(client: DataServiceClient, user_id: str) -> List[str]:
    rows = client.table("project_members").eq("user_id", user_id).select("project_id")
    return [row["project_id"] for row in rows]


@action
def list_projects(client: DataServiceClient):
    user = require_user(client)
    project_ids = _project_ids(client, user.id)
    if not project_ids:
        return []
    rows = client.table("projects").in_("id", project_ids).order("created_at", desc=True).select()
    return [ProjectResponse.model_validate(row) for row in rows]


def _fetch_project(client: DataServiceClient, project_id: str) -> ProjectResponse:
    row = client.table("projects").eq("id", project_id).maybe_single()
    if row is None:
        raise NotFound("Project not found.")
    return ProjectResponse.model_validate(row)


def _fetch_members(client: DataServiceClient, project_id: str, user_id: str) -> List[ProjectMemberResponse]:
    rows = client.rpc(
        "get_project_members_if_allowed",
        {"p_project_id": project_id, "p_user_id": user_id},
    )
    return [ProjectMemberResponse.model_validate(row) for row in rows]


@action
def get_project(client: DataServiceClient, project_id: str):
    require_user(client)
    return _fetch_project(client, project_id)


@action
def list_members(client: DataServiceClient, project_id: str):
    user = require_user(client)
    return _fetch_members(client, project_id, user.id)


@action
def project_page(client: DataServiceClient, project_id: str, cache: Optional[PageCache] = None):
    """Project details, members and tasks grouped by lane.

    The cached payload is shared by every member of the project, so it is
    only served after the caller's access has been checked.
    """
    user = require_user(client)
    project = _fetch_project(client, project_id)

    def build() -> ProjectPage:
        rows = client.table("tasks").eq("project_id", project_id).order("created_at", desc=True).select()
        lanes = partition(TaskResponse.model_validate(row) for row in rows)
        return ProjectPage(
            project=project,
            members=_fetch_members(client, project_id, user.id),
            lanes={lane.value: tasks for lane, tasks in lanes.items()},
        )

    if cache is None:
        return build()
    return cache.get_or_build(project_path(project_id), build)
