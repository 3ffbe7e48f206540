"""Task actions."""
import logging
from datetime import date
from typing import Any, Dict, Optional, Union

from zippyboards.actions.common import action, require_user, revalidate_project
from zippyboards.cache import PageCache
from zippyboards.data_service import DataServiceClient
from zippyboards.errors import NotFound, ValidationFailure
from zippyboards.models import TaskLane, TaskPriority
from zippyboards.schemas.task import TaskCreate, TaskLaneUpdate, TaskResponse, TaskUpdate

logger = logging.getLogger(__name__)


def _load_task(client: DataServiceClient, task_id: str) -> Dict[str, Any]:
    row = client.table("tasks").eq("id", task_id).maybe_single()
    if row is None:
        raise NotFound("Task not found.")
    return row


def _updated_task(rows, task_id: str) -> TaskResponse:
    if not rows:
        raise NotFound("Task not found.")
    logger.debug("Updated task %s", task_id)
    return TaskResponse.model_validate(rows[0])


@action
def list_tasks(client: DataServiceClient, project_id: str):
    require_user(client)
    rows = client.table("tasks").eq("project_id", project_id).order("created_at", desc=True).select()
    return [TaskResponse.model_validate(row) for row in rows]


@action
def create_task(
    client: DataServiceClient,
    project_id: str,
    title: str,
    description: Optional[str] = None,
    priority: Union[TaskPriority, str] = TaskPriority.MEDIUM,
    due_date: Optional[date] = None,
    cache: Optional[PageCache] = None,
):
    require_user(client)
    task_in = TaskCreate(
        project_id=project_id,
        title=title,
        description=description,
        priority=priority,
        due_date=due_date,
    )
    rows = client.table("tasks").insert(
        {
            "project_id": task_in.project_id,
            "title": task_in.title,
            "description": task_in.description,
            "priority": task_in.priority.value,
            "due_date": task_in.due_date,
            "lane": TaskLane.BACKLOG.value,
        }
    )
    revalidate_project(cache, project_id)
    return TaskResponse.model_validate(rows[0])


@action
def update_task(
    client: DataServiceClient,
    task_id: str,
    changes: Union[TaskUpdate, Dict[str, Any]],
    cache: Optional[PageCache] = None,
):
    require_user(client)
    if not isinstance(changes, TaskUpdate):
        changes = TaskUpdate(**changes)
    values = changes.model_dump(exclude_unset=True)
    if not values:
        return TaskResponse.model_validate(_load_task(client, task_id))

    task = _load_task(client, task_id)
    assignee = values.get("assigned_to")
    if assignee is not None:
        members = client.rpc(
            "get_project_members_if_allowed",
            {"p_project_id": task["project_id"], "p_user_id": client.current_user_id()},
        )
        if assignee not in {member["user_id"] for member in members}:
            raise ValidationFailure("Assignee must be a member of the project.")

    for key in ("priority", "lane"):
        if values.get(key) is not None:
            values[key] = values[key].value

    rows = client.table("tasks").eq("id", task_id).update(values)
    revalidate_project(cache, task["project_id"])
    return _updated_task(rows, task_id)


@action
def delete_task(client: DataServiceClient, task_id: str, cache: Optional[PageCache] = None):
    require_user(client)
    rows = client.table("tasks").eq("id", task_id).delete()
    if not rows:
        raise NotFound("Task not found.")
    revalidate_project(cache, rows[0]["project_id"])
    logger.info("Deleted task %s", task_id)
    return None


@action
def move_task_lane(
    client: DataServiceClient,
    task_id: str,
    lane: Union[TaskLane, str],
    cache: Optional[PageCache] = None,
):
    require_user(client)
    lane = TaskLaneUpdate(lane=lane).lane
    rows = client.table("tasks").eq("id", task_id).update({"lane": lane.value})
    task = _updated_task(rows, task_id)
    revalidate_project(cache, task.project_id)
    return task
