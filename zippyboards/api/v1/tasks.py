"""Task endpoints"""
from typing import List

from fastapi import APIRouter, Depends, status

from zippyboards.actions import tasks as task_actions
from zippyboards.api.responses import unwrap
from zippyboards.cache import PageCache
from zippyboards.data_service import DataServiceClient
from zippyboards.dependencies import get_client, get_page_cache
from zippyboards.schemas import TaskCreate, TaskLaneUpdate, TaskResponse, TaskUpdate

router = APIRouter()


@router.get("/projects/{project_id}/tasks", response_model=List[TaskResponse])
def list_tasks(project_id: str, client: DataServiceClient = Depends(get_client)):
    return unwrap(task_actions.list_tasks(client, project_id))


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: TaskCreate,
    client: DataServiceClient = Depends(get_client),
    cache: PageCache = Depends(get_page_cache),
):
    return unwrap(
        task_actions.create_task(
            client,
            task_in.project_id,
            task_in.title,
            task_in.description,
            task_in.priority,
            task_in.due_date,
            cache,
        )
    )


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    task_in: TaskUpdate,
    client: DataServiceClient = Depends(get_client),
    cache: PageCache = Depends(get_page_cache),
):
    return unwrap(task_actions.update_task(client, task_id, task_in, cache))


@router.patch("/tasks/{task_id}/lane", response_model=TaskResponse)
def move_task(
    task_id: str,
    lane_in: TaskLaneUpdate,
    client: DataServiceClient = Depends(get_client),
    cache: PageCache = Depends(get_page_cache),
):
    return unwrap(task_actions.move_task_lane(client, task_id, lane_in.lane, cache))


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    client: DataServiceClient = Depends(get_client),
    cache: PageCache = Depends(get_page_cache),
):
    unwrap(task_actions.delete_task(client, task_id, cache))
