"""Async access to tasks for the board state manager."""
import asyncio
from abc import ABC, abstractmethod
from typing import List

from zippyboards.data_service import DataServiceClient
from zippyboards.errors import NO_SINGLE_ROW, DataServiceError
from zippyboards.models.task import TaskLane
from zippyboards.schemas.task import TaskResponse


class TaskGateway(ABC):
    """Where the board reads tasks from and sends lane changes to."""

    @abstractmethod
    async def fetch_tasks(self, project_id: str) -> List[TaskResponse]:
        """Return every task of the project, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def update_task_lane(self, task_id: str, lane: TaskLane) -> None:
        """Persist a lane change; raise if it was not applied."""
        raise NotImplementedError


class DataServiceTaskGateway(TaskGateway):
    """Gateway over a data service client.

    The client is synchronous; each call runs in a worker thread so the event
    loop stays responsive while the request is outstanding.
    """

    def __init__(self, client: DataServiceClient):
        self._client = client

    async def fetch_tasks(self, project_id: str) -> List[TaskResponse]:
        rows = await asyncio.to_thread(self._select_tasks, project_id)
        return [TaskResponse.model_validate(row) for row in rows]

    async def update_task_lane(self, task_id: str, lane: TaskLane) -> None:
        rows = await asyncio.to_thread(self._update_lane, task_id, lane)
        if not rows:
            raise DataServiceError(f"Task {task_id} was not updated", code=NO_SINGLE_ROW)

    def _select_tasks(self, project_id: str):
        return (
            self._client.table("tasks")
            .eq("project_id", project_id)
            .order("created_at", desc=True)
            .select()
        )

    def _update_lane(self, task_id: str, lane: TaskLane):
        return self._client.table("tasks").eq("id", task_id).update({"lane": lane.value})
