"""
Board state manager.

Holds a project's tasks partitioned into the three lanes and applies drag
moves optimistically: the local lanes change immediately and the lane update
is sent in the background. A failed update discards local state by reloading
everything from the data service.

There is no locking. Two quick moves can have their updates land out of
order; the reload on failure is the only reconciliation.
"""
import asyncio
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Union

from zippyboards.board.gateway import TaskGateway
from zippyboards.board.view import FilterOption, SortDirection, SortOption, build_view
from zippyboards.models.task import TaskLane
from zippyboards.schemas.task import TaskResponse
from zippyboards.speculative import speculate
from zippyboards.utils.timestamps import ensure_aware

logger = logging.getLogger(__name__)

LANES = (TaskLane.BACKLOG, TaskLane.IN_PROGRESS, TaskLane.DONE)

Lanes = Dict[TaskLane, List[TaskResponse]]


def empty_lanes() -> Lanes:
    return {lane: [] for lane in LANES}


def partition(tasks: Iterable[TaskResponse]) -> Lanes:
    """Group tasks by lane, newest first within each lane."""
    lanes = empty_lanes()
    for task in sorted(tasks, key=lambda t: ensure_aware(t.created_at), reverse=True):
        lanes[task.lane].append(task)
    return lanes


class BoardStateManager:
    def __init__(self, gateway: TaskGateway, project_id: Optional[str] = None):
        self._gateway = gateway
        self.project_id = project_id
        self.lanes: Lanes = empty_lanes()
        self.loading = False
        self.error: Optional[str] = None
        self.filter_option = FilterOption.ALL
        self.sort_option = SortOption.CREATED_AT
        self.sort_direction = SortDirection.DESC

    @property
    def task_count(self) -> int:
        return sum(len(tasks) for tasks in self.lanes.values())

    async def load_tasks(self, project_id: Optional[str] = None) -> bool:
        """Replace the lanes with the data service's tasks.

        On failure the lanes are left as they were and ``error`` holds a
        message the UI can show next to a retry button.
        """
        if project_id is not None:
            self.project_id = project_id
        if self.project_id is None:
            raise ValueError("load_tasks needs a project id")

        self.loading = True
        self.error = None
        try:
            tasks = await self._gateway.fetch_tasks(self.project_id)
        except Exception as exc:
            logger.warning("Loading tasks for project %s failed: %s", self.project_id, exc)
            self.error = str(exc) or "Failed to load tasks"
            return False
        finally:
            self.loading = False

        self.lanes = partition(tasks)
        return True

    def move_task(
        self,
        task_id: str,
        from_lane: Union[TaskLane, str],
        from_index: int,
        to_lane: Union[TaskLane, str],
        to_index: int,
    ) -> Optional["asyncio.Task[bool]"]:
        """Move a card and schedule the lane update.

        Must run on the event loop. Returns the background commit, which
        resolves to ``False`` if the update failed and the board was
        reloaded, or ``None`` when the move is a no-op.
        """
        from_lane = TaskLane(from_lane)
        to_lane = TaskLane(to_lane)
        if from_lane == to_lane and from_index == to_index:
            return None

        source = self.lanes[from_lane]
        if not 0 <= from_index < len(source):
            raise ValueError(f"No card at {from_lane.value}[{from_index}]")
        if source[from_index].id != task_id:
            raise ValueError(f"Card at {from_lane.value}[{from_index}] is not task {task_id}")
        insert_limit = len(self.lanes[to_lane]) - (1 if from_lane == to_lane else 0)
        if not 0 <= to_index <= insert_limit:
            raise ValueError(f"Cannot insert at {to_lane.value}[{to_index}]")

        def apply_locally() -> None:
            task = source.pop(from_index)
            self.lanes[to_lane].insert(to_index, task.model_copy(update={"lane": to_lane}))

        async def commit_remotely() -> None:
            await self._gateway.update_task_lane(task_id, to_lane)

        return speculate(apply_locally, commit_remotely, self.load_tasks, label=f"move of task {task_id}")

    def apply_filter(self, option: Union[FilterOption, str]) -> Lanes:
        self.filter_option = FilterOption(option)
        return self.view()

    def apply_sort(
        self,
        option: Union[SortOption, str],
        direction: Union[SortDirection, str] = SortDirection.ASC,
    ) -> Lanes:
        self.sort_option = SortOption(option)
        self.sort_direction = SortDirection(direction)
        return self.view()

    def view(self, now: Optional[datetime] = None) -> Lanes:
        """Filtered and sorted copy of the lanes; the lanes themselves are untouched."""
        return build_view(self.lanes, self.filter_option, self.sort_option, self.sort_direction, now)
