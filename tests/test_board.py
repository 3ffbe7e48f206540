import asyncio
import random
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List

import pytest

from zippyboards.actions.tasks import create_task
from zippyboards.board import (
    BoardStateManager,
    DataServiceTaskGateway,
    FilterOption,
    SortDirection,
    SortOption,
    TaskGateway,
)
from zippyboards.errors import DataServiceError
from zippyboards.models import TaskLane, TaskPriority
from zippyboards.schemas.task import TaskResponse

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
PROJECT_ID = "project-1"


def _task(
    task_id: str,
    lane: TaskLane = TaskLane.BACKLOG,
    priority: TaskPriority = TaskPriority.MEDIUM,
    due_date=None,
    assigned_to=None,
    title=None,
    age_minutes: int = 0,
) -> TaskResponse:
    created = NOW - timedelta(minutes=age_minutes)
    return TaskResponse(
        id=task_id,
        title=title or f"Task {task_id}",
        lane=lane,
        priority=priority,
        due_date=due_date,
        project_id=PROJECT_ID,
        assigned_to=assigned_to,
        created_at=created,
        updated_at=created,
    )


class FakeGateway(TaskGateway):
    """In-memory task store that can be told to reject lane updates."""

    def __init__(self, tasks: List[TaskResponse]):
        self.tasks: Dict[str, TaskResponse] = {task.id: task for task in tasks}
        self.fail_updates = False
        self.fail_fetches = False
        self.updates = []

    async def fetch_tasks(self, project_id):
        if self.fail_fetches:
            raise DataServiceError("service unavailable")
        return list(self.tasks.values())

    async def update_task_lane(self, task_id, lane):
        self.updates.append((task_id, lane))
        if self.fail_updates:
            raise DataServiceError("update rejected")
        self.tasks[task_id] = self.tasks[task_id].model_copy(update={"lane": lane})


def _board(tasks) -> BoardStateManager:
    gateway = FakeGateway(tasks)
    board = BoardStateManager(gateway, PROJECT_ID)
    assert asyncio.run(board.load_tasks())
    return board


def _ids(board: BoardStateManager, lane: TaskLane) -> List[str]:
    return [task.id for task in board.lanes[lane]]


def test_load_partitions_tasks_newest_first():
    board = _board(
        [
            _task("old", age_minutes=30),
            _task("new", age_minutes=1),
            _task("doing", lane=TaskLane.IN_PROGRESS),
        ]
    )

    assert _ids(board, TaskLane.BACKLOG) == ["new", "old"]
    assert _ids(board, TaskLane.IN_PROGRESS) == ["doing"]
    assert _ids(board, TaskLane.DONE) == []
    assert board.loading is False
    assert board.error is None


def test_load_failure_keeps_lanes_and_sets_error():
    board = _board([_task("a")])
    board._gateway.fail_fetches = True

    assert asyncio.run(board.load_tasks()) is False

    assert board.error == "service unavailable"
    assert board.loading is False
    assert _ids(board, TaskLane.BACKLOG) == ["a"]


def test_move_applies_locally_and_commits():
    board = _board([_task("a"), _task("b", age_minutes=5)])

    async def scenario():
        commit = board.move_task("a", TaskLane.BACKLOG, 0, TaskLane.DONE, 0)
        # visible before the update resolves
        assert _ids(board, TaskLane.DONE) == ["a"]
        return await commit

    assert asyncio.run(scenario()) is True
    assert _ids(board, TaskLane.BACKLOG) == ["b"]
    assert board.lanes[TaskLane.DONE][0].lane is TaskLane.DONE
    assert board._gateway.updates == [("a", TaskLane.DONE)]


def test_random_moves_never_lose_or_duplicate_tasks():
    lanes = list(TaskLane)
    tasks = [_task(f"t{i}", lane=lanes[i % 3], age_minutes=i) for i in range(9)]
    board = _board(tasks)
    rng = random.Random(7)

    async def scenario():
        commits = []
        for _ in range(40):
            from_lane = rng.choice([lane for lane in lanes if board.lanes[lane]])
            from_index = rng.randrange(len(board.lanes[from_lane]))
            to_lane = rng.choice(lanes)
            limit = len(board.lanes[to_lane]) - (1 if to_lane == from_lane else 0)
            to_index = rng.randint(0, limit)
            task_id = board.lanes[from_lane][from_index].id
            commit = board.move_task(task_id, from_lane, from_index, to_lane, to_index)
            if commit is not None:
                commits.append(commit)
            assert board.task_count == 9
        await asyncio.gather(*commits)

    asyncio.run(scenario())
    all_ids = sorted(task.id for lane in lanes for task in board.lanes[lane])
    assert all_ids == sorted(task.id for task in tasks)


def test_noop_move_changes_nothing():
    board = _board([_task("a"), _task("b", age_minutes=1), _task("c", age_minutes=2)])
    before = {lane: list(tasks) for lane, tasks in board.lanes.items()}

    async def scenario():
        return board.move_task("b", TaskLane.BACKLOG, 1, TaskLane.BACKLOG, 1)

    assert asyncio.run(scenario()) is None
    assert board.lanes == before
    assert board._gateway.updates == []


def test_reorder_within_lane():
    board = _board([_task("a"), _task("b", age_minutes=1), _task("c", age_minutes=2)])

    async def scenario():
        await board.move_task("a", "backlog", 0, "backlog", 2)

    asyncio.run(scenario())
    assert _ids(board, TaskLane.BACKLOG) == ["b", "c", "a"]


def test_invalid_move_is_rejected():
    board = _board([_task("a")])

    async def scenario():
        with pytest.raises(ValueError):
            board.move_task("a", TaskLane.BACKLOG, 3, TaskLane.DONE, 0)
        with pytest.raises(ValueError):
            board.move_task("other", TaskLane.BACKLOG, 0, TaskLane.DONE, 0)
        with pytest.raises(ValueError):
            board.move_task("a", TaskLane.BACKLOG, 0, TaskLane.DONE, 1)

    asyncio.run(scenario())
    assert _ids(board, TaskLane.BACKLOG) == ["a"]


def test_failed_update_resyncs_with_server():
    board = _board(
        [
            _task("a"),
            _task("b", lane=TaskLane.IN_PROGRESS, age_minutes=1),
            _task("c", lane=TaskLane.DONE, age_minutes=2),
        ]
    )
    board._gateway.fail_updates = True

    async def scenario():
        first = board.move_task("a", TaskLane.BACKLOG, 0, TaskLane.DONE, 0)
        second = board.move_task("b", TaskLane.IN_PROGRESS, 0, TaskLane.BACKLOG, 0)
        return await asyncio.gather(first, second)

    assert asyncio.run(scenario()) == [False, False]
    assert asyncio.run(board.load_tasks())

    server = {task.id: task.lane for task in board._gateway.tasks.values()}
    local = {task.id: lane for lane, tasks in board.lanes.items() for task in tasks}
    assert local == server
    assert all(task.lane is lane for lane, tasks in board.lanes.items() for task in tasks)


def test_priority_sort_descending():
    priorities = [TaskPriority.LOW, TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW, TaskPriority.HIGH]
    board = _board([_task(f"t{i}", priority=p, age_minutes=i) for i, p in enumerate(priorities)])

    view = board.apply_sort(SortOption.PRIORITY, SortDirection.DESC)

    assert [task.priority.value for task in view[TaskLane.BACKLOG]] == ["high", "high", "medium", "low", "low"]
    # the underlying lanes keep load order
    assert _ids(board, TaskLane.BACKLOG) == ["t0", "t1", "t2", "t3", "t4"]


def test_due_date_sort_puts_undated_last_in_both_directions():
    board = _board(
        [
            _task("none", age_minutes=0),
            _task("late", due_date=date(2026, 4, 1), age_minutes=1),
            _task("soon", due_date=date(2026, 3, 1), age_minutes=2),
        ]
    )

    ascending = board.apply_sort("due_date", "asc")[TaskLane.BACKLOG]
    descending = board.apply_sort("due_date", "desc")[TaskLane.BACKLOG]

    assert [task.id for task in ascending] == ["soon", "late", "none"]
    assert [task.id for task in descending] == ["late", "soon", "none"]


def test_title_sort():
    board = _board([_task("1", title="Write docs"), _task("2", title="Fix bug", age_minutes=1)])

    view = board.apply_sort(SortOption.TITLE, SortDirection.ASC)

    assert [task.title for task in view[TaskLane.BACKLOG]] == ["Fix bug", "Write docs"]


def test_overdue_filter_excludes_undated_and_future_tasks():
    board = _board(
        [
            _task("past", due_date=date(2026, 3, 9)),
            _task("today", due_date=date(2026, 3, 10), age_minutes=1),
            _task("future", due_date=date(2026, 3, 11), age_minutes=2),
            _task("undated", age_minutes=3),
        ]
    )
    board.filter_option = FilterOption.OVERDUE

    view = board.view(now=NOW)

    # midnight today is already behind noon
    assert [task.id for task in view[TaskLane.BACKLOG]] == ["past", "today"]


def test_assignment_filters():
    board = _board([_task("mine", assigned_to="user-1"), _task("free", age_minutes=1)])

    assigned = board.apply_filter("assigned")[TaskLane.BACKLOG]
    unassigned = board.apply_filter(FilterOption.UNASSIGNED)[TaskLane.BACKLOG]
    everything = board.apply_filter(FilterOption.ALL)[TaskLane.BACKLOG]

    assert [task.id for task in assigned] == ["mine"]
    assert [task.id for task in unassigned] == ["free"]
    assert len(everything) == 2


def test_data_service_gateway_round_trip(owner, project):
    created = create_task(owner, project.id, "Draft announcement")
    assert created.success
    board = BoardStateManager(DataServiceTaskGateway(owner), project.id)

    async def scenario():
        assert await board.load_tasks()
        return await board.move_task(created.data.id, TaskLane.BACKLOG, 0, TaskLane.IN_PROGRESS, 0)

    assert asyncio.run(scenario()) is True
    row = owner.table("tasks").eq("id", created.data.id).single()
    assert row["lane"] == "in_progress"


def test_data_service_gateway_rejects_outsider(owner, project, sign_in):
    created = create_task(owner, project.id, "Private task")
    outsider = sign_in("outsider@example.com")
    gateway = DataServiceTaskGateway(outsider)

    with pytest.raises(DataServiceError):
        asyncio.run(gateway.update_task_lane(created.data.id, TaskLane.DONE))
    assert asyncio.run(gateway.fetch_tasks(project.id)) == []
