"""Filtering and sorting of board lanes.

Everything here is pure: lanes go in, a new mapping comes out.
"""
import enum
from datetime import datetime
from functools import cmp_to_key
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from zippyboards.models.task import TaskLane, TaskPriority
from zippyboards.schemas.task import TaskResponse
from zippyboards.utils.timestamps import ensure_aware, start_of_day, utcnow


class FilterOption(str, enum.Enum):
    ALL = "all"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    OVERDUE = "overdue"


class SortOption(str, enum.Enum):
    CREATED_AT = "created_at"
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    TITLE = "title"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


PRIORITY_RANK: Dict[TaskPriority, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


def _cmp(left, right) -> int:
    return (left > right) - (left < right)


def is_overdue(task: TaskResponse, now: datetime) -> bool:
    return task.due_date is not None and start_of_day(task.due_date) < now


def matches_filter(task: TaskResponse, option: FilterOption, now: datetime) -> bool:
    if option is FilterOption.ALL:
        return True
    if option is FilterOption.ASSIGNED:
        return task.assigned_to is not None
    if option is FilterOption.UNASSIGNED:
        return task.assigned_to is None
    if option is FilterOption.OVERDUE:
        return is_overdue(task, now)
    raise ValueError(f"Unknown filter option: {option!r}")


def _comparator(option: SortOption, sign: int) -> Callable[[TaskResponse, TaskResponse], int]:
    if option is SortOption.PRIORITY:
        return lambda a, b: sign * _cmp(PRIORITY_RANK[a.priority], PRIORITY_RANK[b.priority])
    if option is SortOption.TITLE:
        return lambda a, b: sign * _cmp(a.title, b.title)
    if option is SortOption.CREATED_AT:
        return lambda a, b: sign * _cmp(ensure_aware(a.created_at), ensure_aware(b.created_at))
    if option is SortOption.DUE_DATE:
        def compare_due(a: TaskResponse, b: TaskResponse) -> int:
            # undated tasks go last in either direction
            if a.due_date is None or b.due_date is None:
                return _cmp(a.due_date is None, b.due_date is None)
            return sign * _cmp(a.due_date, b.due_date)

        return compare_due
    raise ValueError(f"Unknown sort option: {option!r}")


def sort_tasks(tasks: Iterable[TaskResponse], option: SortOption, direction: SortDirection) -> List[TaskResponse]:
    sign = 1 if direction is SortDirection.ASC else -1
    return sorted(tasks, key=cmp_to_key(_comparator(option, sign)))


def build_view(
    lanes: Mapping[TaskLane, List[TaskResponse]],
    filter_option: FilterOption = FilterOption.ALL,
    sort_option: SortOption = SortOption.CREATED_AT,
    direction: SortDirection = SortDirection.DESC,
    now: Optional[datetime] = None,
) -> Dict[TaskLane, List[TaskResponse]]:
    now = now or utcnow()
    return {
        lane: sort_tasks(
            (task for task in tasks if matches_filter(task, filter_option, now)),
            sort_option,
            direction,
        )
        for lane, tasks in lanes.items()
    }
