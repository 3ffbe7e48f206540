"""Kanban board state and views."""
from zippyboards.board.gateway import DataServiceTaskGateway, TaskGateway
from zippyboards.board.state import LANES, BoardStateManager, partition
from zippyboards.board.view import FilterOption, SortDirection, SortOption, build_view

__all__ = [
    "BoardStateManager",
    "DataServiceTaskGateway",
    "FilterOption",
    "LANES",
    "SortDirection",
    "SortOption",
    "TaskGateway",
    "build_view",
    "partition",
]
