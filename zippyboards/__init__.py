"""ZippyBoards: a kanban issue tracker service."""

__version__ = "1.0.0"
