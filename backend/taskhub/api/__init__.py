"""API routers."""

from taskhub.api import task_recurrences, tasks

__all__ = [
    "tasks",
    "task_recurrences",
]
