"""
Enum definitions shared across models.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Task status."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class RecurrenceType(str, Enum):
    """Unit of a recurrence period."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"  # every N days


class RecurrenceEndType(str, Enum):
    """How a recurring series stops."""

    NEVER = "never"
    AFTER_COUNT = "after_count"
    ON_DATE = "on_date"
