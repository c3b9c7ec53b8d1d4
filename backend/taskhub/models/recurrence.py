"""
Recurrence models.

A recurrence rule describes how often a task repeats and when it stops.
Rules are immutable; a recurrence record persists one rule together with
its bookkeeping and owns the task instances generated from it.
"""

from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from taskhub.models.enums import RecurrenceEndType, RecurrenceType
from taskhub.models.task import Task


class NeverEnd(BaseModel):
    """The series never ends on its own; only the instance cap stops it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["never"] = "never"


class AfterCountEnd(BaseModel):
    """The series stops after ``count`` occurrences, anchor included."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["after_count"] = "after_count"
    count: int = Field(..., ge=1)


class OnDateEnd(BaseModel):
    """Occurrences must fall strictly before ``end_date`` (anchor excepted)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["on_date"] = "on_date"
    end_date: date


EndCondition = Annotated[
    Union[NeverEnd, AfterCountEnd, OnDateEnd], Field(discriminator="kind")
]


class RecurrenceRule(BaseModel):
    """Canonical recurrence rule."""

    model_config = ConfigDict(frozen=True)

    type: RecurrenceType = RecurrenceType.DAILY
    interval: int = Field(1, ge=1, description="Units of `type` between occurrences")
    end_condition: EndCondition = Field(default_factory=NeverEnd)
    weekly_days: Optional[tuple[int, ...]] = Field(
        None, description="0=Sunday ... 6=Saturday, for WEEKLY"
    )

    @field_validator("weekly_days")
    @classmethod
    def _normalize_weekly_days(cls, value: Optional[tuple[int, ...]]) -> Optional[tuple[int, ...]]:
        if not value:
            return None
        for day in value:
            if not 0 <= day <= 6:
                raise ValueError(f"weekly day {day} is outside 0..6")
        return tuple(sorted(set(value)))

    @property
    def end_type(self) -> RecurrenceEndType:
        return RecurrenceEndType(self.end_condition.kind)

    @property
    def fans_out_weekly(self) -> bool:
        """True when each qualifying week expands to every listed weekday."""
        return self.type == RecurrenceType.WEEKLY and bool(self.weekly_days)


class RecurrenceRecord(BaseModel):
    """Persisted recurrence with bookkeeping."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    workspace_id: int
    rule: RecurrenceRule
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class RecurrenceRecordUpdate(BaseModel):
    """Bookkeeping fields that may change after creation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_active: Optional[bool] = None


class RecurringTaskCreateResult(BaseModel):
    """Outcome of creating a recurring task series."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    created_count: int
    tasks: list[Task]
    recurrence: RecurrenceRecord
    capped: bool = Field(
        False, description="Series reached the instance cap before its end condition"
    )


class RecurrenceDeleteResult(BaseModel):
    """Outcome of deleting a recurrence."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    deleted_future_count: int = 0
    total_series_size: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def message(self) -> str:
        return (
            f"Task recurrence and {self.deleted_future_count} future tasks deleted "
            f"({self.total_series_size} in series)"
        )
