"""
Recurrence rule normalization.

Turns the loosely-typed recurrence fields of a task form into a canonical
`RecurrenceRule`. Invalid values are rejected here so downstream code only
ever sees valid rules.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from taskhub.core.exceptions import InvalidRuleError
from taskhub.models.enums import RecurrenceEndType, RecurrenceType
from taskhub.models.recurrence import (
    AfterCountEnd,
    EndCondition,
    NeverEnd,
    OnDateEnd,
    RecurrenceRule,
)

MAX_INTERVAL = 1000

# Form field name -> snake_case fallback
_FIELDS = {
    "recurrenceType": "recurrence_type",
    "recurrenceInterval": "recurrence_interval",
    "recurrenceEndType": "recurrence_end_type",
    "recurrenceEndCount": "recurrence_end_count",
    "recurrenceEndDate": "recurrence_end_date",
    "weeklyDays": "weekly_days",
}


def _pick(form_data: Mapping[str, Any], key: str) -> Any:
    value = form_data.get(key)
    if value is None:
        value = form_data.get(_FIELDS[key])
    if value == "":
        return None
    return value


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidRuleError(f"{field} must be an integer", details={field: value})
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRuleError(f"{field} must be an integer", details={field: value}) from exc


def _as_date(value: Any, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise InvalidRuleError(
            f"{field} must be an ISO date (YYYY-MM-DD)", details={field: value}
        ) from exc


def _parse_type(value: Any) -> RecurrenceType:
    if value is None:
        return RecurrenceType.DAILY
    try:
        return RecurrenceType(str(value).lower())
    except ValueError as exc:
        allowed = ", ".join(t.value for t in RecurrenceType)
        raise InvalidRuleError(
            f"Recurrence type must be one of: {allowed}", details={"recurrenceType": value}
        ) from exc


def _parse_interval(value: Any) -> int:
    if value is None:
        return 1
    interval = _as_int(value, "recurrenceInterval")
    if not 1 <= interval <= MAX_INTERVAL:
        raise InvalidRuleError(
            f"Recurrence interval must be between 1 and {MAX_INTERVAL}",
            details={"recurrenceInterval": value},
        )
    return interval


def _parse_end_condition(form_data: Mapping[str, Any]) -> EndCondition:
    raw_end_type = _pick(form_data, "recurrenceEndType")
    if raw_end_type is None:
        return NeverEnd()
    try:
        end_type = RecurrenceEndType(str(raw_end_type).lower())
    except ValueError as exc:
        allowed = ", ".join(t.value for t in RecurrenceEndType)
        raise InvalidRuleError(
            f"Recurrence end type must be one of: {allowed}",
            details={"recurrenceEndType": raw_end_type},
        ) from exc

    if end_type == RecurrenceEndType.NEVER:
        return NeverEnd()

    if end_type == RecurrenceEndType.AFTER_COUNT:
        raw_count = _pick(form_data, "recurrenceEndCount")
        if raw_count is None:
            raise InvalidRuleError("An occurrence count is required for after_count")
        count = _as_int(raw_count, "recurrenceEndCount")
        if count < 1:
            raise InvalidRuleError(
                "Occurrence count must be at least 1", details={"recurrenceEndCount": raw_count}
            )
        return AfterCountEnd(count=count)

    raw_end_date = _pick(form_data, "recurrenceEndDate")
    if raw_end_date is None:
        raise InvalidRuleError("An end date is required for on_date")
    return OnDateEnd(end_date=_as_date(raw_end_date, "recurrenceEndDate"))


def _parse_weekly_days(value: Any) -> Optional[tuple[int, ...]]:
    if not value:
        return None
    if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
        raise InvalidRuleError("weeklyDays must be a list of weekday indices")
    days = []
    for raw_day in value:
        day = _as_int(raw_day, "weeklyDays")
        if not 0 <= day <= 6:
            raise InvalidRuleError(
                "Weekly day indices must be between 0 (Sunday) and 6 (Saturday)",
                details={"weeklyDays": list(value)},
            )
        days.append(day)
    return tuple(days)


def normalize_rule(form_data: Mapping[str, Any], has_recurrence: bool) -> Optional[RecurrenceRule]:
    """
    Build a canonical recurrence rule from form data.

    Defaults: type ``daily``, interval ``1``, end condition ``never``.
    Weekly days are kept only for weekly rules; a weekly rule without them
    repeats on the start date's weekday.

    Args:
        form_data: Form fields, camelCase (``recurrenceType``) or snake_case
        has_recurrence: Whether the form enables recurrence

    Returns:
        The rule, or None when recurrence is disabled

    Raises:
        InvalidRuleError: interval outside 1..MAX_INTERVAL, non-positive count, missing end
            value, unknown type, or a weekday outside 0..6
    """
    if not has_recurrence:
        return None

    rule_type = _parse_type(_pick(form_data, "recurrenceType"))
    interval = _parse_interval(_pick(form_data, "recurrenceInterval"))
    end_condition = _parse_end_condition(form_data)
    weekly_days = _parse_weekly_days(_pick(form_data, "weeklyDays"))
    if rule_type != RecurrenceType.WEEKLY:
        weekly_days = None

    try:
        return RecurrenceRule(
            type=rule_type,
            interval=interval,
            end_condition=end_condition,
            weekly_days=weekly_days,
        )
    except PydanticValidationError as exc:
        raise InvalidRuleError("Invalid recurrence rule", details=exc.errors()) from exc
