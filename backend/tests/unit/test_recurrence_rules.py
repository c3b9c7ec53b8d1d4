"""
Unit tests for recurrence rule normalization.
"""

from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError

from taskhub.core.exceptions import InvalidRuleError, ValidationError
from taskhub.models.enums import RecurrenceEndType, RecurrenceType
from taskhub.models.recurrence import AfterCountEnd, NeverEnd, OnDateEnd, RecurrenceRule
from taskhub.services.recurrence_rules import normalize_rule


def test_disabled_recurrence_returns_none():
    assert normalize_rule({"recurrenceType": "weekly"}, has_recurrence=False) is None


def test_defaults_applied():
    rule = normalize_rule({}, has_recurrence=True)

    assert rule.type == RecurrenceType.DAILY
    assert rule.interval == 1
    assert rule.end_condition == NeverEnd()
    assert rule.weekly_days is None


def test_camel_case_form_fields():
    rule = normalize_rule(
        {
            "recurrenceType": "weekly",
            "recurrenceInterval": 2,
            "recurrenceEndType": "after_count",
            "recurrenceEndCount": 8,
            "weeklyDays": [5, 1, 3, 1],
        },
        has_recurrence=True,
    )

    assert rule.type == RecurrenceType.WEEKLY
    assert rule.interval == 2
    assert rule.end_condition == AfterCountEnd(count=8)
    assert rule.end_type == RecurrenceEndType.AFTER_COUNT
    assert rule.weekly_days == (1, 3, 5)
    assert rule.fans_out_weekly is True


def test_snake_case_form_fields():
    rule = normalize_rule(
        {
            "recurrence_type": "monthly",
            "recurrence_interval": "3",
            "recurrence_end_type": "on_date",
            "recurrence_end_date": "2025-12-31",
        },
        has_recurrence=True,
    )

    assert rule.type == RecurrenceType.MONTHLY
    assert rule.interval == 3
    assert rule.end_condition == OnDateEnd(end_date=date(2025, 12, 31))


def test_end_date_accepts_timestamp_and_date():
    from_timestamp = normalize_rule(
        {"recurrenceEndType": "on_date", "recurrenceEndDate": "2025-06-01T00:00:00.000Z"},
        has_recurrence=True,
    )
    from_date = normalize_rule(
        {"recurrenceEndType": "on_date", "recurrenceEndDate": date(2025, 6, 1)},
        has_recurrence=True,
    )

    assert from_timestamp.end_condition == from_date.end_condition


def test_empty_strings_fall_back_to_defaults():
    rule = normalize_rule(
        {"recurrenceType": "", "recurrenceInterval": "", "recurrenceEndType": ""},
        has_recurrence=True,
    )
    assert rule == RecurrenceRule()


def test_interval_upper_bound_accepted():
    rule = normalize_rule({"recurrenceType": "yearly", "recurrenceInterval": 1000}, has_recurrence=True)
    assert rule.interval == 1000


def test_end_date_accepts_datetime_with_offset():
    rule = normalize_rule(
        {"recurrenceEndType": "on_date", "recurrenceEndDate": "2025-06-01 08:30:00+09:00"},
        has_recurrence=True,
    )
    assert rule.end_condition == OnDateEnd(end_date=date(2025, 6, 1))


def test_weekly_days_dropped_for_other_types():
    rule = normalize_rule({"recurrenceType": "daily", "weeklyDays": [1, 2]}, has_recurrence=True)
    assert rule.weekly_days is None


def test_weekly_without_days_uses_start_weekday():
    rule = normalize_rule({"recurrenceType": "weekly", "weeklyDays": []}, has_recurrence=True)
    assert rule.weekly_days is None
    assert rule.fans_out_weekly is False


@pytest.mark.parametrize("interval", [0, -1, "0", "abc", True, 1001, 10_000_000])
def test_invalid_interval_rejected(interval):
    with pytest.raises(InvalidRuleError):
        normalize_rule({"recurrenceInterval": interval}, has_recurrence=True)


@pytest.mark.parametrize("count", [None, 0, -3, "many"])
def test_invalid_after_count_rejected(count):
    with pytest.raises(InvalidRuleError):
        normalize_rule(
            {"recurrenceEndType": "after_count", "recurrenceEndCount": count},
            has_recurrence=True,
        )


@pytest.mark.parametrize(
    "end_date", [None, "not-a-date", "2025-13-01", "2025-03-20junk", "2025-03-20Tnoon"]
)
def test_invalid_end_date_rejected(end_date):
    with pytest.raises(InvalidRuleError):
        normalize_rule(
            {"recurrenceEndType": "on_date", "recurrenceEndDate": end_date},
            has_recurrence=True,
        )


@pytest.mark.parametrize("weekly_days", [[7], [-1], [1, 9], "135"])
def test_invalid_weekly_days_rejected(weekly_days):
    with pytest.raises(InvalidRuleError):
        normalize_rule({"recurrenceType": "weekly", "weeklyDays": weekly_days}, has_recurrence=True)


def test_unknown_type_and_end_type_rejected():
    with pytest.raises(InvalidRuleError):
        normalize_rule({"recurrenceType": "hourly"}, has_recurrence=True)
    with pytest.raises(InvalidRuleError):
        normalize_rule({"recurrenceEndType": "someday"}, has_recurrence=True)


def test_invalid_rule_error_is_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        normalize_rule({"recurrenceInterval": 0}, has_recurrence=True)
    assert exc_info.value.details == {"recurrenceInterval": 0}


def test_rule_model_enforces_invariants():
    with pytest.raises(PydanticValidationError):
        RecurrenceRule(interval=0)
    with pytest.raises(PydanticValidationError):
        AfterCountEnd(count=0)
    with pytest.raises(PydanticValidationError):
        RecurrenceRule(type=RecurrenceType.WEEKLY, weekly_days=(0, 7))


def test_rule_json_round_trip():
    rule = RecurrenceRule(
        type=RecurrenceType.WEEKLY,
        interval=2,
        end_condition=OnDateEnd(end_date=date(2025, 5, 1)),
        weekly_days=(2, 4),
    )
    assert RecurrenceRule.model_validate(rule.model_dump(mode="json")) == rule
