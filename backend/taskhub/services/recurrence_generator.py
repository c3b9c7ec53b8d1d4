"""
Recurring task instance generator.

Expands a recurrence rule from a start date into an ordered, bounded
sequence of dated task instances. Pure computation: no I/O, no clock.

Month arithmetic convention: adding N months keeps the day of month and
clamps it to the last day of the target month (Jan 31 + 1 month is
Feb 28, or Feb 29 in a leap year; Feb 29 + 1 year is Feb 28). The cursor
carries the clamped day forward, so a series started on Jan 31 continues
Feb 28, Mar 28, Apr 28, ...
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from itertools import islice
from typing import Iterator, Optional

from taskhub.models.enums import RecurrenceType
from taskhub.models.recurrence import AfterCountEnd, OnDateEnd, RecurrenceRule
from taskhub.models.task import GeneratedInstance, TaskTemplate

DEFAULT_MAX_INSTANCES = 50


def add_months(current: date, months: int) -> date:
    """Add months, clamping the day to the target month's length."""
    month_index = current.year * 12 + current.month - 1 + months
    year, month = divmod(month_index, 12)
    month += 1
    max_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(current.day, max_day))


def sunday_weekday(value: date) -> int:
    """Weekday index with 0=Sunday ... 6=Saturday."""
    return (value.weekday() + 1) % 7


def week_start(value: date) -> date:
    """Sunday of the week containing the date."""
    return value - timedelta(days=sunday_weekday(value))


def advance(current: date, rule: RecurrenceRule) -> date:
    """Move the cursor forward by one rule period."""
    if rule.type == RecurrenceType.WEEKLY:
        return current + timedelta(weeks=rule.interval)
    if rule.type == RecurrenceType.MONTHLY:
        return add_months(current, rule.interval)
    if rule.type == RecurrenceType.YEARLY:
        return add_months(current, 12 * rule.interval)
    # DAILY, CUSTOM: day-granularity interval
    return current + timedelta(days=rule.interval)


def _end_allows(rule: RecurrenceRule, candidate: date, count: int) -> bool:
    end = rule.end_condition
    if isinstance(end, AfterCountEnd):
        return count < end.count
    if isinstance(end, OnDateEnd):
        return candidate < end.end_date
    return True


def should_continue(rule: RecurrenceRule, candidate: date, count: int, max_instances: int) -> bool:
    """Continuation predicate for the next candidate, given `count` emitted so far."""
    return count < max_instances and _end_allows(rule, candidate, count)


def iter_occurrence_dates(
    start_date: date, rule: RecurrenceRule, max_instances: int = DEFAULT_MAX_INSTANCES
) -> Iterator[date]:
    """
    Yield occurrence dates in strictly increasing order.

    The start date is always yielded first. Each further step advances the
    cursor one period; weekly rules with weekly days expand the cursor's
    week (Sunday-based) into every listed weekday. The end condition is
    checked against each candidate before it is yielded, and iteration
    stops once `max_instances` dates were produced or the next period
    would fall past ``date.max``.
    """
    yield start_date
    count = 1
    cursor = start_date
    last = start_date

    while True:
        try:
            cursor = advance(cursor, rule)
        except (OverflowError, ValueError):
            # Next period lies beyond date.max
            return
        if not should_continue(rule, cursor, count, max_instances):
            return

        if rule.fans_out_weekly:
            sunday = week_start(cursor)
            for day in rule.weekly_days:
                try:
                    candidate = sunday + timedelta(days=day)
                except OverflowError:
                    return
                if candidate <= last:
                    continue
                if not should_continue(rule, candidate, count, max_instances):
                    continue
                yield candidate
                count += 1
                last = candidate
        else:
            yield cursor
            count += 1
            last = cursor


def generate(
    template: TaskTemplate,
    start_date: date,
    rule: RecurrenceRule,
    max_instances: int = DEFAULT_MAX_INSTANCES,
    recurrence_id: Optional[int] = None,
) -> list[GeneratedInstance]:
    """
    Expand a rule into dated task instances.

    Args:
        template: Fields copied onto every instance
        start_date: Due date of the anchor instance
        rule: Canonical recurrence rule
        max_instances: Hard cap on instances, anchor included
        recurrence_id: Owning recurrence, stamped on every instance

    Returns:
        Instances ordered by due date, at most `max_instances` long
    """
    if max_instances < 1:
        raise ValueError("max_instances must be at least 1")

    fields = template.model_dump()
    dates = islice(iter_occurrence_dates(start_date, rule, max_instances), max_instances)
    return [
        GeneratedInstance(**fields, due_date=due_date, recurrence_id=recurrence_id)
        for due_date in dates
    ]


def exceeds_cap(start_date: date, rule: RecurrenceRule, max_instances: int) -> bool:
    """True when the rule would produce more than `max_instances` occurrences."""
    probe = iter_occurrence_dates(start_date, rule, max_instances + 1)
    return sum(1 for _ in islice(probe, max_instances + 1)) > max_instances
