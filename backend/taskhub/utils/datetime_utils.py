"""
Timezone-aware datetime utilities.

Timestamps are stored in UTC. Calendar dates (due dates, recurrence dates)
carry no time-of-day and no timezone.
"""

from datetime import date, datetime, timezone

# UTC timezone constant
UTC = timezone.utc


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Replaces datetime.utcnow() which is deprecated in Python 3.12+.
    """
    return datetime.now(UTC)


def today_utc() -> date:
    """Get today's calendar date in UTC."""
    return now_utc().date()
