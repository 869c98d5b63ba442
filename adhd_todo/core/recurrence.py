"""
Recurrence calculation for recurring tasks.

Pure functions: given the current due date and a recurrence pattern, compute
the next due date, or a bounded list of upcoming due dates. Nothing here
touches the database.

Weekdays follow the client convention of ``0 = Sunday ... 6 = Saturday``.
Month and year steps clamp to the end of shorter months (Jan 31 + 1 month is
Feb 28/29), and time of day is always preserved.
"""

from __future__ import annotations

import calendar
import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from adhd_todo.core.errors import InvalidRecurrenceError, OccurrenceOutOfRangeError
from adhd_todo.core.logging_config import get_logger
from adhd_todo.core.models.domain.enums import RecurrenceFrequency

logger = get_logger(__name__)

DaysOfWeek = Union[str, Sequence[int], None]


@dataclass(frozen=True)
class RecurrencePattern:
    """Recurrence fields shared by schedules and preview requests."""

    frequency: RecurrenceFrequency = RecurrenceFrequency.daily
    interval: int = 1
    days_of_week: DaysOfWeek = None
    day_of_month: Optional[int] = None
    month_of_year: Optional[int] = None


def parse_days_of_week(days_of_week: DaysOfWeek) -> List[int]:
    """Normalise ``days_of_week`` into a sorted, de-duplicated list.

    Accepts the stored JSON text form (``"[1,3,5]"``) or an iterable of ints.

    Raises:
        InvalidRecurrenceError: if the value cannot be read as weekdays 0..6.
    """
    if days_of_week is None or days_of_week == "":
        return []
    raw: Iterable
    if isinstance(days_of_week, str):
        try:
            raw = json.loads(days_of_week)
        except json.JSONDecodeError as e:
            raise InvalidRecurrenceError(f"days_of_week is not valid JSON: {days_of_week!r}") from e
        if not isinstance(raw, list):
            raise InvalidRecurrenceError(f"days_of_week must be a list, got {days_of_week!r}")
    else:
        raw = days_of_week
    days = set()
    for day in raw:
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise InvalidRecurrenceError(f"days_of_week entries must be integers 0..6, got {day!r}")
        days.add(day)
    return sorted(days)


def _last_day(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _sunday_based_weekday(value: datetime) -> int:
    # datetime.weekday() is Monday = 0
    return (value.weekday() + 1) % 7


def _next_weekly(current: datetime, interval: int, days_of_week: DaysOfWeek) -> datetime:
    try:
        days = parse_days_of_week(days_of_week)
    except InvalidRecurrenceError as e:
        logger.warning(f"Falling back to plain weekly recurrence: {e}")
        days = []

    if not days:
        return current + timedelta(weeks=interval)

    current_day = _sunday_based_weekday(current)
    later_this_week = [day for day in days if day > current_day]
    if later_this_week:
        return current + timedelta(days=later_this_week[0] - current_day)
    return current + timedelta(days=(7 - current_day) + days[0] + (interval - 1) * 7)


def calculate_next_occurrence(
    current: datetime,
    frequency: RecurrenceFrequency | str,
    interval: int = 1,
    days_of_week: DaysOfWeek = None,
    day_of_month: Optional[int] = None,
    month_of_year: Optional[int] = None,
) -> datetime:
    """Compute the due date following ``current``.

    Args:
        current: The current (last) due date.
        frequency: DAILY, WEEKLY, MONTHLY, YEARLY or CUSTOM.
        interval: Step size in units of the frequency; must be at least 1.
        days_of_week: WEEKLY only. Weekdays (0 = Sunday) to land on.
        day_of_month: MONTHLY/YEARLY. Day to land on, clamped to the month length.
        month_of_year: YEARLY only. Month (1..12) to land in.

    Returns:
        The next occurrence, strictly after ``current``.

    Raises:
        InvalidRecurrenceError: for an interval below 1, an out-of-range day/month,
            or a next occurrence past the last representable date.
    """
    frequency = RecurrenceFrequency(frequency)
    if interval is None or interval < 1:
        raise InvalidRecurrenceError(f"interval must be >= 1, got {interval!r}")
    if day_of_month is not None and not 1 <= day_of_month <= 31:
        raise InvalidRecurrenceError(f"day_of_month must be in 1..31, got {day_of_month!r}")
    if month_of_year is not None and not 1 <= month_of_year <= 12:
        raise InvalidRecurrenceError(f"month_of_year must be in 1..12, got {month_of_year!r}")

    try:
        return _step(current, frequency, interval, days_of_week, day_of_month, month_of_year)
    except (OverflowError, ValueError) as e:
        raise OccurrenceOutOfRangeError(f"next occurrence is out of range after {current.isoformat()}") from e


def _step(
    current: datetime,
    frequency: RecurrenceFrequency,
    interval: int,
    days_of_week: DaysOfWeek,
    day_of_month: Optional[int],
    month_of_year: Optional[int],
) -> datetime:
    if frequency in (RecurrenceFrequency.daily, RecurrenceFrequency.custom):
        return current + timedelta(days=interval)

    if frequency is RecurrenceFrequency.weekly:
        return _next_weekly(current, interval, days_of_week)

    if frequency is RecurrenceFrequency.monthly:
        next_date = current + relativedelta(months=interval)
        if day_of_month:
            next_date = next_date.replace(day=min(day_of_month, _last_day(next_date.year, next_date.month)))
        return next_date

    # YEARLY
    next_date = current + relativedelta(years=interval)
    if month_of_year:
        day = day_of_month or next_date.day
        next_date = next_date.replace(
            month=month_of_year,
            day=min(day, _last_day(next_date.year, month_of_year)),
        )
    return next_date


def generate_occurrences(
    start: datetime,
    pattern: RecurrencePattern,
    count: int = 5,
    end_date: Optional[datetime] = None,
    stop_at_calendar_end: bool = False,
) -> List[datetime]:
    """List upcoming occurrences after ``start``.

    ``start`` itself is never included. Generation stops after ``count``
    results or at the first occurrence later than ``end_date``.

    With ``stop_at_calendar_end`` an occurrence past year 9999 ends the list
    instead of raising ``OccurrenceOutOfRangeError``.
    """
    occurrences: List[datetime] = []
    current = start
    for _ in range(max(count, 0)):
        try:
            next_date = calculate_next_occurrence(
                current,
                pattern.frequency,
                pattern.interval,
                pattern.days_of_week,
                pattern.day_of_month,
                pattern.month_of_year,
            )
        except OccurrenceOutOfRangeError:
            if stop_at_calendar_end:
                break
            raise
        if end_date is not None and next_date > end_date:
            break
        occurrences.append(next_date)
        current = next_date
    return occurrences
