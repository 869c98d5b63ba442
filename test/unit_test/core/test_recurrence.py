"""
Unit tests for recurrence calculation.

Covers every frequency, weekday selection with the Sunday-based convention,
month-end clamping and the bounded occurrence generator.
"""

from datetime import datetime, timedelta

import pytest

from adhd_todo.core.errors import InvalidRecurrenceError, OccurrenceOutOfRangeError
from adhd_todo.core.models.domain.enums import RecurrenceFrequency
from adhd_todo.core.recurrence import (
    RecurrencePattern,
    calculate_next_occurrence,
    generate_occurrences,
    parse_days_of_week,
)

# 2024-01-01 is a Monday
MONDAY = datetime(2024, 1, 1, 9, 30)
FRIDAY = datetime(2024, 1, 5, 9, 30)


class TestParseDaysOfWeek:
    """Test normalisation of the days_of_week field."""

    def test_json_text_is_sorted_and_deduplicated(self):
        assert parse_days_of_week("[5, 1, 1, 3]") == [1, 3, 5]

    def test_sequence_is_accepted(self):
        assert parse_days_of_week([6, 0]) == [0, 6]

    @pytest.mark.parametrize("value", [None, "", "[]", []])
    def test_empty_values(self, value):
        assert parse_days_of_week(value) == []

    @pytest.mark.parametrize("value", ["not json", '{"a": 1}', "[7]", [-1], [True], ["1"]])
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidRecurrenceError):
            parse_days_of_week(value)


class TestCalculateNextOccurrence:
    """Test the next due date for each frequency."""

    def test_daily(self):
        assert calculate_next_occurrence(MONDAY, RecurrenceFrequency.daily) == MONDAY + timedelta(days=1)

    def test_daily_with_interval(self):
        assert calculate_next_occurrence(MONDAY, "DAILY", interval=3) == datetime(2024, 1, 4, 9, 30)

    def test_custom_counts_days(self):
        assert calculate_next_occurrence(MONDAY, RecurrenceFrequency.custom, interval=10) == datetime(2024, 1, 11, 9, 30)

    def test_weekly_without_days_adds_weeks(self):
        assert calculate_next_occurrence(MONDAY, RecurrenceFrequency.weekly, interval=2) == datetime(2024, 1, 15, 9, 30)

    def test_weekly_moves_to_next_selected_day_in_same_week(self):
        result = calculate_next_occurrence(MONDAY, RecurrenceFrequency.weekly, days_of_week=[1, 3, 5])
        assert result == datetime(2024, 1, 3, 9, 30)

    def test_weekly_wraps_to_first_day_of_next_week(self):
        result = calculate_next_occurrence(FRIDAY, RecurrenceFrequency.weekly, days_of_week="[1,3,5]")
        assert result == datetime(2024, 1, 8, 9, 30)

    def test_weekly_wrap_honours_interval(self):
        result = calculate_next_occurrence(FRIDAY, RecurrenceFrequency.weekly, interval=2, days_of_week=[1, 3, 5])
        assert result == datetime(2024, 1, 15, 9, 30)

    def test_weekly_sunday_is_day_zero(self):
        saturday = datetime(2024, 1, 6, 8, 0)
        result = calculate_next_occurrence(saturday, RecurrenceFrequency.weekly, days_of_week=[0])
        assert result == datetime(2024, 1, 7, 8, 0)

    def test_weekly_with_malformed_days_falls_back_to_plain_weeks(self):
        result = calculate_next_occurrence(MONDAY, RecurrenceFrequency.weekly, days_of_week="oops")
        assert result == MONDAY + timedelta(weeks=1)

    def test_monthly_clamps_to_month_end(self):
        result = calculate_next_occurrence(datetime(2024, 1, 31, 7, 0), RecurrenceFrequency.monthly)
        assert result == datetime(2024, 2, 29, 7, 0)

    def test_monthly_day_of_month_anchor(self):
        result = calculate_next_occurrence(datetime(2024, 1, 15), RecurrenceFrequency.monthly, day_of_month=31)
        assert result == datetime(2024, 2, 29)

    def test_monthly_interval(self):
        result = calculate_next_occurrence(datetime(2024, 1, 10), RecurrenceFrequency.monthly, interval=3)
        assert result == datetime(2024, 4, 10)

    def test_yearly_leap_day(self):
        result = calculate_next_occurrence(datetime(2024, 2, 29), RecurrenceFrequency.yearly)
        assert result == datetime(2025, 2, 28)

    def test_yearly_month_and_day_anchor(self):
        result = calculate_next_occurrence(
            datetime(2024, 1, 10, 12, 0), RecurrenceFrequency.yearly, day_of_month=15, month_of_year=3
        )
        assert result == datetime(2025, 3, 15, 12, 0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"interval": 0},
            {"interval": -2},
            {"day_of_month": 32},
            {"day_of_month": 0},
            {"month_of_year": 13},
        ],
    )
    def test_invalid_pattern_raises(self, kwargs):
        with pytest.raises(InvalidRecurrenceError):
            calculate_next_occurrence(MONDAY, RecurrenceFrequency.monthly, **kwargs)

    def test_unknown_frequency_raises_value_error(self):
        with pytest.raises(ValueError):
            calculate_next_occurrence(MONDAY, "HOURLY")

    @pytest.mark.parametrize(
        "frequency, current",
        [
            (RecurrenceFrequency.daily, datetime(9999, 12, 31, 9, 0)),
            (RecurrenceFrequency.weekly, datetime(9999, 12, 27, 9, 0)),
            (RecurrenceFrequency.monthly, datetime(9999, 12, 15, 9, 0)),
            (RecurrenceFrequency.yearly, datetime(9999, 6, 1, 9, 0)),
        ],
    )
    def test_past_the_calendar_end_raises(self, frequency, current):
        with pytest.raises(OccurrenceOutOfRangeError, match="out of range"):
            calculate_next_occurrence(current, frequency)

    def test_out_of_range_is_an_invalid_recurrence(self):
        assert issubclass(OccurrenceOutOfRangeError, InvalidRecurrenceError)


class TestGenerateOccurrences:
    """Test the bounded list of upcoming occurrences."""

    def test_start_is_excluded(self):
        result = generate_occurrences(MONDAY, RecurrencePattern(), count=3)
        assert result == [MONDAY + timedelta(days=n) for n in (1, 2, 3)]

    def test_stops_at_end_date(self):
        result = generate_occurrences(MONDAY, RecurrencePattern(), count=10, end_date=MONDAY + timedelta(days=2))
        assert result == [MONDAY + timedelta(days=1), MONDAY + timedelta(days=2)]

    def test_weekly_pattern_is_followed(self):
        pattern = RecurrencePattern(frequency=RecurrenceFrequency.weekly, days_of_week=[1, 5])
        result = generate_occurrences(MONDAY, pattern, count=3)
        assert [d.day for d in result] == [5, 8, 12]

    def test_zero_count(self):
        assert generate_occurrences(MONDAY, RecurrencePattern(), count=0) == []

    def test_calendar_end_raises_by_default(self):
        with pytest.raises(OccurrenceOutOfRangeError):
            generate_occurrences(datetime(9999, 12, 30, 9, 0), RecurrencePattern(), count=3)

    def test_calendar_end_can_stop_the_list(self):
        result = generate_occurrences(
            datetime(9999, 12, 30, 9, 0), RecurrencePattern(), count=3, stop_at_calendar_end=True
        )
        assert result == [datetime(9999, 12, 31, 9, 0)]

    def test_calendar_end_does_not_hide_invalid_patterns(self):
        with pytest.raises(InvalidRecurrenceError):
            generate_occurrences(MONDAY, RecurrencePattern(interval=0), stop_at_calendar_end=True)
