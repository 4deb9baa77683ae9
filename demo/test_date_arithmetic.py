"""
Calendar-day and business-day stepping tests
"""

from datetime import date, timedelta

from court_deadlines.core import (
    HolidayCalendar,
    add_calendar_days,
    next_business_day_on_or_after,
    step_business_days
)


def test_calendar_days_forward_and_backward():
    assert add_calendar_days(date(2025, 9, 5), 30) == date(2025, 10, 5)
    assert add_calendar_days(date(2025, 9, 5), -90) == date(2025, 6, 7)
    assert add_calendar_days(date(2025, 9, 5), 0) == date(2025, 9, 5)


def test_zero_business_days_returns_base_unchanged(calendar_2025):
    saturday = date(2025, 11, 29)
    assert step_business_days(saturday, 0, calendar_2025) == saturday


def test_forward_business_days_skip_weekend_and_holiday(calendar_2025):
    # Friday before Labor Day weekend
    assert step_business_days(date(2025, 8, 29), 1, calendar_2025) == date(2025, 9, 2)
    assert step_business_days(date(2025, 12, 24), 2, calendar_2025) == date(2025, 12, 29)


def test_backward_business_days(calendar_2025):
    assert step_business_days(date(2025, 9, 2), -1, calendar_2025) == date(2025, 8, 29)
    assert step_business_days(date(2025, 9, 5), -16, calendar_2025) == date(2025, 8, 13)


def test_backward_result_strictly_earlier(calendar_2025):
    base = date(2025, 3, 3)
    for offset in range(1, 40):
        assert step_business_days(base, -offset, calendar_2025) < base


def test_exact_number_of_business_days_traversed(calendar_2025):
    base = date(2025, 11, 20)
    for offset in range(1, 30):
        result = step_business_days(base, offset, calendar_2025)

        traversed = [
            base + timedelta(days=i)
            for i in range(1, (result - base).days + 1)
        ]
        counted = [d for d in traversed if calendar_2025.is_business_day(d)]

        assert len(counted) == offset
        assert calendar_2025.is_business_day(result)


def test_holidays_not_counted_when_calendar_empty():
    empty = HolidayCalendar()
    # Labor Day counts as a business day without a holiday calendar
    assert step_business_days(date(2025, 8, 29), 1, empty) == date(2025, 9, 1)


def test_landing_adjustment_moves_off_weekend(calendar_2025):
    assert next_business_day_on_or_after(date(2025, 11, 29), calendar_2025) == date(2025, 12, 1)
    assert next_business_day_on_or_after(date(2025, 6, 8), calendar_2025) == date(2025, 6, 9)


def test_landing_adjustment_holiday_before_weekend(calendar_2025):
    # Thanksgiving + day after, then the weekend
    assert next_business_day_on_or_after(date(2025, 11, 27), calendar_2025) == date(2025, 12, 1)
    # Independence Day on a Friday
    assert next_business_day_on_or_after(date(2025, 7, 4), calendar_2025) == date(2025, 7, 7)


def test_landing_adjustment_keeps_business_day(calendar_2025):
    assert next_business_day_on_or_after(date(2025, 9, 2), calendar_2025) == date(2025, 9, 2)
