"""
Date Arithmetic
Calendar-day and business-day stepping used by the deadline engine
"""

from datetime import date, timedelta

from .holiday_calendar import HolidayCalendar
from .rule_catalog import CountingUnit

ONE_DAY = timedelta(days=1)


def add_calendar_days(base: date, offset_days: int) -> date:
    """Plain calendar arithmetic; offset may be negative"""

    return base + timedelta(days=offset_days)


def step_business_days(base: date, offset_days: int, calendar: HolidayCalendar) -> date:
    """
    Step one calendar day at a time in the direction of the offset sign,
    counting only days that are neither weekends nor holidays

    Args:
        base: Date counting starts from (never counted itself)
        offset_days: Signed number of business days
        calendar: Holidays to skip

    Returns:
        The date on which the count reached abs(offset_days)
    """

    if offset_days == 0:
        return base

    step = ONE_DAY if offset_days > 0 else -ONE_DAY
    target = abs(offset_days)
    current = base
    counted = 0

    while counted < target:
        current += step

        if calendar.is_business_day(current):
            counted += 1

    return current


def next_business_day_on_or_after(candidate: date, calendar: HolidayCalendar) -> date:
    """
    Landing-date adjustment: move forward off weekends, then off a holiday,
    and re-check the weekend until the date is a business day
    """

    current = candidate

    while True:
        while calendar.is_weekend(current):
            current += ONE_DAY

        if not calendar.is_holiday(current):
            return current

        current += ONE_DAY


def apply_offset(base: date, offset_days: int, unit: CountingUnit, calendar: HolidayCalendar) -> date:
    """Raw candidate date for a rule, before landing-date adjustment"""

    if unit is CountingUnit.BUSINESS:
        return step_business_days(base, offset_days, calendar)

    return add_calendar_days(base, offset_days)
