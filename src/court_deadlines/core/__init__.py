"""
Core deadline calculation modules
"""

from .exceptions import (
    DeadlineEngineError,
    UnknownCaseType,
    InvalidBaseDate,
    CatalogError,
    HolidayDataError
)
from .holiday_calendar import HolidayCalendar, HolidayCalendarLoader
from .rule_catalog import CaseType, CountingUnit, DeadlineRule, CaseTypeRuleSet, RuleCatalog, default_catalog
from .date_arithmetic import add_calendar_days, step_business_days, next_business_day_on_or_after
from .deadline_engine import Deadline, DeadlineEngine, normalize_base_date

__all__ = [
    'DeadlineEngineError',
    'UnknownCaseType',
    'InvalidBaseDate',
    'CatalogError',
    'HolidayDataError',
    'HolidayCalendar',
    'HolidayCalendarLoader',
    'CaseType',
    'CountingUnit',
    'DeadlineRule',
    'CaseTypeRuleSet',
    'RuleCatalog',
    'default_catalog',
    'add_calendar_days',
    'step_business_days',
    'next_business_day_on_or_after',
    'Deadline',
    'DeadlineEngine',
    'normalize_base_date'
]
