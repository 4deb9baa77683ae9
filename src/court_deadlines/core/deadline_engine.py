"""
Deadline Engine
Derives every court deadline for a case type from a triggering event date
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Tuple

from .date_arithmetic import apply_offset, next_business_day_on_or_after
from .exceptions import InvalidBaseDate
from .holiday_calendar import HolidayCalendar
from .rule_catalog import CountingUnit, DeadlineRule, RuleCatalog, case_type_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deadline:
    """A computed deadline; created fresh for every computation"""

    rule_name: str
    result_date: date
    description: str
    offset_days: int
    unit: CountingUnit

    @property
    def is_backward(self) -> bool:
        return self.offset_days < 0

    @property
    def offset_summary(self) -> str:
        """Human readable distance from the base date, e.g. '16 days before'"""

        if self.offset_days == 0:
            return ""
        direction = "before" if self.offset_days < 0 else "after"
        return f"{abs(self.offset_days)} days {direction}"

    def to_dict(self) -> Dict:
        return {
            "rule_name": self.rule_name,
            "result_date": self.result_date.isoformat(),
            "description": self.description,
            "offset_days": self.offset_days,
            "unit": self.unit.value
        }


def normalize_base_date(value) -> date:
    """
    Normalize a base date to a calendar date without time of day

    Args:
        value: date, datetime, or ISO 8601 date / datetime string

    Returns:
        datetime.date

    Raises:
        InvalidBaseDate: value cannot be read as a calendar date
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidBaseDate(value, "empty string")

        try:
            return date.fromisoformat(text)
        except ValueError:
            pass

        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError as e:
            raise InvalidBaseDate(value, "expected YYYY-MM-DD") from e

    raise InvalidBaseDate(value, f"unsupported type {type(value).__name__}")


class DeadlineEngine:
    """
    Stateless deadline calculator.
    Rule catalog and holiday calendar are injected, read-only configuration.
    """

    def __init__(self, catalog: RuleCatalog, holiday_calendar: HolidayCalendar):
        """
        Args:
            catalog: Rules per case type
            holiday_calendar: Court holidays for the active jurisdiction
        """

        self.catalog = catalog
        self.holiday_calendar = holiday_calendar

        logger.info(
            f"Deadline engine initialized: {len(catalog)} case types, "
            f"{len(holiday_calendar)} holidays ({holiday_calendar.jurisdiction or 'unnamed'})"
        )

    def compute_deadlines(self, case_type, base_date) -> Tuple[Deadline, ...]:
        """
        Compute every deadline of a case type

        Args:
            case_type: Case-type identifier (str or CaseType)
            base_date: Triggering event date

        Returns:
            Deadlines sorted ascending by date; ties keep catalog order

        Raises:
            UnknownCaseType: case type is not in the catalog
            InvalidBaseDate: base date cannot be normalized
        """

        rule_set = self.catalog.get(case_type)
        base = normalize_base_date(base_date)

        deadlines = [self._evaluate(rule, base) for rule in rule_set.rules]

        # sorted() is stable, so equal dates keep their catalog position
        ordered = tuple(sorted(deadlines, key=lambda d: d.result_date))

        logger.debug(
            f"Computed {len(ordered)} deadlines for {case_type_key(case_type)} from {base.isoformat()}"
        )
        return ordered

    def _evaluate(self, rule: DeadlineRule, base: date) -> Deadline:
        candidate = apply_offset(base, rule.offset_days, rule.unit, self.holiday_calendar)
        landed = next_business_day_on_or_after(candidate, self.holiday_calendar)

        return Deadline(
            rule_name=rule.name,
            result_date=landed,
            description=rule.description,
            offset_days=rule.offset_days,
            unit=rule.unit
        )

    def base_date_label(self, case_type) -> str:
        """Name of the triggering event for a case type (Filing / Hearing / Trial Date)"""

        return self.catalog.get(case_type).base_date_label

    def available_case_types(self) -> List[str]:
        return self.catalog.case_types()
