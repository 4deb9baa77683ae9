"""
Deadline Engine Errors
Exception types raised by the deadline engine and its configuration loaders
"""

from typing import Iterable, Optional


class DeadlineEngineError(Exception):
    """Base class for every error raised by the deadline engine"""


class UnknownCaseType(DeadlineEngineError):
    """The case-type identifier has no entry in the rule catalog"""

    def __init__(self, case_type, known_case_types: Optional[Iterable[str]] = None):
        self.case_type = case_type
        self.known_case_types = tuple(known_case_types or ())

        message = f"Unknown case type: {case_type!r}"
        if self.known_case_types:
            message += f" (known: {', '.join(self.known_case_types)})"

        super().__init__(message)


class InvalidBaseDate(DeadlineEngineError):
    """The base date cannot be normalized to a calendar date"""

    def __init__(self, value, reason: str = ""):
        self.value = value
        self.reason = reason

        message = f"Invalid base date: {value!r}"
        if reason:
            message += f" ({reason})"

        super().__init__(message)


class CatalogError(DeadlineEngineError):
    """Rule catalog data is malformed"""


class HolidayDataError(DeadlineEngineError):
    """Holiday configuration data is missing or malformed"""
