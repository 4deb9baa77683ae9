"""
Shared fixtures for the court deadline tests
"""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from court_deadlines.core import DeadlineEngine, HolidayCalendar, default_catalog

CALIFORNIA_2025 = [
    '2025-01-01',
    '2025-01-20',
    '2025-02-17',
    '2025-05-26',
    '2025-07-04',
    '2025-09-01',
    '2025-11-11',
    '2025-11-27',
    '2025-11-28',
    '2025-12-25',
]


@pytest.fixture
def calendar_2025():
    return HolidayCalendar(CALIFORNIA_2025, jurisdiction="california", years=[2025])


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def engine(catalog, calendar_2025):
    return DeadlineEngine(catalog, calendar_2025)
