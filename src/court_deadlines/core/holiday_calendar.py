"""
Holiday Calendar
Court holiday sets keyed by jurisdiction and year
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import holidays

from .exceptions import HolidayDataError

logger = logging.getLogger(__name__)

DEFAULT_HOLIDAY_FILE = Path(__file__).resolve().parent.parent / "data" / "court_holidays.json"

DateLike = Union[date, datetime, str]

# Saturday = 5, Sunday = 6
WEEKEND_DAYS = frozenset({5, 6})


def _to_date(value: DateLike) -> date:
    """Strip any time-of-day component from a holiday entry"""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) > 10:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            return date.fromisoformat(text)
        except ValueError as e:
            raise HolidayDataError(f"Invalid holiday date: {value!r}") from e

    raise HolidayDataError(f"Unsupported holiday date type: {type(value).__name__}")


class HolidayCalendar:
    """
    Immutable set of non-business dates for a jurisdiction.
    Dates are compared at day granularity.
    """

    __slots__ = ("_dates", "_jurisdiction", "_years")

    def __init__(self,
                 dates: Iterable[DateLike] = (),
                 jurisdiction: str = "",
                 years: Iterable[int] = ()):
        """
        Build a calendar from externally supplied dates

        Args:
            dates: Holiday dates (date, datetime or ISO strings)
            jurisdiction: Jurisdiction the holidays belong to
            years: Years the calendar was built for
        """

        object.__setattr__(self, "_dates", frozenset(_to_date(d) for d in dates))
        object.__setattr__(self, "_jurisdiction", jurisdiction)
        object.__setattr__(self, "_years", tuple(sorted(set(years))))

    def __setattr__(self, name, value):
        raise AttributeError("HolidayCalendar is immutable")

    @classmethod
    def from_holidays_library(cls,
                              country: str = "US",
                              subdiv: Optional[str] = None,
                              years: Iterable[int] = (),
                              jurisdiction: Optional[str] = None) -> "HolidayCalendar":
        """
        Build a calendar from the public holiday tables of the holidays package

        Args:
            country: ISO country code
            subdiv: Optional state / province code (e.g. "CA")
            years: Years to generate
            jurisdiction: Name recorded on the calendar

        Returns:
            HolidayCalendar with the generated dates
        """

        years = list(years)
        generated = holidays.country_holidays(country, subdiv=subdiv, years=years)

        return cls(
            generated.keys(),
            jurisdiction=jurisdiction or (f"{country}-{subdiv}" if subdiv else country),
            years=years
        )

    @property
    def dates(self) -> frozenset:
        return self._dates

    @property
    def jurisdiction(self) -> str:
        return self._jurisdiction

    @property
    def years(self) -> Tuple[int, ...]:
        return self._years

    def is_holiday(self, value: DateLike) -> bool:
        return _to_date(value) in self._dates

    def is_weekend(self, value: DateLike) -> bool:
        return _to_date(value).weekday() in WEEKEND_DAYS

    def is_business_day(self, value: DateLike) -> bool:
        """A business day is neither a weekend day nor a listed holiday"""

        day = _to_date(value)
        return day.weekday() not in WEEKEND_DAYS and day not in self._dates

    def merge(self, other: "HolidayCalendar") -> "HolidayCalendar":
        """Return a new calendar holding the holidays of both calendars"""

        jurisdiction = self._jurisdiction or other.jurisdiction
        if self._jurisdiction and other.jurisdiction and self._jurisdiction != other.jurisdiction:
            jurisdiction = f"{self._jurisdiction}+{other.jurisdiction}"

        return HolidayCalendar(
            self._dates | other.dates,
            jurisdiction=jurisdiction,
            years=self._years + other.years
        )

    def __contains__(self, value) -> bool:
        try:
            return self.is_holiday(value)
        except HolidayDataError:
            return False

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._dates))

    def __len__(self) -> int:
        return len(self._dates)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HolidayCalendar):
            return NotImplemented
        return self._dates == other.dates and self._jurisdiction == other.jurisdiction

    def __hash__(self) -> int:
        return hash((self._dates, self._jurisdiction))

    def __repr__(self) -> str:
        years = ",".join(str(y) for y in self._years) or "-"
        return f"HolidayCalendar(jurisdiction={self._jurisdiction!r}, years={years}, holidays={len(self._dates)})"


class HolidayCalendarLoader:
    """
    Loads versioned court holiday data keyed by jurisdiction and year.

    Expected document shape:

        {
            "version": "2025.1",
            "jurisdictions": {
                "california": {
                    "subdiv": "CA",
                    "years": {"2025": [{"date": "2025-01-01", "name": "New Year's Day"}]}
                }
            }
        }
    """

    def __init__(self,
                 data: Dict,
                 allow_generated: bool = False,
                 source: str = "<memory>"):
        """
        Initialize loader from an already parsed document

        Args:
            data: Parsed holiday document
            allow_generated: Generate years missing from the data with the holidays package
            source: Where the document was read from, for log messages
        """

        if not isinstance(data, dict) or not isinstance(data.get("jurisdictions"), dict):
            raise HolidayDataError(f"Holiday data in {source} has no 'jurisdictions' mapping")

        self.version = str(data.get("version", "unversioned"))
        self.allow_generated = allow_generated
        self.source = source
        self._jurisdictions = {
            name.lower(): self._parse_jurisdiction(name, entry)
            for name, entry in data["jurisdictions"].items()
        }

        logger.info(
            f"Holiday data {self.version} loaded from {source}: "
            f"{', '.join(sorted(self._jurisdictions)) or 'no jurisdictions'}"
        )

    @classmethod
    def from_json_file(cls,
                       path: Optional[Union[str, Path]] = None,
                       allow_generated: bool = False) -> "HolidayCalendarLoader":
        """Load holiday data from a JSON file (bundled data when no path is given)"""

        path = Path(path) if path else DEFAULT_HOLIDAY_FILE

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise HolidayDataError(f"Holiday data file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise HolidayDataError(f"Holiday data file is not valid JSON: {path}: {e}") from e

        return cls(data, allow_generated=allow_generated, source=str(path))

    def _parse_jurisdiction(self, name: str, entry: Dict) -> Dict:
        if not isinstance(entry, dict) or not isinstance(entry.get("years"), dict):
            raise HolidayDataError(f"Jurisdiction {name!r} has no 'years' mapping")

        years = {}
        for year, holidays_list in entry["years"].items():
            try:
                year_number = int(year)
            except ValueError as e:
                raise HolidayDataError(f"Invalid year {year!r} for jurisdiction {name!r}") from e

            parsed = []
            for item in holidays_list:
                if isinstance(item, dict):
                    if "date" not in item:
                        raise HolidayDataError(f"Holiday entry without date in {name!r}/{year}")
                    day = _to_date(item["date"])
                    label = item.get("name", "")
                else:
                    day = _to_date(item)
                    label = ""

                if day.year != year_number:
                    raise HolidayDataError(
                        f"Holiday {day.isoformat()} listed under year {year} for {name!r}"
                    )
                parsed.append((day, label))

            years[year_number] = tuple(sorted(parsed))

        return {
            "country": entry.get("country", "US"),
            "subdiv": entry.get("subdiv"),
            "years": years
        }

    def jurisdictions(self) -> List[str]:
        return sorted(self._jurisdictions)

    def years(self, jurisdiction: str) -> List[int]:
        return sorted(self._get(jurisdiction)["years"])

    def _get(self, jurisdiction: str) -> Dict:
        key = (jurisdiction or "").lower()
        if key not in self._jurisdictions:
            raise HolidayDataError(
                f"No holiday data for jurisdiction {jurisdiction!r} "
                f"(available: {', '.join(self.jurisdictions()) or 'none'})"
            )
        return self._jurisdictions[key]

    def holiday_names(self, jurisdiction: str, year: int) -> List[Tuple[date, str]]:
        """List (date, name) pairs for one jurisdiction/year"""

        entry = self._get(jurisdiction)
        if year in entry["years"]:
            return list(entry["years"][year])

        if self.allow_generated:
            generated = holidays.country_holidays(entry["country"], subdiv=entry["subdiv"], years=[year])
            return sorted(generated.items())

        raise HolidayDataError(f"No holiday data for {jurisdiction!r} in {year}")

    def calendar_for(self, jurisdiction: str, years: Iterable[int]) -> HolidayCalendar:
        """
        Merge the requested years of a jurisdiction into one calendar

        Args:
            jurisdiction: Jurisdiction key (case-insensitive)
            years: Years to include

        Returns:
            HolidayCalendar covering all requested years
        """

        entry = self._get(jurisdiction)
        years = sorted(set(years))
        dates = []

        for year in years:
            if year in entry["years"]:
                dates.extend(day for day, _ in entry["years"][year])
                continue

            if not self.allow_generated:
                raise HolidayDataError(f"No holiday data for {jurisdiction!r} in {year}")

            logger.warning(
                f"No court holiday data for {jurisdiction} {year}; "
                f"using generated {entry['country']}-{entry['subdiv'] or ''} public holidays"
            )
            generated = HolidayCalendar.from_holidays_library(
                entry["country"], entry["subdiv"], years=[year]
            )
            dates.extend(generated)

        return HolidayCalendar(dates, jurisdiction=jurisdiction.lower(), years=years)
