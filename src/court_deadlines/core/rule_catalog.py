"""
Rule Catalog
Per-case-type deadline rules loaded from versioned configuration data
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .exceptions import CatalogError, UnknownCaseType

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE = Path(__file__).resolve().parent.parent / "data" / "deadline_rules.json"


class CountingUnit(str, Enum):
    CALENDAR = "calendar"
    BUSINESS = "business"

    @property
    def label(self) -> str:
        return "Business days" if self is CountingUnit.BUSINESS else "Calendar days"


class CaseType(str, Enum):
    """Built-in case types shipped with the bundled rule catalog"""

    PROBATE = "probate"
    CONSERVATORSHIP = "conservatorship"
    TRUST_LITIGATION = "trust-litigation"
    MOTION = "motion"


def case_type_key(case_type) -> str:
    """Identifier used for catalog lookups"""

    if isinstance(case_type, Enum):
        return str(case_type.value)
    return case_type


@dataclass(frozen=True)
class DeadlineRule:
    """One statutory/court deadline, offset from the base date"""

    name: str
    offset_days: int
    unit: CountingUnit
    description: str = ""

    @property
    def is_backward(self) -> bool:
        return self.offset_days < 0


@dataclass(frozen=True)
class CaseTypeRuleSet:
    """Ordered rules for a single case type"""

    case_type: str
    rules: Tuple[DeadlineRule, ...]
    base_date_label: str = "Filing Date"

    def __post_init__(self):
        seen = set()
        for rule in self.rules:
            if rule.name in seen:
                raise CatalogError(f"Duplicate rule {rule.name!r} in case type {self.case_type!r}")
            seen.add(rule.name)

    def __iter__(self) -> Iterator[DeadlineRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)


def _parse_rule(case_type: str, raw: Dict) -> DeadlineRule:
    if not isinstance(raw, dict):
        raise CatalogError(f"Rule entry in {case_type!r} must be an object")

    missing = [key for key in ("name", "offset_days", "unit") if key not in raw]
    if missing:
        raise CatalogError(f"Rule in {case_type!r} missing fields: {', '.join(missing)}")

    offset = raw["offset_days"]
    # bool is an int subclass
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise CatalogError(f"Rule {raw['name']!r} in {case_type!r} has non-integer offset {offset!r}")

    try:
        unit = CountingUnit(str(raw["unit"]).lower())
    except ValueError as e:
        raise CatalogError(f"Rule {raw['name']!r} in {case_type!r} has unknown unit {raw['unit']!r}") from e

    return DeadlineRule(
        name=str(raw["name"]),
        offset_days=offset,
        unit=unit,
        description=str(raw.get("description", ""))
    )


class RuleCatalog:
    """
    Mapping from case-type identifier to its ordered rule set.
    Read-only after construction.
    """

    def __init__(self, rule_sets: Iterable[CaseTypeRuleSet], version: str = "unversioned"):
        self.version = version
        self._rule_sets: Dict[str, CaseTypeRuleSet] = {}

        for rule_set in rule_sets:
            if rule_set.case_type in self._rule_sets:
                raise CatalogError(f"Case type {rule_set.case_type!r} defined twice")
            self._rule_sets[rule_set.case_type] = rule_set

    @classmethod
    def from_dict(cls, data: Dict) -> "RuleCatalog":
        """
        Build a catalog from a parsed rule document

        Args:
            data: {"version": ..., "case_types": {"<id>": {"base_date_label": ..., "rules": [...]}}}

        Returns:
            RuleCatalog preserving document order
        """

        if not isinstance(data, dict) or not isinstance(data.get("case_types"), dict):
            raise CatalogError("Rule data has no 'case_types' mapping")

        rule_sets = []
        for case_type, entry in data["case_types"].items():
            if not isinstance(entry, dict) or not isinstance(entry.get("rules"), list):
                raise CatalogError(f"Case type {case_type!r} has no 'rules' list")

            rule_sets.append(CaseTypeRuleSet(
                case_type=case_type,
                rules=tuple(_parse_rule(case_type, raw) for raw in entry["rules"]),
                base_date_label=entry.get("base_date_label", "Filing Date")
            ))

        return cls(rule_sets, version=str(data.get("version", "unversioned")))

    @classmethod
    def from_json_file(cls, path: Optional[Union[str, Path]] = None) -> "RuleCatalog":
        """Load a catalog from JSON (bundled rules when no path is given)"""

        path = Path(path) if path else DEFAULT_RULES_FILE

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CatalogError(f"Rule data file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Rule data file is not valid JSON: {path}: {e}") from e

        catalog = cls.from_dict(data)
        logger.info(f"Rule catalog {catalog.version} loaded from {path}: {len(catalog)} case types")
        return catalog

    def get(self, case_type) -> CaseTypeRuleSet:
        key = case_type_key(case_type)

        try:
            return self._rule_sets[key]
        except (KeyError, TypeError):
            raise UnknownCaseType(case_type, self.case_types()) from None

    def case_types(self) -> List[str]:
        return list(self._rule_sets)

    def __contains__(self, case_type) -> bool:
        try:
            return case_type_key(case_type) in self._rule_sets
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._rule_sets)


def default_catalog() -> RuleCatalog:
    return RuleCatalog.from_json_file(DEFAULT_RULES_FILE)
