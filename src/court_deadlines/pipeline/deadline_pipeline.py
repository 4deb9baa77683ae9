"""
Deadline Pipeline Orchestrator
Computes court deadlines and hands them to calendar/task collaborators
"""

import argparse
import asyncio
import itertools
import os
import sys
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env.local file
load_dotenv('.env.local')

from ..core.deadline_engine import Deadline, DeadlineEngine, normalize_base_date
from ..core.exceptions import DeadlineEngineError, InvalidBaseDate
from ..core.holiday_calendar import HolidayCalendarLoader
from ..core.rule_catalog import CaseTypeRuleSet, CountingUnit, RuleCatalog, case_type_key
from ..utils.logger import AuditLogger, setup_logger
from ..utils.report_formatter import deadlines_to_json, format_report
from ..utils.request_validator import RequestValidator
from .collaborators import (
    CalendarCollaborator,
    CalendarEntry,
    TaskCollaborator,
    TaskEntry,
    to_calendar_entry,
    to_task_entry
)

# Setup logging
logger = setup_logger(__name__, os.getenv('COURT_DEADLINES_LOG_LEVEL', 'INFO'))

# Calendar days covered per business day when sizing the holiday window
BUSINESS_DAY_SPAN_FACTOR = 2

# Room for the landing-date adjustment past the furthest raw date
LANDING_MARGIN_DAYS = 14


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass
class PipelineConfig:
    """Configuration for the deadline pipeline"""
    jurisdiction: str = "california"
    holiday_data_path: Optional[str] = None  # bundled data when None
    rule_data_path: Optional[str] = None  # bundled data when None
    allow_generated_holidays: bool = True
    holiday_years_before: int = 0  # loaded in addition to the years the rules reach
    holiday_years_after: int = 0
    task_priority: str = "high"
    calendar_category: str = "court-deadline"
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    enable_audit_log: bool = False

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Resolve configuration from COURT_DEADLINES_* environment variables"""

        defaults = cls()
        return cls(
            jurisdiction=os.getenv('COURT_DEADLINES_JURISDICTION', defaults.jurisdiction),
            holiday_data_path=os.getenv('COURT_DEADLINES_HOLIDAY_FILE') or None,
            rule_data_path=os.getenv('COURT_DEADLINES_RULES_FILE') or None,
            allow_generated_holidays=_env_bool(
                'COURT_DEADLINES_ALLOW_GENERATED_HOLIDAYS', defaults.allow_generated_holidays
            ),
            holiday_years_before=_env_int('COURT_DEADLINES_YEARS_BEFORE', defaults.holiday_years_before),
            holiday_years_after=_env_int('COURT_DEADLINES_YEARS_AFTER', defaults.holiday_years_after),
            task_priority=os.getenv('COURT_DEADLINES_TASK_PRIORITY', defaults.task_priority),
            calendar_category=os.getenv('COURT_DEADLINES_CALENDAR_CATEGORY', defaults.calendar_category),
            log_level=os.getenv('COURT_DEADLINES_LOG_LEVEL', defaults.log_level),
            log_dir=os.getenv('COURT_DEADLINES_LOG_DIR') or None,
            enable_audit_log=_env_bool('COURT_DEADLINES_AUDIT_LOG', defaults.enable_audit_log)
        )


@dataclass
class CalculationResult:
    """Result of one deadline calculation request"""
    request_id: str
    status: str  # success, partial, failed
    case_type: Optional[str] = None
    base_date: Optional[date] = None
    base_date_label: Optional[str] = None
    deadlines: List[Deadline] = field(default_factory=list)
    calendar_entries: List[CalendarEntry] = field(default_factory=list)
    tasks: List[TaskEntry] = field(default_factory=list)
    processing_time: float = 0.0
    error_messages: List[str] = field(default_factory=list)
    audit_trail: List[Dict] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "request_id": self.request_id,
            "status": self.status,
            "case_type": self.case_type,
            "base_date": self.base_date.isoformat() if self.base_date else None,
            "base_date_label": self.base_date_label,
            "deadlines": [d.to_dict() for d in self.deadlines],
            "calendar_entries": [e.to_dict() for e in self.calendar_entries],
            "tasks": [t.to_dict() for t in self.tasks],
            "processing_time": self.processing_time,
            "error_messages": list(self.error_messages)
        }


class DeadlinePipeline:
    """
    Orchestrates deadline calculation requests
    Keeps the engine pure and drives collaborator calls from its output
    """

    def __init__(self,
                 config: Optional[PipelineConfig] = None,
                 calendar: Optional[CalendarCollaborator] = None,
                 task_store: Optional[TaskCollaborator] = None,
                 catalog: Optional[RuleCatalog] = None,
                 holiday_loader: Optional[HolidayCalendarLoader] = None):
        """Initialize pipeline with configuration and optional collaborators"""
        self.config = config or PipelineConfig.from_env()
        self.calendar = calendar
        self.task_store = task_store

        if self.config.log_dir:
            setup_logger(__name__, self.config.log_level, self.config.log_dir)

        try:
            self.catalog = catalog or RuleCatalog.from_json_file(self.config.rule_data_path)
            self.holiday_loader = holiday_loader or HolidayCalendarLoader.from_json_file(
                self.config.holiday_data_path,
                allow_generated=self.config.allow_generated_holidays
            )
        except DeadlineEngineError as e:
            logger.error(f"Failed to load deadline configuration: {e}")
            raise

        self.validator = RequestValidator(self.catalog.case_types())
        self.audit_logger = (
            AuditLogger(log_dir=self.config.log_dir or "logs")
            if self.config.enable_audit_log else None
        )

        # Engines keyed by (jurisdiction, years); built once per holiday range
        self._engines: Dict[Tuple[str, Tuple[int, ...]], DeadlineEngine] = {}
        self._engine_lock = threading.Lock()
        self._request_counter = itertools.count(1)

        # Processing statistics
        self._stats_lock = threading.Lock()
        self.stats = {
            "requests_processed": 0,
            "requests_failed": 0,
            "total_deadlines_computed": 0,
            "calendar_entries_created": 0,
            "tasks_created": 0,
            "average_processing_time": 0.0
        }

        logger.info(
            f"Deadline pipeline initialized for {self.config.jurisdiction} "
            f"(rules {self.catalog.version}, holidays {self.holiday_loader.version})"
        )

    def holiday_years(self, base: date, rule_set: CaseTypeRuleSet) -> Tuple[int, ...]:
        """
        Years of holiday data needed to evaluate a rule set from a base date

        Business-day rules are bounded by twice their offset in calendar days,
        and every result gets room for the landing-date adjustment.

        Args:
            base: Normalized base date
            rule_set: Rules that will be evaluated

        Returns:
            Consecutive years, widened by the configured years before/after
        """

        reaches = [0]
        for rule in rule_set:
            if rule.unit is CountingUnit.BUSINESS:
                reaches.append(rule.offset_days * BUSINESS_DAY_SPAN_FACTOR)
            else:
                reaches.append(rule.offset_days)

        try:
            earliest = base + timedelta(days=min(reaches))
            latest = base + timedelta(days=max(reaches) + LANDING_MARGIN_DAYS)
        except OverflowError as e:
            raise InvalidBaseDate(base, "deadlines fall outside the supported date range") from e

        first = min(earliest.year, base.year - self.config.holiday_years_before)
        last = max(latest.year, base.year + self.config.holiday_years_after)
        return tuple(range(first, last + 1))

    def engine_for(self, base: date, rule_set: CaseTypeRuleSet) -> DeadlineEngine:
        """Engine whose holiday calendar covers every date a rule set can reach"""

        years = self.holiday_years(base, rule_set)
        key = (self.config.jurisdiction.lower(), years)

        with self._engine_lock:
            engine = self._engines.get(key)
            if engine is None:
                calendar = self.holiday_loader.calendar_for(self.config.jurisdiction, years)
                engine = DeadlineEngine(self.catalog, calendar)
                self._engines[key] = engine

        return engine

    def process_request(self,
                        case_type: str,
                        base_date,
                        client_reference: Optional[str] = None,
                        add_to_calendar: bool = False,
                        create_tasks: bool = False) -> CalculationResult:
        """
        Compute the deadlines of a case and optionally publish them

        Args:
            case_type: Case-type identifier
            base_date: Triggering event date
            client_reference: Client the calendar entries / tasks belong to
            add_to_calendar: Send every deadline to the calendar collaborator
            create_tasks: Send every deadline to the task collaborator

        Returns:
            CalculationResult; no deadlines when the computation failed
        """

        start_time = datetime.now()
        result = CalculationResult(
            request_id=self._generate_request_id(case_type),
            status="processing",
            case_type=case_type_key(case_type) if isinstance(case_type, str) else str(case_type)
        )

        # Step 1: Compute deadlines (all or nothing)
        try:
            self._log_step(result, f"Looking up rules for {result.case_type}")
            rule_set = self.catalog.get(case_type)

            self._log_step(result, "Normalizing base date")
            result.base_date = normalize_base_date(base_date)

            self._log_step(result, f"Computing deadlines for {result.case_type}")
            engine = self.engine_for(result.base_date, rule_set)
            deadlines = engine.compute_deadlines(case_type, result.base_date)
            result.base_date_label = rule_set.base_date_label
            result.deadlines = list(deadlines)
        except DeadlineEngineError as e:
            logger.error(f"Deadline calculation failed for {result.request_id}: {e}")
            result.status = "failed"
            result.error_messages.append(str(e))
            return self._finish(result, start_time)

        result.status = "success"

        # Step 2: Downstream collaborators, driven by the computed output
        if add_to_calendar:
            self._publish_calendar(result, client_reference)

        if create_tasks:
            self._publish_tasks(result, client_reference)

        return self._finish(result, start_time)

    def process_payload(self, payload: Dict) -> CalculationResult:
        """Validate a request dictionary, then process it"""

        validation = self.validator.validate_request(payload)
        if not validation["valid"]:
            case_type = payload.get('case_type') if isinstance(payload, dict) else None
            result = CalculationResult(
                request_id=self._generate_request_id(case_type if isinstance(case_type, str) else "invalid"),
                status="failed",
                case_type=case_type if isinstance(case_type, str) else None,
                error_messages=list(validation["errors"])
            )
            return self._finish(result, datetime.now())

        for warning in validation["warnings"]:
            logger.warning(warning)

        return self.process_request(
            case_type=payload['case_type'],
            base_date=payload['base_date'],
            client_reference=payload.get('client_reference'),
            add_to_calendar=payload.get('add_to_calendar', False),
            create_tasks=payload.get('create_tasks', False)
        )

    async def process_batch(self,
                            requests: List[Dict],
                            max_concurrent: int = 5) -> List[CalculationResult]:
        """
        Process multiple request payloads concurrently

        Args:
            requests: Request payloads (see process_payload)
            max_concurrent: Maximum concurrent calculations

        Returns:
            Results in request order
        """

        semaphore = asyncio.Semaphore(max_concurrent)

        async def process_with_semaphore(payload):
            async with semaphore:
                return await asyncio.to_thread(self.process_payload, payload)

        tasks = [process_with_semaphore(payload) for payload in requests]
        return await asyncio.gather(*tasks)

    def _publish_calendar(self, result: CalculationResult, client_reference: Optional[str]):
        if self.calendar is None:
            result.status = "partial"
            result.error_messages.append("No calendar collaborator configured")
            return

        self._log_step(result, f"Adding {len(result.deadlines)} deadlines to calendar")
        entries = [
            to_calendar_entry(d, result.case_type, client_reference, self.config.calendar_category)
            for d in result.deadlines
        ]

        for entry in entries:
            try:
                self.calendar.add_event(entry)
                result.calendar_entries.append(entry)
            except Exception as e:
                logger.error(f"Calendar collaborator error for {entry.title}: {e}")
                result.status = "partial"
                result.error_messages.append(f"Calendar: {entry.title}: {e}")

    def _publish_tasks(self, result: CalculationResult, client_reference: Optional[str]):
        if self.task_store is None:
            result.status = "partial"
            result.error_messages.append("No task collaborator configured")
            return

        self._log_step(result, f"Creating {len(result.deadlines)} tasks")
        entries = [
            to_task_entry(d, result.case_type, client_reference, self.config.task_priority)
            for d in result.deadlines
        ]

        for entry in entries:
            try:
                self.task_store.add_task(entry)
                result.tasks.append(entry)
            except Exception as e:
                logger.error(f"Task collaborator error for {entry.title}: {e}")
                result.status = "partial"
                result.error_messages.append(f"Tasks: {entry.title}: {e}")

    def _finish(self, result: CalculationResult, start_time: datetime) -> CalculationResult:
        result.processing_time = (datetime.now() - start_time).total_seconds()
        self._update_statistics(result)

        if self.audit_logger:
            self.audit_logger.log("deadline_calculation", {
                "request_id": result.request_id,
                "status": result.status,
                "case_type": result.case_type,
                "base_date": result.base_date.isoformat() if result.base_date else None,
                "deadline_count": len(result.deadlines),
                "errors": result.error_messages
            })

        return result

    def _generate_request_id(self, case_type: str) -> str:
        """Generate unique request ID"""

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return f"calc_{case_type}_{timestamp}_{next(self._request_counter)}"

    def _log_step(self, result: CalculationResult, message: str):
        """Log processing step to audit trail"""

        entry = {
            "timestamp": datetime.now().isoformat(),
            "step": message,
            "request_id": result.request_id
        }

        result.audit_trail.append(entry)
        logger.debug(f"[{result.request_id}] {message}")

    def _update_statistics(self, result: CalculationResult):
        """Update pipeline statistics"""

        with self._stats_lock:
            self.stats["requests_processed"] += 1
            processed = self.stats["requests_processed"]

            if result.status == "failed":
                self.stats["requests_failed"] += 1

            self.stats["total_deadlines_computed"] += len(result.deadlines)
            self.stats["calendar_entries_created"] += len(result.calendar_entries)
            self.stats["tasks_created"] += len(result.tasks)

            self.stats["average_processing_time"] = (
                (self.stats["average_processing_time"] * (processed - 1) + result.processing_time) / processed
            )

    def get_statistics(self) -> Dict:
        """Get pipeline statistics"""
        with self._stats_lock:
            return self.stats.copy()


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point"""

    parser = argparse.ArgumentParser(
        prog="court-deadlines",
        description="Calculate court deadlines for a case type from a filing, hearing or trial date"
    )
    parser.add_argument("case_type", nargs="?", help="Case type, e.g. probate or motion")
    parser.add_argument("base_date", nargs="?", help="Triggering event date (YYYY-MM-DD)")
    parser.add_argument("--jurisdiction", help="Holiday jurisdiction (default from config)")
    parser.add_argument("--holidays", help="Holiday data JSON file")
    parser.add_argument("--rules", help="Rule catalog JSON file")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a text report")
    parser.add_argument("--list-case-types", action="store_true", help="List known case types and exit")
    args = parser.parse_args(argv)

    config = PipelineConfig.from_env()
    if args.jurisdiction:
        config.jurisdiction = args.jurisdiction
    if args.holidays:
        config.holiday_data_path = args.holidays
    if args.rules:
        config.rule_data_path = args.rules

    try:
        pipeline = DeadlinePipeline(config)
    except DeadlineEngineError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.list_case_types:
        for case_type in pipeline.catalog.case_types():
            print(f"{case_type:<20} {pipeline.catalog.get(case_type).base_date_label}")
        return 0

    if not args.case_type or not args.base_date:
        parser.error("case_type and base_date are required")

    result = pipeline.process_request(args.case_type, args.base_date)

    if result.status == "failed":
        for message in result.error_messages:
            print(f"Error: {message}", file=sys.stderr)
        return 1

    if args.json:
        print(deadlines_to_json(result.case_type, result.base_date, result.deadlines))
    else:
        print(format_report(
            result.case_type,
            result.base_date,
            result.deadlines,
            base_date_label=result.base_date_label
        ))

    return 0


if __name__ == "__main__":
    sys.exit(main())
