"""
Calendar and task collaborators
Downstream stores that consume computed deadlines
"""

import logging
import threading
from dataclasses import asdict, dataclass
from datetime import date
from typing import Dict, List, Optional, Protocol

from ..core.deadline_engine import Deadline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarEntry:
    title: str
    start_date: date
    end_date: date
    category: str
    description: str
    client_reference: Optional[str] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['start_date'] = self.start_date.isoformat()
        data['end_date'] = self.end_date.isoformat()
        return data


@dataclass(frozen=True)
class TaskEntry:
    title: str
    description: str
    due_date: date
    priority: str
    category: str
    client_reference: Optional[str] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['due_date'] = self.due_date.isoformat()
        return data


class CalendarCollaborator(Protocol):
    def add_event(self, entry: CalendarEntry) -> None:
        ...


class TaskCollaborator(Protocol):
    def add_task(self, entry: TaskEntry) -> None:
        ...


def to_calendar_entry(deadline: Deadline,
                      case_type: str,
                      client_reference: Optional[str] = None,
                      category: str = "court-deadline") -> CalendarEntry:
    """Map a deadline to an all-day calendar event"""

    return CalendarEntry(
        title=f"{deadline.rule_name} - {case_type}",
        start_date=deadline.result_date,
        end_date=deadline.result_date,
        category=category,
        description=deadline.description,
        client_reference=client_reference or None
    )


def to_task_entry(deadline: Deadline,
                  case_type: str,
                  client_reference: Optional[str] = None,
                  priority: str = "high") -> TaskEntry:
    """Map a deadline to a task due on the deadline date"""

    return TaskEntry(
        title=deadline.rule_name,
        description=deadline.description,
        due_date=deadline.result_date,
        priority=priority,
        category=case_type,
        client_reference=client_reference or None
    )


class InMemoryCalendar:
    """Calendar store kept in process memory"""

    def __init__(self):
        self._events: List[CalendarEntry] = []
        self._lock = threading.Lock()

    def add_event(self, entry: CalendarEntry) -> None:
        with self._lock:
            self._events.append(entry)
        logger.debug(f"Calendar event added: {entry.title} on {entry.start_date.isoformat()}")

    def events(self, client_reference: Optional[str] = None) -> List[CalendarEntry]:
        with self._lock:
            events = list(self._events)
        if client_reference is None:
            return events
        return [e for e in events if e.client_reference == client_reference]


class InMemoryTaskStore:
    """Task store kept in process memory"""

    def __init__(self):
        self._tasks: List[TaskEntry] = []
        self._lock = threading.Lock()

    def add_task(self, entry: TaskEntry) -> None:
        with self._lock:
            self._tasks.append(entry)
        logger.debug(f"Task added: {entry.title} due {entry.due_date.isoformat()}")

    def tasks(self, client_reference: Optional[str] = None) -> List[TaskEntry]:
        with self._lock:
            tasks = list(self._tasks)
        if client_reference is None:
            return tasks
        return [t for t in tasks if t.client_reference == client_reference]
