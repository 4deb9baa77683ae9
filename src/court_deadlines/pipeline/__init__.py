"""
Pipeline orchestration for court deadline calculation
"""

from .deadline_pipeline import DeadlinePipeline, PipelineConfig, CalculationResult
from .collaborators import (
    CalendarEntry,
    TaskEntry,
    InMemoryCalendar,
    InMemoryTaskStore,
    to_calendar_entry,
    to_task_entry
)

__all__ = [
    'DeadlinePipeline',
    'PipelineConfig',
    'CalculationResult',
    'CalendarEntry',
    'TaskEntry',
    'InMemoryCalendar',
    'InMemoryTaskStore',
    'to_calendar_entry',
    'to_task_entry'
]
