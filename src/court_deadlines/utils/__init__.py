"""
Utility modules for court deadline calculation
"""

from .request_validator import RequestValidator
from .logger import setup_logger, AuditLogger
from .report_formatter import format_report, format_deadline_line, deadlines_to_json

__all__ = [
    'RequestValidator',
    'setup_logger',
    'AuditLogger',
    'format_report',
    'format_deadline_line',
    'deadlines_to_json'
]
