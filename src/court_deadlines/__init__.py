"""
Court Deadline Calculator
Derives statutory and court deadlines from a triggering event date
"""

__version__ = "2.1.0"
__author__ = "Legal Tech Solutions"
__description__ = "Court deadline calculation with business-day and court-holiday rules"
