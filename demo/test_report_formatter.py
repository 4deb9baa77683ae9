"""
Report formatting tests
"""

import json
from datetime import date

from court_deadlines.utils import deadlines_to_json, format_report


def test_text_report(engine):
    deadlines = engine.compute_deadlines("motion", "2025-09-05")

    report = format_report("motion", date(2025, 9, 5), deadlines, base_date_label="Hearing Date")

    assert "Hearing Date: Friday, Sep 05 2025" in report
    assert "Aug 13 2025  File Motion" in report
    assert "Business days • 16 days before" in report
    assert "Always verify deadlines" in report


def test_json_report(engine):
    deadlines = engine.compute_deadlines("probate", "2025-11-29")

    payload = deadlines_to_json("probate", date(2025, 11, 29), deadlines)

    assert '"result_date": "2025-12-01"' in payload
    assert '"base_date": "2025-11-29"' in payload
    assert len(json.loads(payload)["deadlines"]) == 6
