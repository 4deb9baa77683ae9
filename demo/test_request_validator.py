"""
Request validation tests
"""

from court_deadlines.core import CaseType
from court_deadlines.utils import RequestValidator


def test_valid_request():
    validator = RequestValidator(["probate", "motion"])

    result = validator.validate_request({"case_type": "motion", "base_date": "2025-09-05"})

    assert result["valid"]
    assert result["errors"] == []


def test_missing_fields():
    result = RequestValidator().validate_request({})

    assert not result["valid"]
    assert "Missing required field: case_type" in result["errors"]
    assert "Missing required field: base_date" in result["errors"]


def test_invalid_values():
    validator = RequestValidator(["probate"])

    result = validator.validate_request({
        "case_type": "divorce",
        "base_date": "2025-02-30",
        "client_reference": 12,
        "create_tasks": "yes"
    })

    assert not result["valid"]
    assert len(result["errors"]) == 4


def test_warnings_do_not_invalidate():
    result = RequestValidator().validate_request({
        "case_type": "probate",
        "base_date": "2025-09-05",
        "add_to_calendar": True,
        "priority": "high"
    })

    assert result["valid"]
    assert len(result["warnings"]) == 2


def test_non_dict_request():
    result = RequestValidator().validate_request(["motion", "2025-09-05"])
    assert not result["valid"]


def test_case_type_enum_member_accepted():
    validator = RequestValidator(list(CaseType))

    result = validator.validate_request({"case_type": CaseType.MOTION, "base_date": "2025-09-05"})
    assert result["valid"], result["errors"]

    result = RequestValidator(["motion"]).validate_request({"case_type": CaseType.MOTION, "base_date": "2025-09-05"})
    assert result["valid"], result["errors"]
