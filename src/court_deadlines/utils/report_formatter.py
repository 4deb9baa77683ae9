"""
Report Formatter
Plain-text and JSON renderings of computed deadlines
"""

import json
from datetime import date
from typing import Dict, Sequence

from ..core.deadline_engine import Deadline

DISCLAIMER = (
    "Note: These calculations are based on standard California court rules. "
    "Always verify deadlines with current local rules and court orders."
)


def format_deadline_line(deadline: Deadline) -> str:
    """One line per deadline: date, name, counting details"""

    meta = deadline.unit.label
    if deadline.offset_summary:
        meta += f" • {deadline.offset_summary}"

    return f"{deadline.result_date.strftime('%b %d %Y')}  {deadline.rule_name:<28} {meta}"


def format_report(case_type: str,
                  base_date: date,
                  deadlines: Sequence[Deadline],
                  base_date_label: str = "Base Date",
                  show_descriptions: bool = True) -> str:
    """Render the full deadline schedule for a case as text"""

    lines = [
        f"Court deadlines: {case_type}",
        f"{base_date_label}: {base_date.strftime('%A, %b %d %Y')}",
        ""
    ]

    for deadline in deadlines:
        lines.append(format_deadline_line(deadline))
        if show_descriptions and deadline.description:
            lines.append(f"{'':13}{deadline.description}")

    lines.extend(["", DISCLAIMER])
    return "\n".join(lines)


def deadlines_to_json(case_type: str, base_date: date, deadlines: Sequence[Deadline]) -> str:
    payload: Dict = {
        "case_type": case_type,
        "base_date": base_date.isoformat(),
        "deadlines": [d.to_dict() for d in deadlines]
    }
    return json.dumps(payload, indent=2)
