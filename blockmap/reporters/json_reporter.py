"""
JSON report generator.
"""
import json
from datetime import datetime, timezone
from typing import Any, List

from blockmap import __version__
from blockmap.engine import Outcome
from blockmap.models.diagnostic import Severity


def _count_by_severity(outcomes: List[Outcome]) -> dict:
    counts = {s.value: 0 for s in Severity}
    for o in outcomes:
        for d in o.diagnostics:
            counts[d.severity.value] += 1
    return counts


def _default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def build_report(outcomes: List[Outcome], source_path: str) -> str:
    report = {
        "meta": {
            "generated": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "source": source_path,
            "tool": "blockmap",
            "version": __version__,
        },
        "summary": {
            "blocks": len(outcomes),
            "read": sum(1 for o in outcomes if o.id),
            **_count_by_severity(outcomes),
        },
        "outcomes": [o.to_dict() for o in outcomes],
    }
    return json.dumps(report, indent=2, default=_default)
