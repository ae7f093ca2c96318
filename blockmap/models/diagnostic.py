from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Severity(str, Enum):
    ERROR   = "ERROR"
    WARNING = "WARNING"


@dataclass
class Diagnostic:
    severity: Severity
    summary: str
    address: str
    detail: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "summary": self.summary,
            "address": self.address,
            "detail": self.detail,
        }
