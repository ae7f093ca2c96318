from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class Resource:
    kind: str              # "data" or "resource"
    resource_type: str     # e.g. "aws_medialive_multiplex"
    name: str              # label in the configuration
    properties: Dict[str, Any] = field(default_factory=dict)
    source_file: str = ""

    @property
    def address(self) -> str:
        if self.kind == "data":
            return f"data.{self.resource_type}.{self.name}"
        return f"{self.resource_type}.{self.name}"
