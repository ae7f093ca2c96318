from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from blockmap.models.base import ApiObject, api_field


@dataclass
class ProvisioningArtifactDetail(ApiObject):
    """One entry of a Service Catalog ListProvisioningArtifacts response."""

    id: Optional[str] = api_field("Id")
    name: Optional[str] = api_field("Name")
    description: Optional[str] = api_field("Description")
    type: Optional[str] = api_field("Type")
    created_time: Optional[datetime] = api_field("CreatedTime")
    active: Optional[bool] = api_field("Active")
    guidance: Optional[str] = api_field("Guidance")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ProvisioningArtifactDetail":
        return cls(
            id=data.get("Id"),
            name=data.get("Name"),
            description=data.get("Description"),
            type=data.get("Type"),
            created_time=data.get("CreatedTime"),
            active=data.get("Active"),
            guidance=data.get("Guidance"),
        )
