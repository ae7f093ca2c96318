"""
aws_servicecatalog_provisioning_artifacts data source.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from blockmap.config import Settings
from blockmap.errors import ExternalCallFailure
from blockmap.models.artifact import ProvisioningArtifactDetail
from blockmap.schema import block, boolean, nested, one_of, string
from blockmap.state import ResourceData

TYPE_NAME = "aws_servicecatalog_provisioning_artifacts"

ACCEPT_LANGUAGE_ENGLISH = "en"
ACCEPT_LANGUAGES = ("en", "jp", "zh")

SCHEMA = block(
    accept_language=string(one_of(*ACCEPT_LANGUAGES), default=ACCEPT_LANGUAGE_ENGLISH),
    product_id=string(required=True),
    provisioning_artifact_details=nested(
        block(
            active=boolean(computed=True),
            created_time=string(computed=True),
            description=string(computed=True),
            guidance=string(computed=True),
            id=string(computed=True),
            name=string(computed=True),
            type=string(computed=True),
        ),
        computed=True,
    ),
)


def format_time(value: Any) -> str:
    """Render a timestamp as ``2006-01-02 15:04:05.123 +0000 UTC``."""
    if not isinstance(value, datetime):
        return str(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.strftime("%Y-%m-%d %H:%M:%S")
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")
    return f"{text} {value.strftime('%z %Z')}"


def flatten_provisioning_artifact_detail(detail: ProvisioningArtifactDetail) -> Dict[str, Any]:
    tf_map: Dict[str, Any] = {}

    if detail.active is not None:
        tf_map["active"] = detail.active
    if detail.created_time is not None:
        tf_map["created_time"] = format_time(detail.created_time)
    if detail.description is not None:
        tf_map["description"] = detail.description
    if detail.guidance:
        tf_map["guidance"] = detail.guidance
    if detail.id is not None:
        tf_map["id"] = detail.id
    if detail.name is not None:
        tf_map["name"] = detail.name
    if detail.type:
        tf_map["type"] = detail.type

    return tf_map


def flatten_provisioning_artifact_details(
    details: Sequence[ProvisioningArtifactDetail],
) -> Optional[List[Dict[str, Any]]]:
    """One mapping per detail in listing order; None when there are none."""
    if not details:
        return None
    return [flatten_provisioning_artifact_detail(d) for d in details]


def read(data: ResourceData, client: Any, settings: Settings) -> None:
    product_id = data.get("product_id")

    try:
        output = client.list_provisioning_artifacts(
            AcceptLanguage=data.get("accept_language"),
            ProductId=product_id,
        )
    except (ClientError, BotoCoreError) as exc:
        raise ExternalCallFailure("listing Service Catalog Provisioning Artifacts", exc) from exc

    details = [
        ProvisioningArtifactDetail.from_api(d)
        for d in output.get("ProvisioningArtifactDetails") or []
    ]

    data.set_id(product_id)
    data.set("provisioning_artifact_details", flatten_provisioning_artifact_details(details))
