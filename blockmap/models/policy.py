"""
CloudWatch Logs data protection policy document.

Field order matches the JSON document the service expects.
"""
from dataclasses import dataclass
from typing import List, Optional

from blockmap.models.base import ApiObject, api_field

DEFAULT_POLICY_VERSION = "2021-06-01"


@dataclass
class CustomDataIdentifier(ApiObject):
    name: Optional[str] = api_field("Name")
    regex: Optional[str] = api_field("Regex")


@dataclass
class Configuration(ApiObject):
    custom_data_identifiers: List[CustomDataIdentifier] = api_field(
        "CustomDataIdentifier", default_factory=list
    )


@dataclass
class CloudWatchLogsDestination(ApiObject):
    log_group: Optional[str] = api_field("LogGroup")


@dataclass
class FirehoseDestination(ApiObject):
    delivery_stream: Optional[str] = api_field("DeliveryStream")


@dataclass
class S3Destination(ApiObject):
    bucket: Optional[str] = api_field("Bucket")


@dataclass
class FindingsDestination(ApiObject):
    cloudwatch_logs: Optional[CloudWatchLogsDestination] = api_field("CloudWatchLogs")
    firehose: Optional[FirehoseDestination] = api_field("Firehose")
    s3: Optional[S3Destination] = api_field("S3")


@dataclass
class Audit(ApiObject):
    findings_destination: Optional[FindingsDestination] = api_field("FindingsDestination")


@dataclass
class MaskConfig(ApiObject):
    pass


@dataclass
class Deidentify(ApiObject):
    mask_config: Optional[MaskConfig] = api_field("MaskConfig")


@dataclass
class Operation(ApiObject):
    audit: Optional[Audit] = api_field("Audit")
    deidentify: Optional[Deidentify] = api_field("Deidentify")


@dataclass
class Statement(ApiObject):
    sid: Optional[str] = api_field("Sid")
    data_identifiers: List[str] = api_field("DataIdentifier", default_factory=list)
    operation: Optional[Operation] = api_field("Operation")


@dataclass
class PolicyDocument(ApiObject):
    configuration: Optional[Configuration] = api_field("Configuration")
    description: Optional[str] = api_field("Description")
    name: Optional[str] = api_field("Name")
    statements: List[Statement] = api_field("Statement", default_factory=list)
    version: Optional[str] = api_field("Version")
