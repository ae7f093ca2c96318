from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from blockmap.models.base import ApiObject, api_field


@dataclass
class MultiplexSettings(ApiObject):
    transport_stream_bitrate: Optional[int] = api_field("TransportStreamBitrate")
    transport_stream_id: Optional[int] = api_field("TransportStreamId")
    maximum_video_buffer_delay_milliseconds: Optional[int] = api_field(
        "MaximumVideoBufferDelayMilliseconds"
    )
    transport_stream_reserved_bitrate: Optional[int] = api_field("TransportStreamReservedBitrate")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MultiplexSettings":
        return cls(
            transport_stream_bitrate=data.get("TransportStreamBitrate"),
            transport_stream_id=data.get("TransportStreamId"),
            maximum_video_buffer_delay_milliseconds=data.get("MaximumVideoBufferDelayMilliseconds"),
            transport_stream_reserved_bitrate=data.get("TransportStreamReservedBitrate"),
        )


@dataclass
class Multiplex(ApiObject):
    """A MediaLive multiplex as returned by DescribeMultiplex."""

    arn: Optional[str] = api_field("Arn")
    id: Optional[str] = api_field("Id")
    name: Optional[str] = api_field("Name")
    availability_zones: List[str] = api_field("AvailabilityZones", default_factory=list)
    multiplex_settings: Optional[MultiplexSettings] = api_field("MultiplexSettings")
    state: Optional[str] = api_field("State")
    tags: Dict[str, str] = field(default_factory=dict, metadata={"wire": "Tags"})

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Multiplex":
        settings = data.get("MultiplexSettings")
        return cls(
            arn=data.get("Arn"),
            id=data.get("Id"),
            name=data.get("Name"),
            availability_zones=list(data.get("AvailabilityZones") or []),
            multiplex_settings=MultiplexSettings.from_api(settings) if settings else None,
            state=data.get("State"),
            tags=dict(data.get("Tags") or {}),
        )
