"""
aws_medialive_multiplex resource.

Create, Read, Update, Delete and Import over the MediaLive API. Waiting for
state transitions is delegated to the SDK's waiters.
"""
import uuid
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console

from blockmap.attrs import as_int, unwrap
from blockmap.config import Settings
from blockmap.errors import ExternalCallFailure, ResourceNotFound
from blockmap.models.multiplex import Multiplex, MultiplexSettings
from blockmap.schema import (
    ValueType,
    block,
    boolean,
    int_between,
    integer,
    list_of,
    map_of,
    nested,
    not_empty,
    string,
)
from blockmap.state import ResourceData

console = Console(stderr=True)

TYPE_NAME = "aws_medialive_multiplex"

STATE_RUNNING = "RUNNING"
STATE_DELETED = "DELETED"

SCHEMA = block(
    arn=string(computed=True),
    availability_zones=list_of(
        ValueType.STRING, required=True, min_items=2, max_items=2, force_new=True
    ),
    multiplex_settings=nested(
        block(
            transport_stream_bitrate=integer(int_between(1000000, 100000000), required=True),
            transport_stream_reserved_bitrate=integer(optional=True, computed=True),
            transport_stream_id=integer(int_between(0, 65535), required=True),
            maximum_video_buffer_delay_milliseconds=integer(
                int_between(800, 3000), optional=True, computed=True
            ),
        ),
        max_items=1,
    ),
    name=string(not_empty, required=True),
    start_multiplex=boolean(default=False),
    tags=map_of(ValueType.STRING),
)


# ------------------------------------------------------------------ mapping

def expand_multiplex_settings(node: Any) -> Optional[MultiplexSettings]:
    m, ok = unwrap(node)
    if not ok:
        return None

    settings = MultiplexSettings()

    v, ok = as_int(m.get("transport_stream_bitrate"))
    if ok:
        settings.transport_stream_bitrate = v
    v, ok = as_int(m.get("transport_stream_id"))
    if ok:
        settings.transport_stream_id = v
    # Zero means "not configured" for the optional+computed fields.
    v, ok = as_int(m.get("transport_stream_reserved_bitrate"))
    if ok and v != 0:
        settings.transport_stream_reserved_bitrate = v
    v, ok = as_int(m.get("maximum_video_buffer_delay_milliseconds"))
    if ok and v != 0:
        settings.maximum_video_buffer_delay_milliseconds = v

    return settings


def flatten_multiplex_settings(settings: Optional[MultiplexSettings]) -> List[Dict[str, Any]]:
    if settings is None:
        return []

    tf_map: Dict[str, Any] = {}
    if settings.transport_stream_bitrate is not None:
        tf_map["transport_stream_bitrate"] = settings.transport_stream_bitrate
    if settings.transport_stream_id is not None:
        tf_map["transport_stream_id"] = settings.transport_stream_id
    if settings.transport_stream_reserved_bitrate is not None:
        tf_map["transport_stream_reserved_bitrate"] = settings.transport_stream_reserved_bitrate
    if settings.maximum_video_buffer_delay_milliseconds is not None:
        tf_map["maximum_video_buffer_delay_milliseconds"] = settings.maximum_video_buffer_delay_milliseconds

    return [tf_map]


def _settings_changed(old: Any, new: Any) -> bool:
    """Compare settings blocks, ignoring optional fields left unset in config."""
    before = expand_multiplex_settings(old)
    after = expand_multiplex_settings(new)
    if before is None or after is None:
        return before != after
    for key, value in vars(after).items():
        if value is not None and getattr(before, key) != value:
            return True
    return False


# ------------------------------------------------------------------ API helpers

def _is_not_found(exc: BaseException) -> bool:
    if not isinstance(exc, ClientError):
        return False
    return exc.response.get("Error", {}).get("Code") == "NotFoundException"


def _call(action: str, fn: Callable[..., Any], **kwargs: Any) -> Any:
    try:
        return fn(**kwargs)
    except (ClientError, BotoCoreError) as exc:
        raise ExternalCallFailure(action, exc) from exc


def _wait(client: Any, waiter_name: str, multiplex_id: str, settings: Settings, action: str) -> None:
    kwargs: Dict[str, Any] = {"MultiplexId": multiplex_id}
    waiter_config = settings.waiter_config()
    if waiter_config:
        kwargs["WaiterConfig"] = waiter_config
    _call(action, client.get_waiter(waiter_name).wait, **kwargs)


def find_multiplex_by_id(client: Any, multiplex_id: str) -> Optional[Multiplex]:
    """Describe a multiplex; None when it does not exist or is deleted."""
    try:
        output = client.describe_multiplex(MultiplexId=multiplex_id)
    except ClientError as exc:
        if _is_not_found(exc):
            return None
        raise ExternalCallFailure(f"reading MediaLive Multiplex ({multiplex_id})", exc) from exc
    except BotoCoreError as exc:
        raise ExternalCallFailure(f"reading MediaLive Multiplex ({multiplex_id})", exc) from exc

    multiplex = Multiplex.from_api(output)
    if multiplex.state == STATE_DELETED:
        return None
    return multiplex


def _start(client: Any, multiplex_id: str, settings: Settings) -> None:
    _call(f"starting MediaLive Multiplex ({multiplex_id})", client.start_multiplex, MultiplexId=multiplex_id)
    _wait(client, "multiplex_running", multiplex_id, settings,
          f"waiting for MediaLive Multiplex ({multiplex_id}) start")


def _stop(client: Any, multiplex_id: str, settings: Settings) -> None:
    _call(f"stopping MediaLive Multiplex ({multiplex_id})", client.stop_multiplex, MultiplexId=multiplex_id)
    _wait(client, "multiplex_stopped", multiplex_id, settings,
          f"waiting for MediaLive Multiplex ({multiplex_id}) stop")


# ------------------------------------------------------------------ CRUD

def create(data: ResourceData, client: Any, settings: Settings) -> None:
    name = data.get("name")
    request: Dict[str, Any] = {
        "AvailabilityZones": list(data.get("availability_zones")),
        "Name": name,
        "RequestId": str(uuid.uuid4()),
    }
    multiplex_settings = expand_multiplex_settings(data.get("multiplex_settings"))
    if multiplex_settings is not None:
        request["MultiplexSettings"] = multiplex_settings.to_dict()
    tags = data.get("tags")
    if tags:
        request["Tags"] = dict(tags)

    output = _call(f"creating MediaLive Multiplex ({name})", client.create_multiplex, **request)
    multiplex_id = output["Multiplex"]["Id"]
    data.set_id(multiplex_id)

    _wait(client, "multiplex_created", multiplex_id, settings,
          f"waiting for MediaLive Multiplex ({multiplex_id}) create")

    if data.get("start_multiplex"):
        _start(client, multiplex_id, settings)

    read(data, client, settings)


def read(data: ResourceData, client: Any, settings: Settings) -> None:
    multiplex = find_multiplex_by_id(client, data.id)
    if multiplex is None:
        console.print(
            f"[yellow]Warning:[/yellow] MediaLive Multiplex ({data.id}) not found, removing from state"
        )
        data.set_id("")
        return

    data.set("arn", multiplex.arn or "")
    data.set("availability_zones", list(multiplex.availability_zones))
    data.set("multiplex_settings", flatten_multiplex_settings(multiplex.multiplex_settings))
    data.set("name", multiplex.name or "")
    data.set("tags", dict(multiplex.tags))


def update(data: ResourceData, client: Any, settings: Settings) -> None:
    multiplex_id = data.id
    name_changed = data.has_change("name")
    settings_changed = data.has_config and _settings_changed(
        data.previous("multiplex_settings"), data.get("multiplex_settings")
    )

    if name_changed or settings_changed:
        request: Dict[str, Any] = {"MultiplexId": multiplex_id}
        if name_changed:
            request["Name"] = data.get("name")
        if settings_changed:
            multiplex_settings = expand_multiplex_settings(data.get("multiplex_settings"))
            if multiplex_settings is not None:
                request["MultiplexSettings"] = multiplex_settings.to_dict()
        _call(f"updating MediaLive Multiplex ({multiplex_id})", client.update_multiplex, **request)

    if data.has_change("tags"):
        arn = data.previous("arn")
        old_tags = data.previous("tags") or {}
        new_tags = data.get("tags") or {}
        removed = sorted(k for k in old_tags if k not in new_tags)
        if removed:
            _call(f"untagging MediaLive Multiplex ({multiplex_id})", client.delete_tags,
                  ResourceArn=arn, TagKeys=removed)
        added = {k: v for k, v in new_tags.items() if old_tags.get(k) != v}
        if added:
            _call(f"tagging MediaLive Multiplex ({multiplex_id})", client.create_tags,
                  ResourceArn=arn, Tags=added)

    if data.has_change("start_multiplex"):
        if data.get("start_multiplex"):
            _start(client, multiplex_id, settings)
        else:
            _stop(client, multiplex_id, settings)

    read(data, client, settings)


def delete(data: ResourceData, client: Any, settings: Settings) -> None:
    multiplex_id = data.id
    multiplex = find_multiplex_by_id(client, multiplex_id)
    if multiplex is None:
        return

    if multiplex.state == STATE_RUNNING:
        _stop(client, multiplex_id, settings)

    try:
        client.delete_multiplex(MultiplexId=multiplex_id)
    except ClientError as exc:
        if _is_not_found(exc):
            return
        raise ExternalCallFailure(f"deleting MediaLive Multiplex ({multiplex_id})", exc) from exc
    except BotoCoreError as exc:
        raise ExternalCallFailure(f"deleting MediaLive Multiplex ({multiplex_id})", exc) from exc

    _wait(client, "multiplex_deleted", multiplex_id, settings,
          f"waiting for MediaLive Multiplex ({multiplex_id}) delete")


def import_state(data: ResourceData, client: Any, settings: Settings) -> None:
    """The import ID is the multiplex ID; populate state from the API."""
    multiplex_id = data.id
    read(data, client, settings)
    if not data.id:
        raise ResourceNotFound(f"cannot import non-existent MediaLive Multiplex ({multiplex_id})")
