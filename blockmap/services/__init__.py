"""
Registry of supported data sources and resources.

Built once at import time and read-only afterwards.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from blockmap.config import Settings
from blockmap.schema import Block
from blockmap.services import logs, medialive, servicecatalog
from blockmap.state import ResourceData

Handler = Callable[[ResourceData, Any, Settings], None]

KIND_DATA = "data"
KIND_RESOURCE = "resource"


@dataclass(frozen=True)
class Definition:
    type_name: str
    kind: str
    schema: Block
    read: Handler
    create: Optional[Handler] = None
    update: Optional[Handler] = None
    delete: Optional[Handler] = None
    importer: Optional[Handler] = None
    client: Optional[str] = None   # boto3 service name, None when no API call is made


REGISTRY: Mapping[str, Definition] = MappingProxyType({
    logs.TYPE_NAME: Definition(
        type_name=logs.TYPE_NAME,
        kind=KIND_DATA,
        schema=logs.SCHEMA,
        read=logs.read,
    ),
    servicecatalog.TYPE_NAME: Definition(
        type_name=servicecatalog.TYPE_NAME,
        kind=KIND_DATA,
        schema=servicecatalog.SCHEMA,
        read=servicecatalog.read,
        client="servicecatalog",
    ),
    medialive.TYPE_NAME: Definition(
        type_name=medialive.TYPE_NAME,
        kind=KIND_RESOURCE,
        schema=medialive.SCHEMA,
        read=medialive.read,
        create=medialive.create,
        update=medialive.update,
        delete=medialive.delete,
        importer=medialive.import_state,
        client="medialive",
    ),
})


def lookup(kind: str, type_name: str) -> Optional[Definition]:
    definition = REGISTRY.get(type_name)
    if definition is None or definition.kind != kind:
        return None
    return definition
