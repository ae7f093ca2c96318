from dataclasses import field, fields, is_dataclass
from typing import Any, Dict, Mapping


def api_field(wire_name: str, **kwargs: Any) -> Any:
    """A dataclass field that is absent (None) unless set, with its API name."""
    if "default" not in kwargs and "default_factory" not in kwargs:
        kwargs["default"] = None
    return field(metadata={"wire": wire_name}, **kwargs)


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple)) and not value)


def to_payload(value: Any) -> Any:
    """
    Convert a domain object tree into plain dicts and lists.

    Fields are emitted in declaration order under their API names. None,
    empty strings and empty lists are omitted; a nested object that is set
    but has no fields becomes ``{}``.
    """
    if is_dataclass(value) and not isinstance(value, type):
        out: Dict[str, Any] = {}
        for f in fields(value):
            v = getattr(value, f.name)
            if _is_empty(v):
                continue
            out[f.metadata.get("wire", f.name)] = to_payload(v)
        return out
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    if isinstance(value, Mapping):
        return {k: to_payload(v) for k, v in value.items()}
    return value


class ApiObject:
    """Mixin for dataclasses mirroring an API payload fragment."""

    def to_dict(self) -> Dict[str, Any]:
        return to_payload(self)
