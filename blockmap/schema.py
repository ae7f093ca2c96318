"""
Declarative configuration schemas.

Schemas are assembled once at import time from the constructors below and
are read-only afterwards::

    SCHEMA = block(
        name=string(not_empty, required=True),
        settings=nested(block(id=integer(required=True)), max_items=1),
    )

``Block.decode`` turns a parsed HCL body into an attribute tree that follows
the same conventions the plugin runtime uses: unset arguments take their
default or zero value, nested blocks are lists of mappings, set attributes
are frozensets, and the element of a block whose sub-schema is empty is None.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Union

from blockmap.attrs import as_mapping
from blockmap.errors import ConfigurationError

Validator = Callable[[Any], Optional[str]]

# Terraform meta-arguments accepted on any block and ignored by the mappers.
_META_ARGUMENTS = frozenset({"count", "for_each", "provider", "depends_on", "lifecycle"})


class ValueType(str, Enum):
    STRING = "string"
    BOOL   = "bool"
    INT    = "int"
    FLOAT  = "float"
    LIST   = "list"
    SET    = "set"
    MAP    = "map"


def _join(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def _coerce(value_type: ValueType, value: Any, path: str) -> Any:
    """Convert an HCL scalar the way Terraform converts primitive types."""
    if value_type == ValueType.STRING:
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            return str(int(value)) if value.is_integer() else repr(value)
    elif value_type == ValueType.BOOL:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value in ("true", "false"):
            return value == "true"
    elif value_type == ValueType.INT:
        if isinstance(value, bool):
            pass
        elif isinstance(value, int):
            return value
        elif isinstance(value, float) and value.is_integer():
            return int(value)
        elif isinstance(value, str):
            try:
                return int(value)
            except ValueError:
                pass
    elif value_type == ValueType.FLOAT:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                pass
    raise ConfigurationError(path, f"expected a {value_type.value}, got {value!r}")


_ZERO = {
    ValueType.STRING: "",
    ValueType.BOOL: False,
    ValueType.INT: 0,
    ValueType.FLOAT: 0.0,
}


@dataclass(frozen=True)
class Attribute:
    type: ValueType
    required: bool = False
    optional: bool = False
    computed: bool = False
    default: Any = None
    min_items: int = 0
    max_items: int = 0
    elem: Union["Block", ValueType, None] = None
    validators: Tuple[Validator, ...] = ()
    force_new: bool = False
    description: str = ""

    @property
    def is_block(self) -> bool:
        return isinstance(self.elem, Block)

    @property
    def computed_only(self) -> bool:
        return self.computed and not (self.required or self.optional)

    def zero(self) -> Any:
        if self.type == ValueType.LIST:
            return []
        if self.type == ValueType.SET:
            return frozenset()
        if self.type == ValueType.MAP:
            return {}
        return _ZERO[self.type]

    def decode(self, value: Any, path: str) -> Any:
        if self.type in (ValueType.LIST, ValueType.SET):
            result = self._decode_collection(value, path)
        elif self.type == ValueType.MAP:
            mapping, ok = as_mapping(value)
            if not ok:
                raise ConfigurationError(path, f"expected a map, got {value!r}")
            elem_type = self.elem if isinstance(self.elem, ValueType) else ValueType.STRING
            result = {str(k): _coerce(elem_type, v, _join(path, k)) for k, v in mapping.items()}
        else:
            result = _coerce(self.type, value, path)

        for validator in self.validators:
            message = validator(result)
            if message:
                raise ConfigurationError(path, message)
        return result

    def _decode_collection(self, value: Any, path: str) -> Any:
        # A block written as a bare mapping is still a one-element block.
        if self.is_block and isinstance(value, Mapping):
            value = [value]
        if isinstance(value, (set, frozenset)):
            value = sorted(value, key=repr)
        if not isinstance(value, (list, tuple)):
            raise ConfigurationError(path, f"expected a {self.type.value}, got {value!r}")

        if self.is_block:
            items = [self.elem.decode_element(item, _join(path, i)) for i, item in enumerate(value)]
        else:
            elem_type = self.elem if isinstance(self.elem, ValueType) else ValueType.STRING
            items = [_coerce(elem_type, item, _join(path, i)) for i, item in enumerate(value)]

        result = frozenset(items) if self.type == ValueType.SET else items
        count = len(result)
        if self.required and count == 0:
            raise ConfigurationError(path, "required attribute is not set")
        if self.min_items and count < self.min_items:
            raise ConfigurationError(path, f"at least {self.min_items} item(s) required, got {count}")
        if self.max_items and count > self.max_items:
            raise ConfigurationError(path, f"at most {self.max_items} item(s) allowed, got {count}")
        return result


@dataclass(frozen=True)
class Block:
    attributes: Mapping[str, Attribute]

    def __contains__(self, name: str) -> bool:
        return name in self.attributes

    def __getitem__(self, name: str) -> Attribute:
        return self.attributes[name]

    def decode(self, raw: Any, path: str = "") -> Dict[str, Any]:
        """Decode a configuration body into an attribute tree."""
        if raw is None:
            raw = {}
        body, ok = as_mapping(raw)
        if not ok:
            raise ConfigurationError(path, f"expected a block, got {raw!r}")

        for key in body:
            if key not in self.attributes and key not in _META_ARGUMENTS:
                raise ConfigurationError(_join(path, key), "unsupported argument")

        tree: Dict[str, Any] = {}
        for name, attr in self.attributes.items():
            here = _join(path, name)
            if attr.computed_only:
                if name in body:
                    raise ConfigurationError(here, "cannot set a computed attribute")
                continue

            value = body.get(name)
            if value is None:
                if attr.required:
                    raise ConfigurationError(here, "required attribute is not set")
                tree[name] = attr.default if attr.default is not None else attr.zero()
                continue
            tree[name] = attr.decode(value, here)
        return tree

    def decode_element(self, raw: Any, path: str) -> Optional[Dict[str, Any]]:
        if not self.attributes:
            if raw not in (None, {}):
                raise ConfigurationError(path, "block takes no arguments")
            return None
        return self.decode(raw, path)

    def walk(self, prefix: str = "") -> Iterator[Tuple[str, Attribute]]:
        """Yield ``(path, attribute)`` for every attribute, depth first."""
        for name, attr in self.attributes.items():
            path = _join(prefix, name)
            yield path, attr
            if attr.is_block:
                yield from attr.elem.walk(path)


# ------------------------------------------------------------------ constructors

def _attribute(
    value_type: ValueType,
    validators: Tuple[Validator, ...],
    required: bool = False,
    optional: Optional[bool] = None,
    computed: bool = False,
    **kwargs: Any,
) -> Attribute:
    if optional is None:
        optional = not required and not computed
    return Attribute(
        type=value_type,
        required=required,
        optional=optional,
        computed=computed,
        validators=tuple(validators),
        **kwargs,
    )


def string(*validators: Validator, **kwargs: Any) -> Attribute:
    return _attribute(ValueType.STRING, validators, **kwargs)


def integer(*validators: Validator, **kwargs: Any) -> Attribute:
    return _attribute(ValueType.INT, validators, **kwargs)


def boolean(*validators: Validator, **kwargs: Any) -> Attribute:
    return _attribute(ValueType.BOOL, validators, **kwargs)


def list_of(elem: Union["Block", ValueType], *validators: Validator, **kwargs: Any) -> Attribute:
    return _attribute(ValueType.LIST, validators, elem=elem, **kwargs)


def set_of(elem: ValueType, *validators: Validator, **kwargs: Any) -> Attribute:
    return _attribute(ValueType.SET, validators, elem=elem, **kwargs)


def map_of(elem: ValueType, *validators: Validator, **kwargs: Any) -> Attribute:
    return _attribute(ValueType.MAP, validators, elem=elem, **kwargs)


def nested(body: "Block", *validators: Validator, **kwargs: Any) -> Attribute:
    """A repeated or single (``max_items=1``) configuration block."""
    return list_of(body, *validators, **kwargs)


def block(**attributes: Attribute) -> Block:
    return Block(MappingProxyType(dict(attributes)))


# ------------------------------------------------------------------ validators

def not_empty(value: Any) -> Optional[str]:
    if value == "":
        return "must not be empty"
    return None


def length_between(low: int, high: int) -> Validator:
    def check(value: Any) -> Optional[str]:
        if isinstance(value, str) and not low <= len(value) <= high:
            return f"length must be between {low} and {high}, got {len(value)}"
        return None
    return check


def int_between(low: int, high: int) -> Validator:
    def check(value: Any) -> Optional[str]:
        if isinstance(value, int) and not low <= value <= high:
            return f"must be between {low} and {high}, got {value}"
        return None
    return check


def one_of(*choices: str) -> Validator:
    def check(value: Any) -> Optional[str]:
        if value not in choices:
            return f"expected one of {', '.join(choices)}, got {value!r}"
        return None
    return check
