"""
Accessors for the generic attribute tree.

A decoded configuration block is made of plain Python values: scalars
(str, bool, int, float), sequences (list/tuple), sets of scalars
(set/frozenset) and mappings (dict). Nested blocks are always sequences
wrapping mappings, so a single optional block looks like ``[{...}]``.

The ``as_*`` helpers never raise on a shape mismatch; they return the
coerced value together with a flag telling whether the coercion worked.
"""
from typing import Any, Dict, List, Mapping, Optional, Tuple


def unwrap(node: Any) -> Tuple[Optional[Dict[str, Any]], bool]:
    """
    Unpack a single configuration block.

    Returns ``(None, False)`` when the block is absent, ``({}, True)`` when
    it is present but has no configured fields (``[None]``), and
    ``(mapping, True)`` for the usual one-element block.
    """
    if node is None:
        return None, False

    if isinstance(node, (list, tuple)) and len(node) > 0:
        first = node[0]
        if first is None:
            # Block present, but its sub-schema is empty.
            return {}, True
        if isinstance(first, Mapping):
            return dict(first), True

    return None, False


def as_mapping(node: Any) -> Tuple[Dict[str, Any], bool]:
    if isinstance(node, Mapping):
        return dict(node), True
    return {}, False


def as_sequence(node: Any) -> Tuple[List[Any], bool]:
    if isinstance(node, (list, tuple)):
        return list(node), True
    return [], False


def as_string(node: Any) -> Tuple[str, bool]:
    if isinstance(node, str):
        return node, True
    return "", False


def as_bool(node: Any) -> Tuple[bool, bool]:
    if isinstance(node, bool):
        return node, True
    return False, False


def as_int(node: Any) -> Tuple[int, bool]:
    # bool is an int subclass and never a valid number here
    if isinstance(node, int) and not isinstance(node, bool):
        return node, True
    return 0, False


def set_to_list(node: Any) -> List[str]:
    """
    Convert a set of strings into a list.

    The order is sorted so equal set contents always produce the same list.
    Non-string members are dropped.
    """
    if not isinstance(node, (set, frozenset, list, tuple)):
        return []
    return sorted({v for v in node if isinstance(v, str)})
