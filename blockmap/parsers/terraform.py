import os
from typing import Any, Dict, List

import hcl2
from rich.console import Console

from blockmap.models.resource import Resource

console = Console(stderr=True)

_BLOCK_KINDS = ("data", "resource")


def _strip_quotes(val: str) -> str:
    # Some python-hcl2 releases keep the surrounding quotes on strings and labels.
    if len(val) >= 2 and val[0] == '"' and val[-1] == '"':
        return val[1:-1]
    return val


def _normalize(val: Any) -> Any:
    """
    Recursively clean a python-hcl2 value.

    Nested blocks stay wrapped in lists: a single ``settings { ... }`` block
    is ``[{...}]``, which is the shape the schema decoder expects.
    Parser bookkeeping keys such as ``__start_line__`` are dropped.
    """
    if isinstance(val, list):
        return [_normalize(v) for v in val]
    if isinstance(val, dict):
        return {
            _strip_quotes(k): _normalize(v)
            for k, v in val.items()
            if not (k.startswith("__") and k.endswith("__"))
        }
    if isinstance(val, str):
        return _strip_quotes(val)
    return val


def _iter_labelled(kind: str, blocks: Any):
    """Yield ``(type, name, body)`` for every ``<kind> "type" "name" {}`` block."""
    if isinstance(blocks, dict):
        blocks = [blocks]
    if not isinstance(blocks, list):
        return
    for block_map in blocks:
        if not isinstance(block_map, dict):
            continue
        for resource_type, instances in block_map.items():
            # hcl2 may wrap the labelled body in a list
            if isinstance(instances, dict):
                instances = [instances]
            if not isinstance(instances, list):
                continue
            for instance_map in instances:
                if not isinstance(instance_map, dict):
                    continue
                for name, body in instance_map.items():
                    if isinstance(body, list) and len(body) == 1:
                        body = body[0]
                    yield resource_type, name, body if isinstance(body, dict) else {}


def parse_text(text: str, source_file: str = "") -> List[Resource]:
    data: Dict[str, Any] = _normalize(hcl2.loads(text))
    resources: List[Resource] = []

    for kind in _BLOCK_KINDS:
        for resource_type, name, body in _iter_labelled(kind, data.get(kind, [])):
            resources.append(
                Resource(
                    kind=kind,
                    resource_type=resource_type,
                    name=name,
                    properties=body,
                    source_file=source_file,
                )
            )

    return resources


def parse_file(filepath: str) -> List[Resource]:
    try:
        with open(filepath) as fh:
            text = fh.read()
        return parse_text(text, source_file=filepath)
    except Exception as exc:
        console.print(f"[yellow]Warning:[/yellow] failed to parse {filepath}: {exc}")
        return []


def parse_directory(path: str) -> List[Resource]:
    resources: List[Resource] = []

    if os.path.isfile(path):
        if path.endswith(".tf"):
            resources.extend(parse_file(path))
        return resources

    for root, _, files in os.walk(path):
        for fname in sorted(files):
            if fname.endswith(".tf"):
                resources.extend(parse_file(os.path.join(root, fname)))

    return resources
