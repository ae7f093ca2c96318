"""
Canonical JSON encoding and content hashing for domain objects.
"""
import json
import zlib
from typing import Any

from blockmap.errors import SerializationFailure
from blockmap.models.base import to_payload

# Escaped by default in Go's encoding/json; the policy ID hashes this text.
_HTML_SAFE = str.maketrans({
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
})


def serialize(obj: Any, indent: int = 2) -> str:
    """
    Encode a domain object tree as JSON.

    Keys follow each object's declared field order, never alphabetical, so
    identical content always yields byte-identical text. String values are
    HTML-escaped the way Go's encoder does it.
    """
    try:
        text = json.dumps(
            to_payload(obj),
            indent=indent,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise SerializationFailure(f"encoding {type(obj).__name__}: {exc}") from exc
    return text.translate(_HTML_SAFE)


def string_hashcode(text: str) -> int:
    """CRC-32 (IEEE) of the UTF-8 text, always non-negative."""
    return zlib.crc32(text.encode("utf-8")) & 0xFFFFFFFF
