"""
Canonical Payload Serialization

Produces the exact bytes that get signed for a payload.

Canonical form:
    - UTF-8 JSON, no whitespace (separators "," and ":")
    - Object keys sorted by UTF-8 byte order, at every nesting level
    - Non-ASCII characters emitted literally (no \\uXXXX escapes)
    - Top-level "signature" key excluded

Values are normalized before serialization so that equal content always
renders the same way:
    - Enum members become their value
    - Tuples become lists
    - Floats with an integral value become ints (1.0 -> 1). Other floats
      use Python's repr, so exponent forms (1e-07) can differ from JS
    - pydantic models become their JSON-mode dump (by alias, without None)

Example:
    >>> canonicalize({"timestamp": 1000, "status": "online"})
    b'{"status":"online","timestamp":1000}'
"""

import json
import math
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel

from fareplay.core.constants import SIGNATURE_FIELD
from fareplay.core.errors import CanonicalizationError


def _sort_key(key: str) -> bytes:
    return key.encode("utf-8")


def _normalize(value: Any, path: str) -> Any:
    """Recursively normalize a value into plain JSON types with sorted keys."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)

    if isinstance(value, Enum):
        value = value.value

    if value is None or isinstance(value, (bool, str)):
        return value

    if isinstance(value, int):
        return int(value)

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise CanonicalizationError(f"Non-finite number at {path}: {value!r}")
        if value.is_integer():
            return int(value)
        return value

    if isinstance(value, Mapping):
        for key in value:
            if not isinstance(key, str):
                raise CanonicalizationError(
                    f"Non-string key at {path}: {key!r} ({type(key).__name__})"
                )
        return {
            key: _normalize(value[key], f"{path}.{key}")
            for key in sorted(value, key=_sort_key)
        }

    if isinstance(value, (list, tuple)):
        return [_normalize(item, f"{path}[{i}]") for i, item in enumerate(value)]

    raise CanonicalizationError(
        f"Value at {path} is not JSON-compatible: {type(value).__name__}"
    )


def _normalize_root(value: Any) -> Any:
    try:
        return _normalize(value, "$")
    except RecursionError as e:
        raise CanonicalizationError("Payload is nested too deeply") from e


def to_json_compatible(value: Any) -> Any:
    """
    Normalize a value into plain JSON types (dicts, lists, str, int, float,
    bool, None) using the same rules as the canonical form.

    Raises:
        CanonicalizationError: If the value has no JSON representation
    """
    return _normalize_root(value)


def canonical_string(payload: Mapping[str, Any]) -> str:
    """
    Render a payload in canonical text form.

    Args:
        payload: Mapping of string keys to JSON-compatible values

    Returns:
        Canonical JSON string (signature field excluded)

    Raises:
        CanonicalizationError: If the payload has no canonical representation
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    if not isinstance(payload, Mapping):
        raise CanonicalizationError(
            f"Payload must be a mapping, got {type(payload).__name__}"
        )

    unsigned = {k: v for k, v in payload.items() if k != SIGNATURE_FIELD}
    normalized = _normalize_root(unsigned)

    # Key order comes from _normalize
    return json.dumps(
        normalized,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def canonicalize(payload: Mapping[str, Any]) -> bytes:
    """
    Render a payload as the canonical bytes used for signing.

    Args:
        payload: Mapping of string keys to JSON-compatible values

    Returns:
        UTF-8 encoded canonical JSON (signature field excluded)
    """
    return canonical_string(payload).encode("utf-8")
