"""
Permissive parsing helpers for MFL export payloads.

MFL sends every number as a string ("7", "0.625", "1234.56") and collapses
single-element arrays to a bare object. League data is already validated
upstream, so anything unparseable is read as 0 rather than reported.
"""

import math
import re
from typing import Any, List

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int(value: Any) -> int:
    """Leading-integer parse ("12.5" -> 12, "abc" -> 0, None -> 0)."""
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else 0
    if value is None:
        return 0
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else 0


def parse_float(value: Any) -> float:
    """Leading-decimal parse ("0.625" -> 0.625, "" -> 0.0)."""
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if value is None:
        return 0.0
    match = _FLOAT_PREFIX.match(str(value))
    return float(match.group(1)) if match else 0.0


def parse_number(value: Any) -> float:
    """Numbers pass through; strings are parsed; everything else is 0."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return parse_float(value)
    return 0


def as_list(value: Any) -> List[Any]:
    """Normalize MFL's "object or list of objects" fields to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def pad_franchise_id(value: Any) -> str:
    """MFL franchise ids are 4-digit, zero-padded strings."""
    return str(value).strip().zfill(4)
