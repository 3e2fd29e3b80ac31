"""
Lenient type coercion for numeric fields.

Form tools and dashboards send numbers as strings, sometimes with a
trailing unit ("12 calls") or as decimals where an integer is
expected.  Values are read the way a person would read them: the
leading number counts, anything unreadable is zero.  Integers are
clamped to the signed 64-bit range of the count columns and floats
that overflow to infinity become zero, so every result can be stored.
Nothing here raises.
"""

import math
import re
from typing import Any

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


def _clamp(value: int) -> int:
    return max(INT_MIN, min(INT_MAX, value))


def _parse_int(digits: str) -> int:
    # Longer digit runs are out of range anyway; skip int() on huge strings
    if len(digits.lstrip("+-").lstrip("0")) > len(str(INT_MAX)):
        return INT_MIN if digits.startswith("-") else INT_MAX
    return _clamp(int(digits))


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def to_int(value: Any) -> int:
    """Coerce ``value`` to an integer, truncating decimals; 0 if unreadable."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return _clamp(value)
    if isinstance(value, float):
        return _clamp(int(value)) if math.isfinite(value) else 0
    match = _LEADING_INT.match(str(value))
    return _parse_int(match.group(1)) if match else 0


def to_float(value: Any) -> float:
    """Coerce ``value`` to a finite float; 0.0 if absent or unreadable."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            return _finite(float(value))
        except OverflowError:
            # int too large for a double
            return 0.0
    match = _LEADING_FLOAT.match(str(value))
    return _finite(float(match.group(1))) if match else 0.0


def to_text(value: Any) -> str:
    """Stringify ``value``; ``None`` becomes the empty string."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
