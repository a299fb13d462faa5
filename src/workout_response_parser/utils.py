"""Utility functions."""
import re
from typing import Any, Optional

_LEADING_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def to_int(s: Optional[str]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    try:
        return int(s) if s is not None else None
    except Exception:
        return None


def to_float(s: Optional[str]) -> Optional[float]:
    """Convert string to float, returning None if conversion fails."""
    try:
        return float(s) if s is not None else None
    except Exception:
        return None


def upper_from_range(txt: str) -> Optional[int]:
    """Extract upper bound from a range string like '10-12'."""
    try:
        a, b = txt.replace("–", "-").split("-", 1)
        return int(b.strip())
    except Exception:
        return None


def coerce_int(value: Any) -> Optional[int]:
    """Best-effort conversion of a model-supplied number to int.

    Accepts ints, floats, numeric strings ("45", "45 seconds") and ranges
    ("8-12", upper bound wins). Booleans and anything else yield None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    upper = upper_from_range(text)
    if upper is not None:
        return upper
    match = _LEADING_NUMBER_RE.match(text)
    if match:
        return int(float(match.group(1)))
    return None


def coerce_float(value: Any) -> Optional[float]:
    """Like coerce_int but keeps fractional values."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER_RE.match(value)
        if match:
            return float(match.group(1))
    return None


def as_list(value: Any) -> list:
    """Coerce a possibly-missing sequence field to a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [value] if value.strip() else []
    return []
