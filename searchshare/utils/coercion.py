"""
Numeric Coercion

Every numeric input to the engine degrades to 0 (or "unranked") rather
than raising.
"""

import math
from typing import Any, Optional


MAX_POSITION = 100


def _to_finite_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_volume(value: Any) -> int:
    """
    Coerce a search volume to a non-negative integer.

    Missing, non-numeric and negative values become 0.
    """
    number = _to_finite_float(value)
    if number is None or number <= 0:
        return 0
    return int(number)


def coerce_float(value: Any) -> float:
    """Coerce a stored metric to float, 0.0 when missing or non-numeric."""
    number = _to_finite_float(value)
    return 0.0 if number is None else number


def coerce_position(value: Any) -> Optional[int]:
    """
    Coerce a SERP position to an int in 1..MAX_POSITION.

    Returns None for unranked: missing, 0, negative, > 100 or non-numeric.
    """
    number = _to_finite_float(value)
    if number is None:
        return None
    rank = int(number)
    if rank < 1 or rank > MAX_POSITION:
        return None
    return rank


_TRUE_STRINGS = frozenset({"1", "true", "t", "yes", "y", "on"})


def coerce_flag(value: Any) -> bool:
    """
    Coerce a stored boolean flag.

    Strings are parsed ("true", "1", "yes" ... -> True); anything else
    string-like, such as "false" or "0", is False.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    number = _to_finite_float(value)
    if number is not None:
        return number != 0
    return bool(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves up."""
    return int(math.floor(value + 0.5))


def safe_share(part: float, total: float) -> float:
    """Percentage share of part in total, 0.0 when total is not positive."""
    if total <= 0:
        return 0.0
    return (part / total) * 100
