"""Utility modules for the Search Share Engine."""

from .config import Settings, get_settings
from .coercion import (
    MAX_POSITION,
    coerce_volume,
    coerce_float,
    coerce_flag,
    coerce_position,
    round_half_up,
    safe_share,
)

__all__ = [
    "Settings",
    "get_settings",
    # Numeric coercion
    "MAX_POSITION",
    "coerce_volume",
    "coerce_float",
    "coerce_flag",
    "coerce_position",
    "round_half_up",
    "safe_share",
]
