"""
Metric Helper Functions and Constants

Contains the CTR curves and gap thresholds used across all
share-of-search and share-of-voice calculations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from searchshare.utils.coercion import MAX_POSITION, coerce_position


# ============================================================================
# CTR CURVES (Sistrix-style decay, industry averages)
# ============================================================================

CTR_CURVE: Dict[int, float] = {
    1: 0.316,   # 31.6% CTR for position 1
    2: 0.158,   # 15.8%
    3: 0.110,   # 11.0%
    4: 0.077,   # 7.7%
    5: 0.053,   # 5.3%
    6: 0.043,   # 4.3%
    7: 0.035,   # 3.5%
    8: 0.030,   # 3.0%
    9: 0.026,   # 2.6%
    10: 0.023,  # 2.3%
}

# (last position in band, flat CTR) for positions beyond the table
CTR_TAIL_BANDS: Tuple[Tuple[int, float], ...] = (
    (20, 0.01),     # Page 2
    (50, 0.005),    # Pages 3-5
    (100, 0.001),   # Page 6+
)

# Steeper dashboard curve, kept as a named alternate only
LEGACY_CTR_CURVE: Dict[int, float] = {
    1: 0.28,
    2: 0.15,
    3: 0.09,
    4: 0.06,
    5: 0.04,
    6: 0.03,
    7: 0.025,
    8: 0.02,
    9: 0.018,
    10: 0.015,
    11: 0.012,
    12: 0.01,
    13: 0.009,
    14: 0.008,
    15: 0.007,
    16: 0.006,
    17: 0.005,
    18: 0.004,
    19: 0.003,
    20: 0.002,
}

LEGACY_CTR_TAIL_BANDS: Tuple[Tuple[int, float], ...] = (
    (100, 0.001),
)


class CTRModel(Enum):
    """Available position-to-CTR curves."""
    CANONICAL = "canonical"
    LEGACY = "legacy"


@dataclass(frozen=True)
class CTRCurve:
    """A per-rank CTR table plus flat bands for deeper positions."""
    name: str
    by_position: Dict[int, float]
    tail_bands: Tuple[Tuple[int, float], ...]

    @property
    def max_ctr(self) -> float:
        return max(self.by_position.values())

    def ctr(self, position: Any) -> float:
        """CTR for a SERP position; unranked or out of range gives 0.0."""
        rank = coerce_position(position)
        if rank is None:
            return 0.0
        if rank in self.by_position:
            return self.by_position[rank]
        for last_position, ctr in self.tail_bands:
            if rank <= last_position:
                return ctr
        return 0.0


CANONICAL_CTR = CTRCurve(
    name=CTRModel.CANONICAL.value,
    by_position=CTR_CURVE,
    tail_bands=CTR_TAIL_BANDS,
)

LEGACY_CTR = CTRCurve(
    name=CTRModel.LEGACY.value,
    by_position=LEGACY_CTR_CURVE,
    tail_bands=LEGACY_CTR_TAIL_BANDS,
)

MAX_CTR = CANONICAL_CTR.max_ctr

_CTR_CURVES: Dict[str, CTRCurve] = {
    CTRModel.CANONICAL.value: CANONICAL_CTR,
    CTRModel.LEGACY.value: LEGACY_CTR,
}


def get_ctr_curve(model: Any = CTRModel.CANONICAL) -> CTRCurve:
    """
    Look up a CTR curve by model name.

    Args:
        model: CTRModel or its string value

    Returns:
        CTRCurve

    Raises:
        ValueError: If the model name is unknown
    """
    key = model.value if isinstance(model, CTRModel) else str(model).strip().lower()
    if key not in _CTR_CURVES:
        raise ValueError(
            f"Unknown CTR model '{model}'. Expected one of: {', '.join(_CTR_CURVES)}"
        )
    return _CTR_CURVES[key]


def get_ctr_for_position(position: Any, curve: CTRCurve = CANONICAL_CTR) -> float:
    """
    Get estimated CTR for a SERP position.

    Args:
        position: SERP position (1-100), None if unranked
        curve: CTR curve to read from (canonical by default)

    Returns:
        Estimated CTR as decimal (0.0 - 1.0)
    """
    return curve.ctr(position)


# ============================================================================
# GROWTH GAP THRESHOLDS
# ============================================================================

class GrowthStatus(str, Enum):
    """Project-level status derived from the growth gap."""
    GROWING = "growing"
    DECLINING = "declining"
    NEUTRAL = "neutral"


class GapStrategy(Enum):
    """Available gap threshold schemes."""
    STANDARD = "standard"   # +/-5pp, shared engine default
    NARROW = "narrow"       # +/-2pp, dashboard interpretation


@dataclass(frozen=True)
class GapThresholds:
    """Gap cut-offs (percentage points) and the label for each band."""
    name: str
    upper: float
    lower: float
    positive_label: str
    negative_label: str
    neutral_label: str

    def classify(self, gap: float) -> str:
        if gap > self.upper:
            return self.positive_label
        if gap < self.lower:
            return self.negative_label
        return self.neutral_label


GAP_THRESHOLDS = GapThresholds(
    name=GapStrategy.STANDARD.value,
    upper=5.0,
    lower=-5.0,
    positive_label=GrowthStatus.GROWING.value,
    negative_label=GrowthStatus.DECLINING.value,
    neutral_label=GrowthStatus.NEUTRAL.value,
)

NARROW_GAP_THRESHOLDS = GapThresholds(
    name=GapStrategy.NARROW.value,
    upper=2.0,
    lower=-2.0,
    positive_label="growth_potential",
    negative_label="missing_opportunities",
    neutral_label="balanced",
)

_GAP_STRATEGIES: Dict[str, GapThresholds] = {
    GapStrategy.STANDARD.value: GAP_THRESHOLDS,
    GapStrategy.NARROW.value: NARROW_GAP_THRESHOLDS,
}


def get_gap_thresholds(strategy: Any = GapStrategy.STANDARD) -> GapThresholds:
    """
    Look up a gap threshold scheme by strategy name.

    Raises:
        ValueError: If the strategy name is unknown
    """
    key = strategy.value if isinstance(strategy, GapStrategy) else str(strategy).strip().lower()
    if key not in _GAP_STRATEGIES:
        raise ValueError(
            f"Unknown gap strategy '{strategy}'. Expected one of: {', '.join(_GAP_STRATEGIES)}"
        )
    return _GAP_STRATEGIES[key]

