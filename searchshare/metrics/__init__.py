"""
Metrics Module for the Search Share Engine

This module provides the share-of-search / share-of-voice calculations:

1. **Share of Search** (0-100)
   A brand's share of combined branded search volume among itself and
   tracked competitors.

2. **Share of Voice** (0-100)
   CTR-weighted visibility across market (non-brand) keywords.
   Visible_Volume = Σ (Keyword_Volume × CTR(position))

3. **Growth Gap** (SOV - SOS)
   > +5pp growing, < -5pp declining, otherwise neutral.

Example Usage:
    from searchshare.metrics import compute_snapshot, generate_recommendations

    snapshot = compute_snapshot({
        "brand": {"name": "Acme", "volume": 12100},
        "competitors": [{"name": "Globex", "volume": 18100}],
        "market_keywords": [{"keyword": "running shoes", "volume": 10000}],
        "positions": {"0": {"Acme": 1, "Globex": 4}},
    })
    print(f"SOS {snapshot.sos:.1f}% / SOV {snapshot.sov:.1f}% ({snapshot.status})")

    for rec in generate_recommendations(snapshot, {"market_keyword_count": 1}):
        print(rec.priority, rec.title)
"""

# Helper utilities and constants
from .helpers import (
    # CTR
    CTR_CURVE,
    CTR_TAIL_BANDS,
    LEGACY_CTR_CURVE,
    MAX_CTR,
    CTRModel,
    CTRCurve,
    CANONICAL_CTR,
    LEGACY_CTR,
    get_ctr_curve,
    get_ctr_for_position,

    # Gap thresholds
    GrowthStatus,
    GapStrategy,
    GapThresholds,
    GAP_THRESHOLDS,
    NARROW_GAP_THRESHOLDS,
    get_gap_thresholds,
)

# SOS / SOV
from .share import (
    EntityMetrics,
    KeywordVisibility,
    SOSResult,
    SOVResult,
    SOV_METHOD_SEED,
    SOV_METHOD_CONSERVATIVE,
    calculate_sos,
    calculate_sov,
    calculate_visible_volume,
    calculate_keyword_breakdown,
)

# Growth Gap
from .gap import (
    GrowthGap,
    classify_gap,
    calculate_growth_gap,
    calculate_entity_gaps,
)

# Snapshots
from .snapshot import (
    Snapshot,
    SnapshotDelta,
    SnapshotHistory,
    compute_snapshot,
    compare_snapshots,
    parse_timestamp,
    parse_month,
)

# Trends
from .trends import (
    TREND_PERIODS,
    calculate_sos_trend,
    build_history_table,
)

# Recommendations
from .recommendations import (
    LOW_SOV_THRESHOLD,
    Recommendation,
    RecommendationPriority,
    RecommendationCategory,
    generate_recommendations,
    sort_by_priority,
)

__all__ = [
    # Helpers
    "CTR_CURVE",
    "CTR_TAIL_BANDS",
    "LEGACY_CTR_CURVE",
    "MAX_CTR",
    "CTRModel",
    "CTRCurve",
    "CANONICAL_CTR",
    "LEGACY_CTR",
    "get_ctr_curve",
    "get_ctr_for_position",
    "GrowthStatus",
    "GapStrategy",
    "GapThresholds",
    "GAP_THRESHOLDS",
    "NARROW_GAP_THRESHOLDS",
    "get_gap_thresholds",

    # Share
    "EntityMetrics",
    "KeywordVisibility",
    "SOSResult",
    "SOVResult",
    "SOV_METHOD_SEED",
    "SOV_METHOD_CONSERVATIVE",
    "calculate_sos",
    "calculate_sov",
    "calculate_visible_volume",
    "calculate_keyword_breakdown",

    # Gap
    "GrowthGap",
    "classify_gap",
    "calculate_growth_gap",
    "calculate_entity_gaps",

    # Snapshots
    "Snapshot",
    "SnapshotDelta",
    "SnapshotHistory",
    "compute_snapshot",
    "compare_snapshots",
    "parse_timestamp",
    "parse_month",

    # Trends
    "TREND_PERIODS",
    "calculate_sos_trend",
    "build_history_table",

    # Recommendations
    "LOW_SOV_THRESHOLD",
    "Recommendation",
    "RecommendationPriority",
    "RecommendationCategory",
    "generate_recommendations",
    "sort_by_priority",
]

__version__ = "1.0.0"
