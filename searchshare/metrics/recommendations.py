"""
Recommendation Engine

Rule-based insights derived from a snapshot. Rules run in a fixed order
and each adds zero or one recommendation:

1. Growth gap: growth / visibility-gap / balanced message
2. SOS rank: leader message, or the gap to the SOS leader
3. Low category visibility: SOV under 10% with market keywords tracked

Recommendations are regenerated on demand from the latest snapshot and
never stored.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .helpers import GAP_THRESHOLDS, GapThresholds
from .snapshot import Snapshot
from searchshare.models.inputs import RecommendationContext

logger = logging.getLogger(__name__)


LOW_SOV_THRESHOLD = 10.0


class RecommendationPriority(str, Enum):
    """Urgency of a recommendation."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationCategory(str, Enum):
    """Which rule produced a recommendation."""
    GROWTH_GAP = "growth_gap"
    MARKET_POSITION = "market_position"
    VISIBILITY = "visibility"


PRIORITY_ORDER: Dict[str, int] = {
    RecommendationPriority.HIGH.value: 0,
    RecommendationPriority.MEDIUM.value: 1,
    RecommendationPriority.LOW.value: 2,
}


@dataclass(frozen=True)
class Recommendation:
    """A prioritized, human-readable insight."""
    priority: str
    title: str
    message: str
    icon: str = ""
    category: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "priority": self.priority,
            "icon": self.icon,
            "title": self.title,
            "message": self.message,
            "category": self.category,
        }


# =============================================================================
# RULES
# =============================================================================

def _growth_gap_rule(snapshot: Snapshot, thresholds: GapThresholds) -> Recommendation:
    sos, sov, gap = snapshot.sos, snapshot.sov, snapshot.gap

    if gap > thresholds.upper:
        return Recommendation(
            priority=RecommendationPriority.LOW.value,
            icon="🚀",
            title="Strong Growth Position",
            message=(
                f"Your SOV ({sov:.1f}%) exceeds SOS ({sos:.1f}%) by {gap:.1f}pp. "
                f"This \"excess share of voice\" predicts market share growth. "
                f"Keep investing in visibility."
            ),
            category=RecommendationCategory.GROWTH_GAP.value,
        )

    if gap < thresholds.lower:
        return Recommendation(
            priority=RecommendationPriority.HIGH.value,
            icon="⚠️",
            title="Visibility Gap Alert",
            message=(
                f"Your SOS ({sos:.1f}%) exceeds SOV ({sov:.1f}%) by {abs(gap):.1f}pp. "
                f"People are searching for your brand, but you're losing visibility "
                f"on category terms. Prioritize SEO investment."
            ),
            category=RecommendationCategory.GROWTH_GAP.value,
        )

    return Recommendation(
        priority=RecommendationPriority.MEDIUM.value,
        icon="📊",
        title="Balanced Position",
        message=(
            f"Your SOS and SOV are closely aligned ({abs(gap):.1f}pp gap). "
            f"To drive growth, aim for SOV to exceed SOS by 5-10 percentage points."
        ),
        category=RecommendationCategory.GROWTH_GAP.value,
    )


def _sos_rank_rule(snapshot: Snapshot) -> Optional[Recommendation]:
    if not snapshot.all_brands:
        return None

    # Stable sort: on ties the earlier entity (the brand) keeps the lead
    ranked = sorted(snapshot.all_brands, key=lambda b: b.sos, reverse=True)
    brand_rank = next(
        (i + 1 for i, b in enumerate(ranked) if b.is_own_brand),
        0,
    )

    if brand_rank == 1:
        return Recommendation(
            priority=RecommendationPriority.LOW.value,
            icon="👑",
            title="Brand Demand Leader",
            message=(
                f"You lead in Share of Search with {snapshot.sos:.1f}%. Focus on "
                f"maintaining brand salience and defending against challenger brands."
            ),
            category=RecommendationCategory.MARKET_POSITION.value,
        )

    leader = ranked[0]
    return Recommendation(
        priority=RecommendationPriority.MEDIUM.value,
        icon="🎯",
        title=f"Gap to {leader.name}",
        message=(
            f"{leader.name} leads SOS with {leader.sos:.1f}% vs your {snapshot.sos:.1f}%. "
            f"Consider brand campaigns targeting their audience segments."
        ),
        category=RecommendationCategory.MARKET_POSITION.value,
    )


def _low_visibility_rule(
    snapshot: Snapshot,
    context: RecommendationContext,
    low_sov_threshold: float,
) -> Optional[Recommendation]:
    if snapshot.sov >= low_sov_threshold or context.market_keyword_count <= 0:
        return None

    return Recommendation(
        priority=RecommendationPriority.HIGH.value,
        icon="🔍",
        title="Low Category Visibility",
        message=(
            f"Only {snapshot.sov:.1f}% visibility on market keywords. Audit your SEO "
            f"strategy - focus on ranking improvements for high-volume category terms."
        ),
        category=RecommendationCategory.VISIBILITY.value,
    )


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def generate_recommendations(
    snapshot: Any,
    context: Any = None,
    thresholds: GapThresholds = GAP_THRESHOLDS,
    low_sov_threshold: float = LOW_SOV_THRESHOLD,
) -> List[Recommendation]:
    """
    Generate recommendations for a snapshot.

    Deterministic: the same snapshot and context always give the same list.

    Args:
        snapshot: Snapshot or a stored snapshot record (dict)
        context: RecommendationContext, ProjectInput, or a dict with
            market_keyword_count / marketKeywords
        thresholds: Gap threshold scheme for the growth gap rule
        low_sov_threshold: SOV (%) under which visibility is flagged

    Returns:
        Recommendations in rule order
    """
    if not isinstance(snapshot, Snapshot):
        snapshot = Snapshot.from_dict(snapshot)
    context = RecommendationContext.from_value(context)

    recommendations = [_growth_gap_rule(snapshot, thresholds)]

    rank_recommendation = _sos_rank_rule(snapshot)
    if rank_recommendation:
        recommendations.append(rank_recommendation)

    visibility_recommendation = _low_visibility_rule(snapshot, context, low_sov_threshold)
    if visibility_recommendation:
        recommendations.append(visibility_recommendation)

    logger.debug(
        f"Generated {len(recommendations)} recommendations "
        f"(gap {snapshot.gap:+.1f}pp, SOV {snapshot.sov:.1f}%)"
    )
    return recommendations


def sort_by_priority(recommendations: List[Recommendation]) -> List[Recommendation]:
    """High -> medium -> low, keeping rule order within a priority."""
    return sorted(recommendations, key=lambda r: PRIORITY_ORDER.get(r.priority, len(PRIORITY_ORDER)))
