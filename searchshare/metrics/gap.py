"""
Growth Gap Classifier

    Growth_Gap = SOV - SOS

A positive gap (visibility ahead of demand) is read as a leading
indicator of market-share growth, a negative one as visibility lagging
behind brand demand.

Thresholds (standard scheme):
    > +5pp: growing
    < -5pp: declining
    otherwise: neutral

Only the analyzed brand's gap drives project status. Competitor gaps are
computed the same way for table display.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from .helpers import GAP_THRESHOLDS, GapThresholds
from .share import EntityMetrics


_INTERPRETATIONS: Dict[str, str] = {
    "growing": "SOV exceeds SOS - this predicts future market share growth.",
    "declining": "SOS exceeds SOV - brand demand is not matched by category visibility.",
    "neutral": "SOS and SOV are aligned - push SOV higher to drive growth.",
    "growth_potential": "Visibility is ahead of brand demand - growth potential.",
    "missing_opportunities": "Visibility trails brand demand - missing opportunities.",
    "balanced": "Visibility and brand demand are balanced.",
}


@dataclass(frozen=True)
class GrowthGap:
    """Signed gap and its classification."""
    gap: float
    status: str
    interpretation: str
    thresholds: GapThresholds = GAP_THRESHOLDS

    def to_dict(self) -> Dict[str, object]:
        return {
            "gap": self.gap,
            "status": self.status,
            "interpretation": self.interpretation,
            "strategy": self.thresholds.name,
        }


def classify_gap(gap: float, thresholds: GapThresholds = GAP_THRESHOLDS) -> str:
    """Status label for a gap value under the given threshold scheme."""
    return thresholds.classify(gap)


def calculate_growth_gap(
    sos: float,
    sov: float,
    thresholds: GapThresholds = GAP_THRESHOLDS,
) -> GrowthGap:
    """
    Calculate the growth gap for a brand.

    Args:
        sos: Share of Search (0-100)
        sov: Share of Voice (0-100)
        thresholds: Gap threshold scheme (standard +/-5pp by default)

    Returns:
        GrowthGap with gap, status and interpretation
    """
    gap = sov - sos
    status = classify_gap(gap, thresholds)
    return GrowthGap(
        gap=gap,
        status=status,
        interpretation=_INTERPRETATIONS.get(status, ""),
        thresholds=thresholds,
    )


def calculate_entity_gaps(
    entities: Sequence[EntityMetrics],
    thresholds: GapThresholds = GAP_THRESHOLDS,
) -> List[Dict[str, object]]:
    """Gap and status for every entity, for table display."""
    rows = []
    for entity in entities:
        growth_gap = calculate_growth_gap(entity.sos, entity.sov, thresholds)
        rows.append({
            "name": entity.name,
            "is_own_brand": entity.is_own_brand,
            "gap": growth_gap.gap,
            "status": growth_gap.status,
        })
    return rows
