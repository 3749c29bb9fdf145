"""
Share of Search and Share of Voice Calculators

Share of Search (SOS):
    SOS = Entity_Brand_Volume / Σ Brand_Volume × 100

    Every tracked entity, the analyzed brand included, is in the
    denominator: SOS is the entity's share of combined branded demand.

Share of Voice (SOV):
    Visible_Volume = Σ (Keyword_Volume × CTR(position))
    SOV = Visible_Volume / Total_Market_Volume × 100

    Total_Market_Volume is Σ Keyword_Volume over the supplied market
    keywords, unless the keyword-expansion service supplied a broader total.
    In that case the numerator is still computed only over the supplied
    keyword/position pairs, so SOV is a conservative estimate. Pass the
    expanded keyword list (with its positions) as `keywords` to remove the
    asymmetry.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .helpers import CANONICAL_CTR, CTRCurve
from searchshare.models.inputs import EntityInput, MarketKeywordInput
from searchshare.utils.coercion import coerce_position, round_half_up, safe_share

logger = logging.getLogger(__name__)


SOV_METHOD_SEED = "seed"
SOV_METHOD_CONSERVATIVE = "conservative"


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class EntityMetrics:
    """Per-entity metrics as carried in a snapshot's all_brands list."""
    name: str
    volume: int = 0
    is_own_brand: bool = False
    domain: Optional[str] = None
    sos: float = 0.0
    sov: float = 0.0
    visible_volume: int = 0

    @property
    def gap(self) -> float:
        return self.sov - self.sos

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "domain": self.domain,
            "volume": self.volume,
            "isOwnBrand": self.is_own_brand,
            "sos": self.sos,
            "sov": self.sov,
            "visibleVolume": self.visible_volume,
        }


@dataclass(frozen=True)
class KeywordVisibility:
    """One keyword's contribution to an entity's visible volume."""
    keyword: str
    volume: int
    position: Optional[int]         # None when unranked
    ctr: float
    visible_volume: float           # unrounded

    def to_dict(self) -> Dict[str, object]:
        return {
            "keyword": self.keyword,
            "volume": self.volume,
            "position": self.position,
            "ctr": self.ctr,
            "visibleVolume": self.visible_volume,
        }


@dataclass
class SOSResult:
    """Share of Search for every entity, in input order."""
    total_brand_volume: int = 0
    shares: List[float] = field(default_factory=list)


@dataclass
class SOVResult:
    """Share of Voice for every entity, in input order."""
    total_market_volume: int = 0
    seed_keyword_volume: int = 0
    visible_volumes: List[float] = field(default_factory=list)  # unrounded
    shares: List[float] = field(default_factory=list)
    method: str = SOV_METHOD_SEED
    # One row per keyword for each entity, in keyword order
    keyword_breakdown: List[Tuple[KeywordVisibility, ...]] = field(default_factory=list)

    @property
    def rounded_visible_volumes(self) -> List[int]:
        return [round_half_up(v) for v in self.visible_volumes]


# =============================================================================
# SHARE OF SEARCH
# =============================================================================

def calculate_sos(entities: Sequence[EntityInput]) -> SOSResult:
    """
    Calculate Share of Search for each entity.

    Args:
        entities: Brand and competitors with branded search volumes

    Returns:
        SOSResult with the combined volume and one share per entity
    """
    total_brand_volume = sum(e.volume for e in entities)
    return SOSResult(
        total_brand_volume=total_brand_volume,
        shares=[safe_share(e.volume, total_brand_volume) for e in entities],
    )


# =============================================================================
# SHARE OF VOICE
# =============================================================================

def calculate_keyword_breakdown(
    entity_name: str,
    keywords: Sequence[MarketKeywordInput],
    positions: Dict[str, Dict[str, int]],
    ctr_curve: CTRCurve = CANONICAL_CTR,
) -> Tuple[KeywordVisibility, ...]:
    """
    Per-keyword position, CTR and visible volume for one entity.

    Args:
        entity_name: Entity as named in the position matrix
        keywords: Market keywords in position-matrix index order
        positions: keyword index -> entity name -> SERP rank
        ctr_curve: Position-to-CTR curve

    Returns:
        One KeywordVisibility per keyword, unranked keywords included
    """
    rows = []
    for index, keyword in enumerate(keywords):
        position = coerce_position(positions.get(str(index), {}).get(entity_name))
        ctr = ctr_curve.ctr(position)
        rows.append(KeywordVisibility(
            keyword=keyword.keyword,
            volume=keyword.volume,
            position=position,
            ctr=ctr,
            visible_volume=keyword.volume * ctr,
        ))
    return tuple(rows)


def calculate_visible_volume(
    entity_name: str,
    keywords: Sequence[MarketKeywordInput],
    positions: Dict[str, Dict[str, int]],
    ctr_curve: CTRCurve = CANONICAL_CTR,
) -> float:
    """
    CTR-weighted traffic an entity is estimated to capture.

    Returns the unrounded sum; round once at the output boundary.
    """
    breakdown = calculate_keyword_breakdown(entity_name, keywords, positions, ctr_curve)
    return _sum_visible(breakdown)


def _sum_visible(breakdown: Sequence[KeywordVisibility]) -> float:
    visible_volume = 0.0
    for row in breakdown:
        visible_volume += row.visible_volume
    return visible_volume


def calculate_sov(
    entities: Sequence[EntityInput],
    keywords: Sequence[MarketKeywordInput],
    positions: Dict[str, Dict[str, int]],
    total_market_volume_override: Optional[int] = None,
    ctr_curve: CTRCurve = CANONICAL_CTR,
) -> SOVResult:
    """
    Calculate Share of Voice for each entity.

    Args:
        entities: Brand and competitors
        keywords: Market keywords in position-matrix index order
        positions: keyword index -> entity name -> SERP rank
        total_market_volume_override: Broader denominator from keyword
            expansion, used only when > 0
        ctr_curve: Position-to-CTR curve

    Returns:
        SOVResult with unrounded visible volumes and shares
    """
    seed_keyword_volume = sum(k.volume for k in keywords)

    if total_market_volume_override and total_market_volume_override > 0:
        total_market_volume = total_market_volume_override
        method = SOV_METHOD_CONSERVATIVE
    else:
        total_market_volume = seed_keyword_volume
        method = SOV_METHOD_SEED

    keyword_breakdown = [
        calculate_keyword_breakdown(e.name, keywords, positions, ctr_curve)
        for e in entities
    ]
    visible_volumes = [_sum_visible(rows) for rows in keyword_breakdown]

    # An override smaller than the seed set could otherwise push SOV past 100
    shares = [
        min(100.0, safe_share(visible, total_market_volume))
        for visible in visible_volumes
    ]

    return SOVResult(
        total_market_volume=total_market_volume,
        seed_keyword_volume=seed_keyword_volume,
        visible_volumes=visible_volumes,
        shares=shares,
        method=method,
        keyword_breakdown=keyword_breakdown,
    )
