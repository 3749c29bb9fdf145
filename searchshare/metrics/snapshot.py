"""
Snapshot Assembler

Composes Share of Search, Share of Voice and the Growth Gap into one
immutable, timestamped record, and keeps a project's snapshots as an
append-only history.

Snapshots are never edited after creation. Every "recompute" appends a
new snapshot, even when one already exists for the same month. Deltas
between snapshots are derived on read and never stored.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .gap import calculate_growth_gap, classify_gap
from .helpers import CANONICAL_CTR, GAP_THRESHOLDS, CTRCurve, GapThresholds
from .share import (
    SOV_METHOD_SEED,
    EntityMetrics,
    KeywordVisibility,
    calculate_sos,
    calculate_sov,
)
from searchshare.models.inputs import ProjectInput
from searchshare.utils.coercion import coerce_flag, coerce_float, coerce_position, coerce_volume

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class Snapshot:
    """One immutable computation of all metrics for a project."""
    date: str                       # YYYY-MM of creation
    timestamp: str                  # ISO-8601
    brand_volume: int
    total_brand_volume: int
    total_market_volume: int
    sos: float
    sov: float
    visible_volume: int
    gap: float
    status: str
    all_brands: Tuple[EntityMetrics, ...] = ()

    # Keyword expansion metadata
    seed_keyword_volume: int = 0
    seed_keyword_count: int = 0
    expanded_keyword_count: int = 0
    has_expanded_data: bool = False
    sov_method: str = SOV_METHOD_SEED

    # Brand's per-keyword visibility, derived at computation time
    keyword_breakdown: Tuple[KeywordVisibility, ...] = ()

    @property
    def brand(self) -> Optional[EntityMetrics]:
        """The analyzed brand's row, None for partial stored records."""
        return next((b for b in self.all_brands if b.is_own_brand), None)

    @property
    def competitors(self) -> List[EntityMetrics]:
        return [b for b in self.all_brands if not b.is_own_brand]

    @property
    def created_at(self) -> datetime:
        """
        Creation time. Stored records without a valid timestamp fall back
        to the start of their YYYY-MM month.

        Raises:
            ValueError: If neither timestamp nor date can be parsed
        """
        try:
            return parse_timestamp(self.timestamp)
        except ValueError:
            pass
        try:
            return parse_month(self.date)
        except ValueError:
            raise ValueError(
                f"Snapshot has no usable timestamp ({self.timestamp!r}) or date ({self.date!r})"
            ) from None

    def to_dict(self) -> Dict[str, Any]:
        """Record shape consumed by persistence, UI and report export."""
        return {
            "date": self.date,
            "timestamp": self.timestamp,
            "brandVolume": self.brand_volume,
            "totalBrandVolume": self.total_brand_volume,
            "totalMarketVolume": self.total_market_volume,
            "seedKeywordVolume": self.seed_keyword_volume,
            "sos": self.sos,
            "sov": self.sov,
            "visibleVolume": self.visible_volume,
            "gap": self.gap,
            "status": self.status,
            "allBrands": [b.to_dict() for b in self.all_brands],
            "hasExpandedData": self.has_expanded_data,
            "expandedKeywordCount": self.expanded_keyword_count,
            "seedKeywordCount": self.seed_keyword_count,
            "sovMethod": self.sov_method,
            "keywordBreakdown": [k.to_dict() for k in self.keyword_breakdown],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """
        Rebuild a snapshot from a stored record.

        Accepts camelCase or snake_case keys; missing numerics default to 0.
        """
        data = data or {}

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        raw_brands = pick("allBrands", "all_brands", "allBrandsData", default=[]) or []
        all_brands = tuple(
            _entity_from_dict(b) for b in raw_brands if isinstance(b, dict)
        )

        raw_keywords = pick("keywordBreakdown", "keyword_breakdown", "rankedKeywords", default=[]) or []
        keyword_breakdown = tuple(
            _keyword_from_dict(k) for k in raw_keywords if isinstance(k, dict)
        )

        sos = coerce_float(pick("sos"))
        sov = coerce_float(pick("sov"))
        gap = coerce_float(pick("gap", default=sov - sos))

        return cls(
            date=str(pick("date", default="")),
            timestamp=str(pick("timestamp", default="")),
            brand_volume=coerce_volume(pick("brandVolume", "brand_volume")),
            total_brand_volume=coerce_volume(pick("totalBrandVolume", "total_brand_volume")),
            total_market_volume=coerce_volume(pick("totalMarketVolume", "total_market_volume")),
            sos=sos,
            sov=sov,
            visible_volume=coerce_volume(pick("visibleVolume", "visible_volume")),
            gap=gap,
            status=str(pick("status", default=classify_gap(gap))),
            all_brands=all_brands,
            seed_keyword_volume=coerce_volume(pick("seedKeywordVolume", "seed_keyword_volume")),
            seed_keyword_count=coerce_volume(pick("seedKeywordCount", "seed_keyword_count")),
            expanded_keyword_count=coerce_volume(
                pick("expandedKeywordCount", "expanded_keyword_count")
            ),
            has_expanded_data=coerce_flag(pick("hasExpandedData", "has_expanded_data")),
            sov_method=str(pick("sovMethod", "sov_method", default=SOV_METHOD_SEED)),
            keyword_breakdown=keyword_breakdown,
        )


@dataclass(frozen=True)
class SnapshotDelta:
    """Change in the headline metrics between two snapshots."""
    sos: float
    sov: float
    gap: float
    from_timestamp: str = ""
    to_timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sos": self.sos,
            "sov": self.sov,
            "gap": self.gap,
            "fromTimestamp": self.from_timestamp,
            "toTimestamp": self.to_timestamp,
        }


def _entity_from_dict(data: Dict[str, Any]) -> EntityMetrics:
    is_own_brand = data.get("isOwnBrand", data.get("is_own_brand", data.get("isBrand", False)))
    visible = data.get("visibleVolume", data.get("visible_volume"))
    return EntityMetrics(
        name="" if data.get("name") is None else str(data.get("name")),
        volume=coerce_volume(data.get("volume")),
        is_own_brand=coerce_flag(is_own_brand),
        domain=data.get("domain"),
        sos=coerce_float(data.get("sos")),
        sov=coerce_float(data.get("sov")),
        visible_volume=coerce_volume(visible),
    )


def _keyword_from_dict(data: Dict[str, Any]) -> KeywordVisibility:
    return KeywordVisibility(
        keyword="" if data.get("keyword") is None else str(data.get("keyword")),
        volume=coerce_volume(data.get("volume")),
        position=coerce_position(data.get("position")),
        ctr=coerce_float(data.get("ctr")),
        visible_volume=coerce_float(data.get("visibleVolume", data.get("visible_volume"))),
    )


def parse_month(value: str) -> datetime:
    """
    Start of a YYYY-MM month as a UTC datetime.

    Raises:
        ValueError: If the value is not a YYYY-MM month
    """
    return datetime.strptime((value or "").strip(), "%Y-%m").replace(tzinfo=timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp
    """
    text = (value or "").strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# ASSEMBLY
# =============================================================================

def compute_snapshot(
    project: Any,
    now: Optional[datetime] = None,
    ctr_curve: CTRCurve = CANONICAL_CTR,
    thresholds: GapThresholds = GAP_THRESHOLDS,
) -> Snapshot:
    """
    Compute a snapshot from brand, competitor, keyword and position data.

    Args:
        project: ProjectInput or a dict of the same shape
        now: Creation time (defaults to current UTC time)
        ctr_curve: Position-to-CTR curve for SOV
        thresholds: Gap threshold scheme for status

    Returns:
        Snapshot
    """
    project = ProjectInput.from_value(project)
    now = now or datetime.now(timezone.utc)

    entities = project.entities()
    sos_result = calculate_sos(entities)
    sov_result = calculate_sov(
        entities,
        project.market_keywords,
        project.positions,
        total_market_volume_override=project.total_market_volume_override,
        ctr_curve=ctr_curve,
    )

    visible_volumes = sov_result.rounded_visible_volumes
    all_brands = tuple(
        EntityMetrics(
            name=entity.name,
            volume=entity.volume,
            is_own_brand=entity.is_own_brand,
            domain=entity.domain,
            sos=sos_result.shares[i],
            sov=sov_result.shares[i],
            visible_volume=visible_volumes[i],
        )
        for i, entity in enumerate(entities)
    )

    brand = all_brands[0]
    growth_gap = calculate_growth_gap(brand.sos, brand.sov, thresholds)
    has_expanded_data = sov_result.method != SOV_METHOD_SEED

    snapshot = Snapshot(
        date=now.strftime("%Y-%m"),
        timestamp=now.isoformat(),
        brand_volume=brand.volume,
        total_brand_volume=sos_result.total_brand_volume,
        total_market_volume=sov_result.total_market_volume,
        sos=brand.sos,
        sov=brand.sov,
        visible_volume=brand.visible_volume,
        gap=growth_gap.gap,
        status=growth_gap.status,
        all_brands=all_brands,
        seed_keyword_volume=sov_result.seed_keyword_volume,
        seed_keyword_count=len(project.market_keywords),
        expanded_keyword_count=project.expanded_keyword_count if has_expanded_data else 0,
        has_expanded_data=has_expanded_data,
        sov_method=sov_result.method,
        keyword_breakdown=sov_result.keyword_breakdown[0],
    )

    logger.debug(
        f"Computed snapshot for '{brand.name}': SOS {snapshot.sos:.1f}%, "
        f"SOV {snapshot.sov:.1f}%, gap {snapshot.gap:+.1f}pp ({snapshot.status})"
    )

    return snapshot


def compare_snapshots(latest: Snapshot, previous: Snapshot) -> SnapshotDelta:
    """Delta of latest relative to previous (latest - previous)."""
    return SnapshotDelta(
        sos=latest.sos - previous.sos,
        sov=latest.sov - previous.sov,
        gap=latest.gap - previous.gap,
        from_timestamp=previous.timestamp,
        to_timestamp=latest.timestamp,
    )


# =============================================================================
# HISTORY
# =============================================================================

class SnapshotHistory:
    """
    Append-only snapshot list for one project, ordered by timestamp.

    The history is owned by the caller. Creation must be serialized per
    project; append() rejects a snapshot older than the latest one.

    Usage:
        history = SnapshotHistory(project_id="acme")
        history.record(project_input)
        delta = history.latest_delta()
    """

    def __init__(
        self,
        snapshots: Optional[Iterable[Snapshot]] = None,
        project_id: Optional[str] = None,
    ):
        self.project_id = project_id
        self._snapshots: List[Snapshot] = []
        for snapshot in snapshots or []:
            self.append(snapshot)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Dict[str, Any]],
        project_id: Optional[str] = None,
    ) -> "SnapshotHistory":
        """
        Load stored records, ordering them by creation time.

        Records dated only by month sort at the start of that month; ties
        keep their stored order. Records with neither a timestamp nor a
        date cannot be placed in the history and are skipped.
        """
        dated = []
        for record in records:
            snapshot = Snapshot.from_dict(record)
            try:
                created_at = snapshot.created_at
            except ValueError as e:
                logger.warning(f"Skipping stored snapshot for project {project_id or '<unnamed>'}: {e}")
                continue
            dated.append((created_at, snapshot))

        dated.sort(key=lambda item: item[0])
        return cls([snapshot for _, snapshot in dated], project_id=project_id)

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(list(self._snapshots))

    @property
    def snapshots(self) -> Tuple[Snapshot, ...]:
        return tuple(self._snapshots)

    @property
    def latest(self) -> Optional[Snapshot]:
        """Current metrics: the most recent snapshot."""
        return self._snapshots[-1] if self._snapshots else None

    @property
    def previous(self) -> Optional[Snapshot]:
        return self._snapshots[-2] if len(self._snapshots) > 1 else None

    def append(self, snapshot: Snapshot) -> Snapshot:
        """
        Append a snapshot. Never replaces an existing one.

        Raises:
            ValueError: If the snapshot is older than the latest one
        """
        created_at = snapshot.created_at
        if self._snapshots and created_at < self._snapshots[-1].created_at:
            raise ValueError(
                f"Snapshot {snapshot.timestamp} is older than latest "
                f"{self._snapshots[-1].timestamp}; snapshot creation must be serialized"
            )
        self._snapshots.append(snapshot)
        logger.info(
            f"Appended snapshot #{len(self._snapshots)} for project "
            f"{self.project_id or '<unnamed>'} ({snapshot.date}, status={snapshot.status})"
        )
        return snapshot

    def record(
        self,
        project: Any,
        now: Optional[datetime] = None,
        ctr_curve: CTRCurve = CANONICAL_CTR,
        thresholds: GapThresholds = GAP_THRESHOLDS,
    ) -> Snapshot:
        """Compute a snapshot for the project and append it."""
        snapshot = compute_snapshot(project, now=now, ctr_curve=ctr_curve, thresholds=thresholds)
        return self.append(snapshot)

    def by_month(self, month: str) -> List[Snapshot]:
        """All snapshots created in a YYYY-MM month, oldest first."""
        return [s for s in self._snapshots if s.date == month]

    def latest_delta(self) -> Optional[SnapshotDelta]:
        """Change from the previous snapshot to the latest one."""
        if self.previous is None:
            return None
        return compare_snapshots(self.latest, self.previous)

    def overall_trend(self) -> Optional[SnapshotDelta]:
        """Change from the oldest snapshot to the latest one."""
        if len(self._snapshots) < 2:
            return None
        return compare_snapshots(self._snapshots[-1], self._snapshots[0])

    def to_records(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self._snapshots]
