"""
Share of Search Trends

Two views over time:

1. SOS trend from historical branded volumes: each tracked brand's SOS
   now, 6 months ago and 12 months ago, normalized within each period.
2. History table: one row per stored snapshot with the change against
   the snapshot before it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .snapshot import Snapshot
from searchshare.utils.coercion import coerce_volume, safe_share

logger = logging.getLogger(__name__)


# (period name, months back); 0 reads the "current" volume
TREND_PERIODS: Tuple[Tuple[str, int], ...] = (
    ("now", 0),
    ("6m", 6),
    ("12m", 12),
)


def months_before(now: datetime, months: int) -> Tuple[int, int]:
    """(year, month) of the calendar month `months` before now."""
    index = now.year * 12 + (now.month - 1) - months
    return index // 12, index % 12 + 1


def get_volume_for_month(monthly: Iterable[Dict[str, Any]], year: int, month: int) -> int:
    """Volume of the monthly entry for year/month, 0 if absent."""
    for entry in monthly or []:
        if coerce_volume(entry.get("year")) == year and coerce_volume(entry.get("month")) == month:
            return coerce_volume(entry.get("volume"))
    return 0


def calculate_sos_trend(
    historical_data: Dict[str, Dict[str, Any]],
    brand_names: Sequence[str],
    now: Optional[datetime] = None,
) -> Dict[str, Dict[str, float]]:
    """
    Calculate SOS per brand for each trend period.

    Args:
        historical_data: lower-cased brand name ->
            {"current": int, "monthly": [{"year", "month", "volume"}]}
        brand_names: Brands to include (brand and competitors)
        now: Reference time (defaults to current UTC time)

    Returns:
        brand name -> {"now": sos, "6m": sos, "12m": sos}
    """
    now = now or datetime.now(timezone.utc)
    trends: Dict[str, Dict[str, float]] = {name: {} for name in brand_names}

    for period, months_back in TREND_PERIODS:
        year, month = months_before(now, months_back)
        volumes: Dict[str, int] = {}

        for name in brand_names:
            data = (historical_data or {}).get(name.lower())
            if not data or data.get("monthly") is None:
                continue
            if months_back == 0:
                volumes[name] = coerce_volume(data.get("current"))
            else:
                volumes[name] = get_volume_for_month(data["monthly"], year, month)

        total_volume = sum(volumes.values())
        for name in brand_names:
            trends[name][period] = safe_share(volumes.get(name, 0), total_volume)

    missing = [n for n in brand_names if n.lower() not in (historical_data or {})]
    if missing:
        logger.debug(f"No historical volumes for: {', '.join(missing)}")

    return trends


def build_history_table(snapshots: Sequence[Snapshot]) -> List[Dict[str, Any]]:
    """
    One row per snapshot, oldest first, with changes against the prior row.

    Changes are None on the first row.
    """
    rows = []
    previous: Optional[Snapshot] = None
    for snapshot in snapshots:
        rows.append({
            "date": snapshot.date,
            "timestamp": snapshot.timestamp,
            "sos": snapshot.sos,
            "sov": snapshot.sov,
            "gap": snapshot.gap,
            "status": snapshot.status,
            "sos_change": None if previous is None else snapshot.sos - previous.sos,
            "sov_change": None if previous is None else snapshot.sov - previous.sov,
        })
        previous = snapshot
    return rows
