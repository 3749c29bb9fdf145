"""
Snapshot Quality Checks

Verifies that a computed or stored snapshot satisfies the metric
invariants before it is shown or exported:

- SOS closure: Σ entity SOS ≈ 100 when there is branded volume
- Bounds: 0 <= SOS, SOV <= 100 for every entity
- Gap: gap == sov - sos, and status matches the threshold scheme
- Exactly one own-brand entity

Also emits an info-level hint when no entity is ranked on any market
keyword, a case the engine itself treats as plain zero visibility.

Checks never raise; they return a report.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from searchshare.metrics.helpers import GAP_THRESHOLDS, GapThresholds
from searchshare.metrics.snapshot import Snapshot

logger = logging.getLogger(__name__)


SOS_CLOSURE_TOLERANCE = 0.1
FLOAT_TOLERANCE = 1e-6


@dataclass
class QualityIssue:
    """A single invariant violation or hint."""
    severity: str  # critical, warning, info
    check: str     # Which check raised it
    message: str   # Human-readable description
    value: Any = None


@dataclass
class SnapshotQualityReport:
    """Result of checking one snapshot."""
    issues: List[QualityIssue] = field(default_factory=list)
    critical_count: int = 0
    warning_count: int = 0
    info_count: int = 0

    @property
    def passed(self) -> bool:
        return self.critical_count == 0

    def add_issue(self, severity: str, check: str, message: str, value: Any = None):
        """Add a quality issue"""
        self.issues.append(QualityIssue(
            severity=severity,
            check=check,
            message=message,
            value=value,
        ))

        if severity == "critical":
            self.critical_count += 1
        elif severity == "warning":
            self.warning_count += 1
        else:
            self.info_count += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "issues": [
                {
                    "severity": i.severity,
                    "check": i.check,
                    "message": i.message,
                }
                for i in self.issues
            ],
            "critical_count": self.critical_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
        }


def check_snapshot(
    snapshot: Snapshot,
    tolerance: float = SOS_CLOSURE_TOLERANCE,
    thresholds: GapThresholds = GAP_THRESHOLDS,
) -> SnapshotQualityReport:
    """
    Run all invariant checks on a snapshot.

    Args:
        snapshot: Snapshot to check
        tolerance: Allowed deviation of Σ SOS from 100
        thresholds: Gap scheme the snapshot's status was derived with

    Returns:
        SnapshotQualityReport
    """
    report = SnapshotQualityReport()

    # Own brand
    own_brands = [b for b in snapshot.all_brands if b.is_own_brand]
    if len(own_brands) != 1:
        report.add_issue(
            "critical", "own_brand",
            f"Expected exactly one own-brand entity, found {len(own_brands)}",
            len(own_brands),
        )

    # SOS closure
    if snapshot.total_brand_volume > 0 and snapshot.all_brands:
        sos_total = sum(b.sos for b in snapshot.all_brands)
        if abs(sos_total - 100) > tolerance:
            report.add_issue(
                "critical", "sos_closure",
                f"Entity SOS sums to {sos_total:.2f}%, expected 100%",
                sos_total,
            )

    # Bounds
    for entity in snapshot.all_brands:
        for metric in ("sos", "sov"):
            value = getattr(entity, metric)
            if value < 0 or value > 100 + FLOAT_TOLERANCE:
                report.add_issue(
                    "critical", "bounds",
                    f"{entity.name or '<unnamed>'} {metric.upper()} {value:.2f}% is outside 0-100",
                    value,
                )

    # Gap arithmetic and status
    if abs(snapshot.gap - (snapshot.sov - snapshot.sos)) > FLOAT_TOLERANCE:
        report.add_issue(
            "critical", "gap",
            f"Gap {snapshot.gap:.2f} does not equal SOV - SOS "
            f"({snapshot.sov - snapshot.sos:.2f})",
            snapshot.gap,
        )

    expected_status = thresholds.classify(snapshot.gap)
    if snapshot.status != expected_status:
        report.add_issue(
            "warning", "status",
            f"Status '{snapshot.status}' does not match '{expected_status}' "
            f"under the {thresholds.name} gap scheme",
            snapshot.status,
        )

    # Presentation hints
    if snapshot.seed_keyword_count > 0 and all(b.visible_volume == 0 for b in snapshot.all_brands):
        report.add_issue(
            "info", "no_rankings",
            "No tracked entity is ranked on any market keyword - SERP positions "
            "may not have been fetched",
        )

    if snapshot.has_expanded_data:
        report.add_issue(
            "info", "conservative_sov",
            "SOV denominator comes from expanded keywords while visibility is "
            "measured on seed keywords only - SOV is a conservative estimate",
        )

    if not report.passed:
        logger.warning(
            f"Snapshot {snapshot.timestamp or '<no timestamp>'} failed "
            f"{report.critical_count} quality checks"
        )

    return report
