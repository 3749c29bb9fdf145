"""
Quality Checks

Invariant checks for computed and stored snapshots.
"""

from .checks import (
    QualityIssue,
    SnapshotQualityReport,
    check_snapshot,
    SOS_CLOSURE_TOLERANCE,
)

__all__ = [
    "QualityIssue",
    "SnapshotQualityReport",
    "check_snapshot",
    "SOS_CLOSURE_TOLERANCE",
]
