"""
Pytest Configuration and Shared Fixtures

Provides common project inputs and snapshot records for all test modules.
"""

import pytest
from datetime import datetime, timezone
from typing import Any, Dict


# ============================================================================
# Clock
# ============================================================================

@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic creation time for snapshots."""
    return datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)


# ============================================================================
# Mock Project Fixtures
# ============================================================================

@pytest.fixture
def sportswear_project() -> Dict[str, Any]:
    """Brand with four competitors (SOS scenario: 12100 of 77500)."""
    return {
        "brand": {"name": "Stride", "domain": "stride.com", "volume": 12100},
        "competitors": [
            {"name": "Pacer", "domain": "pacer.com", "volume": 18100},
            {"name": "Sprintly", "domain": "sprintly.com", "volume": 14800},
            {"name": "Trailmark", "domain": "trailmark.com", "volume": 5400},
            {"name": "Apexrun", "domain": "apexrun.com", "volume": 27100},
        ],
        "marketKeywords": [
            {"keyword": "running shoes", "volume": 10000},
        ],
        "positions": {
            "0": {"Stride": 1, "Pacer": 3, "Apexrun": 2},
        },
    }


@pytest.fixture
def single_keyword_project() -> Dict[str, Any]:
    """One market keyword, brand at position 1, no branded volume split."""
    return {
        "brand": {"name": "Stride", "volume": 1000},
        "competitors": [{"name": "Pacer", "volume": 1000}],
        "market_keywords": [{"keyword": "trail running shoes", "volume": 10000}],
        "positions": {"0": {"Stride": 1}},
    }


@pytest.fixture
def multi_keyword_project() -> Dict[str, Any]:
    """Three keywords with sparse positions across three entities."""
    return {
        "brand": {"name": "Stride", "volume": 5000},
        "competitors": [
            {"name": "Pacer", "volume": 3000},
            {"name": "Sprintly", "volume": 2000},
        ],
        "market_keywords": [
            {"keyword": "running shoes", "volume": 8000},
            {"keyword": "trail shoes", "volume": 2000},
            {"keyword": "marathon shoes", "volume": 1500},
        ],
        "positions": {
            "0": {"Stride": 2, "Pacer": 1, "Sprintly": 15},
            "1": {"Stride": 11, "Pacer": 45},
            "2": {"Sprintly": 80},
        },
    }


@pytest.fixture
def stored_snapshot_record() -> Dict[str, Any]:
    """Snapshot as stored by the persistence layer (camelCase, partial)."""
    return {
        "date": "2024-02",
        "timestamp": "2024-02-01T10:00:00.000Z",
        "brandVolume": 12100,
        "totalBrandVolume": 77500,
        "totalMarketVolume": 10000,
        "visibleVolume": 3160,
        "sos": 15.6,
        "sov": 31.6,
        "gap": 16.0,
        "status": "growing",
        "allBrandsData": [
            {"name": "Stride", "volume": 12100, "isBrand": True, "sos": 15.6, "sov": 31.6, "visibleVolume": 3160},
            {"name": "Apexrun", "volume": 27100, "isBrand": False, "sos": 35.0, "sov": 15.8, "visibleVolume": 1580},
        ],
    }
