#!/usr/bin/env python3
"""
Snapshot Runner

Computes a share-of-search / share-of-voice snapshot for a project file,
appends it to the project's history file and prints the snapshot, the
change against the previous snapshot and the recommendations as JSON.

Project file shape:
    {
      "brand": {"name": "Acme", "domain": "acme.com", "volume": 12100},
      "competitors": [{"name": "Globex", "volume": 18100}],
      "marketKeywords": [{"keyword": "running shoes", "volume": 10000}],
      "positions": {"0": {"Acme": 1, "Globex": 4}},
      "totalMarketVolumeOverride": 0
    }

Usage:
    python scripts/compute_snapshot.py project.json
    python scripts/compute_snapshot.py project.json --history history.json
    python scripts/compute_snapshot.py project.json --ctr-model legacy --gap-strategy narrow
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
from pydantic import ValidationError

from searchshare.metrics import (
    CTRModel,
    GapStrategy,
    SnapshotHistory,
    build_history_table,
    generate_recommendations,
    get_ctr_curve,
    get_gap_thresholds,
)
from searchshare.models import ProjectInput, RecommendationContext
from searchshare.quality import check_snapshot
from searchshare.utils import get_settings

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def load_json(path: Path, default=None):
    """Read a JSON file, returning default when it does not exist."""
    if default is not None and not path.exists():
        return default
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def run(
    project_path: Path,
    history_path: Path = None,
    ctr_model: str = None,
    gap_strategy: str = None,
) -> dict:
    """Compute, append and report one snapshot."""
    settings = get_settings()
    ctr_curve = get_ctr_curve(ctr_model or settings.CTR_MODEL)
    thresholds = get_gap_thresholds(gap_strategy or settings.GAP_STRATEGY)

    project = ProjectInput.from_value(load_json(project_path))

    records = load_json(history_path, default=[]) if history_path else []
    history = SnapshotHistory.from_records(records, project_id=project_path.stem)

    snapshot = history.record(project, ctr_curve=ctr_curve, thresholds=thresholds)
    delta = history.latest_delta()

    recommendations = generate_recommendations(
        snapshot,
        RecommendationContext.from_value(project),
        thresholds=thresholds,
        low_sov_threshold=settings.LOW_SOV_THRESHOLD,
    )
    quality = check_snapshot(
        snapshot,
        tolerance=settings.SOS_CLOSURE_TOLERANCE,
        thresholds=thresholds,
    )

    if history_path:
        history_path.write_text(
            json.dumps(history.to_records(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info(f"History saved to {history_path} ({len(history)} snapshots)")

    return {
        "snapshot": snapshot.to_dict(),
        "delta": delta.to_dict() if delta else None,
        "history": build_history_table(history.snapshots),
        "recommendations": [r.to_dict() for r in recommendations],
        "quality": quality.to_dict(),
    }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Compute a share-of-search / share-of-voice snapshot"
    )
    parser.add_argument(
        "project",
        help="Project JSON file (brand, competitors, marketKeywords, positions)"
    )
    parser.add_argument(
        "--history",
        default=None,
        help="History JSON file to append the snapshot to (created if missing)"
    )
    parser.add_argument(
        "--ctr-model",
        default=None,
        choices=[m.value for m in CTRModel],
        help="CTR curve (default: CTR_MODEL setting)"
    )
    parser.add_argument(
        "--gap-strategy",
        default=None,
        choices=[s.value for s in GapStrategy],
        help="Gap thresholds (default: GAP_STRATEGY setting)"
    )

    args = parser.parse_args()

    load_dotenv()
    setup_logging(get_settings().LOG_LEVEL)

    try:
        result = run(
            project_path=Path(args.project),
            history_path=Path(args.history) if args.history else None,
            ctr_model=args.ctr_model,
            gap_strategy=args.gap_strategy,
        )
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read input: {e}")
        sys.exit(1)
    except ValidationError as e:
        logger.error(f"Invalid project file: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
