"""
Test Suite for the Snapshot Runner Script

Tests run() end to end against temporary project and history files.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from compute_snapshot import run  # noqa: E402


@pytest.fixture
def project_file(tmp_path, sportswear_project):
    path = tmp_path / "stride.json"
    path.write_text(json.dumps(sportswear_project), encoding="utf-8")
    return path


class TestRun:
    """Test the runner entry point."""

    def test_without_history(self, project_file):
        result = run(project_file)

        assert result["snapshot"]["status"] == "growing"
        assert result["snapshot"]["sov"] == pytest.approx(31.6)
        assert result["delta"] is None
        assert len(result["history"]) == 1
        assert [r["title"] for r in result["recommendations"]] == [
            "Strong Growth Position",
            "Gap to Apexrun",
        ]
        assert result["quality"]["passed"] is True

    def test_history_file_appended(self, project_file, tmp_path):
        history_path = tmp_path / "history.json"

        run(project_file, history_path=history_path)
        result = run(project_file, history_path=history_path)

        records = json.loads(history_path.read_text(encoding="utf-8"))
        assert len(records) == 2
        assert result["delta"]["sov"] == pytest.approx(0.0)
        assert result["history"][1]["sos_change"] == pytest.approx(0.0)

    def test_strategy_overrides(self, project_file):
        result = run(project_file, ctr_model="legacy", gap_strategy="narrow")

        assert result["snapshot"]["sov"] == pytest.approx(28.0)
        assert result["snapshot"]["status"] == "growth_potential"

    def test_unknown_strategy(self, project_file):
        with pytest.raises(ValueError):
            run(project_file, ctr_model="exponential")

    def test_history_with_partial_record(self, project_file, tmp_path):
        """A stored record without timestamp or date does not block the run."""
        history_path = tmp_path / "history.json"
        history_path.write_text(
            json.dumps([{"sos": 10, "sov": 20}, {"date": "2024-01", "sos": 12.0, "sov": 30.0}]),
            encoding="utf-8",
        )

        result = run(project_file, history_path=history_path)

        records = json.loads(history_path.read_text(encoding="utf-8"))
        assert len(records) == 2
        assert result["delta"]["sos"] == pytest.approx(result["snapshot"]["sos"] - 12.0)
        assert result["snapshot"]["keywordBreakdown"][0]["position"] == 1
