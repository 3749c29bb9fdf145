"""
Test Suite for Engine Input Records

Tests:
- Volume and position coercion
- camelCase / snake_case keys
- Entity ordering and own-brand flag
"""

import pytest

from searchshare.models import EntityInput, ProjectInput, RecommendationContext
from searchshare.utils import coerce_flag, coerce_position, coerce_volume, round_half_up, safe_share


class TestCoercion:
    """Test numeric coercion helpers."""

    @pytest.mark.parametrize("value,expected", [
        (1200, 1200),
        ("1200", 1200),
        (1200.9, 1200),
        (None, 0),
        (-50, 0),
        ("n/a", 0),
        (float("nan"), 0),
        (True, 0),
    ])
    def test_coerce_volume(self, value, expected):
        assert coerce_volume(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (1, 1),
        ("7", 7),
        (100, 100),
        (101, None),
        (0, None),
        (-3, None),
        (None, None),
        ("unranked", None),
    ])
    def test_coerce_position(self, value, expected):
        assert coerce_position(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (True, True),
        (False, False),
        (None, False),
        ("true", True),
        (" Yes ", True),
        ("1", True),
        ("false", False),
        ("0", False),
        ("", False),
        (1, True),
        (0, False),
    ])
    def test_coerce_flag(self, value, expected):
        assert coerce_flag(value) is expected

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_safe_share(self):
        assert safe_share(25, 100) == 25.0
        assert safe_share(25, 0) == 0.0


class TestEntityInput:
    """Test brand / competitor records."""

    def test_aliases(self):
        assert EntityInput.model_validate({"name": "Stride", "isBrand": True}).is_own_brand
        assert EntityInput.model_validate({"name": "Stride", "isOwnBrand": True}).is_own_brand

    def test_string_flag(self):
        """A stored "false" string is not an own-brand flag."""
        assert not EntityInput.model_validate({"name": "Pacer", "isBrand": "false"}).is_own_brand
        assert EntityInput.model_validate({"name": "Stride", "isBrand": "true"}).is_own_brand

    def test_dirty_values(self):
        entity = EntityInput.model_validate({"name": None, "volume": "-12", "extra": 1})

        assert entity.name == ""
        assert entity.volume == 0


class TestProjectInput:
    """Test project records."""

    def test_camel_case_keys(self, sportswear_project):
        project = ProjectInput.from_value(sportswear_project)

        assert len(project.market_keywords) == 1
        assert project.market_keywords[0].volume == 10000
        assert project.total_market_volume_override is None

    def test_entities_order_and_flags(self, sportswear_project):
        """Brand always first and flagged, competitors never flagged."""
        sportswear_project["competitors"][0]["isBrand"] = True
        project = ProjectInput.from_value(sportswear_project)

        entities = project.entities()

        assert [e.name for e in entities][:2] == ["Stride", "Pacer"]
        assert [e.is_own_brand for e in entities] == [True, False, False, False, False]

    def test_positions_normalized(self):
        project = ProjectInput.from_value({
            "positions": {0: {"Stride": "3", "Pacer": 0, "Sprintly": 150}, "1": {"Stride": None}},
        })

        assert project.positions == {"0": {"Stride": 3}, "1": {}}
        assert project.position_for(0, "Stride") == 3
        assert project.position_for(0, "Pacer") is None
        assert project.position_for(5, "Stride") is None

    def test_positions_as_list(self):
        project = ProjectInput.from_value({"positions": [{"Stride": 1}, {"Stride": 4}]})
        assert project.positions == {"0": {"Stride": 1}, "1": {"Stride": 4}}

    def test_null_collections(self):
        project = ProjectInput.from_value({"brand": None, "competitors": None, "marketKeywords": None})

        assert project.brand.name == ""
        assert project.competitors == []
        assert project.market_keywords == []

    def test_expansion_fields(self):
        project = ProjectInput.from_value({
            "expandedTotalMarketVolume": "52000",
            "expandedKeywordCount": [{"keyword": "a"}, {"keyword": "b"}],
        })

        assert project.total_market_volume_override == 52000
        assert project.expanded_keyword_count == 2

    def test_from_value_passthrough(self, sportswear_project):
        project = ProjectInput.from_value(sportswear_project)
        assert ProjectInput.from_value(project) is project


class TestRecommendationContext:
    """Test recommendation context inputs."""

    def test_from_project(self, multi_keyword_project):
        project = ProjectInput.from_value(multi_keyword_project)
        assert RecommendationContext.from_value(project).market_keyword_count == 3

    def test_from_keyword_list(self):
        context = RecommendationContext.from_value({"marketKeywords": [{"keyword": "a"}]})
        assert context.market_keyword_count == 1

    def test_default(self):
        assert RecommendationContext.from_value(None).market_keyword_count == 0
