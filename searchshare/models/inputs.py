"""
Engine Input Records

Pydantic models for the records handed to the metrics engine by the
surrounding application. Numeric fields are coerced here so the metric
functions only ever see clean values:

- missing / None / non-numeric volumes become 0, negatives clamp to 0
- positions outside 1..100 are dropped (treated as unranked)
- keyword-index keys of the position matrix are normalized to strings

Both snake_case and the camelCase keys used by the persistence layer are
accepted.
"""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from searchshare.utils.coercion import coerce_flag, coerce_position, coerce_volume


class EntityInput(BaseModel):
    """A brand or competitor with its monthly branded search volume."""
    name: str = ""
    domain: Optional[str] = None
    volume: int = 0
    is_own_brand: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_own_brand", "isOwnBrand", "isBrand"),
    )

    class Config:
        extra = "ignore"

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("volume", mode="before")
    @classmethod
    def _coerce_volume(cls, value: Any) -> int:
        return coerce_volume(value)

    @field_validator("is_own_brand", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return coerce_flag(value)


class MarketKeywordInput(BaseModel):
    """A non-brand category keyword with its search volume."""
    keyword: str = ""
    volume: int = 0

    class Config:
        extra = "ignore"

    @field_validator("keyword", mode="before")
    @classmethod
    def _coerce_keyword(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("volume", mode="before")
    @classmethod
    def _coerce_volume(cls, value: Any) -> int:
        return coerce_volume(value)


class ProjectInput(BaseModel):
    """
    Everything needed to compute one snapshot.

    positions maps keyword index -> entity name -> SERP rank. A missing
    entry means "not ranked within observed depth".

    total_market_volume_override comes from the external keyword-expansion
    service; when > 0 it replaces the summed keyword volume as the SOV
    denominator.
    """
    brand: EntityInput = Field(default_factory=EntityInput)
    competitors: List[EntityInput] = Field(default_factory=list)
    market_keywords: List[MarketKeywordInput] = Field(
        default_factory=list,
        validation_alias=AliasChoices("market_keywords", "marketKeywords"),
    )
    positions: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    total_market_volume_override: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices(
            "total_market_volume_override",
            "totalMarketVolumeOverride",
            "expandedTotalMarketVolume",
        ),
    )
    expanded_keyword_count: int = Field(
        default=0,
        validation_alias=AliasChoices("expanded_keyword_count", "expandedKeywordCount"),
    )

    class Config:
        extra = "ignore"

    @field_validator("brand", mode="before")
    @classmethod
    def _default_brand(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("competitors", "market_keywords", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("positions", mode="before")
    @classmethod
    def _normalize_positions(cls, value: Any) -> Dict[str, Dict[str, int]]:
        if not value:
            return {}
        if isinstance(value, list):
            value = dict(enumerate(value))
        if not isinstance(value, dict):
            return {}

        matrix: Dict[str, Dict[str, int]] = {}
        for keyword_index, ranks in value.items():
            if not isinstance(ranks, dict):
                continue
            row = {}
            for entity_name, position in ranks.items():
                rank = coerce_position(position)
                if rank is not None:
                    row[str(entity_name)] = rank
            matrix[str(keyword_index)] = row
        return matrix

    @field_validator("total_market_volume_override", mode="before")
    @classmethod
    def _coerce_override(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        return coerce_volume(value)

    @field_validator("expanded_keyword_count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        if isinstance(value, (list, tuple)):
            return len(value)
        return coerce_volume(value)

    @classmethod
    def from_value(cls, value: Any) -> "ProjectInput":
        """Accept an existing ProjectInput or a plain dict."""
        if isinstance(value, cls):
            return value
        return cls.model_validate(value or {})

    def entities(self) -> List[EntityInput]:
        """Brand first (flagged as own brand), then competitors in input order."""
        brand = self.brand.model_copy(update={"is_own_brand": True})
        competitors = [
            c.model_copy(update={"is_own_brand": False}) for c in self.competitors
        ]
        return [brand] + competitors

    def position_for(self, keyword_index: int, entity_name: str) -> Optional[int]:
        """SERP rank of an entity on a keyword, None if unranked."""
        return self.positions.get(str(keyword_index), {}).get(entity_name)


class RecommendationContext(BaseModel):
    """Project context the recommendation rules need beyond the snapshot."""
    market_keyword_count: int = Field(
        default=0,
        validation_alias=AliasChoices(
            "market_keyword_count", "marketKeywordCount", "marketKeywords",
        ),
    )

    class Config:
        extra = "ignore"

    @field_validator("market_keyword_count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        if isinstance(value, (list, tuple)):
            return len(value)
        return coerce_volume(value)

    @classmethod
    def from_value(cls, value: Any) -> "RecommendationContext":
        if isinstance(value, cls):
            return value
        if isinstance(value, ProjectInput):
            return cls(market_keyword_count=len(value.market_keywords))
        return cls.model_validate(value or {})
