"""
Search Share Engine - Input Models

Records supplied by the surrounding application to the metrics engine.
"""

from .inputs import (
    EntityInput,
    MarketKeywordInput,
    ProjectInput,
    RecommendationContext,
)

__all__ = [
    "EntityInput",
    "MarketKeywordInput",
    "ProjectInput",
    "RecommendationContext",
]
