"""
Search Share Engine

Compares a brand's search demand and search visibility against named
competitors:
1. Share of Search from branded search volumes
2. Share of Voice from CTR-weighted SERP positions on market keywords
3. Growth Gap (SOV - SOS) with a growing / neutral / declining status
4. Append-only snapshot history and rule-based recommendations
"""

__version__ = "1.0.0"
