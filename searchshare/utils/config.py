"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.

Only entry points read settings; the metric functions take explicit
parameters.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Metric models
    CTR_MODEL: str = "canonical"        # canonical | legacy
    GAP_STRATEGY: str = "standard"      # standard (+/-5pp) | narrow (+/-2pp)

    # Recommendation / quality thresholds
    LOW_SOV_THRESHOLD: float = 10.0
    SOS_CLOSURE_TOLERANCE: float = 0.1

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
