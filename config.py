"""
Configuration settings for spaced-drill.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.models import SchedulerConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Scheduling
    # ========================================
    scheduling_algorithm: str = Field(
        default="smart_spaced",
        description="Registry key of the reinsertion strategy",
    )
    aggressiveness: Literal["gentle", "balanced", "intensive"] = Field(
        default="balanced",
        description="How soon missed cards reappear (Leitner box intervals)",
    )
    min_spacing: int = Field(
        default=2,
        description="Minimum cards before a missed card reappears",
    )
    max_spacing: int = Field(
        default=8,
        description="Maximum spacing for easy, rarely-missed cards",
    )
    cluster_limit: int = Field(
        default=2,
        description="Maximum consecutive reinserted cards",
    )
    progress_ratio: float = Field(
        default=0.3,
        description="Minimum share of the queue that stays new material",
    )
    difficulty_weight: float = Field(
        default=0.5,
        description="How strongly difficulty pulls a missed card earlier (0-1)",
    )

    # ========================================
    # Mastery
    # ========================================
    mastery_threshold: int = Field(
        default=3,
        description="Consecutive correct answers required to master a card",
    )
    mastery_dir: Path = Field(
        default=Path.home() / ".drill" / "mastery",
        description="Directory for per-deck mastery JSON files",
    )

    # ========================================
    # Sessions
    # ========================================
    session_history_limit: int = Field(
        default=50,
        description="Completed rounds kept for statistics",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="Logging level for the CLI sink",
    )

    def scheduler_config(self) -> SchedulerConfig:
        """
        Build a validated SchedulerConfig.

        Raises:
            InvalidConfigurationError: If the configured values are inconsistent
        """
        return SchedulerConfig(
            min_spacing=self.min_spacing,
            max_spacing=self.max_spacing,
            cluster_limit=self.cluster_limit,
            progress_ratio=self.progress_ratio,
            difficulty_weight=self.difficulty_weight,
            aggressiveness=self.aggressiveness,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
