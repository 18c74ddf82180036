"""Configuration management using pydantic-settings."""
import logging
import os
import sys
from enum import Enum
from functools import lru_cache
from typing import Any, Literal, Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from partsort.errors import ConfigurationError


class ResortPolicy(str, Enum):
    """How a resort treats a listing's existing category."""
    ALWAYS_OVERWRITE = "always_overwrite"
    OVERWRITE_WHEN_CONFIDENT = "overwrite_when_confident"


class EngineSettings(BaseSettings):
    """Engine configuration loaded from environment variables.

    All settings prefixed with PARTSORT_ (e.g., PARTSORT_MIN_CONFIDENCE=45)
    """

    # Classification thresholds
    min_confidence: int = Field(
        default=40,
        ge=0,
        le=100,
        description="Winning confidence below this yields unknown"
    )
    high_confidence: int = Field(
        default=80,
        ge=0,
        le=100,
        description="Confidence regarded as a decisive classification"
    )
    tie_margin: float = Field(
        default=5.0,
        ge=0,
        description="Raw score distance treated as a near-tie"
    )

    # Duplicate matching thresholds
    auto_merge_threshold: float = Field(
        default=0.9,
        ge=0,
        le=1,
        description="Similarity >= this is auto-mergeable"
    )
    review_threshold: float = Field(
        default=0.7,
        ge=0,
        le=1,
        description="Similarity >= this goes to the review queue"
    )
    max_candidates: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum duplicate candidates returned per listing"
    )

    # Resort configuration
    resort_max_workers: int = Field(
        default_factory=lambda: os.cpu_count() or 1,
        ge=1,
        description="Worker threads used by bulk resort (bounds concurrency; CPU parallelism only on free-threaded builds)"
    )
    resort_policy: ResortPolicy = Field(
        default=ResortPolicy.OVERWRITE_WHEN_CONFIDENT,
        description="Whether resort may overwrite an existing category"
    )
    resort_min_confidence: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Confidence required to overwrite an existing category"
    )

    # Rule table
    rule_table_path: Optional[str] = Field(
        default=None,
        description="JSON rule table; built-in defaults when unset"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    environment: Literal["development", "staging", "production"] = "development"

    model_config = SettingsConfigDict(
        env_prefix="PARTSORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def check_consistency(self) -> None:
        """Raise ConfigurationError when thresholds contradict each other."""
        if self.review_threshold > self.auto_merge_threshold:
            raise ConfigurationError(
                "review_threshold must not exceed auto_merge_threshold",
                details={
                    "review_threshold": self.review_threshold,
                    "auto_merge_threshold": self.auto_merge_threshold,
                },
            )
        if self.min_confidence > self.high_confidence:
            raise ConfigurationError(
                "min_confidence must not exceed high_confidence",
                details={
                    "min_confidence": self.min_confidence,
                    "high_confidence": self.high_confidence,
                },
            )


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached engine settings."""
    return EngineSettings()


def configure_logging(settings: Optional[EngineSettings] = None) -> None:
    """Configure structlog.

    JSON output in production, coloured console output elsewhere.
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
