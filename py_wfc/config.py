"""Configuration management."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings pulled from ``WFC_*`` environment variables or ``.env``."""

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Logging format (console or json)"
    )

    # Randomness
    default_seed: str = Field(
        default="default", description="Seed of the process-wide Alea PRNG"
    )

    # Collapse
    default_chance: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Probability of ignoring minimal entropy when picking a cell",
    )
    default_effect_distance: int = Field(
        default=1, ge=0, description="Neighbourhood radius re-evaluated after a change"
    )
    max_contradictions: Optional[int] = Field(
        default=1000,
        ge=0,
        description="Rolled-back attempts allowed in one run (None for unbounded)",
    )
    max_attempts: int = Field(
        default=100, ge=1, description="Whole-grid retries made by generate()"
    )

    model_config = SettingsConfigDict(
        env_prefix="WFC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
