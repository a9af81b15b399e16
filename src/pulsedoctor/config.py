"""Configuration for pulsedoctor.

Created: 2026-10-18

Settings come from environment variables prefixed with ``PULSEDOCTOR_``
(e.g. ``PULSEDOCTOR_BASE_URL``) and an optional ``.env`` file. The CLI
overrides individual values on top of that.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Audit engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="PULSEDOCTOR_",
        env_file=".env",
        extra="ignore",
    )

    # Route probing
    base_url: str = Field(default="http://127.0.0.1:8080", description="Origin probed routes hang off")
    probe_timeout: float = Field(default=3.0, gt=0, description="Seconds before a route probe fails")

    # Simulated flakiness and repair odds
    noise_probability: float = Field(default=0.1, ge=0, le=1)
    partial_repair_success_rate: float = Field(default=0.9, ge=0, le=1)
    broken_repair_success_rate: float = Field(default=0.7, ge=0, le=1)
    repair_delay: float = Field(default=0.2, ge=0)
    seed: int | None = None

    # Module catalog (JSON); built-in catalog when unset
    registry_path: Path | None = None

    # Periodic audits
    watchdog_interval: float = Field(default=300.0, gt=0)

    # API server
    api_host: str = "127.0.0.1"
    api_port: int = 8890

    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def load(cls, **overrides) -> Settings:
        """Load from the environment, applying non-None overrides."""
        return cls(**{k: v for k, v in overrides.items() if v is not None})


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings (cached)."""
    return Settings.load()
