"""Engine configuration."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Engine settings loaded from ``PORTION_ENGINE_*`` environment variables."""

    reference_data_dir: Path | None = None
    debug: bool = False
    log_level: str = "INFO"
    default_serving_grams: float = Field(default=100.0, gt=0)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="PORTION_ENGINE_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
