"""Application configuration."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .standards import LiftStandards


class Settings(BaseSettings):
    """Settings loaded from FORMCHECK_* environment variables or a .env file."""

    model_config = SettingsConfigDict(env_prefix="FORMCHECK_", env_file=".env", extra="ignore")

    log_level: str = "INFO"

    # Optional JSON file overriding the default lift standards
    standards_path: Optional[str] = None
    # Directory holding sample_<lift>_side.json pose files
    sample_dir: str = "./samples"

    # Live feedback
    live_buffer_seconds: float = 6.0
    live_feedback_every: int = 15  # frames between recomputations

    def load_standards(self) -> LiftStandards:
        if self.standards_path:
            return LiftStandards.from_json(self.standards_path)
        return LiftStandards()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
