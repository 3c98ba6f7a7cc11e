"""
Configuration Module

Settings are read from the environment (and a local ``.env`` file).
Secrets have no defaults.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = Field(default="ZenSpace Planner")
    LOG_LEVEL: str = Field(default="INFO")

    # =========================================================================
    # PERSISTENCE
    # =========================================================================
    BACKEND: Literal["memory", "supabase"] = Field(default="memory")
    SEED_DEMO_DATA: bool = Field(default=True, description="memory backend only")
    SUPABASE_URL: Optional[str] = Field(default=None)
    SUPABASE_KEY: Optional[str] = Field(default=None)
    REPOSITORY_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    REPOSITORY_READ_RETRIES: int = Field(default=2, ge=0)
    REPOSITORY_BACKOFF_SECONDS: float = Field(default=0.5, ge=0)

    # =========================================================================
    # ASSISTANT (OpenAI)
    # =========================================================================
    OPENAI_API_KEY: Optional[str] = Field(default=None)
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    ASSISTANT_TIMEOUT_SECONDS: float = Field(default=20.0, gt=0)

    # =========================================================================
    # PLANNING GRID
    # =========================================================================
    OPENING_HOUR: int = Field(default=8, ge=0, le=23)
    CLOSING_HOUR: int = Field(default=21, ge=1, le=24)

    @model_validator(mode="after")
    def _check(self) -> "Settings":
        if self.CLOSING_HOUR <= self.OPENING_HOUR:
            raise ValueError("CLOSING_HOUR must be after OPENING_HOUR")
        if self.BACKEND == "supabase" and not (self.SUPABASE_URL and self.SUPABASE_KEY):
            raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for supabase")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
