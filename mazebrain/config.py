"""Application configuration using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mazebrain.core.path_search import SearchLimits

# Project root directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Key trials recurse; stay well under the interpreter recursion limit
MAX_SEARCH_DEPTH = 200


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        env_file_encoding="utf-8",
        env_prefix="MAZEBRAIN_",
        case_sensitive=False,
    )

    # Application
    app_name: str = "MazeBrain"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:8080"

    # Search limits
    max_search_depth: int = 64  # nested key trials
    max_search_expansions: int = 250_000  # rooms dequeued per solve

    @field_validator("max_search_depth", "max_search_expansions")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Search limits must leave room for at least one step."""
        if v <= 0:
            raise ValueError("Search limits must be positive")
        return v

    @field_validator("max_search_depth")
    @classmethod
    def validate_search_depth(cls, v: int) -> int:
        """Each nested key trial takes two stack frames."""
        if v > MAX_SEARCH_DEPTH:
            raise ValueError(f"Search depth must be at most {MAX_SEARCH_DEPTH}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.debug:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def search_limits(self) -> SearchLimits:
        """Search limits for new solver sessions."""
        return SearchLimits(
            max_depth=self.max_search_depth,
            max_expansions=self.max_search_expansions,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
