"""
Application configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import WildcardMode


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Catalog
    catalog_path: Path = Field(
        default=Path("config/validation_rules.yaml"),
        description="Default rule catalog loaded by the CLI",
    )

    # Matcher settings
    max_query_fields: int = Field(
        default=10,
        ge=0,
        description="Widest query accepted before invoking the matcher",
    )
    wildcard_mode: WildcardMode = Field(
        default=WildcardMode.NULL,
        description="null: only None is a wildcard; falsy: any falsy value is",
    )
    matcher_memoize: bool = Field(
        default=True, description="Cache repeated relaxation sub-problems"
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
