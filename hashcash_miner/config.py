"""
Configuration for hashcash-miner.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings.

    All settings can be overridden via HASHCASH_* environment variables
    or a .env file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="HASHCASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging (always written to stderr)
    log_level: str = Field(default="WARNING", description="Minimum log level")
    log_format: str = Field(default="console", description="Log renderer: console or json")

    # Defaults for mine / sample
    computation_time_seconds: int = Field(
        default=10, ge=0, description="Search budget in seconds"
    )
    limit: int = Field(default=-1, description="Target difficulty (currently informational)")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
