"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from resize_cache.constants import CACHE_DIR, HASH_LENGTH
from resize_cache.models import CacheConfig


class Settings(BaseSettings):
    """Settings loaded from ``RESIZE_CACHE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RESIZE_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Cache layout
    root_dir: Path = Field(
        default=Path("."),
        description="Site root that sources and the cache directory live under"
    )
    cache_subdir: str = Field(
        default=CACHE_DIR,
        description="Cache directory relative to root_dir"
    )
    hash_length: int = Field(
        default=HASH_LENGTH,
        ge=8,
        le=64,
        description="Hex characters kept from the content digest"
    )

    # Publishing
    baseurl: str = Field(
        default="",
        description="Prefix joined to published cache paths"
    )

    # Logging
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file with rotation"
    )
    log_dir: Path = Field(
        default=Path("output/logs"),
        description="Directory for log files"
    )
    log_max_age_days: int = Field(
        default=7,
        ge=1,
        le=30,
        description="Maximum age of log files to keep (days)"
    )

    def cache_config(self, root_dir: Path | None = None) -> CacheConfig:
        """Build the explicit cache configuration, optionally for another root."""
        return CacheConfig(
            root_dir=root_dir if root_dir is not None else self.root_dir,
            cache_subdir=self.cache_subdir,
            hash_length=self.hash_length,
        )


# Global settings instance
settings = Settings()
