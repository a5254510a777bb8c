"""Configuration management for the passthrough proxy."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream Configuration
    base_url: str = Field(..., description="Upstream base URL requests are forwarded to")
    upstream_timeout: float | None = Field(
        100.0, description="Timeout in seconds for upstream calls, None disables it"
    )
    follow_redirects: bool = Field(
        True, description="Follow redirects returned by the upstream"
    )

    # Request Log Configuration
    log_file: str = Field("./log.txt", description="File the request log is appended to")
    console_max_chars: int = Field(
        2300, description="Maximum characters of a request log entry mirrored to console"
    )

    # Application Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )
    debug: bool = Field(False, description="Enable debug mode")

    # API Configuration
    api_host: str = Field("0.0.0.0", description="API host")
    api_port: int = Field(8000, description="API port")


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
