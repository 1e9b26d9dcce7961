"""
Base configuration settings.

Shared settings model every config section inherits from, plus the
application-wide switches (environment, logging, HTTP surface).

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production)",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(
        default="INFO",
        description="Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    api_prefix: str = Field(default="/api", description="Prefix for every HTTP route")
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware",
    )
