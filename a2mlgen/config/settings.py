"""
Compiler Settings
=================

Compiler settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Compiler settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="A2ML Specification Compiler", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Code Generation Configuration
    text_suffix: str = Field(
        default="_TEXT", description="Suffix of the canonical text constant name"
    )
    emit_docstrings: bool = Field(
        default=True, description="Emit documentation comments as class docstrings"
    )
    module_header: Optional[str] = Field(
        default="Generated by a2mlgen. Do not edit.",
        description="Comment line placed at the top of generated modules",
    )

    # Monitoring Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("text_suffix")
    @classmethod
    def validate_text_suffix(cls, v: str) -> str:
        """The suffix must keep the constant name a valid identifier."""
        if not v or not all(ch.isalnum() or ch == "_" for ch in v):
            raise ValueError("Text suffix must consist of letters, digits and underscores")
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="A2MLGEN_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
