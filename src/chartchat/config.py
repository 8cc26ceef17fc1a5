"""
ChartChat Configuration Module.

Handles application settings, feature flags, and environment configuration.
Uses pydantic-settings for validation and type safety.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureFlags(BaseSettings):
    """Feature flags for enabling/disabling modules."""

    model_config = SettingsConfigDict(env_prefix="FEATURE_")

    charts: bool = True
    chat: bool = True

    def to_dict(self) -> dict[str, bool]:
        """Return feature flags as dictionary for health endpoint."""
        return {
            "charts": self.charts,
            "chat": self.chat,
        }


class HostSettings(BaseSettings):
    """Embedded visual host configuration."""

    model_config = SettingsConfigDict(env_prefix="HOST_")

    mode: Literal["memory", "bridge"] = Field(
        default="memory",
        description="memory = process-local demo report, bridge = HTTP embedding bridge",
    )
    bridge_url: str = Field(default="http://localhost:5300", description="Base URL of the embedding bridge")
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for a single host round trip before the run is aborted",
    )


class GeminiSettings(BaseSettings):
    """Gemini API configuration."""

    model_config = SettingsConfigDict(env_prefix="GEMINI_")

    api_key: str = Field(default="", description="Gemini API Key")
    model: str = Field(default="gemini-2.0-flash", description="Model used for chart intents")
    history_limit: int = Field(default=4, ge=0, description="Chat messages forwarded as context")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = False
    app_log_level: str = "INFO"

    # Nested settings
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    host: HostSettings = Field(default_factory=HostSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
