"""
Application Configuration Module

Centralizes all application settings using Pydantic Settings.
Environment variables are loaded from .env file automatically.

Usage:
    from config.settings import settings

    print(settings.TCVS_URL)
    print(settings.AUTO_SIMULATE)
"""

from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from typing import Literal, Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Variable names are case-insensitive.
    """

    # ==========================================================================
    # Target Form
    # ==========================================================================
    TCVS_URL: str = Field(
        default="https://tcvs.fiscal.treasury.gov/",
        description="Treasury Check Verification System form URL"
    )

    # ==========================================================================
    # Browser Configuration
    # ==========================================================================
    BROWSERLESS_API_KEY: Optional[str] = Field(
        default=None,
        description="Remote browser token; a local Chromium is launched when unset"
    )
    BROWSERLESS_ENDPOINT: str = Field(
        default="wss://chrome.browserless.io",
        description="Remote browser CDP WebSocket endpoint"
    )
    HEADLESS: bool = Field(
        default=True,
        description="Run the local browser headless"
    )

    # ==========================================================================
    # Retry & Simulation
    # ==========================================================================
    AUTO_SIMULATE: bool = Field(
        default=False,
        description="Simulate immediately when TCVS reports a server error"
    )
    SIMULATION_MODE: Literal["success", "noMatch"] = Field(
        default="noMatch",
        description="Which simulated payload to return on server errors"
    )
    MAX_RETRIES: int = Field(
        default=3,
        ge=0,
        le=3,
        description="Retries after the first attempt"
    )
    RETRY_BACKOFF_SECONDS: float = Field(
        default=5.0,
        description="Linear backoff step; retry n waits n times this value"
    )

    # ==========================================================================
    # Timeouts (seconds)
    # ==========================================================================
    NAVIGATION_TIMEOUT: float = Field(default=60.0)
    FORM_TIMEOUT: float = Field(default=30.0)
    SUBMISSION_TIMEOUT: float = Field(default=30.0)
    SETTLE_SECONDS: float = Field(default=2.0)

    # ==========================================================================
    # Redis Configuration (for rate limiting)
    # ==========================================================================
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Redis connection URL for rate limiting"
    )
    SUBMIT_RATE_LIMIT: str = Field(
        default="30/minute",
        description="slowapi limit applied to /api/submit"
    )

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    CORS_ORIGINS: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def cors_origins_list(self) -> list:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    ENVIRONMENT: str = Field(
        default="development",
        description="Deployment environment; 'production' disables placeholder results"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit JSON log lines instead of colored console output"
    )
    APP_NAME: str = Field(
        default="TCVS Automation API",
        description="Application name for OpenAPI docs"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )
    PORT: int = Field(default=3000)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


# Singleton instance for easy import
settings = get_settings()
