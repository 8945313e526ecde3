# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.BATCH_EXPIRY_MINUTES)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Reported by the OpenAPI docs, GET / and GET /health
API_VERSION = "1.0.0"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every setting has a development-friendly default, so the service starts
    without a .env file. All settings are accessed via the global `settings`
    instance.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Model Discovery
    # -------------------------------------------------------------------------
    # Model definitions and validators are paired by module name:
    # payloads/incident.py <-> validations/incident.py

    MODELS_PACKAGE: str = Field(
        default="payloads",
        min_length=1,
        description="Importable package holding model (data shape) modules"
    )

    VALIDATIONS_PACKAGE: str = Field(
        default="validations",
        min_length=1,
        description="Importable package holding validator modules"
    )

    # -------------------------------------------------------------------------
    # Array / Batch Validation
    # -------------------------------------------------------------------------

    MAX_ARRAY_RECORDS: int = Field(
        default=10_000,
        ge=1,
        description="Maximum number of records accepted in one array request"
    )

    BATCH_EXPIRY_MINUTES: float = Field(
        default=30,
        gt=0,
        description="Idle time after which a batch session is swept"
    )

    BATCH_CLEANUP_INTERVAL_SECONDS: float = Field(
        default=300,
        gt=0,
        description="How often the expired-batch sweep runs"
    )

    BATCH_DELETE_DELAY_SECONDS: float = Field(
        default=1.0,
        ge=0,
        description="Delay between batch finalization and deletion"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat empty values as unset
        env_ignore_empty=True,
        # Ignore unrelated keys in a shared .env file
        extra="ignore",
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def batch_expiry_seconds(self) -> float:
        """Batch expiry window in seconds."""
        return self.BATCH_EXPIRY_MINUTES * 60

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
