"""
scwprovider Settings - Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find project root (where .env file is located)
PROJECT_ROOT = Path(__file__).parent.parent


class ProviderSettings(BaseSettings):
    """
    Provider configuration settings.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="SCW_",  # Same variable names as the Scaleway CLI
    )

    # Credentials
    access_key: str | None = Field(
        default=None, description="Scaleway access key (env: SCW_ACCESS_KEY)"
    )

    secret_key: str | None = Field(
        default=None,
        description="Scaleway secret key sent as X-Auth-Token (env: SCW_SECRET_KEY)",
    )

    default_project_id: str | None = Field(
        default=None,
        description="Project used when a resource does not set one (env: SCW_DEFAULT_PROJECT_ID)",
    )

    default_organization_id: str | None = Field(
        default=None,
        description="Organization of the default project (env: SCW_DEFAULT_ORGANIZATION_ID)",
    )

    # Locality
    default_region: str = Field(
        default="fr-par",
        description="Region used when a resource does not set one (env: SCW_DEFAULT_REGION)",
    )

    default_zone: str = Field(
        default="fr-par-1",
        description="Zone used when a resource does not set one (env: SCW_DEFAULT_ZONE)",
    )

    # API Configuration
    api_url: str = Field(
        default="https://api.scaleway.com",
        description="Base URL of the Scaleway API (env: SCW_API_URL)",
    )

    http_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for a single API request (env: SCW_HTTP_TIMEOUT)",
    )

    http_max_retries: int = Field(
        default=3,
        description="Attempts for a request failing with 429/5xx/network errors (env: SCW_HTTP_MAX_RETRIES)",
    )

    # Waiter Configuration
    poll_interval: float = Field(
        default=5.0,
        description="Seconds between two status polls while waiting for a resource (env: SCW_POLL_INTERVAL)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR) (env: SCW_LOG_LEVEL)",
    )


# Global settings instance
_settings: ProviderSettings | None = None


def get_settings() -> ProviderSettings:
    """
    Get the global settings instance.

    Creates the settings instance on first call, then returns cached instance.

    Returns:
        ProviderSettings instance
    """
    global _settings
    if _settings is None:
        _settings = ProviderSettings()
    return _settings


def reload_settings() -> ProviderSettings:
    """
    Reload settings from environment/files.

    Useful for testing or when .env file changes.

    Returns:
        Fresh ProviderSettings instance
    """
    global _settings
    _settings = ProviderSettings()
    return _settings


def configure_logging():
    """Configure logging based on settings."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
