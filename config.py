# ============================================================================
# MODULE CONTEXT - APPLICATION CONFIGURATION
# ============================================================================
# STATUS: Core Infrastructure - Configuration Management
# PURPOSE: PostgreSQL connection settings with password or managed identity auth
# EXPORTS: AppConfig, get_app_config, get_postgres_connection_string
# DEPENDENCIES: pydantic-settings, azure-identity
# SOURCE: Environment variables (or .env), Azure managed identity
# PATTERNS: Singleton via lru_cache, lazy credential import
# ============================================================================

"""
Application Configuration Module

Shared settings for every API area: where the feature store lives and how to
authenticate to it. API-specific knobs (table names, link behaviour) live in
each package's own config.py.

Authentication Modes:
    1. Password-based (local development):
       - Requires: POSTGIS_HOST, POSTGIS_DATABASE, POSTGIS_USER, POSTGIS_PASSWORD
       - Use when: USE_MANAGED_IDENTITY=false or not set

    2. Managed Identity (Azure production):
       - Requires: System-assigned managed identity with database access
       - Use when: USE_MANAGED_IDENTITY=true

Usage:
    from config import get_postgres_connection_string

    conn = psycopg.connect(get_postgres_connection_string())
"""

import logging
from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

POSTGRES_AAD_SCOPE = "https://ossrdbms-aad.database.windows.net/.default"


class AppConfig(BaseSettings):
    """
    Application-wide configuration loaded from environment variables.

    Attributes:
        postgis_host: PostgreSQL server hostname
        postgis_port: PostgreSQL server port
        postgis_database: Database name
        postgis_user: Database username
        postgis_password: Database password (unused with managed identity)
        postgis_sslmode: libpq sslmode
        use_managed_identity: Enable Azure managed identity authentication
        api_title: Landing page title
        api_description: Landing page description
    """
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    postgis_host: str = Field(..., description="PostgreSQL hostname")
    postgis_port: int = Field(default=5432, description="PostgreSQL port")
    postgis_database: str = Field(..., description="Database name")
    postgis_user: str = Field(..., description="Database username")
    postgis_password: Optional[str] = Field(default=None, description="Database password")
    postgis_sslmode: str = Field(default="require", description="libpq sslmode")

    use_managed_identity: bool = Field(
        default=False,
        description="Use Azure managed identity for authentication"
    )

    api_title: str = Field(default="OGC API - Features", description="Landing page title")
    api_description: str = Field(
        default="Geospatial feature collections served from PostGIS",
        description="Landing page description"
    )

    @model_validator(mode="after")
    def validate_password(self) -> "AppConfig":
        """Ensure password is provided when not using managed identity."""
        if not self.use_managed_identity and not self.postgis_password:
            raise ValueError(
                "POSTGIS_PASSWORD is required when USE_MANAGED_IDENTITY=false"
            )
        return self


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """
    Get singleton application configuration instance.

    Raises:
        ValidationError: If required environment variables are missing
    """
    return AppConfig()


def get_postgres_connection_string(config: Optional[AppConfig] = None) -> str:
    """
    Build the PostgreSQL connection string for the configured auth mode.

    Returns:
        str: PostgreSQL URI (psycopg format)

    Raises:
        ValueError: If managed identity token acquisition fails
    """
    config = config or get_app_config()

    if config.use_managed_identity:
        password = _acquire_managed_identity_token()
        logger.info(f"Building managed identity connection string for {config.postgis_host}")
    else:
        password = config.postgis_password
        logger.debug(f"Building password-based connection string for {config.postgis_host}")

    # URL-encode password to handle special characters (e.g., @ symbols)
    return (
        f"postgresql://{config.postgis_user}:{quote_plus(password)}"
        f"@{config.postgis_host}:{config.postgis_port}"
        f"/{config.postgis_database}"
        f"?sslmode={config.postgis_sslmode}"
    )


def _acquire_managed_identity_token() -> str:
    """
    Acquire an Azure AD access token for Azure Database for PostgreSQL.

    Tokens live about an hour; connections are opened per operation so each
    new connection string carries a fresh token.
    """
    from azure.identity import DefaultAzureCredential

    try:
        token = DefaultAzureCredential().get_token(POSTGRES_AAD_SCOPE)
    except Exception as e:
        logger.error(f"Failed to acquire managed identity token: {e}")
        raise ValueError(
            f"Managed identity authentication failed: {e}. "
            "Ensure system-assigned managed identity is enabled and has database permissions."
        ) from e

    logger.info("✅ Successfully acquired managed identity token")
    return token.token
