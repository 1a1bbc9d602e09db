# ============================================================================
# MODULE CONTEXT - OGC COMMON CONFIGURATION
# ============================================================================
# STATUS: Shared Configuration - HTTP surface settings
# PURPOSE: Route prefix and public base URL shared by every API area
# EXPORTS: CommonConfig, get_common_config
# DEPENDENCIES: pydantic, os
# SOURCE: Environment variables
# ============================================================================

"""
OGC Common Configuration

Environment Variables:
    Optional:
    - OGC_BASE_URL: Public base URL (e.g. behind APIM); auto-detected from the
      request URL when unset
    - OGC_ROUTE_PREFIX: Path under which the API is mounted (default: /api/features)
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


class CommonConfig(BaseModel):
    """HTTP surface settings shared by landing, collections and items triggers."""

    ogc_base_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("OGC_BASE_URL"),
        description="Public base URL for landing page links (auto-detected if not set)"
    )
    route_prefix: str = Field(
        default_factory=lambda: os.getenv("OGC_ROUTE_PREFIX", "/api/features"),
        description="Path prefix of every OGC route"
    )

    def get_api_root(self, request_url: str) -> str:
        """
        API root URL (landing page location).

        Args:
            request_url: Current request URL for auto-detection

        Returns:
            Configured base URL, or the request URL cut at the route prefix
        """
        if self.ogc_base_url:
            return self.ogc_base_url.rstrip("/")

        prefix = self.route_prefix.rstrip("/")
        url = request_url.split("?", 1)[0]
        if prefix and prefix in url:
            return url.split(prefix, 1)[0] + prefix
        return url.rstrip("/")


_config_cache: Optional[CommonConfig] = None


def get_common_config() -> CommonConfig:
    """Get singleton common configuration instance."""
    global _config_cache

    if _config_cache is None:
        _config_cache = CommonConfig()

    return _config_cache
