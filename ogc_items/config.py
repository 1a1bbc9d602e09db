# ============================================================================
# MODULE CONTEXT - FEATURE ENGINE CONFIGURATION
# ============================================================================
# STATUS: Standalone Configuration - Feature query engine
# PURPOSE: Feature store layout and engine behaviour switches
# EXPORTS: FeaturesEngineConfig, get_items_config
# INTERFACES: Pydantic BaseModel
# DEPENDENCIES: pydantic, os
# SOURCE: Environment variables
# PATTERNS: Settings Pattern, Singleton via cached function
# ============================================================================

"""
Feature Engine Configuration

Environment Variables:
    Optional:
    - OGC_FEATURES_SCHEMA: Schema holding the features table (default: "data")
    - OGC_FEATURES_TABLE: Features table (default: "features")
    - OGC_GEOMETRY_COLUMN: Geometry column (default: "geometry")
    - OGC_STORAGE_SRID: SRID geometries are stored in (default: 4326)
    - OGC_DATETIME_PROPERTY: Feature property the datetime filter applies to
      (default: "datetime")
    - OGC_CLAMP_PREVIOUS_LINK: Emit a previous link clamped to offset 0 when
      0 < offset < limit (default: false)
    - OGC_QUERY_TIMEOUT: Statement timeout in seconds (default: 30)
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


class FeaturesEngineConfig(BaseModel):
    """Feature store layout plus pagination behaviour."""

    features_schema: str = Field(
        default_factory=lambda: os.getenv("OGC_FEATURES_SCHEMA", "data"),
        description="PostgreSQL schema containing the features table"
    )
    features_table: str = Field(
        default_factory=lambda: os.getenv("OGC_FEATURES_TABLE", "features"),
        description="Table holding every feature of every collection"
    )
    geometry_column: str = Field(
        default_factory=lambda: os.getenv("OGC_GEOMETRY_COLUMN", "geometry"),
        description="Geometry column name"
    )
    storage_srid: int = Field(
        default_factory=lambda: int(os.getenv("OGC_STORAGE_SRID", "4326")),
        description="SRID of the stored geometries"
    )
    datetime_property: str = Field(
        default_factory=lambda: os.getenv("OGC_DATETIME_PROPERTY", "datetime"),
        description="Feature property compared against the datetime parameter"
    )
    clamp_previous_link: bool = Field(
        default_factory=lambda: os.getenv("OGC_CLAMP_PREVIOUS_LINK", "false").lower() == "true",
        description="Emit prev link to offset 0 when 0 < offset < limit"
    )
    query_timeout_seconds: int = Field(
        default_factory=lambda: int(os.getenv("OGC_QUERY_TIMEOUT", "30")),
        ge=1,
        le=300,
        description="Maximum query execution time in seconds"
    )


_config_cache: Optional[FeaturesEngineConfig] = None


def get_items_config() -> FeaturesEngineConfig:
    """
    Get singleton feature engine configuration instance.

    Returns:
        Cached configuration instance
    """
    global _config_cache

    if _config_cache is None:
        _config_cache = FeaturesEngineConfig()

    return _config_cache
