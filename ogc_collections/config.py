# ============================================================================
# MODULE CONTEXT - COLLECTIONS CONFIGURATION
# ============================================================================
# STATUS: Standalone Configuration - Collection metadata store
# PURPOSE: Location of the collection metadata table
# EXPORTS: CollectionsConfig, get_collections_config
# INTERFACES: Pydantic BaseModel
# DEPENDENCIES: pydantic, os
# SOURCE: Environment variables
# ============================================================================

"""
Collections Configuration

Environment Variables:
    Optional:
    - OGC_COLLECTIONS_SCHEMA: Schema of the metadata table (default: "meta")
    - OGC_COLLECTIONS_TABLE: Metadata table (default: "collections")
    - OGC_QUERY_TIMEOUT: Statement timeout in seconds (default: 30)
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


class CollectionsConfig(BaseModel):
    collections_schema: str = Field(
        default_factory=lambda: os.getenv("OGC_COLLECTIONS_SCHEMA", "meta"),
        description="PostgreSQL schema containing the metadata table"
    )
    collections_table: str = Field(
        default_factory=lambda: os.getenv("OGC_COLLECTIONS_TABLE", "collections"),
        description="Table of (id text primary key, collection jsonb)"
    )
    query_timeout_seconds: int = Field(
        default_factory=lambda: int(os.getenv("OGC_QUERY_TIMEOUT", "30")),
        ge=1,
        le=300,
        description="Maximum query execution time in seconds"
    )


_config_cache: Optional[CollectionsConfig] = None


def get_collections_config() -> CollectionsConfig:
    """Get singleton collections configuration instance."""
    global _config_cache

    if _config_cache is None:
        _config_cache = CollectionsConfig()

    return _config_cache
