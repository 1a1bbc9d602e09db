# ============================================================================
# MODULE CONTEXT - OGC COLLECTIONS MODULE
# ============================================================================
# STATUS: Collection Registry - Collection metadata API
# PURPOSE: Collection metadata CRUD for OGC API - Common Part 2
# EXPORTS: CollectionRegistry, Collection, Collections, get_collection_triggers, MODULE
# PYDANTIC_MODELS: Collection, Collections
# DEPENDENCIES: psycopg, pydantic, azure-functions
# ENTRY_POINTS: from ogc_collections import get_collection_triggers, MODULE
# ============================================================================

"""
OGC Collections - collection metadata registry.

MODULE adds the Common Part 2 conformance classes and a "data" link to the
landing page when passed to build_api_document().
"""

from ogc_common.document import ApiModule
from ogc_common.models import DATA, JSON, Link

from .config import CollectionsConfig, get_collections_config
from .models import Collection, Collections
from .service import CollectionRegistry
from .triggers import get_collection_triggers

MODULE = ApiModule(
    name="collections",
    conformance=(
        "http://www.opengis.net/spec/ogcapi-common-2/1.0/req/collections",
        "http://www.opengis.net/spec/ogcapi-common-2/1.0/req/json",
    ),
    links=(
        Link(href="collections", rel=DATA, type=JSON,
             title="Metadata about the resource collections"),
    )
)

__all__ = [
    "Collection",
    "CollectionRegistry",
    "Collections",
    "CollectionsConfig",
    "get_collection_triggers",
    "get_collections_config",
    "MODULE"
]
