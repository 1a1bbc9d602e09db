# ============================================================================
# MODULE CONTEXT - OGC ITEMS MODULE
# ============================================================================
# STATUS: Feature Engine - Query translation, pagination, feature CRUD
# PURPOSE: OGC API - Features items endpoints over a PostGIS features table
# EXPORTS: FeatureService, FeaturesEngineConfig, get_item_triggers, MODULE
# PYDANTIC_MODELS: QueryParameters, Feature, FeatureCollection
# DEPENDENCIES: psycopg, pydantic, azure-functions
# ENTRY_POINTS: from ogc_items import get_item_triggers, MODULE
# ============================================================================

"""
OGC Items - Feature Query Translation & Pagination Engine

Architecture:
    ogc_items/
    ├── config.py      # Feature store layout, paging switches
    ├── parameters.py  # 1. Query string -> QueryParameters
    ├── spatial.py     # 2. bbox + bbox-crs -> SpatialPredicate
    ├── filters.py     # 3. Predicate tree -> WHERE + bound params
    ├── repository.py  #    PostGIS access (count, page, CRUD)
    ├── executor.py    # 4. COUNT(*) + ordered page
    ├── pagination.py  # 5. self / prev / next links
    ├── envelope.py    # 6. FeatureCollection / decorated Feature
    ├── service.py     # Pipeline orchestration
    └── triggers.py    # Azure Functions HTTP handlers

Integration:
    from ogc_items import get_item_triggers, MODULE

    document = build_api_document(title, description, [..., MODULE])
    for trigger in get_item_triggers():
        app.route(route=trigger['route'], methods=trigger['methods'], ...)
"""

from ogc_common.document import ApiModule

from .config import FeaturesEngineConfig, get_items_config
from .models import Feature, FeatureCollection
from .parameters import QueryParameters, parse_query_string
from .service import FeatureService
from .triggers import get_item_triggers

MODULE = ApiModule(
    name="features",
    conformance=(
        "http://www.opengis.net/spec/ogcapi-features-1/1.0/conf/core",
        "http://www.opengis.net/spec/ogcapi-features-1/1.0/conf/geojson",
        "http://www.opengis.net/spec/ogcapi-features-2/1.0/conf/crs",
    )
)

__all__ = [
    "Feature",
    "FeatureCollection",
    "FeatureService",
    "FeaturesEngineConfig",
    "get_item_triggers",
    "get_items_config",
    "MODULE",
    "parse_query_string",
    "QueryParameters"
]
