# ============================================================================
# MODULE CONTEXT - AZURE FUNCTIONS ENTRY POINT
# ============================================================================
# STATUS: Core Infrastructure - Function App Entry Point
# PURPOSE: Build the API document snapshot and register every HTTP route
# EXPORTS: app (FunctionApp instance), api_document
# DEPENDENCIES: azure-functions, config, ogc_common, ogc_collections, ogc_items
# ============================================================================

"""
Azure Functions Entry Point

Startup order:
    1. Enabled API modules describe themselves (ApiModule)
    2. build_api_document() freezes landing page + conformance
    3. Routes are registered; handlers only ever read the snapshot

Endpoints (all under /api):
    - features                                                   GET
    - features/conformance                                       GET
    - features/collections                                       GET, POST
    - features/collections/{collection_id}                       GET, PUT, DELETE
    - features/collections/{collection_id}/items                 GET, POST
    - features/collections/{collection_id}/items/{feature_id}    GET, PUT, DELETE

Deployment:
    - Local: func start
    - Azure: func azure functionapp publish <app-name> --python --build remote
"""

import logging

import azure.functions as func

import ogc_collections
import ogc_items
from config import get_app_config
from ogc_common import build_api_document
from ogc_common.triggers import get_common_triggers

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize Azure Function App
app = func.FunctionApp()

# ============================================================================
# API DOCUMENT SNAPSHOT
# ============================================================================

_app_config = get_app_config()

api_document = build_api_document(
    title=_app_config.api_title,
    description=_app_config.api_description,
    modules=[ogc_collections.MODULE, ogc_items.MODULE]
)

logger.info(f"API document built for modules: {', '.join(api_document.modules)}")

common_triggers = get_common_triggers(api_document)
collection_triggers = ogc_collections.get_collection_triggers()
item_triggers = ogc_items.get_item_triggers()

# ============================================================================
# Landing page & conformance
# ============================================================================

@app.route(route="features", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def ogc_landing_page(req: func.HttpRequest) -> func.HttpResponse:
    return common_triggers[0]['handler'](req)


@app.route(route="features/conformance", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def ogc_conformance(req: func.HttpRequest) -> func.HttpResponse:
    return common_triggers[1]['handler'](req)

# ============================================================================
# Collections
# ============================================================================

@app.route(route="features/collections", methods=["GET", "POST"], auth_level=func.AuthLevel.ANONYMOUS)
def ogc_collections_list(req: func.HttpRequest) -> func.HttpResponse:
    return collection_triggers[0]['handler'](req)


@app.route(route="features/collections/{collection_id}", methods=["GET", "PUT", "DELETE"], auth_level=func.AuthLevel.ANONYMOUS)
def ogc_collection(req: func.HttpRequest) -> func.HttpResponse:
    return collection_triggers[1]['handler'](req)

# ============================================================================
# Items
# ============================================================================

@app.route(route="features/collections/{collection_id}/items", methods=["GET", "POST"], auth_level=func.AuthLevel.ANONYMOUS)
def ogc_items_query(req: func.HttpRequest) -> func.HttpResponse:
    return item_triggers[0]['handler'](req)


@app.route(route="features/collections/{collection_id}/items/{feature_id}", methods=["GET", "PUT", "DELETE"], auth_level=func.AuthLevel.ANONYMOUS)
def ogc_item(req: func.HttpRequest) -> func.HttpResponse:
    return item_triggers[1]['handler'](req)


logger.info("✅ OGC API registered successfully (6 routes)")
