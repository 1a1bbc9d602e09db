# ============================================================================
# MODULE CONTEXT - COLLECTIONS TRIGGERS
# ============================================================================
# STATUS: HTTP Triggers - Collection metadata CRUD
# PURPOSE: Azure Functions handlers for /collections and /collections/{id}
# EXPORTS: CollectionsTrigger, CollectionTrigger, get_collection_triggers
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# DEPENDENCIES: azure.functions, ogc_common.triggers
# PATTERNS: Trigger Pattern, Factory Pattern (get_collection_triggers)
# ============================================================================

"""
Collections HTTP Triggers

Endpoints:
- GET    /api/features/collections                  - List collections
- POST   /api/features/collections                  - Create collection (201 + Location)
- GET    /api/features/collections/{collection_id}  - Collection metadata
- PUT    /api/features/collections/{collection_id}  - Replace metadata (204)
- DELETE /api/features/collections/{collection_id}  - Delete metadata (204)
"""

from typing import Any, Dict, List, Optional

import azure.functions as func

from ogc_common.config import CommonConfig
from ogc_common.triggers import BaseOGCTrigger

from .service import CollectionRegistry


class CollectionsTrigger(BaseOGCTrigger):
    """
    Collections list trigger.

    Endpoints:
        GET  /api/features/collections
        POST /api/features/collections
    """

    def __init__(
        self,
        registry: Optional[CollectionRegistry] = None,
        common_config: Optional[CommonConfig] = None
    ):
        super().__init__(common_config)
        self.registry = registry or CollectionRegistry()

    def get(self, req: func.HttpRequest) -> func.HttpResponse:
        return self._json_response(self.registry.list_collections(req.url))

    def post(self, req: func.HttpRequest) -> func.HttpResponse:
        _, location = self.registry.create_collection(self._json_body(req), req.url)
        return self._empty_response(status_code=201, headers={'Location': location})


class CollectionTrigger(BaseOGCTrigger):
    """
    Single collection trigger.

    Endpoints:
        GET    /api/features/collections/{collection_id}
        PUT    /api/features/collections/{collection_id}
        DELETE /api/features/collections/{collection_id}
    """

    def __init__(
        self,
        registry: Optional[CollectionRegistry] = None,
        common_config: Optional[CommonConfig] = None
    ):
        super().__init__(common_config)
        self.registry = registry or CollectionRegistry()

    def get(self, req: func.HttpRequest) -> func.HttpResponse:
        collection_id = self._route_param(req, 'collection_id')
        return self._json_response(self.registry.get_collection(collection_id, req.url))

    def put(self, req: func.HttpRequest) -> func.HttpResponse:
        collection_id = self._route_param(req, 'collection_id')
        self.registry.update_collection(collection_id, self._json_body(req))
        return self._empty_response()

    def delete(self, req: func.HttpRequest) -> func.HttpResponse:
        collection_id = self._route_param(req, 'collection_id')
        self.registry.delete_collection(collection_id)
        return self._empty_response()


def get_collection_triggers(registry: Optional[CollectionRegistry] = None) -> List[Dict[str, Any]]:
    """
    Trigger configurations for the collection endpoints.

    Returns:
        List of dicts with keys: route, methods, handler
    """
    registry = registry or CollectionRegistry()
    return [
        {
            'route': 'features/collections',
            'methods': ['GET', 'POST'],
            'handler': CollectionsTrigger(registry).handle
        },
        {
            'route': 'features/collections/{collection_id}',
            'methods': ['GET', 'PUT', 'DELETE'],
            'handler': CollectionTrigger(registry).handle
        }
    ]
