# ============================================================================
# MODULE CONTEXT - ITEMS TRIGGERS
# ============================================================================
# STATUS: HTTP Triggers - Feature query and single-feature CRUD
# PURPOSE: Azure Functions handlers for /collections/{collection_id}/items
# EXPORTS: ItemsTrigger, ItemTrigger, get_item_triggers
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# DEPENDENCIES: azure.functions, urllib.parse, ogc_common.triggers
# PATTERNS: Trigger Pattern, Factory Pattern (get_item_triggers)
# ============================================================================

"""
Items HTTP Triggers

Endpoints:
- GET    /api/features/collections/{collection_id}/items               - Query features
- POST   /api/features/collections/{collection_id}/items               - Create feature
- GET    /api/features/collections/{collection_id}/items/{feature_id}  - Single feature
- PUT    /api/features/collections/{collection_id}/items/{feature_id}  - Replace feature
- DELETE /api/features/collections/{collection_id}/items/{feature_id}  - Delete feature

The raw query string is handed to the service untouched; parsing and
validation happen there so the same rules apply to every caller.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import azure.functions as func

from ogc_common.config import CommonConfig
from ogc_common.models import GEOJSON
from ogc_common.triggers import BaseOGCTrigger
from util_logger import ComponentType, LoggerFactory

from .service import FeatureService

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "ItemsTrigger")


class ItemsTrigger(BaseOGCTrigger):
    """
    Feature collection trigger.

    Endpoints:
        GET  /api/features/collections/{collection_id}/items
        POST /api/features/collections/{collection_id}/items
    """

    def __init__(
        self,
        service: Optional[FeatureService] = None,
        common_config: Optional[CommonConfig] = None
    ):
        super().__init__(common_config)
        self.service = service or FeatureService()

    def get(self, req: func.HttpRequest) -> func.HttpResponse:
        collection_id = self._route_param(req, 'collection_id')

        feature_collection = self.service.query_features(
            collection_id,
            urlsplit(req.url).query,
            req.url
        )

        logger.info(
            f"Items of '{collection_id}': "
            f"{feature_collection.numberReturned}/{feature_collection.numberMatched}"
        )
        return self._json_response(feature_collection, content_type=GEOJSON)

    def post(self, req: func.HttpRequest) -> func.HttpResponse:
        collection_id = self._route_param(req, 'collection_id')
        body = self._json_body(req)

        feature, location = self.service.create_feature(collection_id, body, req.url)

        return self._json_response(
            feature,
            status_code=201,
            content_type=GEOJSON,
            headers={'Location': location}
        )


class ItemTrigger(BaseOGCTrigger):
    """
    Single feature trigger.

    Endpoints:
        GET    /api/features/collections/{collection_id}/items/{feature_id}
        PUT    /api/features/collections/{collection_id}/items/{feature_id}
        DELETE /api/features/collections/{collection_id}/items/{feature_id}
    """

    def __init__(
        self,
        service: Optional[FeatureService] = None,
        common_config: Optional[CommonConfig] = None
    ):
        super().__init__(common_config)
        self.service = service or FeatureService()

    def get(self, req: func.HttpRequest) -> func.HttpResponse:
        collection_id = self._route_param(req, 'collection_id')
        feature_id = self._route_param(req, 'feature_id')

        feature = self.service.get_feature(
            collection_id,
            feature_id,
            urlsplit(req.url).query,
            req.url
        )
        return self._json_response(feature, content_type=GEOJSON)

    def put(self, req: func.HttpRequest) -> func.HttpResponse:
        collection_id = self._route_param(req, 'collection_id')
        feature_id = self._route_param(req, 'feature_id')

        self.service.replace_feature(collection_id, feature_id, self._json_body(req))
        return self._empty_response()

    def delete(self, req: func.HttpRequest) -> func.HttpResponse:
        collection_id = self._route_param(req, 'collection_id')
        feature_id = self._route_param(req, 'feature_id')

        self.service.delete_feature(collection_id, feature_id)
        return self._empty_response()


def get_item_triggers(service: Optional[FeatureService] = None) -> List[Dict[str, Any]]:
    """
    Trigger configurations for the items endpoints.

    Returns:
        List of dicts with keys: route, methods, handler
    """
    service = service or FeatureService()
    return [
        {
            'route': 'features/collections/{collection_id}/items',
            'methods': ['GET', 'POST'],
            'handler': ItemsTrigger(service).handle
        },
        {
            'route': 'features/collections/{collection_id}/items/{feature_id}',
            'methods': ['GET', 'PUT', 'DELETE'],
            'handler': ItemTrigger(service).handle
        }
    ]
