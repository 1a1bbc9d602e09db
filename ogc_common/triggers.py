# ============================================================================
# MODULE CONTEXT - OGC COMMON TRIGGERS
# ============================================================================
# STATUS: HTTP Triggers - Landing page, conformance, shared base class
# PURPOSE: Azure Functions handler base + document endpoints
# EXPORTS: BaseOGCTrigger, LandingPageTrigger, ConformanceTrigger, get_common_triggers
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# DEPENDENCIES: azure.functions, json, util_logger
# PATTERNS: Trigger Pattern, Factory Pattern (get_common_triggers)
# ============================================================================

"""
OGC Common HTTP Triggers

BaseOGCTrigger is shared by every API area. It owns the translation from the
engine's typed errors to HTTP: an OGCAPIError becomes its own status code and
`{"code", "description"}` body; anything else is logged and reported as 500.

Endpoints:
- GET /api/features             - Landing page
- GET /api/features/conformance - Conformance classes
"""

import json
import uuid
from typing import Any, Dict, List, Optional

import azure.functions as func

from util_logger import ComponentType, LogContext, LoggerFactory

from .config import CommonConfig, get_common_config
from .document import ApiDocument
from .errors import MalformedQuery, OGCAPIError
from .models import JSON

REQUEST_ID_HEADER = "x-request-id"

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "OGCTrigger")


class BaseOGCTrigger:
    """
    Base class for OGC API triggers.

    Subclasses implement one method per HTTP verb (`get`, `post`, `put`,
    `delete`); `handle` dispatches on the request method and converts errors.
    """

    def __init__(self, common_config: Optional[CommonConfig] = None):
        self.common_config = common_config or get_common_config()

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        """Dispatch on HTTP method and map errors to responses."""
        log = LoggerFactory.with_context(logger, self._log_context(req))

        method = getattr(self, req.method.lower(), None)
        if method is None:
            log.warning(f"{type(self).__name__} does not allow {req.method}")
            return self._error_response(
                message=f"Method {req.method} not allowed",
                status_code=405,
                error_type="MethodNotAllowed"
            )

        try:
            response = method(req)
            log.debug(f"{type(self).__name__} answered {response.status_code}")
            return response

        except OGCAPIError as e:
            if e.http_status_code >= 500:
                log.error(f"{type(self).__name__} failed: {e}", exc_info=True)
            else:
                log.warning(
                    f"{type(self).__name__} rejected request: {e}",
                    extra={'custom_dimensions': {'parameter': e.parameter}} if e.parameter else None
                )
            return self._json_response(e.to_dict(), status_code=int(e.http_status_code))

        except Exception as e:
            log.error(f"Unexpected error in {type(self).__name__}: {e}", exc_info=True)
            return self._error_response(
                message=f"Internal server error: {str(e)}",
                status_code=500,
                error_type="InternalServerError"
            )

    # ========================================================================
    # REQUEST HELPERS
    # ========================================================================

    @staticmethod
    def _log_context(req: func.HttpRequest) -> LogContext:
        return LogContext(
            request_id=req.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex,
            method=req.method,
            collection_id=req.route_params.get("collection_id"),
            feature_id=req.route_params.get("feature_id")
        )

    def _api_root(self, req: func.HttpRequest) -> str:
        return self.common_config.get_api_root(req.url)

    @staticmethod
    def _route_param(req: func.HttpRequest, name: str) -> str:
        value = req.route_params.get(name)
        if not value:
            raise MalformedQuery(f"Path parameter '{name}' is required", parameter=name)
        return value

    @staticmethod
    def _json_body(req: func.HttpRequest) -> Dict[str, Any]:
        try:
            body = req.get_json()
        except ValueError as e:
            raise MalformedQuery(f"Request body is not valid JSON: {e}")
        if not isinstance(body, dict):
            raise MalformedQuery("Request body must be a JSON object")
        return body

    # ========================================================================
    # RESPONSE HELPERS
    # ========================================================================

    def _json_response(
        self,
        data: Any,
        status_code: int = 200,
        content_type: str = JSON,
        headers: Optional[Dict[str, str]] = None
    ) -> func.HttpResponse:
        """
        Create JSON HTTP response.

        Args:
            data: Data to serialize (dict, Pydantic model, etc.)
            status_code: HTTP status code
            content_type: Response content type
            headers: Extra response headers (e.g. Location)
        """
        if hasattr(data, 'model_dump'):
            data = data.model_dump(mode='json', exclude_none=True)

        return func.HttpResponse(
            body=json.dumps(data, indent=2),
            status_code=status_code,
            mimetype=content_type,
            headers=headers
        )

    def _empty_response(
        self,
        status_code: int = 204,
        headers: Optional[Dict[str, str]] = None
    ) -> func.HttpResponse:
        return func.HttpResponse(status_code=status_code, headers=headers)

    def _error_response(
        self,
        message: str,
        status_code: int = 400,
        error_type: str = "BadRequest"
    ) -> func.HttpResponse:
        return self._json_response(
            {"code": error_type, "description": message},
            status_code=status_code
        )


# ============================================================================
# DOCUMENT ENDPOINTS
# ============================================================================

class LandingPageTrigger(BaseOGCTrigger):
    """
    Landing page trigger.

    Endpoint: GET /api/features
    """

    def __init__(self, document: ApiDocument, common_config: Optional[CommonConfig] = None):
        super().__init__(common_config)
        self.document = document

    def get(self, req: func.HttpRequest) -> func.HttpResponse:
        landing_page = self.document.render_landing_page(self._api_root(req))
        logger.info("Landing page requested")
        return self._json_response(landing_page)


class ConformanceTrigger(BaseOGCTrigger):
    """
    Conformance classes trigger.

    Endpoint: GET /api/features/conformance
    """

    def __init__(self, document: ApiDocument, common_config: Optional[CommonConfig] = None):
        super().__init__(common_config)
        self.document = document

    def get(self, req: func.HttpRequest) -> func.HttpResponse:
        logger.info("Conformance classes requested")
        return self._json_response(self.document.conformance)


def get_common_triggers(document: ApiDocument) -> List[Dict[str, Any]]:
    """
    Trigger configurations for the document endpoints.

    Returns:
        List of dicts with keys: route, methods, handler
    """
    return [
        {
            'route': 'features',
            'methods': ['GET'],
            'handler': LandingPageTrigger(document).handle
        },
        {
            'route': 'features/conformance',
            'methods': ['GET'],
            'handler': ConformanceTrigger(document).handle
        }
    ]
