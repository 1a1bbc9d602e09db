# ============================================================================
# MODULE CONTEXT - OGC API ERRORS
# ============================================================================
# STATUS: Shared Foundation - Typed error taxonomy
# PURPOSE: Exceptions raised by the engine and translated to HTTP by triggers
# EXPORTS: OGCAPIError, MalformedQuery, InvalidCrs, NotFound, StoreError
# DEPENDENCIES: http (stdlib)
# PATTERNS: Class-attribute error codes (status + OGC exception code)
# ============================================================================

"""
OGC API Error Taxonomy

Every failure the engine surfaces is one of these classes. Each carries the
HTTP status and OGC exception code the trigger layer should report, plus the
offending parameter name and received value when there is one.

    MalformedQuery  400  unknown parameter, wrong type, bad bbox length
    InvalidCrs      400  CRS identifier whose code is not an integer SRID
    NotFound        404  read/update by identifier that matches no row
    StoreError      500  feature store failure (409/400 for constraint errors)
"""

from http import HTTPStatus
from typing import Any, Dict, Optional


class OGCAPIError(Exception):
    """Base class for errors that map onto an OGC exception response."""

    ogc_exception_code = "NoApplicableCode"
    http_status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_msg = "Unknown error"

    def __init__(
        self,
        msg: Optional[str] = None,
        parameter: Optional[str] = None,
        value: Any = None
    ) -> None:
        super().__init__(msg or self.default_msg)
        self.parameter = parameter
        self.value = value

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> Dict[str, Any]:
        """Error body as returned to clients."""
        body = {
            "code": self.ogc_exception_code,
            "description": self.message
        }
        if self.parameter is not None:
            body["parameter"] = self.parameter
        if self.value is not None:
            body["value"] = str(self.value)
        return body


class MalformedQuery(OGCAPIError):
    """Query string rejected before any store round trip."""
    ogc_exception_code = "InvalidParameterValue"
    http_status_code = HTTPStatus.BAD_REQUEST
    default_msg = "Malformed query"


class InvalidCrs(OGCAPIError):
    """CRS identifier whose code cannot be used as an SRID."""
    ogc_exception_code = "InvalidParameterValue"
    http_status_code = HTTPStatus.BAD_REQUEST
    default_msg = "Invalid coordinate reference system"


class NotFound(OGCAPIError):
    ogc_exception_code = "NotFound"
    http_status_code = HTTPStatus.NOT_FOUND
    default_msg = "Identifier not found"


class StoreError(OGCAPIError):
    """
    Failure reported by the feature store.

    The status defaults to 500; constraint violations are client-facing and
    pass an explicit status (409 for duplicates, 400 for bad data).
    """
    ogc_exception_code = "StoreError"
    http_status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_msg = "Feature store error (check logs)"

    def __init__(
        self,
        msg: Optional[str] = None,
        status: Optional[HTTPStatus] = None,
        **kwargs
    ) -> None:
        super().__init__(msg, **kwargs)
        if status is not None:
            self.http_status_code = status
