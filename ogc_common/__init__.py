# ============================================================================
# MODULE CONTEXT - OGC COMMON MODULE
# ============================================================================
# STATUS: Shared Foundation - used by ogc_collections and ogc_items
# PURPOSE: Errors, shared models, API document snapshot, base trigger
# EXPORTS: errors, Link, Crs, LandingPage, Conformance, ApiModule, ApiDocument, build_api_document
# DEPENDENCIES: pydantic, azure-functions
# ============================================================================

"""
OGC API - Common building blocks shared by the collections and features APIs.
"""

from .document import ApiDocument, ApiModule, build_api_document
from .errors import InvalidCrs, MalformedQuery, NotFound, OGCAPIError, StoreError
from .models import Conformance, Crs, LandingPage, Link

__all__ = [
    "ApiDocument",
    "ApiModule",
    "build_api_document",
    "Conformance",
    "Crs",
    "InvalidCrs",
    "LandingPage",
    "Link",
    "MalformedQuery",
    "NotFound",
    "OGCAPIError",
    "StoreError"
]
