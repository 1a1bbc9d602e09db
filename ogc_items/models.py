# ============================================================================
# MODULE CONTEXT - FEATURE MODELS
# ============================================================================
# STATUS: Feature Engine - GeoJSON response models
# PURPOSE: Feature and FeatureCollection documents returned by the items API
# EXPORTS: Feature, FeatureCollection
# PYDANTIC_MODELS: Feature, FeatureCollection
# DEPENDENCIES: pydantic, ogc_common.models
# SOURCE: GeoJSON RFC 7946, OGC API - Features Core 1.0
# ============================================================================

"""
OGC API - Features GeoJSON Models

References:
- GeoJSON RFC 7946: https://tools.ietf.org/html/rfc7946
- OGC API - Features Core 1.0: https://docs.ogc.org/is/17-069r4/17-069r4.html
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ogc_common.models import Link


class Feature(BaseModel):
    """
    GeoJSON Feature.

    Also the request body for POST/PUT on items; `links` sent by a client are
    accepted but self/collection links are recomputed on every read.
    """
    type: str = Field(default="Feature", description="GeoJSON type discriminator")
    id: Optional[str] = Field(default=None, description="Feature identifier")
    geometry: Optional[Dict[str, Any]] = Field(default=None, description="GeoJSON geometry")
    properties: Dict[str, Any] = Field(default_factory=dict, description="Feature attributes")
    links: Optional[List[Link]] = Field(default=None, description="Related resources")

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("properties", mode="before")
    @classmethod
    def empty_properties(cls, value):
        return {} if value is None else value

    @field_validator("type")
    @classmethod
    def must_be_feature(cls, value):
        if value != "Feature":
            raise ValueError(f"type must be 'Feature', got '{value}'")
        return value


class FeatureCollection(BaseModel):
    """
    GeoJSON FeatureCollection with OGC paging metadata.

    numberReturned never exceeds the requested limit or numberMatched.
    """
    type: str = Field(default="FeatureCollection")
    features: List[Feature] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)
    timeStamp: Optional[str] = Field(default=None, description="UTC assembly time, whole seconds")
    numberMatched: Optional[int] = Field(default=None, description="Rows satisfying the filter")
    numberReturned: Optional[int] = Field(default=None, description="Rows in this response")
