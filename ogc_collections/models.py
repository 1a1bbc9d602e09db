# ============================================================================
# MODULE CONTEXT - COLLECTION MODELS
# ============================================================================
# STATUS: Collection Registry - Pydantic models
# PURPOSE: Collection metadata documents (stored and served)
# EXPORTS: Collection, Collections, Extent, SpatialExtent, TemporalExtent
# PYDANTIC_MODELS: All classes in this file
# DEPENDENCIES: pydantic, ogc_common.models
# SOURCE: OGC API - Common Part 2, OGC API - Features Core 1.0
# ============================================================================

"""
OGC API - Collection Metadata Models

A Collection is stored as a JSON document. Fields the API does not know
about are preserved (extra="allow") so publishers can attach their own
metadata; self/items links are never stored.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ogc_common.models import CRS84_URI, EPSG_URI_PREFIX, DEFAULT_CRS_CODE, Link


class SpatialExtent(BaseModel):
    """Spatial extent of a collection (bounding boxes)."""
    bbox: List[List[float]] = Field(
        description="Bounding boxes (minx, miny, maxx, maxy) in CRS order"
    )
    crs: str = Field(default=CRS84_URI, description="Coordinate reference system")


class TemporalExtent(BaseModel):
    """Temporal extent of a collection."""
    interval: List[List[Optional[str]]] = Field(
        description="Temporal intervals (start, end) in ISO 8601 format"
    )
    trs: str = Field(
        default="http://www.opengis.net/def/uom/ISO-8601/0/Gregorian",
        description="Temporal reference system"
    )


class Extent(BaseModel):
    spatial: Optional[SpatialExtent] = None
    temporal: Optional[TemporalExtent] = None


class Collection(BaseModel):
    """
    Collection metadata document.

    Also the request body for POST/PUT on collections.
    """
    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1, description="Unique collection identifier")
    title: Optional[str] = Field(default=None, description="Human-readable title")
    description: Optional[str] = Field(default=None, description="Description of the collection")
    links: List[Link] = Field(default_factory=list, description="Related resources")
    extent: Optional[Extent] = Field(default=None, description="Spatial and temporal extent")
    itemType: str = Field(default="feature", description="Type of items in the collection")
    crs: Optional[List[str]] = Field(default=None, description="Supported output CRS URIs")


class Collections(BaseModel):
    """Collections list response."""
    links: List[Link] = Field(default_factory=list)
    crs: List[str] = Field(
        default_factory=lambda: [CRS84_URI, f"{EPSG_URI_PREFIX}{DEFAULT_CRS_CODE}"]
    )
    collections: List[Collection] = Field(default_factory=list)
