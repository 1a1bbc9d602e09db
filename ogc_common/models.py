# ============================================================================
# MODULE CONTEXT - OGC COMMON MODELS
# ============================================================================
# STATUS: Shared Foundation - Pydantic models used by every API area
# PURPOSE: Link, CRS identifier, landing page and conformance documents
# EXPORTS: Link, Crs, LandingPage, Conformance, media types, link relations
# PYDANTIC_MODELS: Link, Crs, LandingPage, Conformance
# DEPENDENCIES: pydantic, typing
# SOURCE: OGC API - Common Part 1 / Features Part 1 & 2
# ============================================================================

"""
OGC API - Common Pydantic Models

References:
- OGC API - Common Part 1: https://docs.ogc.org/is/19-072/19-072.html
- OGC API - Features Part 2 (CRS by reference): https://docs.ogc.org/is/18-058/18-058.html
- RFC 8288 Web Linking
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidCrs

# Media types
JSON = "application/json"
GEOJSON = "application/geo+json"

# Link relations
SELF = "self"
PREV = "prev"
NEXT = "next"
COLLECTION = "collection"
ITEMS = "items"
DATA = "data"
CONFORMANCE = "conformance"

EPSG_URI_PREFIX = "http://www.opengis.net/def/crs/EPSG/0/"
CRS84_URI = "http://www.opengis.net/def/crs/OGC/1.3/CRS84"
DEFAULT_CRS_CODE = "4326"


class Link(BaseModel):
    """
    OGC API Link object (RFC 8288 Web Linking).

    Links are computed per request and never persisted alongside the
    resource they decorate.
    """
    model_config = ConfigDict(frozen=True)

    href: str = Field(description="URL of the linked resource")
    rel: str = Field(description="Link relation type")
    type: Optional[str] = Field(default=None, description="Media type of the linked resource")
    title: Optional[str] = Field(default=None, description="Human-readable title")


class Crs(BaseModel):
    """
    Coordinate reference system identifier.

    The canonical form is the EPSG code string ("4326"). Input may be the bare
    code, "EPSG:<code>", the OGC EPSG URI, or the CRS84 URI (mapped to 4326).
    Parsing never fails; only resolving the code to an SRID can.
    """
    model_config = ConfigDict(frozen=True)

    code: str = DEFAULT_CRS_CODE

    @classmethod
    def parse(cls, value: str) -> "Crs":
        text = value.strip()
        if text.rstrip("/") == CRS84_URI:
            return cls(code=DEFAULT_CRS_CODE)
        if text.startswith("http://") or text.startswith("https://"):
            return cls(code=text.rstrip("/").rsplit("/", 1)[-1])
        if ":" in text:
            authority, _, code = text.partition(":")
            if authority.upper() == "EPSG":
                return cls(code=code)
        return cls(code=text)

    def srid(self, parameter: str = "crs") -> int:
        """Resolve the code to an integer SRID."""
        try:
            return int(self.code)
        except ValueError:
            raise InvalidCrs(
                f"CRS code '{self.code}' is not a numeric EPSG identifier",
                parameter=parameter,
                value=self.code
            )

    @property
    def uri(self) -> str:
        return f"{EPSG_URI_PREFIX}{self.code}"

    def __str__(self) -> str:
        return self.code


class LandingPage(BaseModel):
    """OGC API landing page (root endpoint)."""
    model_config = ConfigDict(frozen=True)

    title: str
    description: Optional[str] = None
    links: Tuple[Link, ...] = ()


class Conformance(BaseModel):
    """Conformance declaration listing implemented conformance classes."""
    model_config = ConfigDict(frozen=True)

    conformsTo: Tuple[str, ...] = ()
