# ============================================================================
# MODULE CONTEXT - FEATURE QUERY PARAMETERS
# ============================================================================
# STATUS: Feature Engine - Stage 1 (parse + validate)
# PURPOSE: Typed, strict representation of the items query string
# EXPORTS: QueryParameters, ItemQueryParameters, DatetimeFilter, parse_query_string
# PYDANTIC_MODELS: QueryParameters, ItemQueryParameters, DatetimeFilter
# DEPENDENCIES: pydantic, urllib.parse, datetime
# VALIDATION: extra="forbid" - unknown parameters are rejected
# ============================================================================

"""
Feature Query Parameters

Recognized parameters for GET .../items:

    limit      positive integer; absent -> pagination disabled
    offset     non-negative integer; defaults to 0 when limit is given
    bbox       4 (2D) or 6 (3D) comma separated numbers
    bbox-crs   CRS of bbox (alias bbox_crs); default EPSG:4326
    datetime   RFC 3339 instant, or interval "start/end" ('..' or empty = open)
    crs        CRS of returned geometries; default EPSG:4326

Any other key, a repeated key, or a value that does not parse raises
MalformedQuery carrying the parameter name and the received value. Nothing
here touches the feature store.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple, Type, TypeVar
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, ValidationError, field_validator

from ogc_common.errors import MalformedQuery
from ogc_common.models import Crs

OPEN_BOUNDS = ("", "..")

ParamsT = TypeVar("ParamsT", bound=BaseModel)


def _parse_instant(text: str) -> Tuple[datetime, bool]:
    """
    RFC 3339 timestamp or date; naive values are taken as UTC.

    Returns the moment and whether the text was a bare date (midnight UTC).
    """
    try:
        day = date.fromisoformat(text)
    except ValueError:
        pass
    else:
        return datetime(day.year, day.month, day.day, tzinfo=timezone.utc), True

    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"'{text}' is not an RFC 3339 date or timestamp")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment, False


class DatetimeFilter(BaseModel):
    """
    Temporal filter.

    An instant has start == end and instant=True. Intervals may be open on
    one side (start or end None) but not both; bounds are inclusive unless
    end_exclusive is set.

    A bare date covers the whole UTC day: "2024-05-01" becomes
    [2024-05-01, 2024-05-02) and a date interval end runs to the end of
    that day.
    """
    model_config = ConfigDict(frozen=True)

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    instant: bool = False
    end_exclusive: bool = False

    @classmethod
    def parse(cls, value: str) -> "DatetimeFilter":
        text = value.strip()

        if "/" not in text:
            moment, is_date = _parse_instant(text)
            if is_date:
                return cls(start=moment, end=moment + timedelta(days=1), end_exclusive=True)
            return cls(start=moment, end=moment, instant=True)

        start_text, _, end_text = text.partition("/")
        start = end = None
        end_exclusive = False
        if start_text.strip() not in OPEN_BOUNDS:
            start, _ = _parse_instant(start_text.strip())
        if end_text.strip() not in OPEN_BOUNDS:
            end, end_exclusive = _parse_instant(end_text.strip())
            if end_exclusive:
                end += timedelta(days=1)

        if start is None and end is None:
            raise ValueError("interval must have at least one bound")
        if start is not None and end is not None and start > end:
            raise ValueError("interval start is after its end")

        return cls(start=start, end=end, end_exclusive=end_exclusive)


def _to_crs(value):
    if value is None or isinstance(value, Crs):
        return value
    if isinstance(value, str):
        if not value.strip():
            raise ValueError("CRS identifier is empty")
        return Crs.parse(value)
    return value


class ItemQueryParameters(BaseModel):
    """Query parameters accepted on a single-feature read."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    crs: Optional[Crs] = None

    @field_validator("crs", mode="before")
    @classmethod
    def parse_crs(cls, value):
        return _to_crs(value)


class QueryParameters(BaseModel):
    """
    Query parameters of the items endpoint.

    Produced only by parse_query_string() in request handling; tests and
    callers may also construct it directly with Python values.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    limit: Optional[int] = Field(default=None, ge=1, description="Page size; absent disables paging")
    offset: Optional[int] = Field(default=None, ge=0, description="Rows to skip")
    bbox: Optional[List[FiniteFloat]] = Field(default=None, description="xmin,ymin[,zmin],xmax,ymax[,zmax]")
    bbox_crs: Optional[Crs] = Field(default=None, alias="bbox-crs", description="CRS of bbox")
    datetime: Optional[DatetimeFilter] = Field(default=None, description="Instant or interval")
    crs: Optional[Crs] = Field(default=None, description="CRS of returned geometries")

    @field_validator("bbox", mode="before")
    @classmethod
    def split_bbox(cls, value):
        if isinstance(value, str):
            return [part.strip() for part in value.split(",")]
        return value

    @field_validator("bbox")
    @classmethod
    def check_bbox_length(cls, value):
        if value is not None and len(value) not in (4, 6):
            raise ValueError(f"bbox must have 4 or 6 numbers, got {len(value)}")
        return value

    @field_validator("bbox_crs", "crs", mode="before")
    @classmethod
    def parse_crs(cls, value):
        return _to_crs(value)

    @field_validator("datetime", mode="before")
    @classmethod
    def parse_datetime(cls, value):
        if isinstance(value, str):
            return DatetimeFilter.parse(value)
        return value


def _malformed(error: ValidationError, values: Dict[str, str]) -> MalformedQuery:
    """First validation error as MalformedQuery(parameter, value)."""
    detail = error.errors()[0]
    parameter = str(detail["loc"][0]) if detail.get("loc") else None
    value = values.get(parameter) if parameter else None

    if detail["type"] == "extra_forbidden":
        message = f"Unknown query parameter '{parameter}'"
    else:
        message = f"Invalid value for '{parameter}': {detail['msg']}"

    return MalformedQuery(message, parameter=parameter, value=value)


def parse_query_string(
    raw_query: Optional[str],
    model: Type[ParamsT] = QueryParameters
) -> ParamsT:
    """
    Parse a raw query string into `model`.

    Args:
        raw_query: Query string without the leading '?'
        model: QueryParameters (items) or ItemQueryParameters (single feature)

    Raises:
        MalformedQuery: unknown or repeated key, unparseable value, bad bbox
    """
    values: Dict[str, str] = {}
    for key, value in parse_qsl(raw_query or "", keep_blank_values=True):
        if key in values:
            raise MalformedQuery(
                f"Query parameter '{key}' given more than once",
                parameter=key,
                value=value
            )
        values[key] = value

    try:
        return model.model_validate(values)
    except ValidationError as e:
        raise _malformed(e, values) from e
