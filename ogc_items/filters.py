# ============================================================================
# MODULE CONTEXT - FILTER ASSEMBLER
# ============================================================================
# STATUS: Feature Engine - Stage 3 (WHERE clause + output SRID)
# PURPOSE: Compose collection, spatial and temporal predicates into one filter
# EXPORTS: Predicate, CollectionEquals, EnvelopeIntersects, TemporalMatch, AllOf,
#          FeatureFilter, FilterAssembler, assemble_filter
# DEPENDENCIES: psycopg.sql, dataclasses
# VALIDATION: Identifiers via sql.Identifier, every value via %s placeholders
# PATTERNS: Predicate expression tree rendered once, SQL Composition
# ============================================================================

"""
Filter Assembler

The WHERE clause is a small typed expression tree:

    AllOf(
        CollectionEquals("collection", "parks"),
        EnvelopeIntersects("geometry", SpatialPredicate(...), storage_srid),
        TemporalMatch("properties", "datetime", DatetimeFilter(...)),
    )

render() walks the tree once and returns a psycopg sql.Composed together with
the positional parameters in placeholder order. Nothing coming from the
request is ever formatted into the SQL text: column names are Identifiers,
everything else (collection id, coordinates, SRIDs, timestamps, property
name) is a bound value.

The output SRID (the `crs` parameter) is not a predicate; it travels on
FeatureFilter.target_srid and is applied as ST_Transform on the selected
geometry by the repository.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from psycopg import sql

from ogc_common.models import Crs

from .config import FeaturesEngineConfig, get_items_config
from .parameters import DatetimeFilter, QueryParameters
from .spatial import SpatialPredicate, build_spatial_predicate

COLLECTION_COLUMN = "collection"
PROPERTIES_COLUMN = "properties"

Rendered = Tuple[sql.Composable, List[Any]]


class Predicate:
    """Node of the WHERE expression tree."""

    def render(self) -> Rendered:
        raise NotImplementedError


@dataclass(frozen=True)
class CollectionEquals(Predicate):
    column: str
    collection_id: str

    def render(self) -> Rendered:
        clause = sql.SQL("{col} = %s").format(col=sql.Identifier(self.column))
        return clause, [self.collection_id]


@dataclass(frozen=True)
class EnvelopeIntersects(Predicate):
    """Geometry intersects the envelope, re-projected into storage SRID."""
    column: str
    envelope: SpatialPredicate
    storage_srid: int

    def render(self) -> Rendered:
        clause = sql.SQL(
            "ST_Intersects({col}, ST_Transform(ST_MakeEnvelope(%s, %s, %s, %s, %s), %s))"
        ).format(col=sql.Identifier(self.column))
        return clause, [*self.envelope.envelope, self.envelope.srid, self.storage_srid]


@dataclass(frozen=True)
class TemporalMatch(Predicate):
    """
    Compare a timestamp property of the feature against an instant or an
    interval (end bound exclusive for whole-day dates).
    """
    column: str
    property_name: str
    window: DatetimeFilter

    def render(self) -> Rendered:
        value = sql.SQL("({col} ->> %s)::timestamptz").format(col=sql.Identifier(self.column))

        if self.window.instant:
            return sql.SQL("{value} = %s").format(value=value), [self.property_name, self.window.start]

        parts = []
        params: List[Any] = []
        if self.window.start is not None:
            parts.append(sql.SQL("{value} >= %s").format(value=value))
            params.extend([self.property_name, self.window.start])
        if self.window.end is not None:
            operator = sql.SQL("<" if self.window.end_exclusive else "<=")
            parts.append(sql.SQL("{value} {op} %s").format(value=value, op=operator))
            params.extend([self.property_name, self.window.end])
        return sql.SQL(" AND ").join(parts), params


@dataclass(frozen=True)
class AllOf(Predicate):
    predicates: Tuple[Predicate, ...]

    def render(self) -> Rendered:
        parts = []
        params: List[Any] = []
        for predicate in self.predicates:
            clause, clause_params = predicate.render()
            parts.append(clause)
            params.extend(clause_params)
        return sql.SQL(" AND ").join(parts), params


@dataclass(frozen=True)
class FeatureFilter:
    """Everything the executor needs to run a collection query."""
    collection_id: str
    where: Predicate
    target_srid: int
    spatial: Optional[SpatialPredicate] = None
    temporal: Optional[DatetimeFilter] = None


class FilterAssembler:
    """
    Build the FeatureFilter for one items request.

    collection equality is always present; the envelope and temporal
    predicates are added when the request carries bbox / datetime.
    """

    def __init__(self, config: Optional[FeaturesEngineConfig] = None):
        self.config = config or get_items_config()

    def assemble(self, collection_id: str, params: QueryParameters) -> FeatureFilter:
        """
        Raises:
            InvalidCrs: crs or bbox-crs code is not an integer SRID
        """
        target_srid = (params.crs or Crs()).srid(parameter="crs")
        spatial = build_spatial_predicate(params.bbox, params.bbox_crs)

        predicates: List[Predicate] = [CollectionEquals(COLLECTION_COLUMN, collection_id)]
        if spatial is not None:
            predicates.append(
                EnvelopeIntersects(self.config.geometry_column, spatial, self.config.storage_srid)
            )
        if params.datetime is not None:
            predicates.append(
                TemporalMatch(PROPERTIES_COLUMN, self.config.datetime_property, params.datetime)
            )

        return FeatureFilter(
            collection_id=collection_id,
            where=AllOf(tuple(predicates)),
            target_srid=target_srid,
            spatial=spatial,
            temporal=params.datetime
        )


def assemble_filter(
    collection_id: str,
    params: QueryParameters,
    config: Optional[FeaturesEngineConfig] = None
) -> FeatureFilter:
    """Shorthand for FilterAssembler(config).assemble(collection_id, params)."""
    return FilterAssembler(config).assemble(collection_id, params)
