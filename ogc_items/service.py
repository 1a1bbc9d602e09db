# ============================================================================
# MODULE CONTEXT - FEATURE SERVICE
# ============================================================================
# STATUS: Feature Engine - Orchestration
# PURPOSE: Run the query pipeline and single-feature CRUD for the items API
# EXPORTS: FeatureService
# PYDANTIC_MODELS: Feature, FeatureCollection, QueryParameters
# DEPENDENCIES: pydantic, util_logger, ogc_items stages
# SOURCE: FeatureRepository (PostGIS)
# PATTERNS: Service Layer, Pipeline
# ENTRY_POINTS: service = FeatureService(); fc = service.query_features(...)
# ============================================================================

"""
Feature Service - Business Logic Layer

Collection query pipeline:

    parse_query_string -> FilterAssembler (spatial + temporal) ->
    CountingExecutor -> PaginationLinker -> FeatureEnvelopeBuilder

Parsing runs before anything touches the store, so a malformed query string
costs no database round trip.

Single features:
    get      -> Feature with self/collection links, NotFound if absent
    create   -> collection forced from the path, id generated when missing
    replace  -> full replacement, id forced from the path, NotFound if absent
    delete   -> deleting an absent feature is a no-op
"""

import uuid
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from ogc_common.errors import MalformedQuery, NotFound
from ogc_common.models import Crs
from util_logger import ComponentType, LoggerFactory, log_exceptions

from .config import FeaturesEngineConfig, get_items_config
from .envelope import FeatureEnvelopeBuilder, strip_path_segments
from .executor import CountingExecutor
from .filters import FilterAssembler
from .models import Feature, FeatureCollection
from .pagination import PaginationLinker
from .parameters import ItemQueryParameters, parse_query_string
from .repository import FeatureRepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "FeatureService")


class FeatureService:
    """
    Business logic service for the items endpoints.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(
        self,
        config: Optional[FeaturesEngineConfig] = None,
        repository: Optional[FeatureRepository] = None
    ):
        """
        Args:
            config: Feature engine configuration (uses singleton if not provided)
            repository: Feature repository (built from config if not provided)
        """
        self.config = config or get_items_config()
        self.repository = repository or FeatureRepository(self.config)
        self.assembler = FilterAssembler(self.config)
        self.executor = CountingExecutor(self.repository)
        self.linker = PaginationLinker(clamp_previous=self.config.clamp_previous_link)
        self.envelope = FeatureEnvelopeBuilder()

    # ========================================================================
    # READS
    # ========================================================================

    def query_features(
        self,
        collection_id: str,
        raw_query: Optional[str],
        request_url: str
    ) -> FeatureCollection:
        """
        Query a collection.

        Args:
            collection_id: Collection identifier from the path
            raw_query: Query string without '?'
            request_url: Full request URL (self link, base for prev/next)

        Raises:
            MalformedQuery: query string rejected
            InvalidCrs: crs or bbox-crs not an integer SRID
            StoreError: database failure
        """
        params = parse_query_string(raw_query)
        feature_filter = self.assembler.assemble(collection_id, params)

        result = self.executor.execute(feature_filter, limit=params.limit, offset=params.offset)
        links = self.linker.links(request_url, params.limit, params.offset, result.number_matched)

        return self.envelope.build(result.features, links, result.number_matched)

    def get_feature(
        self,
        collection_id: str,
        feature_id: str,
        raw_query: Optional[str],
        request_url: str
    ) -> Feature:
        """
        Read a single feature (optionally re-projected with ?crs=).

        Raises:
            NotFound: no feature with this id in the collection
        """
        params = parse_query_string(raw_query, ItemQueryParameters)
        target_srid = (params.crs or Crs()).srid(parameter="crs")

        row = self.repository.get_feature(collection_id, feature_id, target_srid)
        if row is None:
            raise NotFound(
                f"Feature '{feature_id}' not found in collection '{collection_id}'",
                parameter="featureId",
                value=feature_id
            )

        logger.info(f"Retrieved feature '{feature_id}' from '{collection_id}'")
        return self.envelope.decorate_feature(row, request_url)

    # ========================================================================
    # WRITES
    # ========================================================================

    @staticmethod
    def _parse_feature(body: Dict[str, Any]) -> Feature:
        try:
            return Feature.model_validate(body)
        except ValidationError as e:
            detail = e.errors()[0]
            field = ".".join(str(part) for part in detail.get("loc", ())) or None
            raise MalformedQuery(
                f"Invalid feature document: {detail['msg']}",
                parameter=field
            ) from e

    @log_exceptions(ComponentType.SERVICE, "FeatureService")
    def create_feature(
        self,
        collection_id: str,
        body: Dict[str, Any],
        request_url: str
    ) -> Tuple[Feature, str]:
        """
        Insert a feature into a collection.

        Args:
            collection_id: Target collection (overrides anything in the body)
            body: GeoJSON Feature document
            request_url: URL of the items endpoint that received the POST

        Returns:
            (stored feature with links, Location URL)

        Raises:
            MalformedQuery: body is not a Feature
            StoreError: 409 duplicate id, other database failures
        """
        feature = self._parse_feature(body)
        if feature.id is None:
            feature = feature.model_copy(update={'id': str(uuid.uuid4())})

        row = self.repository.insert_feature(collection_id, feature)

        items_url = strip_path_segments(request_url, 0)
        location = f"{items_url}/{feature.id}"
        logger.info(f"Created feature '{feature.id}' in '{collection_id}'")

        stored = self.envelope.decorate_feature(
            row,
            self_url=location,
            collection_url=strip_path_segments(items_url, 1)
        )
        return stored, location

    @log_exceptions(ComponentType.SERVICE, "FeatureService")
    def replace_feature(
        self,
        collection_id: str,
        feature_id: str,
        body: Dict[str, Any]
    ) -> None:
        """
        Replace a feature; repeating the same body leaves the same row.

        Raises:
            MalformedQuery: body is not a Feature
            NotFound: no feature with this id in the collection
        """
        feature = self._parse_feature(body).model_copy(update={'id': feature_id})

        row = self.repository.replace_feature(collection_id, feature_id, feature)
        if row is None:
            raise NotFound(
                f"Feature '{feature_id}' not found in collection '{collection_id}'",
                parameter="featureId",
                value=feature_id
            )

        logger.info(f"Replaced feature '{feature_id}' in '{collection_id}'")

    @log_exceptions(ComponentType.SERVICE, "FeatureService")
    def delete_feature(self, collection_id: str, feature_id: str) -> None:
        """Delete a feature; deleting one that does not exist is a no-op."""
        deleted = self.repository.delete_feature(collection_id, feature_id)
        if deleted:
            logger.info(f"Deleted feature '{feature_id}' from '{collection_id}'")
        else:
            logger.info(f"Feature '{feature_id}' in '{collection_id}' already absent")
