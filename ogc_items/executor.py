# ============================================================================
# MODULE CONTEXT - COUNTING EXECUTOR
# ============================================================================
# STATUS: Feature Engine - Stage 4 (count + page)
# PURPOSE: Run the assembled filter: COUNT(*) then the ordered page
# EXPORTS: CountingExecutor, QueryResult
# DEPENDENCIES: ogc_items.repository
# ============================================================================

"""
Counting Executor

    limit given:  COUNT(*) over the filter      -> number_matched
                  ORDER BY id LIMIT n OFFSET m  -> page
    no limit:     ORDER BY id                   -> every row
                  number_matched = number_returned

At most two store round trips per request.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from util_logger import ComponentType, LoggerFactory

from .filters import FeatureFilter
from .repository import FeatureRepository

logger = LoggerFactory.create_logger(ComponentType.ENGINE, "CountingExecutor")


@dataclass(frozen=True)
class QueryResult:
    features: List[Dict[str, Any]] = field(default_factory=list)
    number_matched: int = 0

    @property
    def number_returned(self) -> int:
        return len(self.features)


class CountingExecutor:
    """Executes a FeatureFilter against the feature repository."""

    def __init__(self, repository: Optional[FeatureRepository] = None):
        self.repository = repository or FeatureRepository()

    def execute(
        self,
        feature_filter: FeatureFilter,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> QueryResult:
        """
        Args:
            feature_filter: Assembled WHERE tree and output SRID
            limit: Page size; None disables pagination
            offset: Rows to skip; defaults to 0 when a limit is given

        Returns:
            QueryResult with the page and the total match count
        """
        if limit is None:
            features = self.repository.select_features(
                feature_filter.where,
                feature_filter.target_srid
            )
            logger.info(
                f"Collection '{feature_filter.collection_id}': {len(features)} features (unpaged)"
            )
            return QueryResult(features=features, number_matched=len(features))

        offset = offset or 0
        number_matched = self.repository.count_features(feature_filter.where)
        features = self.repository.select_features(
            feature_filter.where,
            feature_filter.target_srid,
            limit=limit,
            offset=offset
        )

        logger.info(
            f"Collection '{feature_filter.collection_id}': "
            f"{len(features)}/{number_matched} features (limit={limit}, offset={offset})"
        )
        return QueryResult(features=features, number_matched=number_matched)
