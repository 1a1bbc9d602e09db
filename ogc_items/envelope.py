# ============================================================================
# MODULE CONTEXT - FEATURE ENVELOPE BUILDER
# ============================================================================
# STATUS: Feature Engine - Stage 6 (response documents)
# PURPOSE: Wrap features, links and counts into GeoJSON response documents
# EXPORTS: FeatureEnvelopeBuilder, utc_timestamp, strip_path_segments
# DEPENDENCIES: datetime, urllib.parse, ogc_items.models
# ============================================================================

"""
Feature Envelope Builder

Collection queries -> FeatureCollection(type, features, links, timeStamp,
numberMatched, numberReturned). Single features -> Feature with two links:

    self        the URL the feature was read from
    collection  that URL without the trailing /items/{featureId}
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit

from ogc_common.models import COLLECTION, GEOJSON, SELF, Link

from .models import Feature, FeatureCollection
from .repository import STORED_LINK_EXCLUDED_RELS


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO 8601 UTC timestamp truncated to whole seconds, e.g. 2026-10-19T08:15:02Z."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.replace(microsecond=0, tzinfo=None).isoformat() + "Z"


def strip_path_segments(url: str, count: int) -> str:
    """Drop the query and the last `count` path segments of `url`."""
    parts = urlsplit(url)
    path = parts.path.rstrip("/")
    for _ in range(count):
        path = path.rsplit("/", 1)[0]
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


class FeatureEnvelopeBuilder:
    """Builds FeatureCollection and single Feature documents."""

    def build(
        self,
        features: List[Dict[str, Any]],
        links: List[Link],
        number_matched: int,
        now: Optional[datetime] = None
    ) -> FeatureCollection:
        """
        Args:
            features: Feature dicts from the repository
            links: Navigation links from the pagination linker
            number_matched: Total rows satisfying the filter
            now: Assembly time (defaults to the current UTC time)
        """
        return FeatureCollection(
            features=[Feature.model_validate(feature) for feature in features],
            links=links,
            timeStamp=utc_timestamp(now),
            numberMatched=number_matched,
            numberReturned=len(features)
        )

    def decorate_feature(
        self,
        feature: Dict[str, Any],
        self_url: str,
        collection_url: Optional[str] = None
    ) -> Feature:
        """
        Attach self/collection links to a single feature.

        Args:
            feature: Feature dict from the repository
            self_url: URL of the feature itself
            collection_url: URL of its collection (derived from self_url when None)

        Stored links other than self/collection are kept after the two
        computed ones.
        """
        if collection_url is None:
            collection_url = strip_path_segments(self_url, 2)

        links = [
            Link(href=self_url, rel=SELF, type=GEOJSON, title="This document"),
            Link(href=collection_url, rel=COLLECTION, type=GEOJSON, title="The collection document")
        ]
        for stored in feature.get('links') or []:
            link = Link.model_validate(stored)
            if link.rel not in STORED_LINK_EXCLUDED_RELS:
                links.append(link)

        return Feature.model_validate({**feature, 'links': links})
