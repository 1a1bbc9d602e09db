# ============================================================================
# MODULE CONTEXT - COLLECTION REGISTRY
# ============================================================================
# STATUS: Collection Registry - Business logic
# PURPOSE: Collection metadata CRUD with read-time link injection
# EXPORTS: CollectionRegistry
# PYDANTIC_MODELS: Collection, Collections
# DEPENDENCIES: pydantic, util_logger, ogc_collections.repository
# PATTERNS: Service Layer
# ============================================================================

"""
Collection Registry

Every collection served gains two links computed from the request URL
(query removed):

    self   {collections}/{id}
    items  {collections}/{id}/items   "Items of {title or id}", GeoJSON

Links with those relations are removed before a document is stored, so
stored metadata never depends on the host it was written through.
"""

from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from pydantic import ValidationError

from ogc_common.errors import MalformedQuery, NotFound
from ogc_common.models import GEOJSON, ITEMS, JSON, SELF, Link
from util_logger import ComponentType, LoggerFactory, log_exceptions

from .models import Collection, Collections
from .repository import CollectionRepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "CollectionRegistry")

INJECTED_RELS = (SELF, ITEMS)


def _without_query(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path.rstrip("/"), "", ""))


class CollectionRegistry:
    """
    Collection metadata CRUD.

    Reads return Collection models with self/items links; writes take raw
    request bodies and validate them here.
    """

    def __init__(self, repository: Optional[CollectionRepository] = None):
        self.repository = repository or CollectionRepository()

    # ========================================================================
    # LINKS
    # ========================================================================

    @staticmethod
    def _with_links(document: Dict[str, Any], collection_url: str) -> Collection:
        collection = Collection.model_validate(document)
        kept = [link for link in collection.links if link.rel not in INJECTED_RELS]
        kept.extend([
            Link(href=collection_url, rel=SELF, type=JSON, title="This collection"),
            Link(
                href=f"{collection_url}/items",
                rel=ITEMS,
                type=GEOJSON,
                title=f"Items of {collection.title or collection.id}"
            )
        ])
        return collection.model_copy(update={'links': kept})

    @staticmethod
    def _to_document(collection: Collection) -> Dict[str, Any]:
        document = collection.model_dump(mode='json', exclude_none=True)
        document['links'] = [
            link for link in document.get('links', [])
            if link.get('rel') not in INJECTED_RELS
        ]
        return document

    @staticmethod
    def _parse_collection(body: Dict[str, Any]) -> Collection:
        try:
            return Collection.model_validate(body)
        except ValidationError as e:
            detail = e.errors()[0]
            field = ".".join(str(part) for part in detail.get("loc", ())) or None
            raise MalformedQuery(
                f"Invalid collection document: {detail['msg']}",
                parameter=field
            ) from e

    # ========================================================================
    # READS
    # ========================================================================

    def list_collections(self, request_url: str) -> Collections:
        """All collections, each with self/items links under request_url."""
        base = _without_query(request_url)
        collections = [
            self._with_links(document, f"{base}/{document['id']}")
            for document in self.repository.list_collections()
        ]

        logger.info(f"Listed {len(collections)} collections")
        return Collections(
            links=[Link(href=request_url, rel=SELF, type=JSON, title="This document")],
            collections=collections
        )

    def get_collection(self, collection_id: str, request_url: str) -> Collection:
        """
        Raises:
            NotFound: no collection with this id
        """
        document = self.repository.get_collection(collection_id)
        if document is None:
            raise NotFound(
                f"Collection '{collection_id}' not found",
                parameter="collectionId",
                value=collection_id
            )

        return self._with_links(document, _without_query(request_url))

    # ========================================================================
    # WRITES
    # ========================================================================

    @log_exceptions(ComponentType.SERVICE, "CollectionRegistry")
    def create_collection(self, body: Dict[str, Any], request_url: str) -> Tuple[Collection, str]:
        """
        Store a new collection.

        Returns:
            (collection with links, Location URL)

        Raises:
            MalformedQuery: body is not a collection document
            StoreError: 409 when the id already exists
        """
        collection = self._parse_collection(body)
        self.repository.insert_collection(collection.id, self._to_document(collection))

        location = f"{_without_query(request_url)}/{collection.id}"
        logger.info(f"Created collection '{collection.id}'")
        return self._with_links(self._to_document(collection), location), location

    @log_exceptions(ComponentType.SERVICE, "CollectionRegistry")
    def update_collection(self, collection_id: str, body: Dict[str, Any]) -> None:
        """
        Replace a collection document; the id always comes from the path.

        Raises:
            NotFound: no collection with this id
        """
        collection = self._parse_collection({**body, 'id': collection_id})

        if not self.repository.update_collection(collection_id, self._to_document(collection)):
            raise NotFound(
                f"Collection '{collection_id}' not found",
                parameter="collectionId",
                value=collection_id
            )
        logger.info(f"Updated collection '{collection_id}'")

    @log_exceptions(ComponentType.SERVICE, "CollectionRegistry")
    def delete_collection(self, collection_id: str) -> None:
        """Delete a collection; deleting one that does not exist is a no-op."""
        if self.repository.delete_collection(collection_id):
            logger.info(f"Deleted collection '{collection_id}'")
        else:
            logger.info(f"Collection '{collection_id}' already absent")
