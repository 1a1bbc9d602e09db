import os

# Settings read at import time by config.get_app_config()
os.environ.setdefault("POSTGIS_HOST", "localhost")
os.environ.setdefault("POSTGIS_DATABASE", "ogc")
os.environ.setdefault("POSTGIS_USER", "ogc")
os.environ.setdefault("POSTGIS_PASSWORD", "secret")

from http import HTTPStatus  # noqa: E402
from typing import Any, Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402

from ogc_common.config import CommonConfig  # noqa: E402
from ogc_common.errors import StoreError  # noqa: E402
from ogc_items.config import FeaturesEngineConfig  # noqa: E402
from ogc_items.filters import AllOf, CollectionEquals, Predicate  # noqa: E402
from ogc_items.models import Feature  # noqa: E402
from ogc_items.service import FeatureService  # noqa: E402


class FakeFeatureRepository:
    """
    In-memory stand-in for FeatureRepository.

    Only the collection predicate is evaluated; spatial and temporal
    predicates are recorded in `calls` for inspection.
    """

    def __init__(self):
        self.rows: Dict[tuple, Dict[str, Any]] = {}
        self.calls: List[tuple] = []

    def add(self, collection_id: str, feature_id: str, **properties) -> None:
        self.rows[(collection_id, feature_id)] = {
            'type': 'Feature',
            'id': feature_id,
            'geometry': {'type': 'Point', 'coordinates': [0.0, 0.0]},
            'properties': dict(properties),
            'links': None
        }

    @staticmethod
    def _collection_of(where: Predicate) -> str:
        predicates = where.predicates if isinstance(where, AllOf) else (where,)
        for predicate in predicates:
            if isinstance(predicate, CollectionEquals):
                return predicate.collection_id
        raise AssertionError("filter without collection predicate")

    def _matching(self, where: Predicate) -> List[Dict[str, Any]]:
        collection_id = self._collection_of(where)
        return [
            dict(row) for (collection, _), row in sorted(self.rows.items(), key=lambda kv: kv[0][1])
            if collection == collection_id
        ]

    def count_features(self, where: Predicate) -> int:
        self.calls.append(('count', where))
        return len(self._matching(where))

    def select_features(
        self,
        where: Predicate,
        target_srid: int,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Dict[str, Any]]:
        self.calls.append(('select', where, target_srid, limit, offset))
        rows = self._matching(where)
        if limit is not None:
            rows = rows[offset:offset + limit]
        return rows

    def get_feature(self, collection_id: str, feature_id: str, target_srid: int):
        self.calls.append(('get', collection_id, feature_id, target_srid))
        row = self.rows.get((collection_id, feature_id))
        return dict(row) if row else None

    def insert_feature(self, collection_id: str, feature: Feature) -> Dict[str, Any]:
        self.calls.append(('insert', collection_id, feature.id))
        if (collection_id, feature.id) in self.rows:
            raise StoreError("Duplicate identifier", status=HTTPStatus.CONFLICT)
        row = feature.model_dump(mode='json')
        self.rows[(collection_id, feature.id)] = row
        return dict(row)

    def replace_feature(self, collection_id: str, feature_id: str, feature: Feature):
        self.calls.append(('replace', collection_id, feature_id))
        if (collection_id, feature_id) not in self.rows:
            return None
        row = feature.model_dump(mode='json')
        self.rows[(collection_id, feature_id)] = row
        return dict(row)

    def delete_feature(self, collection_id: str, feature_id: str) -> bool:
        self.calls.append(('delete', collection_id, feature_id))
        return self.rows.pop((collection_id, feature_id), None) is not None


class FakeCollectionRepository:
    """In-memory stand-in for CollectionRepository."""

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}

    def list_collections(self) -> List[Dict[str, Any]]:
        return [dict(self.documents[key]) for key in sorted(self.documents)]

    def get_collection(self, collection_id: str) -> Optional[Dict[str, Any]]:
        document = self.documents.get(collection_id)
        return dict(document) if document else None

    def insert_collection(self, collection_id: str, document: Dict[str, Any]) -> None:
        if collection_id in self.documents:
            raise StoreError("Duplicate identifier", status=HTTPStatus.CONFLICT)
        self.documents[collection_id] = document

    def update_collection(self, collection_id: str, document: Dict[str, Any]) -> bool:
        if collection_id not in self.documents:
            return False
        self.documents[collection_id] = document
        return True

    def delete_collection(self, collection_id: str) -> bool:
        return self.documents.pop(collection_id, None) is not None


@pytest.fixture
def engine_config():
    return FeaturesEngineConfig(
        features_schema="data",
        features_table="features",
        geometry_column="geometry",
        storage_srid=4326,
        datetime_property="datetime",
        clamp_previous_link=False,
        query_timeout_seconds=30
    )


@pytest.fixture
def common_config():
    return CommonConfig(ogc_base_url=None, route_prefix="/api/features")


@pytest.fixture
def feature_repo():
    repo = FakeFeatureRepository()
    for number in range(1, 6):
        repo.add("parks", f"park-{number}", name=f"Park {number}")
    repo.add("lakes", "lake-1", name="Lake 1")
    return repo


@pytest.fixture
def feature_service(engine_config, feature_repo):
    return FeatureService(config=engine_config, repository=feature_repo)


@pytest.fixture
def collection_repo():
    return FakeCollectionRepository()
