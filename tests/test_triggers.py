import json
import logging
from http import HTTPStatus

import azure.functions as func
import pytest

import ogc_collections
import ogc_items
from ogc_collections.service import CollectionRegistry
from ogc_collections.triggers import CollectionsTrigger, CollectionTrigger
from ogc_common.document import build_api_document
from ogc_common.errors import StoreError
from ogc_common.models import GEOJSON
from ogc_common.triggers import ConformanceTrigger, LandingPageTrigger
from ogc_items.triggers import ItemsTrigger, ItemTrigger

BASE = "http://localhost:7071/api/features"


def _request(method, path, route_params=None, body=b"", headers=None):
    if isinstance(body, dict):
        body = json.dumps(body).encode()
    return func.HttpRequest(
        method=method,
        url=f"{BASE}{path}",
        route_params=route_params or {},
        headers=headers or {},
        body=body
    )


def _json(response):
    return json.loads(response.get_body())


@pytest.fixture
def items(feature_service, common_config):
    return ItemsTrigger(feature_service, common_config)


@pytest.fixture
def item(feature_service, common_config):
    return ItemTrigger(feature_service, common_config)


def test_items_query(items):
    response = items.handle(_request(
        "GET", "/collections/parks/items?limit=2&offset=2", {'collection_id': 'parks'}
    ))

    assert response.status_code == 200
    assert response.mimetype == GEOJSON
    body = _json(response)
    assert body['type'] == "FeatureCollection"
    assert body['numberMatched'] == 5
    assert body['numberReturned'] == 2
    assert {link['rel'] for link in body['links']} == {'self', 'prev', 'next'}


def test_items_unknown_parameter(items, feature_repo):
    response = items.handle(_request(
        "GET", "/collections/parks/items?foo=bar", {'collection_id': 'parks'}
    ))

    assert response.status_code == 400
    body = _json(response)
    assert body['code'] == "InvalidParameterValue"
    assert body['parameter'] == "foo"
    assert body['value'] == "bar"
    assert feature_repo.calls == []


def test_rejection_logged_with_request_context(items, caplog):
    with caplog.at_level(logging.WARNING, logger="trigger.OGCTrigger"):
        items.handle(_request(
            "GET", "/collections/parks/items?foo=bar", {'collection_id': 'parks'},
            headers={'x-request-id': 'req-42'}
        ))

    record = [r for r in caplog.records if r.name == "trigger.OGCTrigger"][-1]
    assert record.levelno == logging.WARNING
    assert record.custom_dimensions['request_id'] == "req-42"
    assert record.custom_dimensions['method'] == "GET"
    assert record.custom_dimensions['collection_id'] == "parks"
    assert record.custom_dimensions['parameter'] == "foo"
    assert record.custom_dimensions['component_type'] == "trigger"
    assert 'feature_id' not in record.custom_dimensions


def test_request_id_generated(item, caplog):
    with caplog.at_level(logging.WARNING, logger="trigger.OGCTrigger"):
        item.handle(_request(
            "GET", "/collections/parks/items/nope",
            {'collection_id': 'parks', 'feature_id': 'nope'}
        ))

    record = [r for r in caplog.records if r.name == "trigger.OGCTrigger"][-1]
    assert record.custom_dimensions['feature_id'] == "nope"
    assert record.custom_dimensions['request_id']


def test_items_invalid_crs(items):
    response = items.handle(_request(
        "GET", "/collections/parks/items?bbox=0,0,1,1&bbox-crs=EPSG:abc", {'collection_id': 'parks'}
    ))
    assert response.status_code == 400
    assert _json(response)['parameter'] == "bbox-crs"


def test_items_create(items, feature_repo):
    response = items.handle(_request(
        "POST", "/collections/parks/items", {'collection_id': 'parks'},
        body={'type': 'Feature', 'id': 'park-9', 'geometry': None, 'properties': {'a': 1}}
    ))

    assert response.status_code == 201
    assert response.headers['Location'] == f"{BASE}/collections/parks/items/park-9"
    assert _json(response)['id'] == "park-9"
    assert ("parks", "park-9") in feature_repo.rows


def test_items_create_invalid_json(items):
    response = items.handle(_request(
        "POST", "/collections/parks/items", {'collection_id': 'parks'}, body=b"{not json"
    ))
    assert response.status_code == 400


def test_items_create_duplicate(items):
    response = items.handle(_request(
        "POST", "/collections/parks/items", {'collection_id': 'parks'}, body={'id': 'park-1'}
    ))
    assert response.status_code == 409
    assert _json(response)['code'] == "StoreError"


def test_item_get(item):
    response = item.handle(_request(
        "GET", "/collections/parks/items/park-1",
        {'collection_id': 'parks', 'feature_id': 'park-1'}
    ))

    assert response.status_code == 200
    assert response.mimetype == GEOJSON
    links = {link['rel']: link['href'] for link in _json(response)['links']}
    assert links['self'] == f"{BASE}/collections/parks/items/park-1"
    assert links['collection'] == f"{BASE}/collections/parks"


def test_item_get_missing(item):
    response = item.handle(_request(
        "GET", "/collections/parks/items/nope", {'collection_id': 'parks', 'feature_id': 'nope'}
    ))
    assert response.status_code == 404
    assert _json(response)['code'] == "NotFound"


def test_item_put_and_delete(item, feature_repo):
    params = {'collection_id': 'parks', 'feature_id': 'park-1'}

    put = item.handle(_request("PUT", "/collections/parks/items/park-1", params,
                               body={'properties': {'name': 'Renamed'}}))
    assert put.status_code == 204
    assert feature_repo.rows[("parks", "park-1")]['properties'] == {'name': 'Renamed'}

    for _ in range(2):
        delete = item.handle(_request("DELETE", "/collections/parks/items/park-1", params))
        assert delete.status_code == 204


def test_method_not_allowed(item):
    response = item.handle(_request(
        "PATCH", "/collections/parks/items/park-1", {'collection_id': 'parks', 'feature_id': 'park-1'}
    ))
    assert response.status_code == 405


def test_store_failure_is_500(items, feature_repo):
    def broken(*args, **kwargs):
        raise StoreError("Database query failed: connection lost")
    feature_repo.count_features = broken

    response = items.handle(_request(
        "GET", "/collections/parks/items?limit=2", {'collection_id': 'parks'}
    ))
    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR


def test_unexpected_error_is_500(items, feature_repo):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")
    feature_repo.select_features = broken

    response = items.handle(_request("GET", "/collections/parks/items", {'collection_id': 'parks'}))
    assert response.status_code == 500
    assert _json(response)['code'] == "InternalServerError"


def test_landing_and_conformance(common_config):
    document = build_api_document("Test API", "desc", [ogc_collections.MODULE, ogc_items.MODULE])

    landing = LandingPageTrigger(document, common_config).handle(_request("GET", ""))
    hrefs = {link['rel']: link['href'] for link in _json(landing)['links']}
    assert hrefs['self'] == BASE
    assert hrefs['conformance'] == f"{BASE}/conformance"
    assert hrefs['data'] == f"{BASE}/collections"

    conformance = ConformanceTrigger(document, common_config).handle(_request("GET", "/conformance"))
    assert "http://www.opengis.net/spec/ogcapi-features-1/1.0/conf/core" in \
        _json(conformance)['conformsTo']


def test_collections_triggers(collection_repo, common_config):
    registry = CollectionRegistry(collection_repo)
    collections = CollectionsTrigger(registry, common_config)
    collection = CollectionTrigger(registry, common_config)

    created = collections.handle(_request("POST", "/collections", body={'id': 'parks', 'title': 'Parks'}))
    assert created.status_code == 201
    assert created.headers['Location'] == f"{BASE}/collections/parks"

    listing = _json(collections.handle(_request("GET", "/collections")))
    assert [c['id'] for c in listing['collections']] == ["parks"]

    params = {'collection_id': 'parks'}
    fetched = _json(collection.handle(_request("GET", "/collections/parks", params)))
    assert {link['rel'] for link in fetched['links']} == {'self', 'items'}

    assert collection.handle(_request("PUT", "/collections/parks", params, body={'title': 'P'})).status_code == 204
    assert collection.handle(_request("DELETE", "/collections/parks", params)).status_code == 204
    assert collection.handle(_request("GET", "/collections/parks", params)).status_code == 404
