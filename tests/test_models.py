from http import HTTPStatus

import pytest
from pydantic import ValidationError

from ogc_common.errors import InvalidCrs, MalformedQuery, NotFound, StoreError
from ogc_common.models import Crs, Link
from ogc_items.models import Feature, FeatureCollection


def test_feature_id_coerced_to_string():
    assert Feature(id=42).id == "42"
    assert Feature.model_validate({'id': 'abc'}).id == "abc"


def test_feature_null_properties():
    assert Feature.model_validate({'properties': None}).properties == {}


def test_feature_type_checked():
    with pytest.raises(ValidationError):
        Feature.model_validate({'type': 'FeatureCollection'})


def test_link_rel_required():
    with pytest.raises(ValidationError):
        Link(href="http://example.com/docs")
    with pytest.raises(ValidationError):
        Feature.model_validate({'links': [{'href': 'http://example.com/docs'}]})

    assert Link(href="http://example.com/docs", rel="describedby").rel == "describedby"


def test_feature_collection_defaults():
    collection = FeatureCollection()
    assert collection.type == "FeatureCollection"
    assert collection.features == []


@pytest.mark.parametrize("value, code", [
    ("4326", "4326"),
    ("EPSG:3857", "3857"),
    ("epsg:3857", "3857"),
    ("http://www.opengis.net/def/crs/EPSG/0/25832", "25832"),
    ("http://www.opengis.net/def/crs/OGC/1.3/CRS84", "4326"),
])
def test_crs_parse(value, code):
    assert Crs.parse(value).code == code
    assert Crs.parse(value).srid() == int(code)


def test_crs_uri():
    assert Crs(code="3857").uri == "http://www.opengis.net/def/crs/EPSG/0/3857"
    assert str(Crs()) == "4326"


def test_error_bodies():
    error = MalformedQuery("Unknown query parameter 'foo'", parameter="foo", value="bar")
    assert error.http_status_code == HTTPStatus.BAD_REQUEST
    assert error.to_dict() == {
        'code': 'InvalidParameterValue',
        'description': "Unknown query parameter 'foo'",
        'parameter': 'foo',
        'value': 'bar'
    }

    assert NotFound().to_dict() == {'code': 'NotFound', 'description': 'Identifier not found'}
    assert InvalidCrs().http_status_code == 400


def test_store_error_status():
    assert StoreError().http_status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert StoreError("dup", status=HTTPStatus.CONFLICT).http_status_code == HTTPStatus.CONFLICT
    # class default untouched
    assert StoreError.http_status_code == HTTPStatus.INTERNAL_SERVER_ERROR
