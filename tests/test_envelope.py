from datetime import datetime, timedelta, timezone

from ogc_common.models import COLLECTION, GEOJSON, SELF, Link
from ogc_items.envelope import FeatureEnvelopeBuilder, strip_path_segments, utc_timestamp
from ogc_items.models import FeatureCollection

ITEM_URL = "http://localhost/api/features/collections/parks/items/park-1?crs=EPSG:3857"


def _row(feature_id, links=None):
    return {
        'type': 'Feature',
        'id': feature_id,
        'geometry': {'type': 'Point', 'coordinates': [1.0, 2.0]},
        'properties': {'name': feature_id},
        'links': links
    }


def test_utc_timestamp_truncated():
    moment = datetime(2026, 10, 19, 8, 15, 2, 987654, tzinfo=timezone.utc)
    assert utc_timestamp(moment) == "2026-10-19T08:15:02Z"


def test_utc_timestamp_converts_offset():
    moment = datetime(2026, 10, 19, 10, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert utc_timestamp(moment) == "2026-10-19T08:00:00Z"


def test_utc_timestamp_now_format():
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert "." not in stamp
    assert datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%SZ")


def test_strip_path_segments():
    assert strip_path_segments(ITEM_URL, 2) == "http://localhost/api/features/collections/parks"
    assert strip_path_segments(ITEM_URL, 0) == \
        "http://localhost/api/features/collections/parks/items/park-1"
    assert strip_path_segments("http://localhost/a/b/", 1) == "http://localhost/a"


def test_build_collection():
    links = [Link(href="http://localhost/items?limit=2", rel=SELF, type=GEOJSON)]
    moment = datetime(2026, 1, 1, tzinfo=timezone.utc)

    collection = FeatureEnvelopeBuilder().build(
        [_row("a"), _row("b")], links, number_matched=7, now=moment
    )

    assert isinstance(collection, FeatureCollection)
    assert collection.type == "FeatureCollection"
    assert [f.id for f in collection.features] == ["a", "b"]
    assert collection.links == links
    assert collection.timeStamp == "2026-01-01T00:00:00Z"
    assert collection.numberMatched == 7
    assert collection.numberReturned == 2


def test_decorate_feature_links():
    feature = FeatureEnvelopeBuilder().decorate_feature(_row("park-1"), ITEM_URL)

    rels = {link.rel: link for link in feature.links}
    assert rels[SELF].href == ITEM_URL
    assert rels[SELF].type == GEOJSON
    assert rels[COLLECTION].href == "http://localhost/api/features/collections/parks"
    assert rels[COLLECTION].type == GEOJSON


def test_decorate_feature_replaces_stored_computed_links():
    stored = [
        {'href': 'http://stale/self', 'rel': 'self'},
        {'href': 'http://example.com/docs', 'rel': 'describedby', 'type': 'text/html'},
    ]
    feature = FeatureEnvelopeBuilder().decorate_feature(_row("park-1", stored), ITEM_URL)

    hrefs = [link.href for link in feature.links]
    assert 'http://stale/self' not in hrefs
    assert hrefs[-1] == 'http://example.com/docs'
    assert [link.rel for link in feature.links] == [SELF, COLLECTION, 'describedby']


def test_decorate_feature_explicit_collection_url():
    feature = FeatureEnvelopeBuilder().decorate_feature(
        _row("x"),
        self_url="http://localhost/api/features/collections/parks/items/x",
        collection_url="http://localhost/api/features/collections/parks"
    )
    assert feature.links[1].href == "http://localhost/api/features/collections/parks"
