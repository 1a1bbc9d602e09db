import pytest

from ogc_common.errors import InvalidCrs
from ogc_common.models import Crs
from ogc_items.spatial import SpatialPredicate, build_spatial_predicate, reduce_bbox


def test_no_bbox():
    assert build_spatial_predicate(None) is None
    # crs is not resolved without a bbox
    assert build_spatial_predicate(None, Crs(code="abc")) is None


@pytest.mark.parametrize("bbox", [
    [0, 0, 1, 1],
    [-180, -90, 180, 90],
    [10.25, 45.5, 11.75, 46.125],
])
def test_envelope_is_exact(bbox):
    predicate = build_spatial_predicate(bbox)
    assert predicate == SpatialPredicate(*[float(c) for c in bbox], srid=4326)
    assert predicate.envelope == tuple(float(c) for c in bbox)


def test_srid_from_bbox_crs():
    predicate = build_spatial_predicate([0, 0, 1000, 1000], Crs.parse("EPSG:3857"))
    assert predicate.srid == 3857


def test_reduce_3d():
    assert reduce_bbox([1, 2, 3, 4, 5, 6]) == [1.0, 2.0, 4.0, 5.0]
    assert reduce_bbox([1, 2, -1e9, 4, 5, 1e9]) == [1.0, 2.0, 4.0, 5.0]


def test_reduce_leaves_other_lengths():
    assert reduce_bbox([1, 2, 3, 4]) == [1.0, 2.0, 3.0, 4.0]
    assert reduce_bbox([1, 2, 3]) == [1.0, 2.0, 3.0]


def test_3d_bbox_matches_2d():
    assert build_spatial_predicate([0, 0, 0, 1, 1, 10]) == build_spatial_predicate([0, 0, 1, 1])


def test_reduce_is_positional():
    # 2D corners followed by z values are not reordered
    assert reduce_bbox([0, 0, 1, 1, 0, 10]) == [0.0, 0.0, 1.0, 0.0]
    assert build_spatial_predicate([0, 0, 1, 1, 0, 10]) == SpatialPredicate(0.0, 0.0, 1.0, 0.0, 4326)


@pytest.mark.parametrize("bbox", [[], [1], [1, 2, 3], [1, 2, 3, 4, 5], [1, 2, 3, 4, 5, 6, 7]])
def test_other_lengths_dropped(bbox):
    assert build_spatial_predicate(bbox) is None


def test_invalid_bbox_crs():
    with pytest.raises(InvalidCrs) as error:
        build_spatial_predicate([0, 0, 1, 1], Crs(code="WGS84"))
    assert error.value.parameter == "bbox-crs"
    assert error.value.value == "WGS84"
    assert error.value.http_status_code == 400
