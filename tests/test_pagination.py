import pytest

from ogc_common.models import NEXT, PREV, SELF
from ogc_items.pagination import PaginationLinker, with_offset

URL = "http://localhost/api/features/collections/parks/items"


def _rels(links):
    return {link.rel: link.href for link in links}


@pytest.mark.parametrize("url, offset, expected", [
    (f"{URL}?limit=2&offset=2", 4, f"{URL}?limit=2&offset=4"),
    (f"{URL}?offset=2&limit=2", 0, f"{URL}?offset=0&limit=2"),
    (f"{URL}?limit=2", 2, f"{URL}?limit=2&offset=2"),
    (URL, 10, f"{URL}?offset=10"),
    (f"{URL}?bbox=0%2C0%2C1%2C1&limit=2&offset=2&crs=EPSG:3857", 0,
     f"{URL}?bbox=0%2C0%2C1%2C1&limit=2&offset=0&crs=EPSG:3857"),
])
def test_with_offset(url, offset, expected):
    assert with_offset(url, offset) == expected


def test_self_only_without_limit():
    links = PaginationLinker().links(f"{URL}?bbox=0,0,1,1", None, None, 100)
    assert len(links) == 1
    assert links[0].rel == SELF
    assert links[0].href == f"{URL}?bbox=0,0,1,1"


def test_middle_page():
    links = _rels(PaginationLinker().links(f"{URL}?limit=2&offset=2", 2, 2, 5))
    assert links[SELF] == f"{URL}?limit=2&offset=2"
    assert links[PREV] == f"{URL}?limit=2&offset=0"
    assert links[NEXT] == f"{URL}?limit=2&offset=4"


def test_first_page_offset_absent():
    links = _rels(PaginationLinker().links(f"{URL}?limit=2", 2, None, 5))
    assert PREV not in links
    assert links[NEXT] == f"{URL}?limit=2&offset=2"


def test_last_page():
    links = _rels(PaginationLinker().links(f"{URL}?limit=2&offset=4", 2, 4, 5))
    assert NEXT not in links
    assert links[PREV] == f"{URL}?limit=2&offset=2"


def test_partial_previous_page_literal():
    linker = PaginationLinker()
    assert linker.previous_offset(limit=5, offset=3) is None
    assert PREV not in _rels(linker.links(f"{URL}?limit=5&offset=3", 5, 3, 20))


def test_partial_previous_page_clamped():
    linker = PaginationLinker(clamp_previous=True)
    assert linker.previous_offset(limit=5, offset=3) == 0
    assert linker.previous_offset(limit=5, offset=0) is None
    assert linker.previous_offset(limit=5, offset=12) == 7
    assert _rels(linker.links(f"{URL}?limit=5&offset=3", 5, 3, 20))[PREV] == f"{URL}?limit=5&offset=0"


def test_presence_rules():
    linker = PaginationLinker()
    for limit in range(1, 6):
        for offset in range(0, 13):
            for matched in range(0, 16):
                url = f"{URL}?limit={limit}&offset={offset}"
                links = _rels(linker.links(url, limit, offset, matched))

                assert links[SELF] == url
                assert (PREV in links) == (offset != 0 and offset >= limit)
                assert (NEXT in links) == (offset + limit < matched)
                if PREV in links:
                    assert links[PREV] == f"{URL}?limit={limit}&offset={offset - limit}"
                if NEXT in links:
                    assert links[NEXT] == f"{URL}?limit={limit}&offset={offset + limit}"
