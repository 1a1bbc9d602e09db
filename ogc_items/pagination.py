# ============================================================================
# MODULE CONTEXT - PAGINATION LINKER
# ============================================================================
# STATUS: Feature Engine - Stage 5 (self/prev/next links)
# PURPOSE: Offset arithmetic and link hrefs for paged item responses
# EXPORTS: PaginationLinker, with_offset
# DEPENDENCIES: urllib.parse, ogc_common.models
# ============================================================================

"""
Pagination Linker

With limit L, offset O (default 0) and M matched rows:

    prev  iff O != 0 and O >= L    -> offset O - L
    next  iff O + L < M            -> offset O + L
    self  always                   -> request URL unchanged

When clamp_previous is on, prev is emitted for every O > 0 and targets
max(0, O - L), so 0 < O < L still links back to the first page.

prev/next hrefs differ from the request URL only in the offset query
component; every other parameter keeps its original spelling and position.
"""

from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

from ogc_common.models import GEOJSON, NEXT, PREV, SELF, Link


def with_offset(url: str, offset: int) -> str:
    """
    Return `url` with its offset query component set to `offset`.

    Existing components are kept verbatim (no re-encoding); the offset is
    replaced in place, or appended when the query has none.
    """
    parts = urlsplit(url)
    segments = parts.query.split("&") if parts.query else []

    replaced = False
    rewritten = []
    for segment in segments:
        if segment.split("=", 1)[0] == "offset":
            rewritten.append(f"offset={offset}")
            replaced = True
        else:
            rewritten.append(segment)
    if not replaced:
        rewritten.append(f"offset={offset}")

    return urlunsplit((parts.scheme, parts.netloc, parts.path, "&".join(rewritten), parts.fragment))


class PaginationLinker:
    """Decides which navigation links a page gets and where they point."""

    def __init__(self, clamp_previous: bool = False):
        self.clamp_previous = clamp_previous

    def previous_offset(self, limit: int, offset: int) -> Optional[int]:
        if self.clamp_previous:
            return max(0, offset - limit) if offset > 0 else None
        if offset != 0 and offset >= limit:
            return offset - limit
        return None

    @staticmethod
    def next_offset(limit: int, offset: int, number_matched: int) -> Optional[int]:
        if offset + limit < number_matched:
            return offset + limit
        return None

    def links(
        self,
        request_url: str,
        limit: Optional[int],
        offset: Optional[int],
        number_matched: int
    ) -> List[Link]:
        """
        Navigation links for one page.

        Args:
            request_url: Incoming URL including its query string
            limit: Requested page size; None means only self is returned
            offset: Requested offset; None is treated as 0
            number_matched: Total rows satisfying the filter

        Returns:
            [self, prev?, next?]
        """
        links = [Link(href=request_url, rel=SELF, type=GEOJSON, title="This document")]
        if limit is None:
            return links

        offset = offset or 0

        previous = self.previous_offset(limit, offset)
        if previous is not None:
            links.append(Link(
                href=with_offset(request_url, previous),
                rel=PREV,
                type=GEOJSON,
                title="Previous page"
            ))

        following = self.next_offset(limit, offset, number_matched)
        if following is not None:
            links.append(Link(
                href=with_offset(request_url, following),
                rel=NEXT,
                type=GEOJSON,
                title="Next page"
            ))

        return links
