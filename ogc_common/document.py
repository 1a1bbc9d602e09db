# ============================================================================
# MODULE CONTEXT - API DOCUMENT SNAPSHOT
# ============================================================================
# STATUS: Shared Foundation - Landing page and conformance metadata
# PURPOSE: Immutable landing page + conformance snapshot assembled at startup
# EXPORTS: ApiModule, ApiDocument, build_api_document, CORE_CONFORMANCE
# PYDANTIC_MODELS: ApiModule, ApiDocument
# DEPENDENCIES: pydantic, urllib.parse
# PATTERNS: Build-once snapshot, modules contribute before routes exist
# ============================================================================

"""
API Document Snapshot

Each enabled API area (collections, features) describes itself with an
ApiModule: the conformance classes it implements and the links it adds to the
landing page. function_app.py hands the list of enabled modules to
build_api_document() once, before any route is registered; the resulting
ApiDocument is frozen and shared read-only by every request.

Landing links are stored relative ("collections", "conformance") and
resolved against the request base URL when rendered, so the snapshot never
depends on the host it is served from.
"""

from typing import Iterable, Tuple

from pydantic import BaseModel, ConfigDict

from .models import (
    CONFORMANCE,
    JSON,
    SELF,
    Conformance,
    LandingPage,
    Link,
)

CORE_CONFORMANCE: Tuple[str, ...] = (
    "http://www.opengis.net/spec/ogcapi-common-1/1.0/req/core",
)

CORE_LINKS: Tuple[Link, ...] = (
    Link(href=".", rel=SELF, type=JSON, title="This document"),
    Link(href="conformance", rel=CONFORMANCE, type=JSON,
         title="OGC conformance classes implemented by this API"),
)


class ApiModule(BaseModel):
    """Contribution of one API area to the shared document."""
    model_config = ConfigDict(frozen=True)

    name: str
    conformance: Tuple[str, ...] = ()
    links: Tuple[Link, ...] = ()


class ApiDocument(BaseModel):
    """Frozen landing page + conformance pair, built once."""
    model_config = ConfigDict(frozen=True)

    landing_page: LandingPage
    conformance: Conformance
    modules: Tuple[str, ...] = ()

    def render_landing_page(self, base_url: str) -> LandingPage:
        """Landing page with hrefs resolved against base_url."""
        root = base_url.rstrip("/")
        links = tuple(
            link.model_copy(update={"href": _resolve(root, link.href)})
            for link in self.landing_page.links
        )
        return self.landing_page.model_copy(update={"links": links})


def _resolve(root: str, href: str) -> str:
    if href.startswith("http://") or href.startswith("https://"):
        return href
    if href in (".", ""):
        return root
    return f"{root}/{href.lstrip('/')}"


def build_api_document(
    title: str,
    description: str,
    modules: Iterable[ApiModule]
) -> ApiDocument:
    """
    Assemble the landing page and conformance declaration.

    Conformance URIs keep first-seen order and are de-duplicated; module links
    follow the core links in registration order.
    """
    conforms_to = list(CORE_CONFORMANCE)
    links = list(CORE_LINKS)
    names = []

    for module in modules:
        names.append(module.name)
        for uri in module.conformance:
            if uri not in conforms_to:
                conforms_to.append(uri)
        links.extend(module.links)

    return ApiDocument(
        landing_page=LandingPage(
            title=title,
            description=description,
            links=tuple(links)
        ),
        conformance=Conformance(conformsTo=tuple(conforms_to)),
        modules=tuple(names)
    )
