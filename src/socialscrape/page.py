"""Fetching HTML pages and pulling values out of them by CSS selector.

Selector matching is BeautifulSoup's (soupsieve under the hood); this module
only fixes how text and attributes are read back out of the matched nodes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup
from bs4.element import Tag

from .config import Settings


logger = logging.getLogger(__name__)

_ATTR_RE = re.compile(r"^[A-Za-z_:][-A-Za-z0-9_:.]*$")
_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_ ]*$")


@dataclass(frozen=True)
class FieldSpec:
    """One output column: where to find it and what to read from it."""

    name: str
    selector: str
    attr: str | None = None


def parse_field(spec: str) -> FieldSpec:
    """Parse ``name=selector`` or ``name=selector@attr``.

    The ``@attr`` suffix is only split off when it looks like an attribute
    name, so selectors such as ``a[href$="@x"]`` stay intact.
    """
    name, sep, rest = spec.partition("=")
    name = name.strip()
    rest = rest.strip()
    if not sep or not name or not rest:
        raise ValueError(f"Bad field spec {spec!r}; expected name=selector[@attr]")
    if not _NAME_RE.match(name):
        raise ValueError(f"Bad field name {name!r}")

    selector, attr = rest, None
    if "@" in rest:
        head, _, tail = rest.rpartition("@")
        if head.strip() and _ATTR_RE.match(tail.strip()):
            selector, attr = head.strip(), tail.strip()
    return FieldSpec(name=name, selector=selector, attr=attr)


def parse_document(html: str | bytes, parser: str = "html.parser") -> BeautifulSoup:
    return BeautifulSoup(html, parser)


def fetch_document(
    url: str,
    settings: Settings | None = None,
    session: requests.Session | None = None,
) -> BeautifulSoup:
    """GET ``url`` and parse the body.

    Non-2xx responses raise ``requests.HTTPError``. Network errors propagate
    unchanged; there is no retry.
    """
    settings = settings or Settings()
    http = session or requests.Session()
    logger.debug("GET %s", url)
    r = http.get(url, headers={"User-Agent": settings.user_agent}, timeout=settings.http_timeout)
    r.raise_for_status()
    logger.info("Fetched %s (%d bytes)", url, len(r.content or b""))
    # raw bytes, so the parser can honour <meta charset> when the header has none
    return parse_document(r.content, settings.html_parser)


def select_nodes(doc: BeautifulSoup | Tag, selector: str) -> list[Tag]:
    return list(doc.select(selector))


def extract(node: Tag, attr: str | None = None) -> str | None:
    if attr is None:
        return " ".join(node.get_text(" ", strip=True).split())
    v = node.get(attr)
    if v is None:
        return None
    # class, rel and friends come back as lists
    if isinstance(v, (list, tuple)):
        return " ".join(v)
    return str(v).strip()


def extract_all(doc: BeautifulSoup | Tag, field: FieldSpec) -> list[str | None]:
    return [extract(n, field.attr) for n in select_nodes(doc, field.selector)]
