# === FILE: webcrawler/parser/html_parser.py ===
"""HTML parsing for WebCrawler.

:func:`parse_page` turns markup into a :class:`ParsedPage` holding what a
crawl result needs:

* title: text of the first ``<title>``, ``"No title"`` if absent or empty.
* description / keywords: ``content`` of the matching ``<meta name=…>``.
* headings: ``h1``…``h6`` texts, trimmed, empty ones dropped, document order.
* links: every ``<a href>`` resolved to an absolute URL, with text and title.
* images: every ``<img src>`` resolved to an absolute URL, with alt, title,
  width and height attributes.

Links are *not* filtered here; that is the job of
:class:`webcrawler.crawler.url_filter.UrlFilter`.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from webcrawler.crawler.models import ImageRef, LinkRef
from webcrawler.logger import get_logger

__all__: Sequence[str] = ("ParsedPage", "parse_page", "HEADING_TAGS", "NO_TITLE")

logger = get_logger("parser")

HEADING_TAGS: Tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")
NO_TITLE = "No title"


@dataclass(slots=True, frozen=True)
class ParsedPage:
    """Structured content of one HTML document."""

    title: str
    description: str
    keywords: str
    headings: Dict[str, Tuple[str, ...]]
    links: Tuple[LinkRef, ...]
    images: Tuple[ImageRef, ...]


def _attr(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if value is None:
        return ""
    # multi-valued attributes (class, rel) come back as lists
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _absolute(ref: str, base_url: str) -> Optional[str]:
    ref = ref.strip()
    if not ref:
        return None
    try:
        return urljoin(base_url, ref)
    except ValueError:
        logger.debug("Invalid URL: %s", ref)
        return None


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find("meta", attrs={"name": name})
    return _attr(tag, "content") if isinstance(tag, Tag) else ""


def _headings(soup: BeautifulSoup) -> Dict[str, Tuple[str, ...]]:
    headings: Dict[str, Tuple[str, ...]] = {}
    for name in HEADING_TAGS:
        texts = (tag.get_text().strip() for tag in soup.find_all(name))
        headings[name] = tuple(t for t in texts if t)
    return headings


def _links(soup: BeautifulSoup, base_url: str) -> Tuple[LinkRef, ...]:
    links = []
    for tag in soup.find_all("a", href=True):
        url = _absolute(_attr(tag, "href"), base_url)
        if url is None:
            continue
        links.append(LinkRef(url=url, text=tag.get_text().strip(), title=_attr(tag, "title")))
    return tuple(links)


def _images(soup: BeautifulSoup, base_url: str) -> Tuple[ImageRef, ...]:
    images = []
    for tag in soup.find_all("img", src=True):
        url = _absolute(_attr(tag, "src"), base_url)
        if url is None:
            continue
        images.append(
            ImageRef(
                url=url,
                alt=_attr(tag, "alt"),
                title=_attr(tag, "title"),
                width=_attr(tag, "width"),
                height=_attr(tag, "height"),
            )
        )
    return tuple(images)


def parse_page(html: str, base_url: str) -> ParsedPage:
    """Parse *html* fetched from *base_url*; relative links and images resolve against it."""
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""

    return ParsedPage(
        title=title or NO_TITLE,
        description=_meta_content(soup, "description"),
        keywords=_meta_content(soup, "keywords"),
        headings=_headings(soup),
        links=_links(soup, base_url),
        images=_images(soup, base_url),
    )
