# File: webcrawler/utils.py
"""webcrawler.utils: URL helpers shared by the filter, the robots cache and the parser."""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import urljoin, urlparse, urlunparse

from webcrawler.logger import get_logger

logger = get_logger("utils")

__all__: Sequence[str] = (
    "normalize_url",
    "resolve_url",
    "extract_host",
    "origin_of",
)


def normalize_url(url: str) -> str:
    """Lower-cases scheme and host, turns an empty path into ``/`` and drops the fragment.

    Raises ValueError for URLs that cannot be parsed (e.g. a broken IPv6 host).
    """
    parsed = urlparse(url.strip())
    # .port validates the netloc and raises ValueError on garbage
    parsed.port
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    path = parsed.path or "/"
    return urlunparse((scheme, netloc, path, parsed.params, parsed.query, ""))


def resolve_url(href: str, base_url: str) -> Optional[str]:
    """Resolve *href* against *base_url*; None when it does not produce a usable URL."""
    href = href.strip()
    if not href:
        return None
    try:
        return normalize_url(urljoin(base_url, href))
    except ValueError as exc:
        logger.debug("Invalid URL %r on %s: %s", href, base_url, exc)
        return None


def extract_host(url: str) -> str:
    """Returns the lower-case host name of *url* without port."""
    return urlparse(url).hostname or ""


def origin_of(url: str) -> str:
    """``scheme://host[:port]`` of *url*."""
    parsed = urlparse(url)
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"
