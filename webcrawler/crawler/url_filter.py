# webcrawler/crawler/url_filter.py
"""
Link filtering pipeline: turns the links found on a page into frontier candidates.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Set, Union

from webcrawler.config import CrawlerConfig
from webcrawler.crawler.models import LinkRef
from webcrawler.logger import get_logger
from webcrawler.utils import extract_host, resolve_url

logger = get_logger("filter")

_SCHEMES = ("http", "https")


class UrlFilter:
    """Applies scheme, host, allow-list and regex rules to discovered links."""

    def __init__(self, config: CrawlerConfig) -> None:
        self.follow_external_links = config.follow_external_links
        self.allowed_domains = frozenset(config.allowed_domains)
        self.exclude_patterns: List[Pattern[str]] = [re.compile(p) for p in config.exclude_patterns]
        self.include_patterns: List[Pattern[str]] = [re.compile(p) for p in config.include_patterns]

    def filter_links(self, links: Iterable[Union[LinkRef, str]], base_url: str) -> Set[str]:
        """
        Return the absolute URLs from *links* that may be crawled.

        Rules are applied in order and stop at the first rejection; the result
        is deduplicated, its order is meaningless.
        """
        base_host = extract_host(base_url)
        accepted: Set[str] = set()
        for link in links:
            href = link.url if isinstance(link, LinkRef) else link
            url = resolve_url(href, base_url)
            if url is None:
                continue
            if self._accept(url, base_host):
                accepted.add(url)
        return accepted

    def _accept(self, url: str, base_host: str) -> bool:
        scheme = url.split(":", 1)[0]
        if scheme not in _SCHEMES:
            return False
        host = extract_host(url)
        if not self.follow_external_links and host != base_host:
            return False
        if self.allowed_domains and host not in self.allowed_domains:
            return False
        if any(p.search(url) for p in self.exclude_patterns):
            logger.debug("Excluded by pattern: %s", url)
            return False
        if self.include_patterns and not any(p.search(url) for p in self.include_patterns):
            return False
        return True
