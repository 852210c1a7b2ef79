# webcrawler/crawler/fetcher.py
"""
Fetcher module: HTTP transport over aiohttp and the page fetch-and-retry unit.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol, Set

from aiohttp import ClientError, ClientSession, ClientTimeout

from webcrawler.config import CrawlerConfig
from webcrawler.crawler.errors import FetchError, HttpStatusError, NetworkError
from webcrawler.crawler.models import FrontierItem, PageResult
from webcrawler.crawler.robots import RobotsCache
from webcrawler.logger import get_logger
from webcrawler.parser.html_parser import parse_page

logger = get_logger("fetcher")

DEFAULT_HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


@dataclass(slots=True)
class HttpResponse:
    """What the crawler needs from an HTTP response. Header names are lower-case."""

    status: int
    body: str
    final_url: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")


class Transport(Protocol):
    async def fetch(self, url: str, *, html_only: bool = False) -> HttpResponse: ...


class HttpTransport:
    """
    aiohttp-backed transport. Redirects are followed; any non-2xx final status
    raises :class:`HttpStatusError`, a missing response :class:`NetworkError`.
    With ``html_only`` the body of a non-HTML response is never read.
    """

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> HttpTransport:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout / 1000),
                headers={"User-Agent": self.config.user_agent, **DEFAULT_HEADERS},
                raise_for_status=False,
            )
            self._owns_session = True

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str, *, html_only: bool = False) -> HttpResponse:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning("HTTP %s: %s", resp.status, url)
                    raise HttpStatusError(url, resp.status, resp.reason)
                content_type = resp.headers.get("Content-Type", "")
                if html_only and "text/html" not in content_type.lower():
                    body = ""
                else:
                    body = await resp.text(errors="replace")
                return HttpResponse(
                    status=resp.status,
                    body=body,
                    final_url=str(resp.url),
                    headers={k.lower(): v for k, v in resp.headers.items()},
                )
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Network error: %s", url)
            raise NetworkError(url, exc) from exc


class PageFetcher:
    """Fetches one frontier item: robots check, retry with backoff, HTML extraction."""

    def __init__(
        self,
        transport: Transport,
        config: CrawlerConfig,
        robots: Optional[RobotsCache] = None,
    ) -> None:
        self.transport = transport
        self.config = config
        self.robots = robots

    async def fetch_page(self, item: FrontierItem, visited: Set[str]) -> PageResult | None:
        """
        Fetch *item* and build its PageResult.

        Returns None for policy skips (already visited, disallowed by
        robots.txt, non-HTML content). Raises FetchError once all
        ``max_retries + 1`` attempts have failed.
        """
        url = item.url
        if url in visited:
            return None
        visited.add(url)

        if self.config.respect_robots_txt and self.robots is not None:
            if not await self.robots.is_allowed(url, self.config.user_agent):
                logger.debug("Blocked by robots.txt: %s", url)
                return None

        start = time.monotonic()
        attempt = 0
        while True:
            try:
                logger.debug("Crawling (depth %d): %s", item.depth, url)
                response = await self.transport.fetch(url, html_only=True)
                break
            except FetchError as exc:
                attempt += 1
                if attempt > self.config.max_retries:
                    raise
                logger.warning("Retry %d/%d for %s: %s", attempt, self.config.max_retries, url, exc)
                await asyncio.sleep(self.config.retry_backoff * attempt / 1000)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        final_url = response.final_url or url
        if final_url != url:
            if final_url in visited:
                logger.debug("Redirect target already visited: %s -> %s", url, final_url)
                return None
            visited.add(final_url)

        content_type = response.content_type
        if "text/html" not in content_type.lower():
            logger.debug("Skipping non-HTML content: %s", url)
            return None

        page = parse_page(response.body, final_url)
        return PageResult(
            url=final_url,
            original_url=url,
            title=page.title,
            description=page.description,
            keywords=page.keywords,
            headings=page.headings,
            links=page.links,
            images=page.images,
            status_code=response.status,
            content_length=len(response.body),
            content_type=content_type,
            crawl_time_ms=elapsed_ms,
            depth=item.depth,
            parent=item.parent,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
