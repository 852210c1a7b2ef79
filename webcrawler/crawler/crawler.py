# === FILE: webcrawler/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import List, Optional

from webcrawler.aggregator import ResultAggregator
from webcrawler.config import CrawlerConfig
from webcrawler.crawler.errors import FetchError
from webcrawler.crawler.fetcher import HttpTransport, PageFetcher, Transport
from webcrawler.crawler.models import (
    CrawlError,
    CrawlResult,
    CrawlState,
    FrontierItem,
    PageResult,
)
from webcrawler.crawler.robots import RobotsCache
from webcrawler.crawler.url_filter import UrlFilter
from webcrawler.events import CrawlEvents
from webcrawler.logger import get_logger
from webcrawler.utils import normalize_url

__all__ = ("Crawler",)


class Crawler:
    """
    Breadth-first crawler: FIFO frontier dispatched in batches under one
    concurrency limit that holds for the whole run.

    Use as an async context manager so the HTTP session gets opened and closed::

        async with Crawler(config) as crawler:
            results, summary = await crawler.crawl("https://example.com/")
    """

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        *,
        transport: Optional[Transport] = None,
        events: Optional[CrawlEvents] = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self.events = events or CrawlEvents()
        self.url_filter = UrlFilter(self.config)
        self.logger = get_logger("crawler")
        self._owns_transport = transport is None
        self.transport: Transport = transport if transport is not None else HttpTransport(self.config)
        self._state = CrawlState()
        self._aggregator = ResultAggregator()

    async def __aenter__(self) -> Crawler:
        if self._owns_transport:
            await self.transport.open()  # type: ignore[attr-defined]
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_transport:
            await self.transport.close()  # type: ignore[attr-defined]

    # ------------------------------------------------------------------ #
    # Inspection of the last run                                         #
    # ------------------------------------------------------------------ #

    @property
    def results(self) -> List[PageResult]:
        return self._aggregator.results

    @property
    def visited_urls(self) -> List[str]:
        return list(self._state.visited)

    @property
    def failed_urls(self) -> List[str]:
        return list(self._state.failed)

    # ------------------------------------------------------------------ #
    # Scheduler                                                          #
    # ------------------------------------------------------------------ #

    async def crawl(self, seed_url: str) -> CrawlResult:
        """
        Crawl from *seed_url* until the frontier is empty or ``max_pages``
        results were collected.

        Page failures are reported through the ``error`` event and the
        summary; only an invalid seed or an unexpected exception escapes.
        """
        seed = normalize_url(seed_url)
        if not seed.startswith(("http://", "https://")):
            raise ValueError(f"seed URL must be http(s): {seed_url!r}")

        cfg = self.config
        self.logger.info("Starting crawl from: %s", seed)
        start = time.monotonic()

        state = self._state = CrawlState()
        aggregator = self._aggregator = ResultAggregator()
        fetcher = PageFetcher(self.transport, cfg, RobotsCache(self.transport))
        limiter = asyncio.Semaphore(cfg.max_concurrency)

        state.frontier.append(FrontierItem(url=seed, depth=0, parent=None))
        try:
            while state.frontier and len(aggregator) < cfg.max_pages:
                room = min(cfg.max_concurrency, cfg.max_pages - len(aggregator), len(state.frontier))
                batch = [state.frontier.popleft() for _ in range(room)]
                outcomes = await asyncio.gather(
                    *(self._dispatch(fetcher, limiter, item, state) for item in batch),
                    return_exceptions=True,
                )

                fault: Optional[BaseException] = None
                for item, outcome in zip(batch, outcomes):
                    if isinstance(outcome, FetchError):
                        self._record_failure(item, outcome, state)
                    elif isinstance(outcome, BaseException):
                        fault = fault or outcome
                    elif outcome is not None:
                        self._record_page(item, outcome, state, aggregator)
                if fault is not None:
                    raise fault

                if state.frontier and len(aggregator) < cfg.max_pages and cfg.delay > 0:
                    await asyncio.sleep(cfg.delay / 1000)
        except Exception as exc:
            self.logger.error("Crawl failed: %s", exc)
            self.events.emit("error", CrawlError(url=seed, cause=exc))
            raise

        elapsed_ms = int((time.monotonic() - start) * 1000)
        summary = aggregator.summarize(
            failed_pages=len(state.failed),
            total_time_ms=elapsed_ms,
            visited_pages=len(state.visited),
        )
        self.logger.info(
            "Crawl completed: %d pages, %d failed in %d ms (%.1f ms/page)",
            summary.total_pages,
            summary.failed_pages,
            summary.total_time_ms,
            summary.average_time_ms,
        )
        outcome = CrawlResult(results=aggregator.results, summary=summary)
        self.events.emit("complete", outcome)
        return outcome

    @staticmethod
    async def _dispatch(
        fetcher: PageFetcher,
        limiter: asyncio.Semaphore,
        item: FrontierItem,
        state: CrawlState,
    ) -> PageResult | None:
        async with limiter:
            return await fetcher.fetch_page(item, state.visited)

    def _record_page(
        self,
        item: FrontierItem,
        result: PageResult,
        state: CrawlState,
        aggregator: ResultAggregator,
    ) -> None:
        aggregator.add(result)
        if item.depth < self.config.max_depth:
            for url in sorted(self.url_filter.filter_links(result.links, result.url)):
                if url in state.visited or url in state.failed:
                    continue
                state.frontier.append(FrontierItem(url=url, depth=item.depth + 1, parent=result.url))
        self.events.emit("page", result)

    def _record_failure(self, item: FrontierItem, exc: FetchError, state: CrawlState) -> None:
        state.failed.add(item.url)
        self.logger.error("Failed to crawl %s: %s", item.url, exc)
        self.events.emit("error", CrawlError(url=item.url, cause=exc))
