# File: webcrawler/engine.py
"""webcrawler.engine: обёртка для запуска обхода одним вызовом."""

from __future__ import annotations

from typing import Optional

from webcrawler.config import CrawlerConfig
from webcrawler.crawler.crawler import Crawler
from webcrawler.crawler.models import CrawlResult
from webcrawler.events import CrawlEvents

__all__ = ["start_crawl"]


async def start_crawl(
    seed_url: str,
    config: Optional[CrawlerConfig] = None,
    events: Optional[CrawlEvents] = None,
) -> CrawlResult:
    """
    Запускает краулер в контексте и возвращает результаты со сводкой.

    Parameters
    ----------
    seed_url : str
        Стартовый URL обхода.
    config : CrawlerConfig, optional
        Настройки; по умолчанию значения CrawlerConfig().
    events : CrawlEvents, optional
        Слушатели событий page / error / complete.
    """
    async with Crawler(config, events=events) as crawler:
        return await crawler.crawl(seed_url)
