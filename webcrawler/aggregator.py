# File: webcrawler/aggregator.py
"""webcrawler.aggregator: накопление результатов обхода и расчёт итоговой сводки."""

from __future__ import annotations

from typing import List

from webcrawler.crawler.models import CrawlSummary, PageResult
from webcrawler.utils import extract_host


class ResultAggregator:
    """Собирает успешные PageResult в порядке завершения."""

    def __init__(self) -> None:
        self._results: List[PageResult] = []

    def __len__(self) -> int:
        return len(self._results)

    def add(self, result: PageResult) -> None:
        self._results.append(result)

    @property
    def results(self) -> List[PageResult]:
        return list(self._results)

    def summarize(self, failed_pages: int, total_time_ms: int, visited_pages: int = 0) -> CrawlSummary:
        """Среднее время на страницу равно 0, если страниц нет."""
        total = len(self._results)
        return CrawlSummary(
            total_pages=total,
            failed_pages=failed_pages,
            total_time_ms=total_time_ms,
            average_time_ms=total_time_ms / total if total else 0,
            visited_pages=visited_pages,
            unique_domains=len({extract_host(r.url) for r in self._results}),
        )
