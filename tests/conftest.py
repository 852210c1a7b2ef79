# File: tests/conftest.py
import asyncio
import logging
from typing import Callable, Dict, List, Union

import pytest

from webcrawler.config import CrawlerConfig
from webcrawler.crawler.errors import FetchError, HttpStatusError
from webcrawler.crawler.fetcher import HttpResponse

# keep a reference: some tests monkeypatch asyncio.sleep
_real_sleep = asyncio.sleep

Route = Union[HttpResponse, FetchError, Callable[[str], HttpResponse]]


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


def html_response(url: str, body: str, status: int = 200, final_url: str | None = None) -> HttpResponse:
    return HttpResponse(
        status=status,
        body=body,
        final_url=final_url or url,
        headers={"content-type": "text/html; charset=utf-8"},
    )


class FakeTransport:
    """
    In-memory transport. Routes map a URL to a response, an exception to raise
    or a callable producing either. Unknown URLs answer 404.
    """

    def __init__(self, routes: Dict[str, Route] | None = None, latency: float = 0.0) -> None:
        self.routes: Dict[str, Route] = dict(routes or {})
        self.latency = latency
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def count(self, url: str) -> int:
        return self.calls.count(url)

    async def fetch(self, url: str, *, html_only: bool = False) -> HttpResponse:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await _real_sleep(self.latency)
            route = self.routes.get(url)
            if route is None:
                raise HttpStatusError(url, 404)
            if callable(route):
                route = route(url)
            if isinstance(route, FetchError):
                raise route
            return route
        finally:
            self.in_flight -= 1


@pytest.fixture(autouse=True)
def reset_project_logger():
    """CLI tests call configure(); undo it so caplog sees records again."""
    yield
    lg = logging.getLogger("WebCrawler")
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()
    lg.propagate = True
    lg.setLevel(logging.NOTSET)


@pytest.fixture()
def fast_config() -> CrawlerConfig:
    """Config without pacing or backoff pauses, robots.txt respected."""
    return CrawlerConfig(
        max_depth=3,
        max_pages=100,
        max_concurrency=5,
        delay=0,
        timeout=2000,
        user_agent="TestAgent/1.0",
        max_retries=3,
        retry_backoff=0,
    )


@pytest.fixture()
def make_html() -> Callable[..., HttpResponse]:
    return html_response


@pytest.fixture()
def fake_transport() -> Callable[..., FakeTransport]:
    return FakeTransport
