# webcrawler/crawler/errors.py
"""
Exceptions raised by the HTTP transport and the page fetcher.
"""
from __future__ import annotations

from typing import Optional


class FetchError(Exception):
    """A single page could not be fetched. Retried by the fetcher, never fatal to a crawl."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class HttpStatusError(FetchError):
    """The server answered, but with a non-2xx status."""

    def __init__(self, url: str, status: int, reason: Optional[str] = None) -> None:
        super().__init__(url, f"HTTP {status}{' ' + reason if reason else ''}: {url}")
        self.status = status


class NetworkError(FetchError):
    """No response at all: connection failure, TLS error or timeout."""

    def __init__(self, url: str, cause: BaseException) -> None:
        detail = str(cause) or type(cause).__name__
        super().__init__(url, f"Network error for {url}: {detail}")
        self.cause = cause


__all__ = ["FetchError", "HttpStatusError", "NetworkError"]
