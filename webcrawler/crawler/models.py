# webcrawler/crawler/models.py
"""
Data models for the WebCrawler engine.
"""
from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Any, Deque, Dict, List, NamedTuple, Optional, Set, Tuple


@dataclass(slots=True, frozen=True)
class FrontierItem:
    """A URL waiting in the frontier, with its hop count from the seed."""

    url: str
    depth: int
    parent: Optional[str] = None


@dataclass(slots=True, frozen=True)
class LinkRef:
    url: str
    text: str = ""
    title: str = ""


@dataclass(slots=True, frozen=True)
class ImageRef:
    url: str
    alt: str = ""
    title: str = ""
    width: str = ""
    height: str = ""


@dataclass(slots=True, frozen=True)
class PageResult:
    """Metadata extracted from one successfully crawled HTML page."""

    url: str
    original_url: str
    title: str
    description: str
    keywords: str
    headings: Dict[str, Tuple[str, ...]]
    links: Tuple[LinkRef, ...]
    images: Tuple[ImageRef, ...]
    status_code: int
    content_length: int
    content_type: str
    crawl_time_ms: int
    depth: int
    parent: Optional[str]
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["headings"] = {tag: list(texts) for tag, texts in self.headings.items()}
        return data


@dataclass(slots=True, frozen=True)
class CrawlSummary:
    """Read-only numbers describing a finished run."""

    total_pages: int
    failed_pages: int
    total_time_ms: int
    average_time_ms: float
    visited_pages: int = 0
    unique_domains: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class CrawlError:
    """Payload of the ``error`` notification."""

    url: str
    cause: BaseException


@dataclass(slots=True)
class CrawlState:
    """Mutable bookkeeping owned by the scheduler for a single run."""

    frontier: Deque[FrontierItem] = field(default_factory=deque)
    visited: Set[str] = field(default_factory=set)
    failed: Set[str] = field(default_factory=set)


class CrawlResult(NamedTuple):
    results: List[PageResult]
    summary: CrawlSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict(),
        }
