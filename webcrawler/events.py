# File: webcrawler/events.py
"""webcrawler.events: optional progress notifications (page / error / complete)."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

from webcrawler.logger import get_logger

__all__ = ["CrawlEvents", "EVENT_KINDS"]

logger = get_logger("events")

EVENT_KINDS = ("page", "error", "complete")

Listener = Callable[[Any], None]


class CrawlEvents:
    """Registry of listeners the crawler notifies. Emitting without listeners is a no-op."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def on(self, kind: str, listener: Listener) -> Listener:
        """Register *listener* for *kind*; returns it so it can be used as a decorator."""
        if kind not in EVENT_KINDS:
            raise ValueError(f"unknown event kind {kind!r}, expected one of {EVENT_KINDS}")
        self._listeners[kind].append(listener)
        return listener

    def off(self, kind: str, listener: Listener) -> None:
        self._listeners[kind].remove(listener)

    def emit(self, kind: str, payload: Any) -> None:
        for listener in list(self._listeners.get(kind, ())):
            try:
                listener(payload)
            except Exception:
                # a broken listener must not change the crawl
                logger.exception("Listener %r for %r event failed", listener, kind)
