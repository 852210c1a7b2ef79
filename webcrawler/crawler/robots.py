# webcrawler/crawler/robots.py
"""
robots.txt support: a rule parser (RFC 9309 matching) and a per-host cache.
"""
from __future__ import annotations

import asyncio
import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

from webcrawler.crawler.errors import FetchError
from webcrawler.logger import get_logger
from webcrawler.utils import origin_of

logger = get_logger("robots")

__all__ = ("RobotsTxtRules", "RobotsCache")


class RobotsTxtRules:
    """
    Парсит robots.txt (RFC 9309).
    Пустое Disallow считается разрешением всех путей.
    """
    _WILDCARD_RE = re.compile(r"(\*|\$)")

    def __init__(self, text: str) -> None:
        self._groups: List[Dict[str, object]] = []
        self._regex_cache: Dict[str, re.Pattern[str]] = {}
        self._parse(text)

    def can_fetch(self, user_agent: str, path: str) -> bool:
        """Longest matching rule wins; on a tie Allow beats Disallow."""
        group = self._match_group(user_agent)
        if group is None:
            return True
        best_len = -1
        allow: Optional[bool] = None
        for directive, pattern in group["directives"]:  # type: ignore[index]
            if not self._match_path(path, pattern):
                continue
            length = self._rule_len(pattern)
            if length > best_len or (length == best_len and directive == "allow" and allow is False):
                best_len = length
                allow = (directive == "allow")
        return True if allow is None else allow

    def is_allowed(self, url: str, user_agent: str) -> bool:
        parsed = urlparse(url)
        path = parsed.path or "/"
        if parsed.query:
            path = f"{path}?{parsed.query}"
        return self.can_fetch(user_agent, path)

    def _new_group(self) -> Dict[str, object]:
        group: Dict[str, object] = {"agents": [], "directives": []}
        self._groups.append(group)
        return group

    def _parse(self, text: str) -> None:
        current: Optional[Dict[str, object]] = None
        for raw in text.splitlines():
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            key, _, val = line.partition(":")
            key = key.lower().strip()
            val = val.strip()
            if key == "user-agent":
                # consecutive User-agent lines share one group
                if current is None or current["directives"]:
                    current = self._new_group()
                current["agents"].append(val.lower())  # type: ignore[union-attr]
            elif key in ("allow", "disallow"):
                if key == "disallow" and val == "":
                    continue
                if current is None:
                    current = self._new_group()
                    current["agents"].append("*")  # type: ignore[union-attr]
                current["directives"].append((key, val))  # type: ignore[union-attr]

    def _match_group(self, user_agent: str) -> Optional[Dict[str, object]]:
        ua = user_agent.lower()
        for group in self._groups:
            if any(a != "*" and ua.startswith(a) for a in group["agents"]):  # type: ignore[attr-defined]
                return group
        for group in self._groups:
            if "*" in group["agents"]:  # type: ignore[operator]
                return group
        return None

    def _match_path(self, path: str, pattern: str) -> bool:
        if pattern not in self._regex_cache:
            esc = re.escape(pattern).replace(r"\*", ".*")
            if pattern.endswith("$"):
                esc = esc[:-2] + "$"
            self._regex_cache[pattern] = re.compile(f"^{esc}")
        return bool(self._regex_cache[pattern].match(path))

    @classmethod
    def _rule_len(cls, pattern: str) -> int:
        return len(cls._WILDCARD_RE.sub("", pattern))


class RobotsCache:
    """
    Per-origin cache of parsed robots.txt rules for one crawl run.

    The file is requested at most once per ``scheme://host``; a missing or
    unreadable file is cached as ``None`` which allows everything.
    """

    def __init__(self, transport) -> None:
        self.transport = transport
        self._rules: Dict[str, Optional[RobotsTxtRules]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def __contains__(self, origin: str) -> bool:
        return origin in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    async def is_allowed(self, url: str, user_agent: str) -> bool:
        """True unless the cached rules for *url*'s host disallow it. Never raises."""
        try:
            rules = await self.rules_for(url)
            return True if rules is None else rules.is_allowed(url, user_agent)
        except Exception as exc:
            logger.debug("Error checking robots.txt for %s: %s", url, exc)
            return True

    async def rules_for(self, url: str) -> Optional[RobotsTxtRules]:
        origin = origin_of(url)
        if origin in self._rules:
            return self._rules[origin]
        lock = self._locks.setdefault(origin, asyncio.Lock())
        async with lock:
            if origin not in self._rules:
                self._rules[origin] = await self._load(origin)
        return self._rules[origin]

    async def _load(self, origin: str) -> Optional[RobotsTxtRules]:
        robots_url = f"{origin}/robots.txt"
        try:
            response = await self.transport.fetch(robots_url)
            rules = RobotsTxtRules(response.body)
        except FetchError as exc:
            logger.debug("robots.txt unavailable at %s (%s), allowing all", robots_url, exc)
            return None
        except Exception as exc:
            logger.warning("Unusable robots.txt at %s (%s), allowing all", robots_url, exc)
            return None
        logger.debug("Loaded robots.txt from %s", robots_url)
        return rules
