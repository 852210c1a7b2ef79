# File: tests/test_events.py
import logging

import pytest

from webcrawler.events import CrawlEvents


def test_emit_without_listeners_is_noop():
    CrawlEvents().emit("page", object())


def test_listeners_receive_payload_in_registration_order():
    events = CrawlEvents()
    seen = []
    events.on("page", lambda p: seen.append(("first", p)))
    events.on("page", lambda p: seen.append(("second", p)))
    events.on("error", lambda p: seen.append(("error", p)))
    events.emit("page", 1)
    assert seen == [("first", 1), ("second", 1)]


def test_failing_listener_is_logged_not_raised(caplog):
    events = CrawlEvents()
    seen = []

    def broken(_):
        raise RuntimeError("listener bug")

    events.on("complete", broken)
    events.on("complete", seen.append)
    with caplog.at_level(logging.ERROR, logger="WebCrawler"):
        events.emit("complete", "done")
    assert seen == ["done"]
    assert "listener bug" in caplog.text


def test_off_and_unknown_kind():
    events = CrawlEvents()
    seen = []
    listener = events.on("error", seen.append)
    events.off("error", listener)
    events.emit("error", "x")
    assert seen == []
    with pytest.raises(ValueError):
        events.on("finished", seen.append)
