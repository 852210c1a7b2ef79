# File: tests/test_aggregator.py
from webcrawler.aggregator import ResultAggregator
from webcrawler.crawler.models import PageResult


def page(url: str) -> PageResult:
    return PageResult(
        url=url,
        original_url=url,
        title="t",
        description="",
        keywords="",
        headings={},
        links=(),
        images=(),
        status_code=200,
        content_length=0,
        content_type="text/html",
        crawl_time_ms=1,
        depth=0,
        parent=None,
        timestamp="2026-01-01T00:00:00+00:00",
    )


def test_average_over_results():
    agg = ResultAggregator()
    for i in range(4):
        agg.add(page(f"https://a.com/{i}"))
    summary = agg.summarize(failed_pages=1, total_time_ms=2000, visited_pages=6)
    assert summary.total_pages == 4
    assert summary.failed_pages == 1
    assert summary.total_time_ms == 2000
    assert summary.average_time_ms == 500
    assert summary.visited_pages == 6


def test_average_is_zero_without_results():
    summary = ResultAggregator().summarize(failed_pages=3, total_time_ms=1234)
    assert summary.total_pages == 0
    assert summary.average_time_ms == 0


def test_results_keep_insertion_order_and_count_domains():
    agg = ResultAggregator()
    urls = ["https://a.com/2", "https://b.com/", "https://a.com/1"]
    for u in urls:
        agg.add(page(u))
    assert [r.url for r in agg.results] == urls
    assert len(agg) == 3
    assert agg.summarize(0, 30).unique_domains == 2
