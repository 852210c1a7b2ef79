"""webcrawler.crawler: frontier scheduler, page fetcher, robots cache and link filter."""
