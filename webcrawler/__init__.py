# webcrawler/__init__.py
"""
WebCrawler package initializer.
Defines package version and exposes the one-call crawl entry point.
"""
__version__ = "0.1.0"

from webcrawler.config import CrawlerConfig, load_config
from webcrawler.engine import start_crawl

__all__ = ["__version__", "CrawlerConfig", "load_config", "start_crawl"]
