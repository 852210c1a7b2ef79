# File: webcrawler/report/__init__.py
"""webcrawler.report: JSON and HTML reports for a finished crawl, used by the CLI."""

from webcrawler.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from webcrawler.report.json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
