# File: tests/test_cli.py
"""Тесты для CLI (`webcrawler.cli`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `config`, `--version`, а также обработку ошибок.
"""
import asyncio
import json

import pytest
import webcrawler.cli as cli_module
from click.testing import CliRunner
from webcrawler.cli import cli
from webcrawler.crawler.models import CrawlResult, CrawlSummary, PageResult


def dummy_page(url: str) -> PageResult:
    return PageResult(
        url=url,
        original_url=url,
        title="Dummy",
        description="",
        keywords="",
        headings={"h1": ("Hello",)},
        links=(),
        images=(),
        status_code=200,
        content_length=13,
        content_type="text/html",
        crawl_time_ms=5,
        depth=0,
        parent=None,
        timestamp="2026-01-01T00:00:00+00:00",
    )


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Патчим start_crawl для возвращения фиктивных страниц без обхода."""
    calls = []

    async def fake_crawl(url, cfg, events=None):
        calls.append((url, cfg, events))
        summary = CrawlSummary(total_pages=1, failed_pages=0, total_time_ms=5, average_time_ms=5.0)
        return CrawlResult(results=[dummy_page(url)], summary=summary)

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return calls


@pytest.fixture()
def config_file(tmp_path):
    cfg_file = tmp_path / "config.json"
    cfg_file.write_text(
        json.dumps({"max_depth": 1, "max_pages": 20, "user_agent": "Agent/1.0", "delay": 0}),
        encoding="utf-8",
    )
    return cfg_file


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "WebCrawler" in result.output


def test_show_config(config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["user_agent"] == "Agent/1.0"
    assert data["max_pages"] == 20
    assert data["max_concurrency"] == 5


def test_show_config_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["config"])
    assert result.exit_code == 0
    assert json.loads(result.output)["max_depth"] == 3


def test_bad_config_reports_error(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("max_pages: -1\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1


def test_crawl_stdout(config_file, patch_start_crawl):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "crawl", "https://example.com/"])
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["results"][0]["url"] == "https://example.com/"
    assert output["results"][0]["headings"]["h1"] == ["Hello"]
    assert output["summary"]["total_pages"] == 1
    url, cfg, events = patch_start_crawl[0]
    assert cfg.max_pages == 20
    assert events is None


def test_crawl_overrides(config_file, patch_start_crawl):
    result = CliRunner().invoke(
        cli,
        ["--config", str(config_file), "crawl", "https://example.com/", "--max-pages", "3",
         "--max-depth", "0", "--concurrency", "2", "--delay", "10", "--progress"],
    )
    assert result.exit_code == 0
    _, cfg, events = patch_start_crawl[0]
    assert (cfg.max_pages, cfg.max_depth, cfg.max_concurrency, cfg.delay) == (3, 0, 2, 10)
    assert cfg.user_agent == "Agent/1.0"
    assert events is not None


def test_crawl_invalid_override(config_file):
    result = CliRunner().invoke(
        cli, ["--config", str(config_file), "crawl", "https://example.com/", "--max-pages", "0"]
    )
    assert result.exit_code == 1


def test_crawl_json_file(tmp_path, config_file):
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config", str(config_file), "crawl", "https://example.com/", "--json", str(out)]
    )
    assert result.exit_code == 0
    assert out.exists()
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["results"][0]["title"] == "Dummy"


def test_crawl_html_file(tmp_path, config_file):
    out = tmp_path / "report.html"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config", str(config_file), "crawl", "https://example.com/", "--html", str(out)]
    )
    assert result.exit_code == 0
    html = out.read_text(encoding="utf-8")
    assert "https://example.com/" in html
    assert "Dummy" in html


def test_crawl_timeout(monkeypatch, config_file):
    async def slow(url, cfg, events=None):
        await asyncio.sleep(2)

    monkeypatch.setattr(cli_module, "start_crawl", slow)

    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config", str(config_file), "crawl", "https://example.com/", "--crawl-timeout", "0.2"]
    )
    assert result.exit_code == 1


def test_crawl_failure(monkeypatch, config_file):
    async def broken(url, cfg, events=None):
        raise ValueError("seed URL must be http(s)")

    monkeypatch.setattr(cli_module, "start_crawl", broken)
    result = CliRunner().invoke(cli, ["--config", str(config_file), "crawl", "ftp://x/"])
    assert result.exit_code == 1
