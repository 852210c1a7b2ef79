# === FILE: webcrawler/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера WebCrawler через командную строку.

Команды:
  crawl URL   Обойти сайт начиная с URL и вывести/сохранить отчёты
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (по умолчанию configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --max-pages INT     Override max_pages
  --max-depth INT     Override max_depth
  --concurrency INT   Override max_concurrency
  --delay MS          Override delay
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном report.html.j2
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --progress          Печатать в stderr каждую страницу и ошибку
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Пример:
  webcrawler crawl https://example.com/ --max-pages 50 --json report.json
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError

from webcrawler import __version__
from webcrawler.config import CrawlerConfig, load_config
from webcrawler.engine import start_crawl
from webcrawler.events import CrawlEvents
from webcrawler.logger import configure
from webcrawler.report.html_report import render_html
from webcrawler.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
_DEFAULT_CONFIG = Path("configs/default.yaml")


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _with_overrides(cfg: CrawlerConfig, overrides: Dict[str, Any]) -> CrawlerConfig:
    """Новый CrawlerConfig с заменёнными полями; значения проходят валидацию заново."""
    update = {k: v for k, v in overrides.items() if v is not None}
    if not update:
        return cfg
    return CrawlerConfig(**{**cfg.model_dump(), **update})


def _progress_events() -> CrawlEvents:
    events = CrawlEvents()
    events.on("page", lambda page: click.echo(f"Crawled: {page.url} (depth {page.depth})", err=True))
    events.on("error", lambda err: click.secho(f"Error crawling {err.url}: {err.cause}", fg='yellow', err=True))
    return events


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='WebCrawler, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(name)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд WebCrawler CLI."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        if config_path is None and not _DEFAULT_CONFIG.exists():
            cfg = CrawlerConfig()
        else:
            cfg = load_config(config_path)
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--max-pages', '-l', 'max_pages', type=int, default=None, help='Override max_pages')
@click.option('--max-depth', '-d', 'max_depth', type=int, default=None, help='Override max_depth')
@click.option('--concurrency', 'max_concurrency', type=int, default=None, help='Override max_concurrency')
@click.option('--delay', 'delay', type=int, default=None, help='Override delay (мс)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблоном (по умолчанию встроенный)'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--progress', is_flag=True, help='Печатать прогресс в stderr')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, url, max_pages, max_depth, max_concurrency, delay, json_output, html_output,
          template_dir, pretty, progress, crawl_timeout):
    """Обойти сайт начиная с URL и сгенерировать отчёты."""
    try:
        cfg = _with_overrides(ctx.obj['config'], {
            'max_pages': max_pages,
            'max_depth': max_depth,
            'max_concurrency': max_concurrency,
            'delay': delay,
        })
    except ValidationError as e:
        print_error(f'Неверные параметры: {e}')

    events: Optional[CrawlEvents] = _progress_events() if progress else None
    try:
        if crawl_timeout:
            outcome = asyncio.run(
                asyncio.wait_for(start_crawl(url, cfg, events), timeout=crawl_timeout)
            )
        else:
            outcome = asyncio.run(start_crawl(url, cfg, events))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    # Если не сохраняем в файл, печатаем в stdout
    if not json_output and not html_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=indent))
        return

    if json_output:
        try:
            saved_json = render_json(outcome, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(outcome, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
