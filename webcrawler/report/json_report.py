# webcrawler/report/json_report.py

"""
Генерация JSON-отчёта для проекта WebCrawler.

Сериализация результата обхода (страницы + сводка) в файл.
"""
import json
from pathlib import Path

from webcrawler.crawler.models import CrawlResult


def render_json(outcome: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результат обхода в формате JSON по указанному пути.

    :param outcome: CrawlResult с результатами и сводкой
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(outcome.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
