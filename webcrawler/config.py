# === FILE: webcrawler/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера WebCrawler.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["CrawlerConfig", "DEFAULT_USER_AGENT", "load_config"]

DEFAULT_USER_AGENT = "WebCrawler-PY/1.0"


class CrawlerConfig(BaseModel):
    """Настройки одного запуска обхода. Все времена задаются в миллисекундах."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(3, ge=0, description="Максимальная глубина обхода ссылок.")
    max_pages: int = Field(100, ge=1, description="Жесткий лимит по числу страниц.")
    max_concurrency: int = Field(5, ge=1, description="Сколько запросов выполняется одновременно.")
    delay: int = Field(1000, ge=0, description="Пауза между пакетами запросов (мс).")
    timeout: int = Field(30000, gt=0, description="Таймаут на один запрос (мс).")
    follow_external_links: bool = Field(False, description="Переходить ли на другие хосты.")
    respect_robots_txt: bool = Field(True, description="Учитывать robots.txt.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    allowed_domains: List[str] = Field(
        default_factory=list, description="Белый список хостов (пусто = без ограничений)."
    )
    exclude_patterns: List[str] = Field(
        default_factory=list, description="Регулярные выражения для исключения URL."
    )
    include_patterns: List[str] = Field(
        default_factory=list, description="Регулярные выражения, хотя бы одному из которых URL должен соответствовать."
    )
    max_retries: int = Field(3, ge=0, description="Число повторных попыток после неудачного запроса.")
    retry_backoff: int = Field(
        1000, ge=0, description="Шаг паузы перед повтором (мс), умножается на номер попытки."
    )

    @field_validator("user_agent")
    @classmethod
    def _strip_user_agent(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("user_agent must not be blank")
        return v

    @field_validator("allowed_domains")
    @classmethod
    def _lower_domains(cls, v: List[str]) -> List[str]:
        return [d.strip().lower() for d in v if d.strip()]

    @field_validator("exclude_patterns", "include_patterns")
    @classmethod
    def _check_patterns(cls, v: List[str]) -> List[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CrawlerConfig(**data)
