"""
Rules Config для таблиц ключевых слов парсинга.

ЦКП: Загрузка единой модели RulesConfig из YAML.

Архитектурный принцип:
- Единая модель RulesConfig = calendar + services + pieces
- RulesConfig.load() читает base.yaml (или файл из переопределённой директории)
- Результат кешируется по пути файла
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Dict, List, Optional

import yaml
from loguru import logger

from contracts.d2_schedule_dto import PieceCategory
from ..domain.exceptions import RulesConfigurationError


@dataclass(frozen=True)
class CalendarConfig:
    """Названия дней недели и месяцев."""
    weekdays: List[str]
    months: Dict[str, int]
    banner_scan_lines: int = 10


@dataclass(frozen=True)
class ServiceConfig:
    """Ключевые слова строк служб и названий служб."""
    service_keywords: List[str]
    evening_title_keywords: List[str]
    eucharist_title_keywords: List[str]


@dataclass(frozen=True)
class PieceConfig:
    """Ключевые слова для разбиения и классификации произведений."""
    organ_keywords: List[str]
    choral_keywords: List[str]
    setting_keywords: List[str]
    no_join_words: List[str]
    no_join_letters: List[str] = field(default_factory=list)
    annotation_markers: List[str] = field(default_factory=list)
    default_category: PieceCategory = PieceCategory.ANTHEMS


@dataclass(frozen=True)
class RulesConfig:
    """
    Единая конфигурация правил для всех этапов пайплайна D2.
    """
    calendar: CalendarConfig
    services: ServiceConfig
    pieces: PieceConfig

    _config_dir: ClassVar[Optional[Path]] = None
    _cache: ClassVar[Dict[str, "RulesConfig"]] = {}

    @classmethod
    def load(cls, file_name: str = "base.yaml") -> "RulesConfig":
        """
        Загружает таблицы правил из YAML файла.
        """
        config_dir = Path(cls._config_dir) if cls._config_dir else Path(__file__).parent
        config_file = config_dir / file_name
        cache_key = str(config_file)

        if cache_key in cls._cache:
            return cls._cache[cache_key]

        rules = cls._load_yaml(config_file)
        cls._cache[cache_key] = rules

        logger.debug(
            f"[RulesConfig] Загружены правила из {config_file.name}: "
            f"{len(rules.services.service_keywords)} service_keywords, "
            f"{len(rules.pieces.organ_keywords)} organ_keywords"
        )

        return rules

    @classmethod
    def _load_yaml(cls, config_file: Path) -> "RulesConfig":
        """Читает и валидирует YAML файл правил."""
        if not config_file.exists():
            raise RulesConfigurationError(
                message=f"Файл правил не найден: {config_file}",
                component="RulesConfig",
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise RulesConfigurationError(
                message=f"Некорректный YAML: {config_file}",
                component="RulesConfig",
                original_error=e,
            )

        for section in ("calendar", "services", "pieces"):
            if section not in data:
                raise RulesConfigurationError(
                    message=f"Отсутствует секция '{section}' в {config_file}",
                    component="RulesConfig",
                )

        calendar = data["calendar"]
        services = data["services"]
        pieces = data["pieces"]

        try:
            default_category = PieceCategory(pieces.get("default_category", "anthems"))
            return cls(
                calendar=CalendarConfig(
                    weekdays=[w.lower() for w in calendar["weekdays"]],
                    months={k.lower(): int(v) for k, v in calendar["months"].items()},
                    banner_scan_lines=int(calendar.get("banner_scan_lines", 10)),
                ),
                services=ServiceConfig(
                    service_keywords=[k.lower() for k in services["service_keywords"]],
                    evening_title_keywords=[k.lower() for k in services["evening_title_keywords"]],
                    eucharist_title_keywords=[k.lower() for k in services["eucharist_title_keywords"]],
                ),
                pieces=PieceConfig(
                    organ_keywords=[k.lower() for k in pieces["organ_keywords"]],
                    choral_keywords=[k.lower() for k in pieces["choral_keywords"]],
                    setting_keywords=[k.lower() for k in pieces["setting_keywords"]],
                    no_join_words=[k.lower() for k in pieces["no_join_words"]],
                    no_join_letters=[str(k) for k in pieces.get("no_join_letters", [])],
                    annotation_markers=[k.lower() for k in pieces.get("annotation_markers", [])],
                    default_category=default_category,
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RulesConfigurationError(
                message=f"Некорректная структура правил в {config_file}",
                component="RulesConfig",
                original_error=e,
            )


class RulesLoader:
    """
    Загрузчик правил.
    Обертка над RulesConfig.load для DI.
    """
    def load(self, file_name: str = "base.yaml") -> RulesConfig:
        return RulesConfig.load(file_name)
