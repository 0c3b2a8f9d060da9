#!/usr/bin/env python3
"""
Показ расписания служб из списка музыки.

Использование:
    # Следующая служба (страница списка из MUSIC_LIST_URL)
    python scripts/show_schedule.py next

    # Службы этой недели из локальных PDF
    python scripts/show_schedule.py week --pdf data/music_list.pdf

    # Конкретный день с фиксированными часами
    python scripts/show_schedule.py day 2025-09-12 --now 2025-09-10T09:00:00

    # Только службы с Songmen
    python scripts/show_schedule.py week --choir songmen

    # Обновлять каждые REFRESH_INTERVAL_HOURS и печатать следующую службу (Ctrl+C - выход)
    python scripts/show_schedule.py watch
"""

import sys
import json
import argparse
import re
import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from pathlib import Path

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from loguru import logger

from config import settings
from src.ingestion import HttpFetcher, ListingPageDiscovery, LocalFileDiscovery, PdfFragmentExtractor
from src.schedule import EngineConfig
from src.service import ScheduleService, TextFormatter, configure_logging


COMMANDS = ("next", "week", "tomorrow", "day", "raw", "status", "json", "watch")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Расписание служб из списка музыки")
    parser.add_argument("command", choices=COMMANDS, help="Что показать")
    parser.add_argument("date", nargs="?", help="Дата YYYY-MM-DD (для команды day)")
    parser.add_argument("--pdf", nargs="+", type=Path, help="Локальные PDF вместо страницы списка")
    parser.add_argument("--url", default=settings.MUSIC_LIST_URL, help="Страница со ссылками на PDF")
    parser.add_argument("--now", help="Зафиксировать часы (ISO, например 2025-09-10T09:00:00)")
    parser.add_argument("--choir", help="Фильтр по хору (regex)")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Уровень логирования")
    args = parser.parse_args(argv)

    if args.command == "day" and not args.date:
        parser.error("команда day требует дату YYYY-MM-DD")
    return args


def build_service(args) -> ScheduleService:
    """Собирает сервис из настроек и аргументов."""
    clock = None
    if args.now:
        pinned = datetime.fromisoformat(args.now)
        clock = lambda: pinned

    config = EngineConfig.from_settings(clock=clock)
    if args.choir:
        config = replace(config, choir_filter=re.compile(args.choir, re.IGNORECASE))

    fetcher = HttpFetcher(timeout=settings.HTTP_TIMEOUT_SECONDS)
    if args.pdf:
        discovery = LocalFileDiscovery(args.pdf)
        source_url = ", ".join(str(p) for p in args.pdf)
    else:
        discovery = ListingPageDiscovery(args.url, fetcher=fetcher, clock=config.now)
        source_url = args.url

    return ScheduleService(
        discovery=discovery,
        fragment_source=PdfFragmentExtractor(fetcher),
        config=config,
        source_url=source_url,
    )


def render(service: ScheduleService, args) -> str:
    formatter = TextFormatter()
    status = service.status()
    end_date = status.validity_end_date

    if args.command == "status":
        return formatter.status(status)
    if args.command == "json":
        return json.dumps(formatter.json_payload(service.next(), status), ensure_ascii=False, indent=2)
    if args.command == "raw":
        return formatter.raw(service.raw())
    if args.command == "next":
        return formatter.selection(service.next(), end_date)
    if args.command == "week":
        return formatter.selection(service.week(), end_date)
    if args.command == "tomorrow":
        return formatter.selection(service.tomorrow(), end_date)
    return formatter.selection(service.day(date.fromisoformat(args.date)), end_date)


def watch(service: ScheduleService, stop_event: threading.Event) -> None:
    """Периодически обновляет расписание и печатает следующую службу."""
    formatter = TextFormatter()
    interval = timedelta(hours=settings.REFRESH_INTERVAL_HOURS)

    def show_next(snapshot):
        end_date = snapshot.schedule.validity_end_date if snapshot.schedule else None
        print(formatter.selection(service.next(), end_date), flush=True)

    try:
        service.run_periodic(interval, stop_event, on_refresh=show_next)
    except KeyboardInterrupt:
        stop_event.set()
        logger.info("[Watch] Остановлено пользователем")


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings.validate_config()
    except ValueError as e:
        logger.error(f"[Config] {e}")
        sys.exit(1)

    service = build_service(args)
    if args.command == "watch":
        watch(service, threading.Event())
        return

    service.refresh()
    print(render(service, args))


if __name__ == "__main__":
    main()
