"""
Поиск документов-источников на странице списка музыки.

ЦКП: List[DocumentLocator]: ссылки на PDF с заявленной датой окончания.

Текст ссылки вида "Music List to 13 September" даёт заявленную дату
окончания (год берётся из часов). Ссылки без даты сохраняются с claimed_end_date=None.
"""

import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from loguru import logger

from contracts.d1_fragments_dto import DocumentLocator
from src.schedule.domain.exceptions import DocumentDiscoveryError, DocumentFetchError
from src.schedule.domain.interfaces import IDocumentDiscovery
from src.schedule.rules.rules_config import RulesConfig
from .http_client import HttpFetcher


_CLAIMED_END_RE = re.compile(r"\bto\s+(\d{1,2})\s+([A-Za-z]+)", re.IGNORECASE)


def parse_listing(html: str, base_url: str, year: int, months: Dict[str, int]) -> List[DocumentLocator]:
    """
    Извлекает ссылки на PDF из HTML страницы.

    Args:
        html: HTML страницы
        base_url: URL страницы (для относительных ссылок)
        year: Год для заявленных дат
        months: Таблица месяцев (имя -> номер)
    """
    soup = BeautifulSoup(html, "html.parser")
    locators: List[DocumentLocator] = []
    seen = set()

    for link in soup.select('a[href*=".pdf"]'):
        href = link.get("href", "").strip()
        if not href:
            continue
        location = urljoin(base_url, href)
        if location in seen:
            continue
        seen.add(location)

        label = link.get_text(" ", strip=True)
        locators.append(DocumentLocator(
            location=location,
            claimed_end_date=_claimed_end_date(label, year, months),
            label=label,
        ))

    return locators


def _claimed_end_date(label: str, year: int, months: Dict[str, int]) -> Optional[date]:
    m = _CLAIMED_END_RE.search(label)
    if not m:
        return None
    month = months.get(m.group(2).lower())
    if month is None:
        return None
    try:
        return date(year, month, int(m.group(1)))
    except ValueError:
        logger.warning(f"[ListingDiscovery] Некорректная дата в ссылке: '{label}'")
        return None


def select_latest(locators: Sequence[DocumentLocator], limit: int) -> List[DocumentLocator]:
    """
    Выбирает до `limit` документов с самой поздней заявленной датой.

    Документы без даты идут последними в порядке страницы.
    """
    indexed = list(enumerate(locators))
    indexed.sort(key=lambda item: (
        item[1].claimed_end_date is None,
        -(item[1].claimed_end_date.toordinal() if item[1].claimed_end_date else 0),
        item[0],
    ))
    return [locator for _, locator in indexed[:limit]]


class ListingPageDiscovery(IDocumentDiscovery):
    """
    Поиск PDF на странице списка музыки.
    """

    def __init__(
        self,
        page_url: str,
        fetcher: Optional[HttpFetcher] = None,
        rules: Optional[RulesConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.page_url = page_url
        self.fetcher = fetcher or HttpFetcher()
        self.rules = rules or RulesConfig.load()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def discover(self) -> List[DocumentLocator]:
        try:
            html = self.fetcher.fetch_text(self.page_url)
        except DocumentFetchError as e:
            raise DocumentDiscoveryError(
                message=f"Страница списка недоступна: {self.page_url}",
                component="ListingPageDiscovery",
                original_error=e,
            )

        locators = parse_listing(html, self.page_url, self.clock().year, self.rules.calendar.months)
        logger.info(f"[ListingDiscovery] Найдено {len(locators)} PDF на {self.page_url}")
        return locators


class LocalFileDiscovery(IDocumentDiscovery):
    """Локальные PDF файлы (отладка, офлайн запуск)."""

    def __init__(self, paths: Sequence[Path]):
        self.paths = [Path(p) for p in paths]

    def discover(self) -> List[DocumentLocator]:
        missing = [p for p in self.paths if not p.exists()]
        if missing:
            logger.warning(f"[LocalFileDiscovery] Файлы не найдены: {[str(p) for p in missing]}")
        return [DocumentLocator(location=str(p), label=p.name) for p in self.paths if p.exists()]
