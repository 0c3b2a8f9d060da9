"""
Date Parser - Разбор дат списка служб.

ЦКП: Календарная дата из "<день> <месяц>" и год из контекста.

Год берётся из даты окончания документа, если она известна,
иначе из текущих часов. Время суток не хранится: важна только дата.
"""

import re
from datetime import date
from typing import Iterable, Optional

from loguru import logger

from ..domain.exceptions import UnparseableDateError
from ..rules.rules_config import CalendarConfig


# "31 August – 13 September 2025" (год необязателен для баннера)
DATE_RANGE_PATTERN = r"(\d{1,2})\s+([A-Za-z]+)\s+[–—-]\s+(\d{1,2})\s+([A-Za-z]+)"

_DATE_RANGE_RE = re.compile(DATE_RANGE_PATTERN)
_DATE_RANGE_WITH_YEAR_RE = re.compile(DATE_RANGE_PATTERN + r"\s+(\d{4})")


class DateParser:
    """Разбор дат по таблице месяцев из конфига."""

    def __init__(self, calendar: CalendarConfig):
        self.calendar = calendar
        weekdays = "|".join(re.escape(w) for w in calendar.weekdays)
        self.day_header_re = re.compile(rf"^({weekdays})\s+(\d{{1,2}})\s+([A-Za-z]+)", re.IGNORECASE)
        self.weekday_prefix_re = re.compile(rf"^({weekdays})\b", re.IGNORECASE)

    def resolve(self, day: int, month_name: str, year: int) -> date:
        """
        Raises:
            UnparseableDateError: неизвестный месяц или несуществующий день
        """
        month = self.calendar.months.get(month_name.lower())
        if month is None:
            raise UnparseableDateError(f"Неизвестный месяц: {month_name!r}", component="DateParser")
        try:
            return date(year, month, day)
        except ValueError as e:
            raise UnparseableDateError(
                f"Несуществующая дата: {day} {month_name} {year}",
                component="DateParser",
                original_error=e,
            )

    def is_day_header(self, line: str) -> bool:
        return bool(self.day_header_re.match(line))

    def starts_with_weekday(self, line: str) -> bool:
        return bool(self.weekday_prefix_re.match(line))

    def parse_day_header(self, line: str, year: int) -> date:
        """
        "SUNDAY 31 AUGUST TRINITY 11" -> date(year, 8, 31)
        """
        m = self.day_header_re.match(line)
        if not m:
            raise UnparseableDateError(f"Не заголовок дня: {line!r}", component="DateParser")
        return self.resolve(int(m.group(2)), m.group(3), year)

    @staticmethod
    def is_date_range_banner(line: str) -> bool:
        return bool(_DATE_RANGE_RE.search(line))

    def detect_validity_end(self, lines: Iterable[str]) -> Optional[date]:
        """
        Ищет баннер "<d> <Month> – <d> <Month> <yyyy>" в первых строках документа.

        Returns:
            Дата окончания (конец диапазона) или None
        """
        for i, line in enumerate(lines):
            if i >= self.calendar.banner_scan_lines:
                break
            m = _DATE_RANGE_WITH_YEAR_RE.search(line)
            if not m:
                continue
            try:
                end = self.resolve(int(m.group(3)), m.group(4), int(m.group(5)))
            except UnparseableDateError as e:
                logger.warning(f"[DateParser] Баннер не распознан: {e.message}")
                continue
            logger.debug(f"[DateParser] Дата окончания документа: {end.isoformat()} ('{line}')")
            return end
        return None
