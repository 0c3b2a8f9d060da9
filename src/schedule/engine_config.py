"""
Конфигурация ядра.

ЦКП: Значения (не чтение окружения), передаваемые в ядро:
часы, окно "текущей" службы, лимит документов, опорный часовой пояс.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EngineConfig:
    """
    Конфигурация движка расписания.

    clock - переопределяемые часы (для детерминированных тестов).
    """
    clock: Callable[[], datetime] = utc_now
    grace_window: timedelta = timedelta(minutes=10)
    max_documents: int = 2
    timezone: tzinfo = timezone.utc
    choir_filter: Optional[re.Pattern] = None

    def now(self) -> datetime:
        """Текущий момент в опорном часовом поясе."""
        return self.localize(self.clock())

    def localize(self, moment: Optional[datetime] = None) -> datetime:
        """
        Переводит момент в опорный часовой пояс.

        None -> текущий момент по часам. Наивное время считается
        временем опорного пояса.
        """
        if moment is None:
            return self.now()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=self.timezone)
        return moment.astimezone(self.timezone)

    @classmethod
    def from_settings(cls, clock: Optional[Callable[[], datetime]] = None) -> "EngineConfig":
        """Собирает конфиг из config.settings."""
        from config import settings

        return cls(
            clock=clock or utc_now,
            grace_window=timedelta(minutes=settings.GRACE_WINDOW_MINUTES),
            max_documents=settings.MAX_SOURCE_DOCUMENTS,
            timezone=ZoneInfo(settings.SCHEDULE_TIMEZONE),
            choir_filter=re.compile(settings.CHOIR_FILTER, re.IGNORECASE) if settings.CHOIR_FILTER else None,
        )
