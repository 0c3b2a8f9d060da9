"""
Selection Engine - Выборка служб для показа.

ЦКП: Текущие/предстоящие службы по запросу (next, week, tomorrow, day, raw).

- Текущие = службы, начавшиеся не раньше (now - grace window), по возрастанию времени
- Устаревшее расписание -> любая выборка пуста и помечена stale
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from loguru import logger

from contracts.d2_schedule_dto import MergedSchedule, ServiceRecord
from ..engine_config import EngineConfig
from .freshness import FreshnessEvaluator


@dataclass(frozen=True)
class Selection:
    """
    Результат выборки.

    is_available=False - расписания нет вовсе (ни один документ не загружен).
    """
    records: Tuple[ServiceRecord, ...]
    is_stale: bool
    is_available: bool = True

    @classmethod
    def unavailable(cls) -> "Selection":
        return cls(records=(), is_stale=True, is_available=False)

    @property
    def first(self) -> Optional[ServiceRecord]:
        return self.records[0] if self.records else None

    @property
    def is_empty(self) -> bool:
        return not self.records


class SelectionEngine:
    """
    Запросы к расписанию.

    Все методы читают часы один раз за вызов.
    """

    def __init__(self, schedule: MergedSchedule, config: Optional[EngineConfig] = None):
        self.schedule = schedule
        self.config = config or EngineConfig()
        self.freshness = FreshnessEvaluator(self.config)

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        return self.freshness.is_stale(self.schedule, now)

    def current(self, now: Optional[datetime] = None) -> Selection:
        """Службы не раньше now - grace window, по возрастанию."""
        now = self.config.localize(now)
        if self.is_stale(now):
            logger.debug("[SelectionEngine] Расписание устарело")
            return Selection(records=(), is_stale=True)

        threshold = now - self.config.grace_window
        upcoming: List[ServiceRecord] = [
            record for record in self.schedule.records
            if record.starts_at(self.config.timezone) >= threshold
        ]
        upcoming.sort(key=lambda r: r.starts_at(self.config.timezone))
        return Selection(records=tuple(upcoming), is_stale=False)

    def next(self, now: Optional[datetime] = None) -> Selection:
        current = self.current(now)
        return Selection(records=current.records[:1], is_stale=current.is_stale)

    def week(self, now: Optional[datetime] = None) -> Selection:
        """Текущие службы в пределах недели Пн-Вс, содержащей now."""
        now = self.config.localize(now)
        today = now.astimezone(self.config.timezone).date()
        monday = today - timedelta(days=today.weekday())
        sunday = monday + timedelta(days=6)
        return self._filter_dates(self.current(now), monday, sunday)

    def tomorrow(self, now: Optional[datetime] = None) -> Selection:
        now = self.config.localize(now)
        target = now.astimezone(self.config.timezone).date() + timedelta(days=1)
        return self.day(target, now)

    def day(self, target: date, now: Optional[datetime] = None) -> Selection:
        return self._filter_dates(self.current(now), target, target)

    def raw(self, now: Optional[datetime] = None) -> Selection:
        """Те же текущие службы; представление показывает их исходные строки."""
        return self.current(now)

    @staticmethod
    def _filter_dates(selection: Selection, start: date, end: date) -> Selection:
        records = tuple(r for r in selection.records if start <= r.date <= end)
        return Selection(records=records, is_stale=selection.is_stale)
