"""
Freshness Evaluator - Проверка актуальности расписания.

Расписание устарело, если дата окончания известна и текущая календарная дата
(в опорном часовом поясе) позже неё. Без даты окончания расписание не устаревает.
"""

from datetime import datetime
from typing import Optional

from contracts.d2_schedule_dto import MergedSchedule
from ..engine_config import EngineConfig


class FreshnessEvaluator:

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def is_stale(self, schedule: MergedSchedule, now: Optional[datetime] = None) -> bool:
        if schedule.validity_end_date is None:
            return False
        now = self.config.localize(now)
        return now.astimezone(self.config.timezone).date() > schedule.validity_end_date
