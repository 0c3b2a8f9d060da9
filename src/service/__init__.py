"""
Service: живой снапшот расписания, периодическое обновление и текстовый вывод.
"""

from src.service.schedule_service import ScheduleService, ScheduleSnapshot, ScheduleStatus
from src.service.text_formatter import TextFormatter
from src.service.logging_setup import configure_logging

__all__ = [
    "ScheduleService",
    "ScheduleSnapshot",
    "ScheduleStatus",
    "TextFormatter",
    "configure_logging",
]
