"""
Text Formatter - Текстовое представление выборок.

Формат строки службы:
    "2025-09-12 17:30    Choral Evensong  |  Senior Girls & Songmen  |  piece; piece"

Органные произведения в строку не попадают.
"""

import re
from datetime import date
from typing import Optional

from contracts.d2_schedule_dto import PieceCategory, ServiceRecord
from src.schedule.selection import Selection
from .schedule_service import ScheduleStatus


PIECE_ORDER = (
    PieceCategory.SETTINGS,
    PieceCategory.ANTHEMS,
    PieceCategory.OTHER,
    PieceCategory.PSALMS,
    PieceCategory.HYMNS,
)

_AND_RE = re.compile(r"\band\b")


class TextFormatter:
    """Форматирование записей, выборок и статуса в plain text."""

    @staticmethod
    def service_line(record: ServiceRecord) -> str:
        pieces = "; ".join(
            piece for category in PIECE_ORDER for piece in record.pieces_for(category)
        )
        choir = _AND_RE.sub("&", record.choir)
        return f"{record.date.isoformat()} {record.time}    {record.title}  |  {choir}  |  {pieces}"

    @staticmethod
    def stale_message(validity_end_date: Optional[date]) -> str:
        if validity_end_date is None:
            return "STALE: Music list unavailable — no newer list published."
        return f"STALE: Music list ended {validity_end_date.isoformat()} — no newer list published."

    def selection(self, selection: Selection, validity_end_date: Optional[date]) -> str:
        """Строки служб или сообщение об устаревании, если показывать нечего."""
        if selection.is_stale or selection.is_empty:
            return self.stale_message(validity_end_date)
        return "\n".join(self.service_line(record) for record in selection.records)

    @staticmethod
    def raw(selection: Selection) -> str:
        """Заголовок службы и исходные строки произведений."""
        blocks = []
        for record in selection.records:
            header = f"{record.date.isoformat()} {record.time} {record.title} ({record.choir})"
            blocks.append("\n".join([header, *record.raw_lines, ""]))
        return "\n".join(blocks)

    @staticmethod
    def status(status: ScheduleStatus) -> str:
        lines = [
            f"source_page_url: {status.source_url}",
            f"documents: {', '.join(status.documents) if status.documents else 'none'}",
            f"end_date: {status.validity_end_date.isoformat() if status.validity_end_date else 'unknown'}",
            f"last_refresh: {status.last_refresh.isoformat() if status.last_refresh else 'never'}",
            f"services_parsed: {status.records_parsed}",
            f"selected_services: {status.selected_count}",
            f"stale: {str(status.is_stale).lower()}",
        ]
        lines.extend(f"error: {error}" for error in status.errors)
        return "\n".join(lines)

    @staticmethod
    def json_payload(selection: Selection, status: ScheduleStatus) -> dict:
        """Следующая служба + источник; при stale/ошибке поля службы = None."""
        source = {
            "music_list_url": status.source_url,
            "end_date": status.validity_end_date.isoformat() if status.validity_end_date else None,
            "fetched_at": status.last_refresh.isoformat() if status.last_refresh else None,
        }
        record = selection.first
        if record is None or selection.is_stale:
            return {
                "date": None,
                "time": None,
                "service": None,
                "choir": None,
                "pieces": None,
                "source": source,
                "stale": True,
            }
        return {
            "date": record.date.isoformat(),
            "time": record.time,
            "service": record.title,
            "choir": record.choir,
            "pieces": {category.value: list(titles) for category, titles in record.pieces.items()},
            "source": source,
            "stale": False,
        }
