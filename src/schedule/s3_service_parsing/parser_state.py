"""
Состояние парсера служб.

Неизменяемое значение, которое передаётся через чистую функцию шага
(state, line) -> state. Тестируется построчно без I/O.
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Tuple

from contracts.d2_schedule_dto import PieceCategory, Pieces, ServiceRecord
from ..s4_pieces.stage import PieceMention


class ParserMode(str, Enum):
    SCANNING = "scanning"
    IN_SERVICE = "in_service"


@dataclass(frozen=True)
class ServiceDraft:
    """Открытая служба. Время None, если токен не распознан."""
    date: Optional[date]
    time: Optional[str]
    title: str
    choir: str = ""
    mentions: Tuple[PieceMention, ...] = ()
    raw_lines: Tuple[str, ...] = ()

    def with_line(self, raw_line: str, mentions: Iterable[PieceMention]) -> "ServiceDraft":
        return replace(
            self,
            raw_lines=self.raw_lines + (raw_line,),
            mentions=self.mentions + tuple(mentions),
        )

    @property
    def is_complete(self) -> bool:
        return self.date is not None and self.time is not None

    def to_record(self) -> Optional[ServiceRecord]:
        """Запись о службе или None, если дата или время не определены."""
        if not self.is_complete:
            return None
        pieces = Pieces()
        for mention in self.mentions:
            pieces = pieces.with_added(mention.category, mention.display)
        return ServiceRecord(
            date=self.date,
            time=self.time,
            title=self.title,
            choir=self.choir,
            pieces=pieces,
            raw_lines=self.raw_lines,
        )


@dataclass(frozen=True)
class ParserState:
    """
    Состояние машины SCANNING / IN_SERVICE.

    year - год для дат "<день> <месяц>" без года.
    """
    year: int
    mode: ParserMode = ParserMode.SCANNING
    current_date: Optional[date] = None
    open_service: Optional[ServiceDraft] = None
    closed: Tuple[ServiceDraft, ...] = ()

    def close_open(self) -> "ParserState":
        if self.open_service is None:
            return self
        return replace(
            self,
            mode=ParserMode.SCANNING,
            open_service=None,
            closed=self.closed + (self.open_service,),
        )

    def open(self, draft: ServiceDraft) -> "ParserState":
        closed = self.close_open()
        return replace(closed, mode=ParserMode.IN_SERVICE, open_service=draft)

    def pieces_of(self, category: PieceCategory) -> Tuple[str, ...]:
        """Произведения открытой службы (для отладки и тестов)."""
        if self.open_service is None:
            return ()
        return tuple(m.display for m in self.open_service.mentions if m.category is category)
