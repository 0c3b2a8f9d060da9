"""
Stage 3: Service Parsing

ЦКП: Упорядоченные строки -> записи о службах (ServiceRecord).

Input: CleanupResult.texts (из Stage 2) + дата окончания документа
Output: ServiceParsingResult (записи, отброшенные службы)

Машина состояний SCANNING / IN_SERVICE. Для каждой строки, первое совпадение:
1. Заголовок дня ("SUNDAY 31 AUGUST") -> обновить текущую дату
2. Строка службы (время + тип службы, не баннер диапазона дат) ->
   закрыть открытую службу, открыть новую
3. Строка произведений (если служба открыта) -> добавить к открытой службе
В конце ввода открытая служба закрывается.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Callable, Iterable, List, Optional, Tuple

from loguru import logger

from contracts.d2_schedule_dto import ServiceRecord
from ..domain.exceptions import UnparseableDateError, UnparseableTimeError
from ..rules.rules_config import RulesConfig
from ..s4_pieces.stage import PieceStage
from .date_parser import DateParser
from .parser_state import ParserMode, ParserState, ServiceDraft
from .time_parser import TIME_TOKEN_PATTERN, parse_time


_SERVICE_LINE_RE = re.compile(rf"^(?P<time>{TIME_TOKEN_PATTERN})\s+(?P<rest>.+)$", re.IGNORECASE)
_CHOIR_RE = re.compile(r"\(([^)]+)\)")


@dataclass
class ServiceParsingResult:
    """
    Результат Stage 3: Service Parsing.

    ЦКП: Записи о службах с датой и временем.
    """
    records: List[ServiceRecord] = field(default_factory=list)
    dropped_count: int = 0              # Службы без даты или времени
    validity_end_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "records_count": len(self.records),
            "dropped_count": self.dropped_count,
            "validity_end_date": self.validity_end_date.isoformat() if self.validity_end_date else None,
        }


class ServiceParsingStage:
    """
    Stage 3: Service Parsing.

    step() - чистая функция (state, line) -> state.
    process() - свёртка всех строк документа.
    """

    def __init__(
        self,
        rules: Optional[RulesConfig] = None,
        piece_stage: Optional[PieceStage] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        rules = rules or RulesConfig.load()
        self.date_parser = DateParser(rules.calendar)
        self.piece_stage = piece_stage or PieceStage(rules)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.service_keywords_re = re.compile(
            r"\b(?:" + "|".join(re.escape(k) for k in rules.services.service_keywords) + r")\b",
            re.IGNORECASE,
        )

    def initial_state(self, validity_end_date: Optional[date] = None) -> ParserState:
        year = validity_end_date.year if validity_end_date else self.clock().year
        return ParserState(year=year)

    def step(self, state: ParserState, line: str) -> ParserState:
        """Один шаг машины состояний."""
        # 1. Заголовок дня
        if self.date_parser.is_day_header(line):
            try:
                current_date = self.date_parser.parse_day_header(line, state.year)
            except UnparseableDateError as e:
                logger.warning(f"[ServiceParser] Заголовок дня без даты: '{line}' ({e.message})")
                current_date = None
            return replace(state, current_date=current_date)

        # 2. Строка службы
        match = self._match_service_line(line)
        if match:
            return state.open(self._open_service(state, match, line))

        # 3. Строка произведений
        if state.mode is ParserMode.IN_SERVICE and not self.date_parser.starts_with_weekday(line):
            draft = state.open_service
            mentions = self.piece_stage.process_line(line, draft.title)
            return replace(state, open_service=draft.with_line(line, mentions))

        logger.trace(f"[ServiceParser] Пропуск: '{line}'")
        return state

    def finish(self, state: ParserState) -> Tuple[List[ServiceRecord], int]:
        """Закрывает открытую службу и выпускает записи."""
        state = state.close_open()
        records = []
        dropped = 0
        for draft in state.closed:
            record = draft.to_record()
            if record is None:
                dropped += 1
                logger.warning(
                    f"[ServiceParser] Служба отброшена (date={draft.date}, time={draft.time}): '{draft.title}'"
                )
                continue
            records.append(record)
        return records, dropped

    def process(self, lines: Iterable[str], validity_end_date: Optional[date] = None) -> ServiceParsingResult:
        state = self.initial_state(validity_end_date)
        for line in lines:
            state = self.step(state, line)
        records, dropped = self.finish(state)

        logger.info(f"[Stage 3: Service Parsing] {len(records)} служб, отброшено {dropped}")

        return ServiceParsingResult(records=records, dropped_count=dropped, validity_end_date=validity_end_date)

    def _match_service_line(self, line: str) -> Optional[re.Match]:
        match = _SERVICE_LINE_RE.match(line)
        if not match:
            return None
        if not self.service_keywords_re.search(match.group("rest")):
            return None
        if self.date_parser.is_date_range_banner(line):
            return None
        return match

    def _open_service(self, state: ParserState, match: re.Match, line: str) -> ServiceDraft:
        try:
            time = parse_time(match.group("time"))
        except UnparseableTimeError as e:
            logger.warning(f"[ServiceParser] Время не распознано: '{line}' ({e.message})")
            time = None

        rest = match.group("rest").strip()
        choir = _CHOIR_RE.search(rest)
        if choir:
            title = rest[:choir.start()].strip()
            label = choir.group(1).strip()
            trailing = rest[choir.end():].strip()
        else:
            title, label, trailing = rest, "", ""

        draft = ServiceDraft(date=state.current_date, time=time, title=title, choir=label)
        if trailing:
            draft = draft.with_line(trailing, self.piece_stage.process_line(trailing, title))

        logger.debug(f"[ServiceParser] Служба: {state.current_date} {time} '{title}' ({label})")
        return draft
