"""
Schedule Service - Живой снапшот расписания и его обновление.

ЦКП: Неизменяемый ScheduleSnapshot, который заменяется целиком по ссылке.

Обновление (refresh):
1. Discovery - список документов-источников
2. Выбор max_documents документов с самой поздней заявленной датой
3. Каждый документ: фрагменты -> DocumentParsingPipeline (ошибка одного не роняет остальные)
4. Слияние -> фильтр по хору -> новый снапшот
Если ни один документ не дал результата, предыдущий снапшот остаётся в силе.
"""

import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Tuple

from loguru import logger

from contracts.d1_fragments_dto import DocumentLocator
from contracts.d2_schedule_dto import DocumentParseResult, MergedSchedule
from src.ingestion.listing_discovery import select_latest
from src.schedule.domain.exceptions import (
    DocumentDiscoveryError,
    NoValidDocumentsError,
    PartialRefreshFailure,
)
from src.schedule.domain.interfaces import IDocumentDiscovery, IFragmentSource
from src.schedule.engine_config import EngineConfig
from src.schedule.merging import ScheduleMerger
from src.schedule.pipeline import DocumentParsingPipeline
from src.schedule.selection import Selection, SelectionEngine


@dataclass(frozen=True)
class ScheduleSnapshot:
    """
    Состояние расписания на момент последнего обновления.

    schedule=None - ещё ни одного успешного обновления.
    """
    schedule: Optional[MergedSchedule] = None
    last_refresh: Optional[datetime] = None
    last_attempt: Optional[datetime] = None
    records_parsed: int = 0
    errors: Tuple[str, ...] = ()

    @property
    def is_available(self) -> bool:
        return self.schedule is not None


@dataclass
class ScheduleStatus:
    """Сводка для /status."""
    source_url: str
    documents: List[str] = field(default_factory=list)
    validity_end_date: Optional[date] = None
    last_refresh: Optional[datetime] = None
    records_parsed: int = 0
    selected_count: int = 0
    is_stale: bool = False
    is_available: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def last_error(self) -> Optional[str]:
        return self.errors[-1] if self.errors else None

    def to_dict(self) -> dict:
        return {
            "source_url": self.source_url,
            "documents": self.documents,
            "validity_end_date": self.validity_end_date.isoformat() if self.validity_end_date else None,
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
            "records_parsed": self.records_parsed,
            "selected_count": self.selected_count,
            "is_stale": self.is_stale,
            "is_available": self.is_available,
            "errors": self.errors,
        }


class ScheduleService:
    """
    Держатель снапшота и оркестратор обновления.

    Читатели получают снапшот по ссылке и никогда не видят его частично обновлённым.
    """

    def __init__(
        self,
        discovery: IDocumentDiscovery,
        fragment_source: IFragmentSource,
        config: Optional[EngineConfig] = None,
        pipeline: Optional[DocumentParsingPipeline] = None,
        merger: Optional[ScheduleMerger] = None,
        source_url: str = "",
    ):
        self.discovery = discovery
        self.fragment_source = fragment_source
        self.config = config or EngineConfig()
        self.pipeline = pipeline or DocumentParsingPipeline(self.config)
        self.merger = merger or ScheduleMerger()
        self.source_url = source_url

        self._snapshot = ScheduleSnapshot()
        self._refresh_lock = threading.Lock()

    @property
    def snapshot(self) -> ScheduleSnapshot:
        return self._snapshot

    # ------------------------------------------------------------------
    # Обновление
    # ------------------------------------------------------------------

    def refresh(self) -> ScheduleSnapshot:
        """
        Обновляет снапшот. Никогда не выбрасывает исключений домена.

        Returns:
            ScheduleSnapshot: Снапшот после попытки (новый или прежний с ошибкой)
        """
        with self._refresh_lock:
            attempt = self.config.now()
            logger.info("[ScheduleService] Обновление расписания")

            try:
                locators = self.discovery.discover()
            except DocumentDiscoveryError as e:
                logger.error(f"[ScheduleService] Discovery не удалось: {e}")
                return self._keep_previous(attempt, [str(e)])

            selected = select_latest(locators, self.config.max_documents)
            logger.debug(
                f"[ScheduleService] Выбрано {len(selected)} из {len(locators)} документов: "
                f"{[loc.location for loc in selected]}"
            )

            results, failures = self._process_documents(selected)
            errors = [str(failure) for failure in failures]

            try:
                schedule = self._merge(results)
            except NoValidDocumentsError as e:
                logger.error(f"[ScheduleService] {e}")
                return self._keep_previous(attempt, errors + [str(e)])

            records_parsed = len(schedule.records)
            schedule = self._apply_choir_filter(schedule)

            snapshot = ScheduleSnapshot(
                schedule=schedule,
                last_refresh=attempt,
                last_attempt=attempt,
                records_parsed=records_parsed,
                errors=tuple(errors),
            )
            self._snapshot = snapshot

            logger.info(
                f"[ScheduleService] Обновлено: {len(schedule.records)}/{records_parsed} служб, "
                f"end_date={schedule.validity_end_date}, stale={self._engine(snapshot).is_stale()}"
            )
            return snapshot

    def _process_documents(
        self, locators: List[DocumentLocator]
    ) -> Tuple[List[DocumentParseResult], List[PartialRefreshFailure]]:
        results: List[DocumentParseResult] = []
        failures: List[PartialRefreshFailure] = []

        for locator in locators:
            try:
                pages = self.fragment_source.extract(locator)
                results.append(self.pipeline.process(pages, locator).dto)
            except Exception as e:
                logger.warning(f"[ScheduleService] Документ пропущен: {locator.location}: {e}")
                failures.append(PartialRefreshFailure(
                    message=f"Документ пропущен: {locator.location}",
                    component="ScheduleService",
                    original_error=e,
                ))

        logger.info(f"[ScheduleService] Документы: {len(results)}/{len(locators)} успешно")
        return results, failures

    def _merge(self, results: List[DocumentParseResult]) -> MergedSchedule:
        if not results:
            raise NoValidDocumentsError(
                message="Ни один документ не дал результата",
                component="ScheduleService",
            )
        return self.merger.merge(results)

    def _apply_choir_filter(self, schedule: MergedSchedule) -> MergedSchedule:
        pattern = self.config.choir_filter
        if pattern is None:
            return schedule
        records = tuple(r for r in schedule.records if pattern.search(r.choir))
        return schedule.model_copy(update={"records": records})

    def _keep_previous(self, attempt: datetime, errors: List[str]) -> ScheduleSnapshot:
        snapshot = replace(self._snapshot, last_attempt=attempt, errors=tuple(errors))
        self._snapshot = snapshot
        if snapshot.is_available:
            logger.warning("[ScheduleService] Используется предыдущий снапшот")
        return snapshot

    def run_periodic(
        self,
        interval: timedelta,
        stop_event: threading.Event,
        on_refresh: Optional[Callable[[ScheduleSnapshot], None]] = None,
    ) -> None:
        """
        Обновляет снапшот каждые `interval`, пока не установлен stop_event.

        on_refresh вызывается с новым снапшотом после каждого обновления.
        """
        logger.info(f"[ScheduleService] Периодическое обновление каждые {interval}")
        while not stop_event.is_set():
            snapshot = self.refresh()
            if on_refresh is not None:
                on_refresh(snapshot)
            stop_event.wait(interval.total_seconds())
        logger.info("[ScheduleService] Периодическое обновление остановлено")

    # ------------------------------------------------------------------
    # Запросы
    # ------------------------------------------------------------------

    def _engine(self, snapshot: Optional[ScheduleSnapshot] = None) -> Optional[SelectionEngine]:
        snapshot = snapshot or self._snapshot
        if snapshot.schedule is None:
            return None
        return SelectionEngine(snapshot.schedule, self.config)

    def next(self, now: Optional[datetime] = None) -> Selection:
        engine = self._engine()
        return engine.next(now) if engine else Selection.unavailable()

    def week(self, now: Optional[datetime] = None) -> Selection:
        engine = self._engine()
        return engine.week(now) if engine else Selection.unavailable()

    def tomorrow(self, now: Optional[datetime] = None) -> Selection:
        engine = self._engine()
        return engine.tomorrow(now) if engine else Selection.unavailable()

    def day(self, target: date, now: Optional[datetime] = None) -> Selection:
        engine = self._engine()
        return engine.day(target, now) if engine else Selection.unavailable()

    def raw(self, now: Optional[datetime] = None) -> Selection:
        engine = self._engine()
        return engine.raw(now) if engine else Selection.unavailable()

    def status(self, now: Optional[datetime] = None) -> ScheduleStatus:
        snapshot = self._snapshot
        engine = self._engine(snapshot)
        schedule = snapshot.schedule

        return ScheduleStatus(
            source_url=self.source_url,
            documents=list(schedule.sources) if schedule else [],
            validity_end_date=schedule.validity_end_date if schedule else None,
            last_refresh=snapshot.last_refresh,
            records_parsed=snapshot.records_parsed,
            selected_count=len(engine.current(now).records) if engine else 0,
            is_stale=engine.is_stale(now) if engine else True,
            is_available=snapshot.is_available,
            errors=list(snapshot.errors),
        )
