"""
Unit-тесты для ScheduleService.

ЦКП: Снапшот заменяется целиком; частичный и полный отказ документов не роняют обновление.
"""

import re
import threading
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List

import pytest

from contracts.d1_fragments_dto import DocumentLocator, PageFragments, TextFragment
from src.schedule.domain.exceptions import DocumentDiscoveryError, FragmentExtractionError
from src.schedule.domain.interfaces import IDocumentDiscovery, IFragmentSource
from src.schedule.engine_config import EngineConfig
from src.schedule.rules import RulesConfig
from src.service import ScheduleService


NOW = datetime(2025, 9, 10, 9, 0, tzinfo=timezone.utc)


def fragments(*lines: str) -> List[PageFragments]:
    """Строки сверху вниз -> фрагменты одной страницы."""
    top = 800
    return [PageFragments(1, [TextFragment(text, 50, top - 20 * i) for i, text in enumerate(lines)])]


FIRST_LIST = fragments(
    "Music List",
    "31 August – 13 September 2025",
    "THURSDAY 11 SEPTEMBER",
    "1730 Choral Evensong (Senior Girls and Songmen)",
    "Walmisley in D minor",
    "FRIDAY 12 SEPTEMBER",
    "1730 Choral Evensong (Girls)",
)

SECOND_LIST = fragments(
    "Music List",
    "14 September – 27 September 2025",
    "FRIDAY 12 SEPTEMBER",
    "1730 Choral Evensong (Girls)",
    "SUNDAY 14 SEPTEMBER",
    "1530 Choral Evensong (Songmen)",
)


class FakeDiscovery(IDocumentDiscovery):

    def __init__(self, locators=None, error=None):
        self.locators = locators or []
        self.error = error

    def discover(self):
        if self.error:
            raise self.error
        return list(self.locators)


class FakeSource(IFragmentSource):

    def __init__(self, documents: Dict[str, List[PageFragments]]):
        self.documents = documents
        self.calls: List[str] = []

    def extract(self, locator):
        self.calls.append(locator.location)
        if locator.location not in self.documents:
            raise FragmentExtractionError(f"broken: {locator.location}", component="FakeSource")
        return self.documents[locator.location]


LOCATORS = [
    DocumentLocator("first.pdf", date(2025, 9, 13)),
    DocumentLocator("second.pdf", date(2025, 9, 27)),
]


@pytest.fixture
def config():
    RulesConfig._cache.clear()
    return EngineConfig(clock=lambda: NOW)


def make_service(config, documents, locators=LOCATORS, discovery=None):
    return ScheduleService(
        discovery=discovery or FakeDiscovery(locators),
        fragment_source=FakeSource(documents),
        config=config,
        source_url="https://cathedral.example.org/music-list/",
    )


class TestRefresh:

    def test_two_documents_merged(self, config):
        """Должен объединить документы без дубликатов."""
        service = make_service(config, {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST})

        snapshot = service.refresh()

        keys = [(r.date.day, r.choir) for r in snapshot.schedule.records]
        assert keys == [(12, "Girls"), (14, "Songmen"), (11, "Senior Girls and Songmen")]
        assert snapshot.schedule.validity_end_date == date(2025, 9, 27)
        assert snapshot.errors == ()
        assert snapshot.last_refresh == NOW

    def test_only_latest_documents_processed(self, config):
        locators = LOCATORS + [DocumentLocator("old.pdf", date(2025, 8, 30))]
        service = make_service(config, {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST}, locators)

        service.refresh()

        assert service.fragment_source.calls == ["second.pdf", "first.pdf"]

    def test_partial_failure_recorded(self, config):
        """Должен построить расписание из уцелевших документов и записать ошибку."""
        service = make_service(config, {"second.pdf": SECOND_LIST})

        snapshot = service.refresh()

        assert len(snapshot.schedule.records) == 2
        assert len(snapshot.errors) == 1
        assert "first.pdf" in snapshot.errors[0]
        assert service.status().last_error == snapshot.errors[0]

    def test_total_failure_keeps_previous_snapshot(self, config):
        """Должен оставить предыдущий снапшот, если ни один документ не обработан."""
        documents = {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST}
        service = make_service(config, documents)
        good = service.refresh()

        documents.clear()
        after = service.refresh()

        assert after.schedule is good.schedule
        assert after.last_refresh == good.last_refresh
        assert any("Ни один документ" in e for e in after.errors)
        assert not service.next().is_empty

    def test_total_failure_without_previous_is_unavailable(self, config):
        service = make_service(config, {})

        snapshot = service.refresh()

        assert snapshot.schedule is None
        for selection in (service.next(), service.week(), service.tomorrow(), service.raw(),
                          service.day(date(2025, 9, 12))):
            assert selection.is_stale
            assert not selection.is_available
        assert service.status().is_stale

    def test_discovery_failure_recorded(self, config):
        error = DocumentDiscoveryError("listing down", component="FakeDiscovery")
        service = make_service(config, {}, discovery=FakeDiscovery(error=error))

        snapshot = service.refresh()

        assert snapshot.schedule is None
        assert "listing down" in snapshot.errors[0]

    def test_snapshot_replaced_by_reference(self, config):
        """Должен заменить снапшот новым объектом, не изменяя старый."""
        service = make_service(config, {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST})
        first = service.refresh()
        second = service.refresh()

        assert first is not second
        assert first.schedule is not second.schedule
        assert first.schedule.records == second.schedule.records

    def test_choir_filter(self, config):
        config = replace(config, choir_filter=re.compile(r"songmen", re.IGNORECASE))
        service = make_service(config, {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST})

        snapshot = service.refresh()

        assert {r.choir for r in snapshot.schedule.records} == {"Songmen", "Senior Girls and Songmen"}
        assert snapshot.records_parsed == 3


class TestQueriesAndStatus:

    def test_queries_delegate_to_selection_engine(self, config):
        service = make_service(config, {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST})
        service.refresh()

        assert service.next().first.date == date(2025, 9, 11)
        assert [r.date.day for r in service.week().records] == [11, 12, 14]
        assert [r.date.day for r in service.tomorrow().records] == [11]
        assert service.day(date(2025, 9, 14)).first.choir == "Songmen"

    def test_status(self, config):
        service = make_service(config, {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST})
        service.refresh()

        status = service.status()

        assert status.documents == ["second.pdf", "first.pdf"]
        assert status.validity_end_date == date(2025, 9, 27)
        assert status.records_parsed == 3
        assert status.selected_count == 3
        assert not status.is_stale
        assert status.is_available
        assert status.to_dict()["validity_end_date"] == "2025-09-27"


class TestRunPeriodic:

    def test_stops_when_event_set(self, config):
        service = make_service(config, {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST})
        stop = threading.Event()
        calls = []
        original = service.refresh

        def refresh_once():
            calls.append(1)
            stop.set()
            return original()

        service.refresh = refresh_once
        service.run_periodic(timedelta(hours=12), stop)

        assert calls == [1]
        assert service.snapshot.is_available

    def test_reports_each_snapshot(self, config):
        """Должен передавать каждый новый снапшот в on_refresh."""
        service = make_service(config, {"first.pdf": FIRST_LIST, "second.pdf": SECOND_LIST})
        stop = threading.Event()
        seen = []

        def on_refresh(snapshot):
            seen.append(snapshot)
            if len(seen) == 2:
                stop.set()

        service.run_periodic(timedelta(seconds=0), stop, on_refresh=on_refresh)

        assert len(seen) == 2
        assert all(s.is_available for s in seen)
        assert seen[-1] is service.snapshot
