"""
Unit-тесты для FreshnessEvaluator и SelectionEngine.

ЦКП: Актуальность расписания, окно "текущей" службы, выборки.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from contracts.d2_schedule_dto import MergedSchedule, ServiceRecord
from src.schedule.engine_config import EngineConfig
from src.schedule.selection import FreshnessEvaluator, SelectionEngine


UTC = timezone.utc


def record(d: date, time: str, title: str = "Choral Evensong") -> ServiceRecord:
    return ServiceRecord(date=d, time=time, title=title, choir="Songmen")


def schedule(*records, end=None) -> MergedSchedule:
    return MergedSchedule(records=tuple(records), validity_end_date=end)


def engine_at(now: datetime, sched: MergedSchedule, **kwargs) -> SelectionEngine:
    return SelectionEngine(sched, EngineConfig(clock=lambda: now, **kwargs))


class TestFreshness:

    def test_stale_one_second_after_end_date(self):
        """Должен считать расписание устаревшим сразу после даты окончания."""
        sched = schedule(record(date(2025, 9, 20), "17:30"), end=date(2025, 9, 13))
        engine = engine_at(datetime(2025, 9, 14, 0, 0, 1, tzinfo=UTC), sched)

        assert engine.is_stale()
        for selection in (engine.current(), engine.next(), engine.week(), engine.tomorrow(),
                          engine.day(date(2025, 9, 20)), engine.raw()):
            assert selection.is_stale
            assert selection.is_empty

    def test_not_stale_on_end_date(self):
        sched = schedule(end=date(2025, 9, 13))
        now = datetime(2025, 9, 13, 23, 59, tzinfo=UTC)
        assert not FreshnessEvaluator(EngineConfig(clock=lambda: now)).is_stale(sched)

    def test_no_end_date_never_stale(self):
        sched = schedule()
        now = datetime(2099, 1, 1, tzinfo=UTC)
        assert not FreshnessEvaluator(EngineConfig(clock=lambda: now)).is_stale(sched)

    def test_calendar_date_in_reference_zone(self):
        """Должен сравнивать календарную дату в опорном часовом поясе."""
        sched = schedule(end=date(2025, 9, 13))
        now = datetime(2025, 9, 13, 23, 30, tzinfo=UTC)
        london = EngineConfig(clock=lambda: now, timezone=ZoneInfo("Europe/London"))

        assert FreshnessEvaluator(london).is_stale(sched)


class TestGraceWindow:

    NOW = datetime(2025, 9, 12, 17, 40, tzinfo=UTC)

    def test_nine_minutes_ago_is_current(self):
        sched = schedule(record(date(2025, 9, 12), "17:31"))
        assert engine_at(self.NOW, sched).next().first.time == "17:31"

    def test_eleven_minutes_ago_is_past(self):
        sched = schedule(record(date(2025, 9, 12), "17:29"))
        assert engine_at(self.NOW, sched).next().is_empty

    def test_custom_window(self):
        sched = schedule(record(date(2025, 9, 12), "17:29"))
        engine = engine_at(self.NOW, sched, grace_window=timedelta(minutes=15))
        assert not engine.next().is_empty


class TestQueries:

    # Среда
    NOW = datetime(2025, 9, 10, 9, 0, tzinfo=UTC)

    @pytest.fixture
    def engine(self):
        sched = schedule(
            record(date(2025, 9, 14), "15:30"),
            record(date(2025, 9, 11), "17:30"),
            record(date(2025, 9, 9), "17:30"),
            record(date(2025, 9, 15), "17:30"),
            record(date(2025, 9, 11), "07:30", "Morning Prayer"),
            end=date(2025, 9, 27),
        )
        return engine_at(self.NOW, sched)

    def test_current_sorted_and_past_excluded(self, engine):
        """Должен вернуть будущие службы по возрастанию времени."""
        times = [(r.date.day, r.time) for r in engine.current().records]
        assert times == [(11, "07:30"), (11, "17:30"), (14, "15:30"), (15, "17:30")]

    def test_next(self, engine):
        assert engine.next().first.title == "Morning Prayer"

    def test_week_is_monday_to_sunday(self, engine):
        """Должен ограничить неделю понедельником 8 и воскресеньем 14 сентября."""
        assert [r.date.day for r in engine.week().records] == [11, 11, 14]

    def test_tomorrow(self, engine):
        assert [r.time for r in engine.tomorrow().records] == ["07:30", "17:30"]

    def test_day(self, engine):
        assert [r.date for r in engine.day(date(2025, 9, 15)).records] == [date(2025, 9, 15)]

    def test_day_in_past_is_empty(self, engine):
        assert engine.day(date(2025, 9, 9)).is_empty

    def test_explicit_now_overrides_clock(self, engine):
        later = datetime(2025, 9, 14, 16, 0, tzinfo=UTC)
        assert engine.next(later).first.date == date(2025, 9, 15)

    def test_naive_now_is_read_in_reference_zone(self, engine):
        """Должен принимать наивное время как время опорного пояса."""
        naive = datetime(2025, 9, 10, 9, 0)

        assert engine.next(naive).first.title == "Morning Prayer"
        assert [r.date.day for r in engine.week(naive).records] == [11, 11, 14]
        assert not engine.is_stale(datetime(2025, 9, 27, 23, 0))
        assert engine.is_stale(datetime(2025, 9, 28, 0, 30))

    def test_naive_now_with_london_zone(self):
        """Должен привязать наивное время к поясу Europe/London, а не к UTC."""
        london = ZoneInfo("Europe/London")
        sched = schedule(record(date(2025, 9, 12), "17:30"), end=date(2025, 9, 13))
        engine = SelectionEngine(sched, EngineConfig(timezone=london))

        # 17:35 BST = 16:35 UTC, служба 17:30 BST ещё в окне
        assert engine.next(datetime(2025, 9, 12, 17, 35)).first.time == "17:30"
        assert engine.next(datetime(2025, 9, 12, 17, 41)).is_empty


class TestEngineConfigLocalize:

    def test_aware_moment_converted(self):
        config = EngineConfig(timezone=ZoneInfo("Europe/London"))
        local = config.localize(datetime(2025, 9, 12, 16, 0, tzinfo=UTC))
        assert (local.hour, local.utcoffset()) == (17, timedelta(hours=1))

    def test_none_reads_clock(self):
        now = datetime(2025, 9, 12, 16, 0)
        config = EngineConfig(clock=lambda: now)
        assert config.localize(None) == datetime(2025, 9, 12, 16, 0, tzinfo=UTC)
