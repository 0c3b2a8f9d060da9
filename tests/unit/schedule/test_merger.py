"""
Unit-тесты для ScheduleMerger.
"""

from datetime import date

import pytest

from contracts.d2_schedule_dto import DocumentParseResult, MergedSchedule, PieceCategory, ServiceRecord
from src.schedule.merging import ScheduleMerger


def record(day: int, time: str = "17:30", title: str = "Choral Evensong", choir: str = "Songmen", **pieces) -> ServiceRecord:
    return ServiceRecord(
        date=date(2025, 9, day),
        time=time,
        title=title,
        choir=choir,
        pieces={PieceCategory(k): tuple(v) for k, v in pieces.items()},
    )


class TestMerge:

    def test_identical_record_in_two_documents_kept_once(self):
        """Должен оставить одну запись для одинакового ключа из двух документов."""
        first = DocumentParseResult(source="a.pdf", records=(record(12, anthems=["First — A"]),))
        second = DocumentParseResult(source="b.pdf", records=(record(12, anthems=["Second — B"]),))

        merged = ScheduleMerger().merge([first, second])

        assert len(merged.records) == 1
        assert merged.records[0].pieces_for(PieceCategory.ANTHEMS) == ("First — A",)

    def test_different_choir_is_different_record(self):
        merged = ScheduleMerger().merge([
            DocumentParseResult(source="a.pdf", records=(record(12), record(12, choir="Girls"))),
        ])
        assert len(merged.records) == 2

    def test_order_preserved(self):
        merged = ScheduleMerger().merge([
            DocumentParseResult(source="a.pdf", records=(record(13), record(12))),
            DocumentParseResult(source="b.pdf", records=(record(14),)),
        ])
        assert [r.date.day for r in merged.records] == [13, 12, 14]
        assert merged.sources == ("a.pdf", "b.pdf")

    def test_validity_end_is_max_of_present(self):
        """Должен взять максимум дат окончания, игнорируя отсутствующие."""
        merged = ScheduleMerger().merge([
            DocumentParseResult(source="a.pdf", validity_end_date=date(2025, 9, 13)),
            DocumentParseResult(source="b.pdf", validity_end_date=None),
            DocumentParseResult(source="c.pdf", validity_end_date=date(2025, 9, 27)),
        ])
        assert merged.validity_end_date == date(2025, 9, 27)

    def test_no_end_dates(self):
        merged = ScheduleMerger().merge([DocumentParseResult(source="a.pdf")])
        assert merged.validity_end_date is None


class TestContracts:

    def test_merged_schedule_rejects_duplicates(self):
        with pytest.raises(ValueError):
            MergedSchedule(records=(record(12), record(12)))

    def test_service_record_fills_missing_categories(self):
        r = record(12, hymns=["Hymns 707"])
        assert [category for category, _ in r.pieces.items()] == list(PieceCategory)
        assert r.pieces_for(PieceCategory.ORGAN) == ()

    @pytest.mark.parametrize("time", ["1730", "24:00", "7:30"])
    def test_service_record_rejects_bad_time(self, time):
        with pytest.raises(ValueError):
            record(12, time=time)

    def test_service_record_is_frozen(self):
        r = record(12)
        with pytest.raises(ValueError):
            r.title = "Matins"

    def test_service_record_pieces_cannot_be_modified(self):
        """Должен запрещать изменение произведений выпущенной записи."""
        r = record(12, hymns=["Hymns 707"])

        with pytest.raises(TypeError):
            r.pieces[PieceCategory.HYMNS] = ("Hymns 1",)
        with pytest.raises(ValueError):
            r.pieces.hymns = ("Hymns 1",)

        assert r.pieces_for(PieceCategory.HYMNS) == ("Hymns 707",)

    def test_pieces_accept_string_category_keys(self):
        r = ServiceRecord(
            date=date(2025, 9, 12), time="17:30", title="Choral Evensong",
            pieces={"organ": ["Toccata — Widor"]},
        )
        assert r.pieces_for(PieceCategory.ORGAN) == ("Toccata — Widor",)
        assert r.pieces_for(PieceCategory.SETTINGS) == ()
