"""
Unit-тесты для PdfFragmentExtractor (PyMuPDF).
"""

from unittest.mock import MagicMock, patch

import fitz
import pytest

from contracts.d1_fragments_dto import DocumentLocator
from src.ingestion import PdfFragmentExtractor
from src.schedule.domain.exceptions import DocumentFetchError, FragmentExtractionError
from src.schedule.s1_layout import LayoutStage


def make_pdf(lines) -> bytes:
    """PDF в памяти: lines = [(text, x, y_сверху)]."""
    document = fitz.open()
    page = document.new_page(width=595, height=842)
    for text, x, y in lines:
        page.insert_text((x, y), text, fontsize=11)
    data = document.tobytes()
    document.close()
    return data


class TestExtractFromBytes:

    def test_y_flipped_to_bottom_up(self):
        """Должен перевернуть Y: верх страницы = больший Y."""
        pages = PdfFragmentExtractor.extract_from_bytes(make_pdf([
            ("Hymns 707", 72, 300),
            ("FRIDAY 12 SEPTEMBER", 72, 100),
        ]))

        assert len(pages) == 1
        by_text = {f.text.strip(): f for f in pages[0].fragments}
        assert by_text["FRIDAY 12 SEPTEMBER"].y > by_text["Hymns 707"].y
        assert by_text["FRIDAY 12 SEPTEMBER"].y == pytest.approx(842 - 100, abs=1)

    def test_layout_reads_top_to_bottom(self):
        pages = PdfFragmentExtractor.extract_from_bytes(make_pdf([
            ("Crux fidelis MacDonald", 72, 140),
            ("1730 Choral Evensong", 72, 120),
            ("FRIDAY 12 SEPTEMBER", 72, 100),
        ]))

        assert LayoutStage().process(pages).texts == [
            "FRIDAY 12 SEPTEMBER",
            "1730 Choral Evensong",
            "Crux fidelis MacDonald",
        ]

    def test_span_origin_used(self):
        """Должен брать координаты из origin каждого span."""
        page = MagicMock()
        page.rect.height = 800
        page.get_text.return_value = {"blocks": [
            {"lines": [{"spans": [
                {"text": "Choral", "origin": (50.0, 100.0)},
                {"text": "  ", "origin": (90.0, 100.0)},
            ]}]},
            {"type": 1},
        ]}
        document = MagicMock()
        document.__enter__.return_value = [page]

        with patch("src.ingestion.pdf_fragments.fitz.open", return_value=document):
            pages = PdfFragmentExtractor.extract_from_bytes(b"%PDF")

        assert [(f.text, f.x, f.y) for f in pages[0].fragments] == [("Choral", 50.0, 700.0)]
        page.get_text.assert_called_once_with("dict")


class TestExtract:

    def test_local_file(self, tmp_path):
        path = tmp_path / "list.pdf"
        path.write_bytes(make_pdf([("1730 Choral Evensong", 72, 100)]))

        pages = PdfFragmentExtractor(fetcher=MagicMock()).extract(DocumentLocator(str(path)))

        assert "".join(f.text for f in pages[0].fragments).strip() == "1730 Choral Evensong"

    def test_url_fetched(self):
        fetcher = MagicMock()
        fetcher.fetch_bytes.return_value = make_pdf([("Hymns 707", 72, 100)])

        pages = PdfFragmentExtractor(fetcher=fetcher).extract(DocumentLocator("https://x.org/list.pdf"))

        fetcher.fetch_bytes.assert_called_once_with("https://x.org/list.pdf")
        assert pages[0].page_number == 1

    def test_missing_file(self, tmp_path):
        """Должен выбросить FragmentExtractionError для отсутствующего файла."""
        with pytest.raises(FragmentExtractionError):
            PdfFragmentExtractor(fetcher=MagicMock()).extract(DocumentLocator(str(tmp_path / "none.pdf")))

    def test_fetch_failure(self):
        fetcher = MagicMock()
        fetcher.fetch_bytes.side_effect = DocumentFetchError("404", component="HttpFetcher")

        with pytest.raises(FragmentExtractionError) as exc_info:
            PdfFragmentExtractor(fetcher=fetcher).extract(DocumentLocator("https://x.org/list.pdf"))

        assert isinstance(exc_info.value.original_error, DocumentFetchError)

    def test_corrupt_pdf(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"not a pdf at all")

        with pytest.raises(FragmentExtractionError):
            PdfFragmentExtractor(fetcher=MagicMock()).extract(DocumentLocator(str(path)))
