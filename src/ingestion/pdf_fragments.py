"""
Адаптер PyMuPDF, реализующий интерфейс IFragmentSource.

ЦКП: List[PageFragments]: фрагменты текста с базовой линией для D2.

PyMuPDF отдаёт координаты с началом в левом ВЕРХНЕМ углу (y вниз).
Контракт D1 требует y вверх, поэтому y переворачивается: y_up = page_height - y.
"""

from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF
from loguru import logger

from contracts.d1_fragments_dto import DocumentLocator, PageFragments, TextFragment
from src.schedule.domain.exceptions import DocumentFetchError, FragmentExtractionError
from src.schedule.domain.interfaces import IFragmentSource
from .http_client import HttpFetcher


class PdfFragmentExtractor(IFragmentSource):
    """
    Извлечение фрагментов из PDF (URL или локальный файл).
    """

    def __init__(self, fetcher: Optional[HttpFetcher] = None):
        self.fetcher = fetcher or HttpFetcher()

    def extract(self, locator: DocumentLocator) -> List[PageFragments]:
        data = self._read(locator)
        try:
            return self.extract_from_bytes(data)
        except Exception as e:
            raise FragmentExtractionError(
                message=f"Не удалось декодировать PDF: {locator.location}",
                component="PdfFragmentExtractor",
                original_error=e,
            )

    def _read(self, locator: DocumentLocator) -> bytes:
        location = locator.location
        try:
            if location.startswith(("http://", "https://")):
                return self.fetcher.fetch_bytes(location)
            return Path(location).read_bytes()
        except (DocumentFetchError, OSError) as e:
            raise FragmentExtractionError(
                message=f"Документ недоступен: {location}",
                component="PdfFragmentExtractor",
                original_error=e,
            )

    @staticmethod
    def extract_from_bytes(data: bytes) -> List[PageFragments]:
        pages: List[PageFragments] = []
        with fitz.open(stream=data, filetype="pdf") as document:
            for page_index, page in enumerate(document):
                height = page.rect.height
                fragments = []
                for block in page.get_text("dict").get("blocks", []):
                    for line in block.get("lines", []):
                        for span in line.get("spans", []):
                            text = span.get("text", "")
                            if not text.strip():
                                continue
                            x, y = span["origin"]
                            fragments.append(TextFragment(text=text, x=x, y=height - y))
                pages.append(PageFragments(page_number=page_index + 1, fragments=fragments))

        logger.debug(
            f"[PdfFragmentExtractor] {len(pages)} стр., "
            f"{sum(len(p.fragments) for p in pages)} фрагментов"
        )
        return pages
