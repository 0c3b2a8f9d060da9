"""
Stage 1: Layout Reconstruction

ЦКП: Преобразование фрагментов текста в упорядоченные строки.

Input: List[PageFragments] (из D1)
Output: LayoutResult (строки сверху вниз, страницы по порядку)

Алгоритм:
1. Округление базовой линии Y до целой единицы (гасит дрожание < 1 единицы)
2. Группировка фрагментов с одинаковой округлённой Y в строку
3. Сортировка фрагментов в строке по X, склейка через пробел
4. Сортировка строк по убыванию Y (верх страницы первым)

Ограничение: колонки НЕ распознаются. Страница читается как одна колонка.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List

from loguru import logger

from contracts.d1_fragments_dto import PageFragments, TextFragment


@dataclass
class Line:
    """
    Строка текста на странице.

    Результат группировки фрагментов по базовой линии.
    """
    text: str                           # Текст строки (фрагменты через пробел)
    page_number: int                    # Номер страницы
    baseline: int                       # Округлённая базовая линия
    fragments_count: int = 0            # Сколько фрагментов склеено

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "page_number": self.page_number,
            "baseline": self.baseline,
            "fragments_count": self.fragments_count,
        }


@dataclass
class LayoutResult:
    """
    Результат Stage 1: Layout.

    ЦКП: Упорядоченные строки текста.
    """
    lines: List[Line] = field(default_factory=list)
    total_fragments: int = 0
    pages_count: int = 0

    @property
    def texts(self) -> List[str]:
        """Список текстов строк."""
        return [line.text for line in self.lines]

    @property
    def full_text(self) -> str:
        return "\n".join(self.texts)

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "total_fragments": self.total_fragments,
            "total_lines": len(self.lines),
            "pages_count": self.pages_count,
        }


class LayoutStage:
    """
    Stage 1: Layout Reconstruction.

    ЦКП: Порядок чтения из неупорядоченных фрагментов.
    """

    def __init__(self, baseline_unit: float = 1.0):
        """
        Args:
            baseline_unit: Шаг округления базовой линии. Фрагменты, чьи Y
                          округляются к одному шагу, считаются одной строкой.
        """
        if baseline_unit <= 0:
            raise ValueError("baseline_unit must be positive")
        self.baseline_unit = baseline_unit

    def process(self, pages: List[PageFragments]) -> LayoutResult:
        """
        Обрабатывает страницы и возвращает LayoutResult.
        """
        lines: List[Line] = []
        total_fragments = 0

        for page in pages:
            total_fragments += len(page.fragments)
            lines.extend(self._page_lines(page))

        logger.info(
            f"[Stage 1: Layout] Результат: {len(lines)} строк из {total_fragments} фрагментов "
            f"({len(pages)} стр.)"
        )

        return LayoutResult(lines=lines, total_fragments=total_fragments, pages_count=len(pages))

    def _page_lines(self, page: PageFragments) -> List[Line]:
        """Строки одной страницы сверху вниз."""
        groups: Dict[int, List[TextFragment]] = {}
        for fragment in page.fragments:
            groups.setdefault(self._round_baseline(fragment.y), []).append(fragment)

        lines = []
        for baseline in sorted(groups, reverse=True):
            fragments = sorted(groups[baseline], key=lambda f: f.x)
            text = " ".join(f.text for f in fragments).strip()
            if not text:
                continue
            lines.append(Line(
                text=text,
                page_number=page.page_number,
                baseline=baseline,
                fragments_count=len(fragments),
            ))

        logger.trace(f"[Stage 1: Layout] Страница {page.page_number}: {len(lines)} строк")
        return lines

    def _round_baseline(self, y: float) -> int:
        # Половина округляется вверх, независимо от чётности
        return math.floor(y / self.baseline_unit + 0.5)
