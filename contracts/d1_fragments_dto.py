"""
DTO контракт: D1 (Ingestion) -> D2 (Schedule)

Результат извлечения текста из PDF списка служб.
Фрагменты текста с базовой линией (x, y). Порядок чтения восстанавливает D2.

ВАЖНО: система координат y направлена ВВЕРХ (как в PDF):
больший y = выше на странице. Адаптеры с другой системой координат обязаны
перевернуть y до передачи в D2.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class TextFragment:
    """
    Отдельный фрагмент текста, извлечённый из PDF.

    Используется для:
    - Группировки фрагментов в строки по базовой линии (y)
    - Сортировки фрагментов внутри строки слева направо (x)
    """
    text: str       # Текст фрагмента
    x: float        # Начало базовой линии X
    y: float        # Базовая линия Y (вверх)


@dataclass
class PageFragments:
    """
    Фрагменты одной страницы в порядке, в котором их отдал декодер.
    """
    page_number: int
    fragments: List[TextFragment] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentLocator:
    """
    Адрес документа-источника (URL или путь к файлу).

    claimed_end_date: дата окончания, заявленная в тексте ссылки
    ("Music list to 13 September"). Может отсутствовать.
    """
    location: str
    claimed_end_date: Optional[date] = None
    label: str = ""
