"""
Контракты DTO между доменами проекта Cathedral Music List.

Контракты:
- D1 -> D2: TextFragment, PageFragments, DocumentLocator (d1_fragments_dto.py)
- D2 -> Presentation: ServiceRecord, DocumentParseResult, MergedSchedule (d2_schedule_dto.py)

D2 контракты используют Pydantic v2 (frozen модели).
"""

# D1 -> D2 (Ingestion -> Schedule)
from .d1_fragments_dto import TextFragment, PageFragments, DocumentLocator

# D2 -> Presentation
from .d2_schedule_dto import (
    PieceCategory,
    ServiceRecord,
    DocumentParseResult,
    MergedSchedule,
    Pieces,
)

__all__ = [
    # D1 -> D2
    "TextFragment",
    "PageFragments",
    "DocumentLocator",
    # D2 -> Presentation
    "PieceCategory",
    "ServiceRecord",
    "DocumentParseResult",
    "MergedSchedule",
    "Pieces",
]
