"""
Stage 4: Pieces

ЦКП: Строка произведений -> классифицированные канонические упоминания.

Input: одна строка произведений + название открытой службы
Output: List[PieceMention]

Координирует:
- PieceSplitter: разбиение строки
- PieceClassifier: категория
- TitleNormalizer: каноническая форма
"""

from dataclasses import dataclass
from typing import List, Optional

from contracts.d2_schedule_dto import PieceCategory
from ..rules.rules_config import RulesConfig
from .piece_splitter import PieceSplitter
from .classifier import PieceClassifier
from .title_normalizer import TitleNormalizer


@dataclass(frozen=True)
class PieceMention:
    """Одно упоминание произведения после классификации."""
    raw: str
    category: PieceCategory
    display: str

    def to_dict(self) -> dict:
        return {"raw": self.raw, "category": self.category.value, "display": self.display}


class PieceStage:
    """
    Stage 4: Pieces.

    Вызывается парсером служб построчно, пока служба открыта.
    """

    def __init__(self, rules: Optional[RulesConfig] = None):
        rules = rules or RulesConfig.load()
        self.splitter = PieceSplitter(rules.pieces)
        self.classifier = PieceClassifier(rules.pieces)
        self.normalizer = TitleNormalizer(rules.pieces, rules.services)

    def process_line(self, line: str, service_title: str) -> List[PieceMention]:
        mentions = []
        for segment in self.splitter.split(line):
            category = self.classifier.classify(segment)
            display = self.normalizer.canonicalize(segment, category, service_title)
            mentions.append(PieceMention(raw=segment, category=category, display=display))
        return mentions
