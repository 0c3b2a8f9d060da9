"""
Stage 4: Pieces

ЦКП: Разбиение, классификация и каноническая форма произведений.
"""

from .stage import PieceStage, PieceMention
from .piece_splitter import PieceSplitter
from .classifier import PieceClassifier, ClassificationRule
from .title_normalizer import TitleNormalizer, TitleRule, TITLE_RULES

__all__ = [
    "PieceStage",
    "PieceMention",
    "PieceSplitter",
    "PieceClassifier",
    "ClassificationRule",
    "TitleNormalizer",
    "TitleRule",
    "TITLE_RULES",
]
