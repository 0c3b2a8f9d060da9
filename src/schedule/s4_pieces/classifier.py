"""
Piece Classifier - Классификация упоминаний произведений.

ЦКП: Категория произведения (settings / anthems / psalms / hymns / organ / other).

Правила применяются по порядку, первое совпадение выигрывает:
1. organ    - органное ключевое слово целым словом И нет хорового ключевого слова
2. hymns    - подстрока "hymn"
3. psalms   - подстрока "psalm"
4. anthems  - подстрока "anthem"
5. settings - ключевое слово канта/сеттинга (magnificat, responses, ...)
6. settings - форма "<Композитор> in <Тональность>"
7. default  - категория из конфига (anthems)
"""

from dataclasses import dataclass
from typing import Callable, List

from loguru import logger

from contracts.d2_schedule_dto import PieceCategory
from ..rules.rules_config import PieceConfig
from .patterns import SETTING_SHAPE_RE, contains_any, word_pattern


@dataclass(frozen=True)
class ClassificationRule:
    """Правило классификации: (имя, предикат по тексту, категория)."""
    name: str
    predicate: Callable[[str], bool]
    category: PieceCategory

    def matches(self, text: str) -> bool:
        return self.predicate(text)


class PieceClassifier:
    """Упорядоченный список правил классификации."""

    def __init__(self, config: PieceConfig):
        self.default_category = config.default_category
        self.rules = self._build_rules(config)

    @staticmethod
    def _build_rules(config: PieceConfig) -> List[ClassificationRule]:
        organ_re = word_pattern(config.organ_keywords)
        choral_re = word_pattern(config.choral_keywords)
        setting_keywords = config.setting_keywords

        return [
            ClassificationRule(
                "organ",
                lambda t: bool(organ_re.search(t)) and not choral_re.search(t),
                PieceCategory.ORGAN,
            ),
            ClassificationRule("hymn", lambda t: "hymn" in t.lower(), PieceCategory.HYMNS),
            ClassificationRule("psalm", lambda t: "psalm" in t.lower(), PieceCategory.PSALMS),
            ClassificationRule("anthem", lambda t: "anthem" in t.lower(), PieceCategory.ANTHEMS),
            ClassificationRule(
                "setting_keyword",
                lambda t: contains_any(t.lower(), setting_keywords),
                PieceCategory.SETTINGS,
            ),
            ClassificationRule(
                "setting_shape",
                lambda t: bool(SETTING_SHAPE_RE.match(t.strip())),
                PieceCategory.SETTINGS,
            ),
        ]

    def classify(self, text: str) -> PieceCategory:
        for rule in self.rules:
            if rule.matches(text):
                logger.trace(f"[PieceClassifier] '{text}' -> {rule.category.value} ({rule.name})")
                return rule.category
        return self.default_category
