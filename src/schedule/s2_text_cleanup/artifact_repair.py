"""
Artifact Repair - Исправление артефактов извлечения текста из PDF.

ЦКП: Строка, в которой склеены разорванные токены.

ВАЖНО: Порядок правил значим. Каждое правило рассчитывает, что предыдущие
уже отработали. Менять порядок только вместе с тестами.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Union

from loguru import logger


Replacement = Union[str, Callable[[re.Match], str]]


@dataclass(frozen=True)
class TextRule:
    """Одна независимая подстановка: (имя, паттерн, замена)."""
    name: str
    pattern: re.Pattern
    replacement: Replacement

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def build_artifact_rules(
    no_join_words: Iterable[str], no_join_letters: Iterable[str] = ()
) -> List[TextRule]:
    """
    Строит упорядоченный список правил исправления артефактов.

    Args:
        no_join_words: Слова, которые остаются отдельным токеном после
                       одиночной заглавной буквы ("D minor", "E flat").
        no_join_letters: Заглавные буквы-слова ("I", "A"), которые не
                         приклеиваются к следующему слову.
    """
    keep_separate = {w.lower() for w in no_join_words}
    standalone_letters = set(no_join_letters)

    def join_split_capital(m: re.Match) -> str:
        if m.group(1) in standalone_letters or m.group(2).lower() in keep_separate:
            return m.group(0)
        return m.group(1) + m.group(2)

    return [
        # "10 30" -> "1030"
        TextRule("digit_gap", re.compile(r"(?<=\d)\s+(?=\d)"), ""),
        # "Hymn s 341" -> "Hymns 341"
        TextRule("hymn_plural", re.compile(r"\bHymn\s+s\b", re.IGNORECASE), "Hymns"),
        # "W almisley" -> "Walmisley", но "D minor" остаётся
        TextRule("split_capital", re.compile(r"\b([A-Z])\s+([a-z]{2,})\b"), join_split_capital),
        # "L ' - Estrange" -> "L’Estrange"
        TextRule(
            "lestrange",
            re.compile(r"\bL\s*[’'`-]+\s*(?:[-—]\s*)?Estrange", re.IGNORECASE),
            "L’Estrange",
        ),
        # "Mass for — four voices Byrd" -> "Mass for four voices — Byrd"
        TextRule(
            "mass_for_dash_composer",
            re.compile(r"^Mass\s+for\s+—\s+(.+?)\s+([A-Z][A-Za-z’'\-]+)$"),
            r"Mass for \1 — \2",
        ),
        TextRule("mass_for_dash", re.compile(r"\b(Mass\s+for)\s+[—–-]\s+", re.IGNORECASE), r"\1 "),
        TextRule("of_dash", re.compile(r"\bof\s+—\s+", re.IGNORECASE), "of "),
    ]


class ArtifactRepairer:
    """Применяет правила исправления артефактов строго по порядку."""

    def __init__(self, rules: List[TextRule]):
        self.rules = rules

    def repair(self, text: str) -> str:
        for rule in self.rules:
            repaired = rule.apply(text)
            if repaired != text:
                logger.trace(f"[ArtifactRepairer] {rule.name}: '{text}' -> '{repaired}'")
            text = repaired
        return text
