"""
Title Normalizer - Каноническая форма "Произведение — Композитор".

ЦКП: Строка для показа, одинаковая для одного и того же произведения.

Правила (первое сработавшее выигрывает):
1. Уже есть разделитель " — "          -> без изменений
2. "Composer: Title"                    -> "Title — Composer"
3. "Title  Composer" (2+ пробела)       -> "Title — Composer"
4. "Psalm <ref> <Composer>"             -> "Psalm <ref> — <Composer>"
5. Хвост из 1-4 слов с заглавной буквы,
   без цифр в строке, короче 30 символов -> "Title — Composer"
6. Иначе без изменений

Отдельное правило для settings формы "<Composer> in <Key>":
Evensong -> "Mag and Nunc in <Key> — <Composer>", Eucharist -> "Mass in ...",
иначе "Service in ...".
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from contracts.d2_schedule_dto import PieceCategory
from ..rules.rules_config import PieceConfig, ServiceConfig
from .patterns import CANONICAL_SEPARATOR, SETTING_SHAPE_RE, contains_any


_COLON_RE = re.compile(r"^(.+?):\s*(.+)$")
_WIDE_GAP_RE = re.compile(r"^(.+?)\s{2,}(.+)$")
_PSALM_COMPOSER_RE = re.compile(r"^(Psalms?\s+\d[\d.:,–\-\s]*?)\s+([A-Z][A-Za-z\s.’'\-]*?)\s*$")
_TRAILING_COMPOSER_RE = re.compile(
    r"^(.+?)\s+([A-Z][A-Za-z’'\-]+(?:\s+[A-Z][A-Za-z’'\-.]+){0,3})\s*$"
)
_DIGIT_RE = re.compile(r"\d")

MAX_COMPOSER_LENGTH = 30


def _join(work: str, composer: str) -> str:
    return f"{work.strip()}{CANONICAL_SEPARATOR}{composer.strip()}"


@dataclass(frozen=True)
class TitleRule:
    """Правило нормализации: возвращает новую строку или None, если не применимо."""
    name: str
    transform: Callable[[str], Optional[str]]


def _already_canonical(text: str) -> Optional[str]:
    return text if CANONICAL_SEPARATOR.strip() in text else None


def _composer_colon_title(text: str) -> Optional[str]:
    m = _COLON_RE.match(text)
    # "Psalm 119: 1-8": слева не композитор
    if not m or _DIGIT_RE.search(m.group(1)):
        return None
    return _join(m.group(2), m.group(1))


def _title_wide_gap_composer(text: str) -> Optional[str]:
    m = _WIDE_GAP_RE.match(text)
    return _join(m.group(1), m.group(2)) if m else None


def _psalm_composer(text: str) -> Optional[str]:
    m = _PSALM_COMPOSER_RE.match(text)
    return _join(m.group(1), m.group(2)) if m else None


def _trailing_composer(text: str) -> Optional[str]:
    if _DIGIT_RE.search(text):
        return None
    m = _TRAILING_COMPOSER_RE.match(text)
    if m and len(m.group(2)) < MAX_COMPOSER_LENGTH:
        return _join(m.group(1), m.group(2))
    return None


TITLE_RULES: List[TitleRule] = [
    TitleRule("already_canonical", _already_canonical),
    TitleRule("composer_colon_title", _composer_colon_title),
    TitleRule("title_wide_gap_composer", _title_wide_gap_composer),
    TitleRule("psalm_composer", _psalm_composer),
    TitleRule("trailing_composer", _trailing_composer),
]


class TitleNormalizer:
    """Приводит упоминание произведения к канонической форме."""

    def __init__(self, piece_config: PieceConfig, service_config: ServiceConfig, rules: List[TitleRule] = None):
        self.setting_keywords = piece_config.setting_keywords
        self.evening_keywords = service_config.evening_title_keywords
        self.eucharist_keywords = service_config.eucharist_title_keywords
        self.rules = rules if rules is not None else TITLE_RULES

    def normalize(self, text: str) -> str:
        text = text.strip()
        for rule in self.rules:
            result = rule.transform(text)
            if result is not None:
                return result
        return text

    def canonicalize_setting(self, text: str, service_title: str) -> str:
        """
        Settings формы "<Composer> in <Key>" переписываются по типу службы.
        """
        text = text.strip()
        if CANONICAL_SEPARATOR.strip() in text or contains_any(text.lower(), self.setting_keywords):
            return self.normalize(text)

        m = SETTING_SHAPE_RE.match(text)
        if not m:
            return self.normalize(text)

        composer = " ".join(m.group("composer").split())
        key = m.group("key").strip()
        title_lower = (service_title or "").lower()

        if contains_any(title_lower, self.evening_keywords):
            work = f"Mag and Nunc in {key}"
        elif contains_any(title_lower, self.eucharist_keywords):
            work = f"Mass in {key}"
        else:
            work = f"Service in {key}"
        return _join(work, composer)

    def canonicalize(self, text: str, category: PieceCategory, service_title: str) -> str:
        if category is PieceCategory.SETTINGS:
            return self.canonicalize_setting(text, service_title)
        return self.normalize(text)
