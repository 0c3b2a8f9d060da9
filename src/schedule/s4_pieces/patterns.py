"""
Общие паттерны для произведений.
"""

import re


# Разделитель канонической формы "Произведение — Композитор"
CANONICAL_SEPARATOR = " — "

# "<Композитор> in <Тональность>": "Walmisley in D minor", "Wood in E-flat (No.2)"
SETTING_SHAPE_RE = re.compile(
    r"^(?P<composer>[A-Z][A-Za-z.’'\-]*(?:\s+[A-Z][A-Za-z.’'\-]*){0,3})"
    r"\s+in\s+(?P<key>[A-G](?:\b.*)?)$"
)


def contains_any(text_lower: str, keywords) -> bool:
    """Подстрочное совпадение хотя бы одного ключевого слова."""
    return any(keyword in text_lower for keyword in keywords)


def word_pattern(keywords) -> re.Pattern:
    """
    Regex для совпадения ключевых слов целым словом (с простым мн. числом).

    "march" совпадёт с "March" и "marches", но не с "Marchant".
    """
    alternatives = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})(?:s|es)?\b", re.IGNORECASE)
