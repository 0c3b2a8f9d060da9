"""
Unicode Normalizer - Каноническая форма строки.

ЦКП: Строка без лигатур, мягких переносов и лишних пробелов.
"""

import re
import unicodedata


_LIGATURES = {
    "\ufb01": "fi",
    "\ufb02": "fl",
}
_SOFT_HYPHEN = "\u00ad"
_WHITESPACE_RE = re.compile(r"\s+")


class UnicodeNormalizer:
    """Нормализация Unicode: NFKC, лигатуры, мягкие переносы, пробелы."""

    def normalize(self, text: str) -> str:
        text = unicodedata.normalize("NFKC", text)
        for ligature, letters in _LIGATURES.items():
            text = text.replace(ligature, letters)
        text = text.replace(_SOFT_HYPHEN, "")
        return _WHITESPACE_RE.sub(" ", text).strip()
