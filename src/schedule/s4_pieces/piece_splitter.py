"""
Piece Splitter - Разбиение строки на упоминания произведений.

ЦКП: Одна сырая строка -> одно или несколько упоминаний.

Правила по приоритету:
1. Отрезать хвостовую пометку (Preacher: ..., Celebrant ...)
2. "<Композитор> in <Тональность> Responses <...>" -> setting + responses
   (иначе строка с Responses остаётся одним упоминанием)
3. Маркер "Psalm(s)" -> текст до маркера + псалмы (по запятым)
4. Маркер "Hymn(s)" -> текст до маркера + список гимнов (без разбиения)
5. Иначе вся строка = одно упоминание
"""

import re
from typing import List, Optional

from loguru import logger

from ..rules.rules_config import PieceConfig
from .patterns import SETTING_SHAPE_RE


_RESPONSES_RE = re.compile(r"^(.+?)\s+(Responses\b.*)$", re.IGNORECASE)
_PSALM_MARKER_RE = re.compile(r"\bPsalms?\b", re.IGNORECASE)
_PSALM_CONTENT_RE = re.compile(r"^Psalms?\s+(.+)$", re.IGNORECASE)
_HYMN_MARKER_RE = re.compile(r"\bHymns?\b", re.IGNORECASE)
_LEADING_DIGIT_RE = re.compile(r"^\d")
_TRIM_CHARS = " ,;"


class PieceSplitter:
    """Разбивает строку произведений на отдельные упоминания."""

    def __init__(self, config: PieceConfig):
        self.annotation_re = self._build_annotation_re(config.annotation_markers)

    @staticmethod
    def _build_annotation_re(markers: List[str]) -> Optional[re.Pattern]:
        if not markers:
            return None
        alternatives = "|".join(re.escape(m) for m in markers)
        return re.compile(rf"\s*(?:[-–—,;|]\s*)?\b(?:{alternatives})\b.*$", re.IGNORECASE)

    def split(self, line: str) -> List[str]:
        """
        Разбивает строку на упоминания.

        Args:
            line: Очищенная строка произведений

        Returns:
            Непустые сегменты в порядке появления
        """
        text = self.strip_annotation(line)
        if not text:
            return []

        responses = _RESPONSES_RE.match(text)
        setting = responses.group(1).strip(_TRIM_CHARS) if responses else ""
        if setting and SETTING_SHAPE_RE.match(setting):
            segments = [setting]
            segments.extend(self._split_lists(responses.group(2).strip()))
        else:
            segments = self._split_lists(text)

        logger.trace(f"[PieceSplitter] '{line}' -> {segments}")
        return segments

    def strip_annotation(self, line: str) -> str:
        text = line.strip()
        if self.annotation_re:
            text = self.annotation_re.sub("", text)
        return text.strip(_TRIM_CHARS)

    def _split_lists(self, text: str) -> List[str]:
        """Правила 3-5: псалмы, гимны, иначе целиком."""
        psalm = _PSALM_MARKER_RE.search(text)
        if psalm:
            return self._with_prefix(text[:psalm.start()], self.split_psalms(text[psalm.start():]))

        hymn = _HYMN_MARKER_RE.search(text)
        if hymn:
            return self._with_prefix(text[:hymn.start()], [text[hymn.start():].strip()])

        return [text]

    @staticmethod
    def _with_prefix(prefix: str, segments: List[str]) -> List[str]:
        prefix = prefix.strip(_TRIM_CHARS)
        return ([prefix] if prefix else []) + segments

    @staticmethod
    def split_psalms(section: str) -> List[str]:
        """
        Разбивает секцию псалмов по запятым.

        Часть, начинающаяся с цифры, открывает новый псалом. Остальные
        части дописываются к предыдущему ("Psalm 110 Garrett , 150 Stanford").
        """
        match = _PSALM_CONTENT_RE.match(section.strip())
        if not match:
            return [section.strip()]

        entries: List[str] = []
        for part in (p.strip() for p in match.group(1).split(",")):
            if not part:
                continue
            if _LEADING_DIGIT_RE.match(part) or not entries:
                entries.append(f"Psalm {part}")
            else:
                entries[-1] = f"{entries[-1]} {part}"
        return entries or [section.strip()]
