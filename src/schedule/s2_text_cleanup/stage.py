"""
Stage 2: Text Cleanup

ЦКП: Очистка строк от Unicode-мусора и артефактов извлечения.

Input: LayoutResult.lines[] (из Stage 1)
Output: CleanupResult(lines[]) - очищенные строки

Два этапа для каждой строки:
1. UnicodeNormalizer - NFKC, лигатуры, мягкие переносы, пробелы
2. ArtifactRepairer - упорядоченные подстановки (цифры, буквы, имена, тире)
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from loguru import logger

from ..s1_layout.stage import LayoutResult, Line
from ..rules.rules_config import RulesConfig
from .unicode_normalizer import UnicodeNormalizer
from .artifact_repair import ArtifactRepairer, build_artifact_rules


@dataclass
class CleanupResult:
    """
    Результат Stage 2: Text Cleanup.

    ЦКП: Очищенные непустые строки.
    """
    lines: List[Line] = field(default_factory=list)
    original_count: int = 0
    changed_count: int = 0
    removed_count: int = 0

    @property
    def texts(self) -> List[str]:
        return [line.text for line in self.lines]

    def to_dict(self) -> dict:
        return {
            "lines_count": len(self.lines),
            "original_count": self.original_count,
            "changed_count": self.changed_count,
            "removed_count": self.removed_count,
        }


class TextCleanupStage:
    """
    Stage 2: Text Cleanup.

    ЦКП: Каноническая форма текста каждой строки.
    """

    def __init__(self, rules: Optional[RulesConfig] = None):
        rules = rules or RulesConfig.load()
        self.unicode_normalizer = UnicodeNormalizer()
        self.artifact_repairer = ArtifactRepairer(
            build_artifact_rules(rules.pieces.no_join_words, rules.pieces.no_join_letters)
        )

    def normalize_text(self, text: str) -> str:
        """Оба этапа очистки для одной строки."""
        return self.artifact_repairer.repair(self.unicode_normalizer.normalize(text))

    def process(self, layout: LayoutResult) -> CleanupResult:
        lines: List[Line] = []
        changed = 0

        for line in layout.lines:
            text = self.normalize_text(line.text)
            if not text:
                continue
            if text != line.text:
                changed += 1
            lines.append(replace(line, text=text))

        removed = len(layout.lines) - len(lines)
        logger.debug(
            f"[Stage 2: Text Cleanup] {len(lines)} строк, изменено {changed}, удалено {removed}"
        )

        return CleanupResult(
            lines=lines,
            original_count=len(layout.lines),
            changed_count=changed,
            removed_count=removed,
        )
