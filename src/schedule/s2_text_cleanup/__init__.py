"""
Stage 2: Text Cleanup

ЦКП: Unicode-нормализация и исправление артефактов извлечения.
"""

from .stage import TextCleanupStage, CleanupResult
from .unicode_normalizer import UnicodeNormalizer
from .artifact_repair import ArtifactRepairer, TextRule, build_artifact_rules

__all__ = [
    "TextCleanupStage",
    "CleanupResult",
    "UnicodeNormalizer",
    "ArtifactRepairer",
    "TextRule",
    "build_artifact_rules",
]
