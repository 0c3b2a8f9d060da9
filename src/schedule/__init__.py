"""
Домен Schedule (D2): Извлечение и нормализация расписания служб.

Архитектура: пайплайн на документ + слияние + выборка
- Stage 1: Layout (фрагменты -> строки)
- Stage 2: Text Cleanup (Unicode + артефакты извлечения)
- Stage 3: Service Parsing (машина состояний -> ServiceRecord)
- Stage 4: Pieces (разбиение, классификация, каноническая форма)
- Merging: слияние документов без дубликатов
- Selection: актуальность и выборки next / week / tomorrow / day

Вход: contracts.PageFragments (от D1)
Выход: contracts.MergedSchedule
"""

from src.schedule.pipeline import DocumentParsingPipeline, PipelineResult
from src.schedule.engine_config import EngineConfig
from src.schedule.rules import RulesConfig, RulesLoader

from src.schedule.s1_layout import LayoutStage, LayoutResult, Line
from src.schedule.s2_text_cleanup import TextCleanupStage, CleanupResult
from src.schedule.s3_service_parsing import ServiceParsingStage, ServiceParsingResult, ParserState
from src.schedule.s4_pieces import PieceStage, PieceMention
from src.schedule.merging import ScheduleMerger
from src.schedule.selection import FreshnessEvaluator, SelectionEngine, Selection

__all__ = [
    # Pipeline
    "DocumentParsingPipeline",
    "PipelineResult",
    "EngineConfig",
    "RulesConfig",
    "RulesLoader",
    # Stages
    "LayoutStage",
    "LayoutResult",
    "Line",
    "TextCleanupStage",
    "CleanupResult",
    "ServiceParsingStage",
    "ServiceParsingResult",
    "ParserState",
    "PieceStage",
    "PieceMention",
    # After parsing
    "ScheduleMerger",
    "FreshnessEvaluator",
    "SelectionEngine",
    "Selection",
]
