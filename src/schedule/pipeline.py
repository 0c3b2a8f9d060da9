"""
Document Parsing Pipeline - Оркестратор этапов D2 для одного документа.

Координирует выполнение этапов в строгом порядке:
1. Layout → 2. Text Cleanup → 3. Service Parsing (с 4. Pieces внутри)

Возвращает DocumentParseResult (контракт D2).
Документы независимы: у пайплайна нет общего изменяемого состояния между вызовами.
"""

import time
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from contracts.d1_fragments_dto import DocumentLocator, PageFragments
from contracts.d2_schedule_dto import DocumentParseResult

from .engine_config import EngineConfig
from .rules.rules_config import RulesConfig
from .s1_layout import LayoutStage, LayoutResult
from .s2_text_cleanup import TextCleanupStage, CleanupResult
from .s3_service_parsing import ServiceParsingStage, ServiceParsingResult


@dataclass
class PipelineResult:
    """
    Полный результат пайплайна со всеми промежуточными данными.

    Используется для отладки и анализа.
    """
    dto: DocumentParseResult

    layout: Optional[LayoutResult] = None
    cleanup: Optional[CleanupResult] = None
    parsing: Optional[ServiceParsingResult] = None

    processing_time_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "dto": self.dto.model_dump(mode="json"),
            "layout": self.layout.to_dict() if self.layout else None,
            "cleanup": self.cleanup.to_dict() if self.cleanup else None,
            "parsing": self.parsing.to_dict() if self.parsing else None,
            "processing_time_ms": self.processing_time_ms,
        }


class DocumentParsingPipeline:
    """
    Пайплайн парсинга одного документа.

    ЦКП: DocumentParseResult с записями о службах и датой окончания.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rules: Optional[RulesConfig] = None,
        layout_stage: Optional[LayoutStage] = None,
        cleanup_stage: Optional[TextCleanupStage] = None,
        parsing_stage: Optional[ServiceParsingStage] = None,
    ):
        self.config = config or EngineConfig()
        rules = rules or RulesConfig.load()

        self.layout_stage = layout_stage or LayoutStage()
        self.cleanup_stage = cleanup_stage or TextCleanupStage(rules)
        self.parsing_stage = parsing_stage or ServiceParsingStage(rules, clock=self.config.now)

    def process(self, pages: List[PageFragments], locator: DocumentLocator) -> PipelineResult:
        """
        Обрабатывает фрагменты одного документа через все этапы.

        Args:
            pages: Фрагменты по страницам (D1)
            locator: Адрес документа (с заявленной датой окончания)
        """
        start_time = time.time()
        logger.info(f"[DocumentPipeline] Старт обработки: {locator.location}")

        logger.debug("[DocumentPipeline] Stage 1/3: Layout")
        layout = self.layout_stage.process(pages)

        logger.debug("[DocumentPipeline] Stage 2/3: Text Cleanup")
        cleanup = self.cleanup_stage.process(layout)

        # Дата окончания: баннер документа, иначе заявленная в ссылке
        validity_end_date = self.parsing_stage.date_parser.detect_validity_end(cleanup.texts)
        if validity_end_date is None:
            validity_end_date = locator.claimed_end_date

        logger.debug("[DocumentPipeline] Stage 3/3: Service Parsing")
        parsing = self.parsing_stage.process(cleanup.texts, validity_end_date)

        dto = DocumentParseResult(
            source=locator.location,
            records=tuple(parsing.records),
            validity_end_date=validity_end_date,
        )

        processing_time_ms = (time.time() - start_time) * 1000
        logger.info(
            f"[DocumentPipeline] Завершено за {processing_time_ms:.1f}ms: "
            f"{len(dto.records)} служб, end_date={validity_end_date}"
        )

        return PipelineResult(
            dto=dto,
            layout=layout,
            cleanup=cleanup,
            parsing=parsing,
            processing_time_ms=processing_time_ms,
        )

    def parse_lines(self, lines: List[str], locator: DocumentLocator) -> DocumentParseResult:
        """
        Упрощённый вход: уже упорядоченные строки (без Stage 1).
        """
        texts = [t for t in (self.cleanup_stage.normalize_text(line) for line in lines) if t]
        validity_end_date = self.parsing_stage.date_parser.detect_validity_end(texts) or locator.claimed_end_date
        parsing = self.parsing_stage.process(texts, validity_end_date)
        return DocumentParseResult(
            source=locator.location,
            records=tuple(parsing.records),
            validity_end_date=validity_end_date,
        )
