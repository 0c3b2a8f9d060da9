"""
Stage 3: Service Parsing

ЦКП: Машина состояний строк -> ServiceRecord.
"""

from .stage import ServiceParsingStage, ServiceParsingResult
from .parser_state import ParserState, ParserMode, ServiceDraft
from .time_parser import parse_time
from .date_parser import DateParser

__all__ = [
    "ServiceParsingStage",
    "ServiceParsingResult",
    "ParserState",
    "ParserMode",
    "ServiceDraft",
    "parse_time",
    "DateParser",
]
