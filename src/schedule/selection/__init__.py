"""Актуальность расписания и выборки."""

from .freshness import FreshnessEvaluator
from .selection_engine import SelectionEngine, Selection

__all__ = ["FreshnessEvaluator", "SelectionEngine", "Selection"]
