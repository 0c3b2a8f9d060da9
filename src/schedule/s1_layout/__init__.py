"""
Stage 1: Layout Reconstruction

ЦКП: Фрагменты текста -> упорядоченные строки.
"""

from .stage import LayoutStage, LayoutResult, Line

__all__ = ["LayoutStage", "LayoutResult", "Line"]
