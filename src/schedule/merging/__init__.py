"""Слияние результатов документов."""

from .merger import ScheduleMerger

__all__ = ["ScheduleMerger"]
