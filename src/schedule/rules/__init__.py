"""Таблицы правил (YAML) и их загрузчик."""

from .rules_config import RulesConfig, RulesLoader, CalendarConfig, ServiceConfig, PieceConfig

__all__ = ["RulesConfig", "RulesLoader", "CalendarConfig", "ServiceConfig", "PieceConfig"]
