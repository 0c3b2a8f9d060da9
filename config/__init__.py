"""Настройки проекта."""
