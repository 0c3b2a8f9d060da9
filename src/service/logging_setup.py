"""
Настройка loguru для скриптов.

Ядро только пишет в logger; sinks настраивает точка входа.
"""

import sys

from loguru import logger


LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    """Сбрасывает sinks loguru и пишет в stderr с заданным уровнем."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
