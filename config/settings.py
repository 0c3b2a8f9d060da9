"""
Настройки проекта Cathedral Music List.

Все значения читаются из переменных окружения один раз при импорте.
Ядро (src/schedule) НЕ читает окружение само: значения передаются через EngineConfig.
"""

import os
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# =============================================================================
# ИСТОЧНИК (страница со списком PDF)
# =============================================================================
MUSIC_LIST_URL = os.getenv("MUSIC_LIST_URL", "https://leicestercathedral.org/music-list/")

# Таймаут HTTP запросов (секунды)
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

# =============================================================================
# НАСТРОЙКИ ОБНОВЛЕНИЯ
# =============================================================================
# Интервал периодического обновления снапшота (команда watch)
REFRESH_INTERVAL_HOURS = float(os.getenv("REFRESH_INTERVAL_HOURS", "12"))

# Сколько документов (PDF) максимум объединять в одно расписание
MAX_SOURCE_DOCUMENTS = int(os.getenv("MAX_SOURCE_DOCUMENTS", "2"))

# =============================================================================
# НАСТРОЙКИ ВЫБОРКИ
# =============================================================================
# Сколько минут после начала служба ещё считается "текущей"
GRACE_WINDOW_MINUTES = int(os.getenv("GRACE_WINDOW_MINUTES", "10"))

# Часовой пояс, в котором дата + время службы превращаются в момент времени
SCHEDULE_TIMEZONE = os.getenv("SCHEDULE_TIMEZONE", "UTC")

# Фильтр по хору (regex). Пусто = без фильтра. Пример: "\\bsongmen\\b"
CHOIR_FILTER = os.getenv("CHOIR_FILTER", "")

# =============================================================================
# ЛОГИРОВАНИЕ
# =============================================================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# =============================================================================
# ПРОВЕРКА КОНФИГУРАЦИИ
# =============================================================================
def validate_config():
    """Проверяет корректность конфигурации."""
    errors = []

    if not MUSIC_LIST_URL.startswith(("http://", "https://")):
        errors.append(f"MUSIC_LIST_URL должен быть http(s) адресом: {MUSIC_LIST_URL}")

    try:
        ZoneInfo(SCHEDULE_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"Неизвестный часовой пояс SCHEDULE_TIMEZONE: {SCHEDULE_TIMEZONE}")

    if GRACE_WINDOW_MINUTES < 0:
        errors.append("GRACE_WINDOW_MINUTES не может быть отрицательным")

    if MAX_SOURCE_DOCUMENTS < 1:
        errors.append("MAX_SOURCE_DOCUMENTS должен быть >= 1")

    if REFRESH_INTERVAL_HOURS <= 0:
        errors.append("REFRESH_INTERVAL_HOURS должен быть > 0")

    if HTTP_TIMEOUT_SECONDS <= 0:
        errors.append("HTTP_TIMEOUT_SECONDS должен быть > 0")

    if CHOIR_FILTER:
        try:
            re.compile(CHOIR_FILTER)
        except re.error as e:
            errors.append(f"CHOIR_FILTER не является корректным regex: {e}")

    if errors:
        raise ValueError("\n".join(errors))

    return True
