"""
Time Parser - Разбор токена времени службы.

Форматы:
- "HHMM"            -> 24h ("1730" -> "17:30")
- "H[:.]MM am|pm"   -> 12h (12am -> 00, 12pm -> 12, остальные pm +12)
- "H am|pm"         -> 12h, минуты = 00
- "H[:.]MM"         -> 24h
"""

import re

from ..domain.exceptions import UnparseableTimeError


# Токен времени в начале строки службы
TIME_TOKEN_PATTERN = r"(?:\d{4}|\d{1,2}[:.]\d{2}\s*(?:am|pm)?|\d{1,2}\s*(?:am|pm))"

_FOUR_DIGIT_RE = re.compile(r"^(\d{2})(\d{2})$")
_MERIDIEM_RE = re.compile(r"^(\d{1,2})(?:[:.](\d{2}))?\s*(am|pm)$")
_CLOCK_RE = re.compile(r"^(\d{1,2})[:.](\d{2})$")


def parse_time(token: str) -> str:
    """
    Преобразует токен времени в "HH:MM".

    Raises:
        UnparseableTimeError: формат не распознан или значения вне диапазона
    """
    value = token.strip().lower()

    m = _FOUR_DIGIT_RE.match(value) or _CLOCK_RE.match(value)
    if m:
        return _format(int(m.group(1)), int(m.group(2)), token)

    m = _MERIDIEM_RE.match(value)
    if m:
        hour = int(m.group(1))
        minute = int(m.group(2) or 0)
        if not 1 <= hour <= 12:
            raise UnparseableTimeError(f"Час вне 12h диапазона: {token!r}", component="TimeParser")
        if m.group(3) == "am":
            hour = 0 if hour == 12 else hour
        elif hour != 12:
            hour += 12
        return _format(hour, minute, token)

    raise UnparseableTimeError(f"Неизвестный формат времени: {token!r}", component="TimeParser")


def _format(hour: int, minute: int, token: str) -> str:
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise UnparseableTimeError(f"Время вне диапазона: {token!r}", component="TimeParser")
    return f"{hour:02d}:{minute:02d}"
