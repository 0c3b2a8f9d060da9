"""
DTO контракт: D2 (Schedule) -> Presentation

Структурированные записи о службах после парсинга, классификации и слияния.

ВАЖНО: Все модели frozen. После выпуска запись не изменяется,
обновление расписания = замена снапшота целиком.
"""

import datetime as dt
import re
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class PieceCategory(str, Enum):
    """Категория музыкального произведения (закрытый набор)."""
    SETTINGS = "settings"
    ANTHEMS = "anthems"
    PSALMS = "psalms"
    HYMNS = "hymns"
    ORGAN = "organ"
    OTHER = "other"


class Pieces(BaseModel):
    """
    Произведения службы по категориям, по кортежу на категорию.

    Принимает и словарь {PieceCategory: titles}; отсутствующие категории пусты.
    """

    settings: Tuple[str, ...] = ()
    anthems: Tuple[str, ...] = ()
    psalms: Tuple[str, ...] = ()
    hymns: Tuple[str, ...] = ()
    organ: Tuple[str, ...] = ()
    other: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def accept_category_keys(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {PieceCategory(key).value: value for key, value in data.items()}
        return data

    def of(self, category: PieceCategory) -> Tuple[str, ...]:
        return getattr(self, PieceCategory(category).value)

    def items(self) -> Tuple[Tuple[PieceCategory, Tuple[str, ...]], ...]:
        return tuple((category, self.of(category)) for category in PieceCategory)

    def with_added(self, category: PieceCategory, title: str) -> "Pieces":
        return self.model_copy(update={category.value: self.of(category) + (title,)})


class ServiceRecord(BaseModel):
    """
    Одна служба: дата, время, название, хор и классифицированные произведения.
    """

    date: dt.date = Field(..., description="Календарная дата службы")
    time: str = Field(..., description="Время начала HH:MM (24h)")
    title: str = Field(..., description="Название службы (Choral Evensong, ...)")
    choir: str = Field("", description="Хор из скобок в строке службы")
    pieces: Pieces = Field(
        default_factory=Pieces, description="Канонизированные произведения по категориям"
    )
    raw_lines: Tuple[str, ...] = Field(default=(), description="Исходные строки произведений")

    model_config = ConfigDict(frozen=True)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not _TIME_RE.match(v):
            raise ValueError(f"Time must be HH:MM, got {v!r}")
        return v

    @property
    def key(self) -> Tuple[dt.date, str, str, str]:
        """Ключ дедупликации (date, time, title, choir)."""
        return (self.date, self.time, self.title, self.choir)

    @property
    def start_time(self) -> dt.time:
        hour, minute = self.time.split(":")
        return dt.time(int(hour), int(minute))

    def starts_at(self, tz: dt.tzinfo) -> dt.datetime:
        """Момент начала службы в опорном часовом поясе."""
        return dt.datetime.combine(self.date, self.start_time, tzinfo=tz)

    def pieces_for(self, category: PieceCategory) -> Tuple[str, ...]:
        return self.pieces.of(category)


class DocumentParseResult(BaseModel):
    """
    Результат парсинга одного документа-источника.
    """

    source: str = Field(..., description="URL или путь документа")
    records: Tuple[ServiceRecord, ...] = Field(default=())
    validity_end_date: Optional[dt.date] = Field(None, description="Последняя дата, покрытая документом")

    model_config = ConfigDict(frozen=True)


class MergedSchedule(BaseModel):
    """
    Объединённое расписание из нескольких документов без дубликатов.
    """

    records: Tuple[ServiceRecord, ...] = Field(default=())
    validity_end_date: Optional[dt.date] = Field(None, description="Максимум по всем документам")
    sources: Tuple[str, ...] = Field(default=(), description="Документы, вошедшие в слияние")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_unique_keys(self) -> "MergedSchedule":
        seen = set()
        for record in self.records:
            if record.key in seen:
                raise ValueError(f"Duplicate service record: {record.key}")
            seen.add(record.key)
        return self
