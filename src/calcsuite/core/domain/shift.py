"""
Shift — Модели рабочих смен и участников распределённой команды

Immutable Pydantic модели для списочных входов калькуляторов рабочего времени.
Время суток передаётся строкой "HH:MM".
"""

import re
from typing import Final

from pydantic import BaseModel, Field, field_validator

HHMM_PATTERN: Final[re.Pattern] = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_hhmm(v: str) -> str:
    if not HHMM_PATTERN.match(v):
        raise ValueError(f"time must be in HH:MM format, got {v!r}")
    return v


class WorkSegment(BaseModel):
    """Отрезок работы (часть разделённой смены)."""

    start: str = Field(..., description="Начало, HH:MM")
    end: str = Field(..., description="Конец, HH:MM")

    model_config = {"frozen": True}

    @field_validator("start", "end")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        return _check_hhmm(v)


class OnCallSegment(BaseModel):
    """Дежурство: часы и ставка."""

    hours: float = Field(..., ge=0, description="Часы дежурства")
    rate: float = Field(..., ge=0, description="Ставка за час дежурства")

    model_config = {"frozen": True}


class BillableTask(BaseModel):
    """Задача фрилансера с затраченным временем."""

    name: str = Field(..., min_length=1, description="Название задачи")
    hours: int = Field(..., ge=0, description="Часы")
    minutes: int = Field(0, ge=0, le=59, description="Минуты (0..59)")

    model_config = {"frozen": True}

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes


class TeamMember(BaseModel):
    """
    Участник команды с локальным рабочим окном.

    utc_offset — смещение часового пояса в часах (например, 5.5 для UTC+5:30).
    """

    name: str = Field(..., min_length=1, description="Имя участника")
    utc_offset: float = Field(..., ge=-12, le=14, description="Смещение от UTC, часы")
    work_start: str = Field(..., description="Начало рабочего дня, HH:MM (локальное)")
    work_end: str = Field(..., description="Конец рабочего дня, HH:MM (локальное)")

    model_config = {"frozen": True}

    @field_validator("work_start", "work_end")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        return _check_hhmm(v)
