"""
Trip — Модели списочных входов калькуляторов поездок

Immutable Pydantic модели для строк форм:
- Expense: расход группы (кто платил, на кого делится)
- PackItem: предмет снаряжения рюкзака
- Activity: пункт плана маршрута
- Habit: регулярная трата (для расчёта упущенной выгоды)
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class ItemWeightUnit(str, Enum):
    """Единица веса предмета снаряжения."""

    GRAMS = "grams"
    OUNCES = "ounces"
    POUNDS = "pounds"


class HabitFrequency(str, Enum):
    """Частота привычки."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# =============================================================================
# MODELS
# =============================================================================


class Expense(BaseModel):
    """
    Расход группы.

    Сумма делится поровну между участниками split_between.
    """

    name: str = Field(..., min_length=1, description="Описание расхода")
    amount: float = Field(..., gt=0, description="Сумма расхода")
    paid_by: str = Field(..., min_length=1, description="Кто оплатил")
    split_between: tuple[str, ...] = Field(
        ..., min_length=1, description="Участники, между которыми делится расход"
    )

    model_config = {"frozen": True}

    @field_validator("split_between")
    @classmethod
    def validate_unique_participants(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Участник не может входить в раздел дважды."""
        if len(set(v)) != len(v):
            raise ValueError(f"split_between has duplicate participants: {list(v)}")
        return v


class PackItem(BaseModel):
    """Предмет снаряжения."""

    name: str = Field(..., min_length=1, description="Название предмета")
    weight: float = Field(..., ge=0, description="Вес одного предмета")
    unit: ItemWeightUnit = Field(..., description="Единица веса")

    model_config = {"frozen": True}


class Activity(BaseModel):
    """Пункт плана маршрута."""

    name: str = Field(..., min_length=1, description="Название активности")
    duration: int = Field(..., gt=0, description="Длительность, минуты")

    model_config = {"frozen": True}


class Habit(BaseModel):
    """Регулярная трата."""

    name: str = Field(..., min_length=1, description="Название привычки")
    cost: float = Field(..., ge=0, description="Стоимость одного раза")
    frequency: HabitFrequency = Field(..., description="Частота (daily/weekly/monthly)")

    model_config = {"frozen": True}
