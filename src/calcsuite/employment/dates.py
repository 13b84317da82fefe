"""
Employment Dates — Календарная арифметика трудовых сроков

Калькуляторы:
- Окончание испытательного срока и срока уведомления
- Последний рабочий день (с учётом выходных и праздников)
- Длительность контракта (включительно)
- Годовщины работы
- График сменной ротации (N дней работы / M дней отдыха)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Период длительности D, начавшийся в день S, заканчивается в S + D − 1 день
2. Месяцы добавляются календарно (relativedelta: 31 янв + 1 мес = 29 фев)
3. Конец диапазона раньше начала → DateRangeError
4. Длительность контракта считается включительно (start = end → 1 день)
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Final, NamedTuple

from dateutil.relativedelta import relativedelta

from calcsuite.core.domain.dates import coerce_date, validate_date_range
from calcsuite.core.math.numerical_safeguards import (
    validate_choice,
    validate_integer,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

DAYS_PER_WEEK: Final[int] = 7
AVERAGE_DAYS_PER_MONTH: Final[float] = 30.44

# Число годовщин в каждую сторону
ANNIVERSARY_WINDOW: Final[int] = 5

# Верхняя граница длительности периода (защита от вырожденного ввода)
MAX_PERIOD_DURATION: Final[int] = 3650


class DurationUnit(str, Enum):
    """Единица длительности периода."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


@dataclass(frozen=True)
class RotationConfig:
    """Горизонт построения графика ротации."""

    horizon_days: int = 90


# =============================================================================
# RESULT TYPES
# =============================================================================


class LastWorkingDay(NamedTuple):
    notice_period_end: date
    last_working_day: date
    holidays_in_period: int


class ContractDuration(NamedTuple):
    years: int
    months: int
    days: int
    total_days: int
    total_weeks: float
    total_months: float


class Anniversary(NamedTuple):
    year: int
    date: date
    days_until: int | None
    days_ago: int | None


class AnniversarySchedule(NamedTuple):
    years_of_service: int
    next_anniversary: Anniversary
    past: tuple[Anniversary, ...]
    upcoming: tuple[Anniversary, ...]


class ShiftRotation(NamedTuple):
    cycle_length: int
    work_days: tuple[date, ...]
    off_days: tuple[date, ...]


# =============================================================================
# PERIOD END DATES
# =============================================================================


def _add_duration(start: date, duration: int, unit: str) -> date:
    validate_integer(duration, "duration", min_value=1, max_value=MAX_PERIOD_DURATION)
    validate_choice(unit, "unit", {u.value for u in DurationUnit})
    duration = int(duration)

    if unit == DurationUnit.DAYS.value:
        return start + timedelta(days=duration)
    if unit == DurationUnit.WEEKS.value:
        return start + timedelta(weeks=duration)
    return start + relativedelta(months=duration)


def probation_end(start_date, duration: int, unit: str = "months") -> date:
    """
    Последний день испытательного срока.

    Examples:
        >>> probation_end("2024-01-15", 3, "months")
        datetime.date(2024, 4, 14)
    """
    start = coerce_date(start_date, "start_date")
    return _add_duration(start, duration, unit) - timedelta(days=1)


def notice_period_end(resignation_date, duration: int, unit: str = "weeks") -> date:
    """
    Последний день срока уведомления.

    Examples:
        >>> notice_period_end("2024-03-01", 2, "weeks")
        datetime.date(2024, 3, 14)
    """
    start = coerce_date(resignation_date, "resignation_date")
    return _add_duration(start, duration, unit) - timedelta(days=1)


def _parse_holidays(public_holidays) -> set[date]:
    """Праздники: список дат или строка ISO-дат через запятую."""
    if not public_holidays:
        return set()
    if isinstance(public_holidays, str):
        public_holidays = [h for h in (p.strip() for p in public_holidays.split(",")) if h]
    return {coerce_date(h, "public_holidays") for h in public_holidays}


def last_working_day(
    resignation_date, duration: int, unit: str = "weeks", public_holidays=None
) -> LastWorkingDay:
    """
    Последний рабочий день после подачи заявления.

    Для unit="days" длительность считается в рабочих днях (выходные и праздники
    пропускаются). Для недель и месяцев — календарный период минус один день,
    затем сдвиг назад к ближайшему рабочему дню.

    Args:
        resignation_date: Дата подачи заявления
        duration: Длительность уведомления
        unit: "days" (рабочие дни), "weeks" или "months"
        public_holidays: Праздники (список дат или строка через запятую)

    Examples:
        >>> last_working_day("2024-03-01", 4, "weeks").last_working_day
        datetime.date(2024, 3, 28)
    """
    start = coerce_date(resignation_date, "resignation_date")
    holidays = _parse_holidays(public_holidays)

    def is_non_working(day: date) -> bool:
        return day.weekday() >= 5 or day in holidays

    if unit == DurationUnit.DAYS.value:
        validate_integer(duration, "duration", min_value=1, max_value=MAX_PERIOD_DURATION)
        counted = 0
        current = start
        while counted < int(duration):
            current += timedelta(days=1)
            if not is_non_working(current):
                counted += 1
        period_end = current
    else:
        period_end = _add_duration(start, duration, unit) - timedelta(days=1)

    last_day = period_end
    while is_non_working(last_day):
        last_day -= timedelta(days=1)

    holidays_in_period = sum(1 for h in holidays if start < h <= last_day)
    return LastWorkingDay(
        notice_period_end=period_end,
        last_working_day=last_day,
        holidays_in_period=holidays_in_period,
    )


# =============================================================================
# CONTRACT DURATION
# =============================================================================


def contract_duration(start_date, end_date) -> ContractDuration:
    """
    Длительность контракта, обе даты включительно.

    Examples:
        >>> contract_duration("2024-01-01", "2024-12-31")[:4]
        (1, 0, 0, 366)
    """
    start = coerce_date(start_date, "start_date")
    end = coerce_date(end_date, "end_date")
    validate_date_range(start, end)

    total_days = (end - start).days + 1
    # Включительно: разница до дня, следующего за концом
    delta = relativedelta(end + timedelta(days=1), start)
    return ContractDuration(
        years=delta.years,
        months=delta.months,
        days=delta.days,
        total_days=total_days,
        total_weeks=total_days / DAYS_PER_WEEK,
        total_months=total_days / AVERAGE_DAYS_PER_MONTH,
    )


# =============================================================================
# ANNIVERSARIES
# =============================================================================


def employment_anniversaries(hire_date, today=None) -> AnniversarySchedule:
    """
    Годовщины работы: стаж, ближайшая годовщина, 5 прошедших и 5 предстоящих.

    Args:
        hire_date: Дата найма (не в будущем относительно today)
        today: Текущая дата (default: date.today())

    Raises:
        DateRangeError: hire_date позже today
    """
    hired = coerce_date(hire_date, "hire_date")
    current = coerce_date(today, "today") if today is not None else date.today()
    validate_date_range(hired, current, field="hire_date")

    years = relativedelta(current, hired).years

    def anniversary(year: int) -> Anniversary:
        day = hired + relativedelta(years=year)
        if day > current:
            return Anniversary(year=year, date=day, days_until=(day - current).days, days_ago=None)
        return Anniversary(year=year, date=day, days_until=None, days_ago=(current - day).days)

    past = tuple(anniversary(y) for y in range(max(1, years - ANNIVERSARY_WINDOW + 1), years + 1))
    upcoming = tuple(anniversary(years + i) for i in range(1, ANNIVERSARY_WINDOW + 1))

    return AnniversarySchedule(
        years_of_service=years,
        next_anniversary=upcoming[0],
        past=past,
        upcoming=upcoming,
    )


# =============================================================================
# SHIFT ROTATION
# =============================================================================


def shift_rotation(
    start_date, days_on: int, days_off: int, config: RotationConfig | None = None
) -> ShiftRotation:
    """
    График ротации: циклы "days_on рабочих / days_off выходных" от start_date.

    Строится ceil(horizon / cycle) + 1 циклов, чтобы покрыть весь горизонт.

    Examples:
        >>> r = shift_rotation("2024-01-01", 2, 2)
        >>> r.work_days[:3]
        (datetime.date(2024, 1, 1), datetime.date(2024, 1, 2), datetime.date(2024, 1, 5))
    """
    config = config or RotationConfig()
    start = coerce_date(start_date, "start_date")
    validate_integer(days_on, "days_on", min_value=1, max_value=365)
    validate_integer(days_off, "days_off", min_value=0, max_value=365)
    days_on, days_off = int(days_on), int(days_off)

    cycle = days_on + days_off
    cycles = math.ceil(config.horizon_days / cycle) + 1

    work_days = []
    off_days = []
    for index in range(cycles * cycle):
        day = start + timedelta(days=index)
        if index % cycle < days_on:
            work_days.append(day)
        else:
            off_days.append(day)

    logger.debug("shift_rotation: cycle=%d cycles=%d", cycle, cycles)
    return ShiftRotation(cycle_length=cycle, work_days=tuple(work_days), off_days=tuple(off_days))
