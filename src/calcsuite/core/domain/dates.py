"""
Dates — Приведение и форматирование дат, времени и длительностей

Формы передают даты как ISO-строки ("2024-03-15", "2024-03-15T08:30"),
время суток как "HH:MM". Модуль приводит их к объектам datetime и
форматирует длительности для вывода.
"""

from datetime import date, datetime, time
from typing import Final

from calcsuite.core.math.numerical_safeguards import CalculatorInputError, validate_non_negative

MINUTES_PER_HOUR: Final[int] = 60
MINUTES_PER_DAY: Final[int] = 24 * 60


class DateRangeError(CalculatorInputError):
    """Конец диапазона раньше начала."""

    pass


# =============================================================================
# ПРИВЕДЕНИЕ
# =============================================================================


def coerce_date(value, field: str = "date") -> date:
    """
    ISO-строка, date или datetime → date.

    Raises:
        CalculatorInputError: Значение не является датой
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise CalculatorInputError(f"{field} must be an ISO date (YYYY-MM-DD), got {value!r}", field=field)


def coerce_datetime(value, field: str = "datetime") -> datetime:
    """
    ISO-строка или datetime → naive/aware datetime (как передано).

    Raises:
        CalculatorInputError: Значение не является датой-временем
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            pass
    raise CalculatorInputError(
        f"{field} must be an ISO date-time (YYYY-MM-DDTHH:MM), got {value!r}", field=field
    )


def coerce_local_datetime(value, field: str = "datetime") -> datetime:
    """
    Местное (wall-clock) время без смещения UTC.

    Значения со смещением ("Z", "+02:00") отклоняются: их нельзя сравнивать
    с местным временем без знания часового пояса.

    Raises:
        CalculatorInputError: Не дата-время или указано смещение UTC
    """
    moment = coerce_datetime(value, field)
    if moment.tzinfo is not None:
        raise CalculatorInputError(
            f"{field} must be a local date-time without a UTC offset, got {value!r}", field=field
        )
    return moment


def parse_hhmm(value, field: str = "time") -> int:
    """
    "HH:MM" (или time) → минуты от полуночи.

    Examples:
        >>> parse_hhmm("08:30")
        510
    """
    if isinstance(value, time):
        return value.hour * MINUTES_PER_HOUR + value.minute
    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) in (2, 3) and all(p.isdigit() for p in parts):
            hours, minutes = int(parts[0]), int(parts[1])
            if 0 <= hours < 24 and 0 <= minutes < 60:
                return hours * MINUTES_PER_HOUR + minutes
    raise CalculatorInputError(f"{field} must be a time in HH:MM format, got {value!r}", field=field)


def validate_date_range(start: date, end: date, field: str = "end_date") -> None:
    """
    Raises:
        DateRangeError: end раньше start
    """
    if end < start:
        raise DateRangeError(f"{field} ({end.isoformat()}) is before the start ({start.isoformat()})", field=field)


# =============================================================================
# ФОРМАТИРОВАНИЕ
# =============================================================================


def format_hhmm(minutes: int) -> str:
    """
    Минуты от полуночи → "HH:MM" (по модулю суток).

    Examples:
        >>> format_hhmm(1530)
        '01:30'
    """
    minutes = int(round(minutes)) % MINUTES_PER_DAY
    return f"{minutes // MINUTES_PER_HOUR:02d}:{minutes % MINUTES_PER_HOUR:02d}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_duration(total_minutes: float, include_days: bool = True) -> str:
    """
    Длительность в минутах → "1 day, 2 hours, 5 minutes".

    Examples:
        >>> format_duration(1565)
        '1 day, 2 hours, 5 minutes'
        >>> format_duration(0.4)
        'Less than a minute'
    """
    validate_non_negative(total_minutes, "total_minutes")
    rounded = int(round(total_minutes))
    if rounded == 0:
        return "Less than a minute"

    if include_days:
        days, rest = divmod(rounded, MINUTES_PER_DAY)
    else:
        days, rest = 0, rounded
    hours, minutes = divmod(rest, MINUTES_PER_HOUR)

    parts = []
    if days:
        parts.append(_plural(days, "day"))
    if hours:
        parts.append(_plural(hours, "hour"))
    if minutes:
        parts.append(_plural(minutes, "minute"))
    return ", ".join(parts)


def format_hours(total_minutes: float) -> str:
    """
    Длительность в формате "Xh Ym".

    Examples:
        >>> format_hours(135)
        '2h 15m'
    """
    rounded = int(round(total_minutes))
    sign = "-" if rounded < 0 else ""
    hours, minutes = divmod(abs(rounded), MINUTES_PER_HOUR)
    return f"{sign}{hours}h {minutes}m"
