"""
Hours — Рабочее время, смены и начисления

Калькуляторы рабочего времени:
- Длительность смены (включая ночную, через полночь)
- Разделённая смена (две части и перерыв между ними)
- Округление табеля (nearest_5, nearest_15, down_15)
- Компенсационные отгулы за переработку
- Оплата дежурств
- Накопление PTO
- Часы удалённой работы
- Оплачиваемые часы фрилансера
- Пересечение рабочих окон распределённой команды

Время суток — "HH:MM"; все длительности считаются в целых минутах.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Смена через полночь допускается только при allow_overnight=True
2. Окна команды сравниваются в UTC по модулю суток (1440 минут)
"""

import logging
import math
from enum import Enum
from typing import Final, NamedTuple

from calcsuite.core.domain.dates import (
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
    format_hhmm,
    format_hours,
    parse_hhmm,
)
from calcsuite.core.domain.shift import BillableTask, OnCallSegment, TeamMember, WorkSegment
from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
    validate_choice,
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Продолжительность рабочего дня для пересчёта отгулов
WORKDAY_HOURS: Final[float] = 8.0


class RoundingRule(str, Enum):
    """Правило округления табеля."""

    NEAREST_5 = "nearest_5"
    NEAREST_15 = "nearest_15"
    DOWN_15 = "down_15"


class AccrualFrequency(str, Enum):
    """Частота начисления PTO."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    SEMI_MONTHLY = "semi-monthly"
    MONTHLY = "monthly"
    ANNUALLY = "annually"


PAY_PERIODS_PER_YEAR: Final[dict[str, int]] = {
    AccrualFrequency.WEEKLY.value: 52,
    AccrualFrequency.BI_WEEKLY.value: 26,
    AccrualFrequency.SEMI_MONTHLY.value: 24,
    AccrualFrequency.MONTHLY.value: 12,
    AccrualFrequency.ANNUALLY.value: 1,
}


# =============================================================================
# RESULT TYPES
# =============================================================================


class Duration(NamedTuple):
    total_minutes: int
    hours: int
    minutes: int
    decimal_hours: float
    crosses_midnight: bool


class SplitShift(NamedTuple):
    first_shift: Duration
    second_shift: Duration
    break_duration: Duration
    total_minutes: int
    decimal_hours: float


class RoundedTimesheet(NamedTuple):
    actual_minutes: int
    rounded_in: str
    rounded_out: str
    rounded_minutes: int
    difference_minutes: int
    difference: str  # "+ 0h 5m"


class CompTime(NamedTuple):
    overtime_minutes: float
    comp_time_minutes: float
    comp_time_hours: float
    comp_time_days: float


class OnCallPay(NamedTuple):
    total_hours: float
    total_pay: float
    equivalent_regular_hours: float
    segment_pay: tuple[float, ...]


class WorkFromHome(NamedTuple):
    gross_minutes: int
    net_minutes: int
    gross: str
    net: str
    decimal_hours: float


class BillableHours(NamedTuple):
    total_minutes: int
    decimal_hours: float
    formatted: str
    earnings: float | None


class TimeZoneOverlap(NamedTuple):
    overlap_hours: float
    windows: tuple[tuple[str, str], ...]  # в локальном времени первого участника


# =============================================================================
# DURATIONS
# =============================================================================


def _duration(total_minutes: int, crosses_midnight: bool = False) -> Duration:
    hours, minutes = divmod(total_minutes, MINUTES_PER_HOUR)
    return Duration(
        total_minutes=total_minutes,
        hours=hours,
        minutes=minutes,
        decimal_hours=total_minutes / MINUTES_PER_HOUR,
        crosses_midnight=crosses_midnight,
    )


def time_duration(start: str, end: str, allow_overnight: bool = True) -> Duration:
    """
    Длительность между двумя временами суток.

    Args:
        start: Начало "HH:MM"
        end: Конец "HH:MM"
        allow_overnight: Если end < start, считать что конец на следующий день

    Raises:
        CalculatorInputError: Некорректное время или end < start без overnight

    Examples:
        >>> time_duration("22:00", "06:30").total_minutes
        510
    """
    start_min = parse_hhmm(start, "start")
    end_min = parse_hhmm(end, "end")

    if end_min >= start_min:
        return _duration(end_min - start_min)
    if not allow_overnight:
        raise CalculatorInputError(
            f"end ({end}) is before start ({start}) and overnight shifts are not allowed",
            field="end",
        )
    return _duration(end_min + MINUTES_PER_DAY - start_min, crosses_midnight=True)


def split_shift_hours(
    first_start: str, first_end: str, second_start: str, second_end: str
) -> SplitShift:
    """
    Разделённая смена: две части в пределах одних суток и перерыв между ними.
    """
    first = time_duration(first_start, first_end, allow_overnight=False)
    second = time_duration(second_start, second_end, allow_overnight=False)
    try:
        gap = time_duration(first_end, second_start, allow_overnight=False)
    except CalculatorInputError:
        raise CalculatorInputError(
            "the second shift must start after the first shift ends", field="second_start"
        )

    total = first.total_minutes + second.total_minutes
    return SplitShift(
        first_shift=first,
        second_shift=second,
        break_duration=gap,
        total_minutes=total,
        decimal_hours=total / MINUTES_PER_HOUR,
    )


# =============================================================================
# TIMESHEET ROUNDING
# =============================================================================


def _round_minutes(minutes: int, rule: RoundingRule) -> int:
    if rule == RoundingRule.NEAREST_5:
        step, down = 5, False
    elif rule == RoundingRule.NEAREST_15:
        step, down = 15, False
    else:
        step, down = 15, True

    if down:
        return minutes // step * step
    # половина шага округляется вверх
    return math.floor(minutes / step + 0.5) * step


def timesheet_rounding(time_in: str, time_out: str, rule: str = "nearest_15") -> RoundedTimesheet:
    """
    Округление отметок табеля и разница с фактической длительностью.

    Examples:
        >>> r = timesheet_rounding("08:53", "17:07", "nearest_15")
        >>> (r.rounded_in, r.rounded_out, r.rounded_minutes)
        ('09:00', '17:00', 480)
    """
    validate_choice(rule, "rule", {r.value for r in RoundingRule})
    rounding = RoundingRule(rule)

    actual = time_duration(time_in, time_out, allow_overnight=False).total_minutes
    rounded_in = _round_minutes(parse_hhmm(time_in, "time_in"), rounding)
    rounded_out = _round_minutes(parse_hhmm(time_out, "time_out"), rounding)
    rounded = rounded_out - rounded_in
    diff = rounded - actual

    return RoundedTimesheet(
        actual_minutes=actual,
        rounded_in=format_hhmm(rounded_in),
        rounded_out=format_hhmm(rounded_out),
        rounded_minutes=rounded,
        difference_minutes=diff,
        difference=f"{'+' if diff >= 0 else '-'} {format_hours(abs(diff))}",
    )


# =============================================================================
# PAY & ACCRUAL
# =============================================================================


def compensatory_off_days(
    overtime_hours: float, comp_time_rate: float, overtime_minutes: float = 0
) -> CompTime:
    """
    Компенсационное время за переработку (8-часовой рабочий день).

    Examples:
        >>> compensatory_off_days(4, 1.5).comp_time_hours
        6.0
    """
    validate_positive(overtime_hours, "overtime_hours")
    validate_in_range(overtime_minutes, "overtime_minutes", 0, 59)
    validate_positive(comp_time_rate, "comp_time_rate")

    total = overtime_hours * MINUTES_PER_HOUR + overtime_minutes
    comp_minutes = total * comp_time_rate
    comp_hours = comp_minutes / MINUTES_PER_HOUR
    return CompTime(
        overtime_minutes=total,
        comp_time_minutes=comp_minutes,
        comp_time_hours=comp_hours,
        comp_time_days=comp_hours / WORKDAY_HOURS,
    )


def on_call_pay(segments, base_pay_rate: float) -> OnCallPay:
    """
    Оплата дежурств и эквивалент в обычных рабочих часах.

    Args:
        segments: Последовательность OnCallSegment (не пустая)
        base_pay_rate: Базовая почасовая ставка (> 0)
    """
    segments = [s if isinstance(s, OnCallSegment) else OnCallSegment(**s) for s in segments]
    if not segments:
        raise CalculatorInputError("at least one on-call segment is required", field="segments")
    validate_positive(base_pay_rate, "base_pay_rate")

    pays = tuple(s.hours * s.rate for s in segments)
    total_pay = sum(pays)
    return OnCallPay(
        total_hours=sum(s.hours for s in segments),
        total_pay=total_pay,
        equivalent_regular_hours=total_pay / base_pay_rate,
        segment_pay=pays,
    )


def pto_accrual(
    accrual_rate: float,
    accrual_frequency: str = "bi-weekly",
    hours_worked: float | None = None,
    pay_periods: int | None = None,
) -> float:
    """
    Накопленный PTO (часы).

    Если указаны hours_worked — ставка применяется к каждому отработанному часу;
    иначе — к числу периодов (pay_periods или годовое число периодов частоты).

    Examples:
        >>> pto_accrual(0.05, hours_worked=2080)
        104.0
        >>> pto_accrual(4, "bi-weekly")
        104
    """
    validate_positive(accrual_rate, "accrual_rate")
    validate_choice(accrual_frequency, "accrual_frequency", PAY_PERIODS_PER_YEAR)

    if hours_worked:
        validate_non_negative(hours_worked, "hours_worked")
        return accrual_rate * hours_worked

    if pay_periods:
        validate_positive(pay_periods, "pay_periods")
        periods = pay_periods
    else:
        periods = PAY_PERIODS_PER_YEAR[accrual_frequency]
    return accrual_rate * periods


def work_from_home_hours(segments, unpaid_break_minutes: float = 0) -> WorkFromHome:
    """
    Суммарное время удалённой работы по отрезкам за день минус неоплачиваемый перерыв.
    """
    segments = [s if isinstance(s, WorkSegment) else WorkSegment(**s) for s in segments]
    if not segments:
        raise CalculatorInputError("at least one work segment is required", field="segments")
    validate_non_negative(unpaid_break_minutes, "unpaid_break_minutes")

    gross = sum(
        time_duration(s.start, s.end, allow_overnight=False).total_minutes for s in segments
    )
    net = int(round(gross - unpaid_break_minutes))
    if net < 0:
        raise CalculatorInputError(
            "unpaid break is longer than the time worked", field="unpaid_break_minutes"
        )
    return WorkFromHome(
        gross_minutes=gross,
        net_minutes=net,
        gross=format_hours(gross),
        net=format_hours(net),
        decimal_hours=net / MINUTES_PER_HOUR,
    )


def freelance_billable_hours(tasks, hourly_rate: float | None = None) -> BillableHours:
    """
    Оплачиваемое время по задачам и заработок при заданной ставке.

    Examples:
        >>> freelance_billable_hours([{"name": "Design", "hours": 2, "minutes": 30}], 40).earnings
        100.0
    """
    tasks = [t if isinstance(t, BillableTask) else BillableTask(**t) for t in tasks]
    if not tasks:
        raise CalculatorInputError("at least one task is required", field="tasks")

    total = sum(t.total_minutes for t in tasks)
    decimal = total / MINUTES_PER_HOUR
    earnings = None
    if hourly_rate is not None:
        validate_non_negative(hourly_rate, "hourly_rate")
        earnings = decimal * hourly_rate

    return BillableHours(
        total_minutes=total,
        decimal_hours=decimal,
        formatted=format_hours(total),
        earnings=earnings,
    )


# =============================================================================
# TIME ZONE OVERLAP
# =============================================================================


def _utc_intervals(member: TeamMember) -> list[tuple[int, int]]:
    """Рабочее окно участника в UTC-минутах суток, разбитое на полуинтервалы [a, b)."""
    offset = int(round(member.utc_offset * MINUTES_PER_HOUR))
    start = parse_hhmm(member.work_start, "work_start")
    end = parse_hhmm(member.work_end, "work_end")
    length = (end - start) % MINUTES_PER_DAY or MINUTES_PER_DAY

    utc_start = (start - offset) % MINUTES_PER_DAY
    utc_end = utc_start + length
    if utc_end <= MINUTES_PER_DAY:
        return [(utc_start, utc_end)]
    return [(utc_start, MINUTES_PER_DAY), (0, utc_end - MINUTES_PER_DAY)]


def _intersect(left: list[tuple[int, int]], right: list[tuple[int, int]]) -> list[tuple[int, int]]:
    result = []
    for a_start, a_end in left:
        for b_start, b_end in right:
            start, end = max(a_start, b_start), min(a_end, b_end)
            if start < end:
                result.append((start, end))
    return sorted(result)


def time_zone_overlap(members) -> TimeZoneOverlap:
    """
    Общее рабочее время команды в разных часовых поясах.

    Окна участников переводятся в UTC (с переходом через полночь),
    пересекаются, а результат показывается в локальном времени первого участника.

    Examples:
        >>> team = [
        ...     {"name": "A", "utc_offset": 0, "work_start": "09:00", "work_end": "17:00"},
        ...     {"name": "B", "utc_offset": 2, "work_start": "09:00", "work_end": "17:00"},
        ... ]
        >>> time_zone_overlap(team)
        TimeZoneOverlap(overlap_hours=6.0, windows=(('09:00', '15:00'),))
    """
    members = [m if isinstance(m, TeamMember) else TeamMember(**m) for m in members]
    if len(members) < 2:
        raise CalculatorInputError("at least two team members are required", field="members")

    common = _utc_intervals(members[0])
    for member in members[1:]:
        common = _intersect(common, _utc_intervals(member))

    overlap_minutes = sum(end - start for start, end in common)
    display_offset = int(round(members[0].utc_offset * MINUTES_PER_HOUR))
    windows = tuple(
        (format_hhmm(start + display_offset), format_hhmm(end + display_offset))
        for start, end in _merge_wrapped(common)
    )

    logger.debug("time_zone_overlap: members=%d overlap_minutes=%d", len(members), overlap_minutes)
    return TimeZoneOverlap(overlap_hours=overlap_minutes / MINUTES_PER_HOUR, windows=windows)


def _merge_wrapped(intervals: list[tuple[int, int]]) -> list[tuple[int, int]]:
    """Склейка интервала, заканчивающегося в полночь, с интервалом от полуночи."""
    if len(intervals) >= 2 and intervals[0][0] == 0 and intervals[-1][1] == MINUTES_PER_DAY:
        head, tail = intervals[0], intervals[-1]
        return [*intervals[1:-1], (tail[0], head[1] + MINUTES_PER_DAY)]
    return intervals
