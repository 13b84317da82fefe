"""
Trip Time — Длительность поездок, часовые пояса и планирование времени

Калькуляторы:
- Время в пути по расстоянию и скорости
- Время вождения с перерывами
- Запас времени (buffer)
- Время похода по правилу Нейсмита
- Длительность перелёта между часовыми поясами
- Разница часовых поясов и восстановление после jet lag
- Количество дней и ночей поездки
- Длительность пересадки
- План маршрута (активности и свободное время)

Часовые пояса — идентификаторы IANA (zoneinfo).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. total_days = end − start + 1; total_nights = total_days − 1
2. Конец раньше начала → DateRangeError (поездка, пересадка, маршрут)
3. Скорость всегда > 0
4. Перерыв не планируется ровно в момент прибытия

ФОРМУЛЫ:
    Naismith: t = distance / pace + ascent_ft / 2000  (или ascent_m / 600)
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Final, NamedTuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from calcsuite.core.domain.dates import (
    DateRangeError,
    MINUTES_PER_HOUR,
    coerce_date,
    coerce_datetime,
    coerce_local_datetime,
    format_duration,
    validate_date_range,
)
from calcsuite.core.domain.trip import Activity
from calcsuite.core.math.geodesy import KM_PER_MILE
from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
    is_zero,
    validate_choice,
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS & CONFIG
# =============================================================================

DISTANCE_UNITS: Final[frozenset[str]] = frozenset({"kilometers", "miles"})
SPEED_UNITS: Final[frozenset[str]] = frozenset({"kmh", "mph"})
ELEVATION_UNITS: Final[frozenset[str]] = frozenset({"feet", "meters"})


class HikingPace(str, Enum):
    """Темп ходьбы."""

    SLOW = "slow"
    AVERAGE = "average"
    FAST = "fast"


class LayoverCategory(str, Enum):
    """Оценка длительности пересадки."""

    TIGHT = "tight"
    COMFORTABLE = "comfortable"
    LONG = "long"


@dataclass(frozen=True)
class HikingConfig:
    """
    Параметры правила Нейсмита.

    pace_mph / pace_kmh — базовая скорость по темпу,
    feet_per_hour / meters_per_hour — набор высоты, добавляющий 1 час.
    """

    pace_mph: tuple[tuple[str, float], ...] = (("slow", 2.0), ("average", 3.0), ("fast", 4.0))
    pace_kmh: tuple[tuple[str, float], ...] = (("slow", 3.2), ("average", 4.8), ("fast", 6.4))
    feet_per_hour: float = 2000.0
    meters_per_hour: float = 600.0


@dataclass(frozen=True)
class LayoverConfig:
    """
    Фиксированные накладные расходы пересадки (минуты).

    Используемое время = общее − высадка − повторный досмотр и посадка.
    """

    deplaning_minutes: int = 60
    security_and_boarding_minutes: int = 120
    tight_below_minutes: int = 60
    long_from_minutes: int = 300


@dataclass(frozen=True)
class JetLagConfig:
    """
    Модель восстановления: дней на один пересечённый пояс по направлению
    и добавка за длинный перелёт.
    """

    days_per_zone_east: float = 1.0
    days_per_zone_west: float = 2.0 / 3.0
    long_flight_hours: float = 8.0
    long_flight_extra_days: float = 0.5


# =============================================================================
# RESULT TYPES
# =============================================================================


class TravelTime(NamedTuple):
    hours: float
    text: str


class TimelineSegment(NamedTuple):
    kind: str  # "drive" | "break" | "activity" | "free"
    label: str
    start_minute: float
    end_minute: float


class DrivingWithBreaks(NamedTuple):
    driving_hours: float
    number_of_breaks: int
    break_minutes: float
    total_hours: float
    text: str
    timeline: tuple[TimelineSegment, ...]


class BufferTime(NamedTuple):
    buffer_minutes: float
    total_minutes: float
    text: str


class HikingTime(NamedTuple):
    walking_hours: float
    ascent_hours: float
    total_hours: float
    text: str


class FlightDuration(NamedTuple):
    total_minutes: int
    hours: int
    minutes: int
    text: str


class TimeZoneDifference(NamedTuple):
    offset_hours_1: float
    offset_hours_2: float
    difference_hours: float  # offset2 − offset1
    ahead: str | None
    text: str


class JetLag(NamedTuple):
    time_zones_crossed: float
    direction: str  # "east" | "west" | "none"
    recovery_days: float
    advice: tuple[str, ...]


class TravelDays(NamedTuple):
    total_days: int
    total_nights: int
    weekdays: int
    weekend_days: int


class LayoverTime(NamedTuple):
    total_minutes: int
    text: str
    usable_minutes: int
    category: LayoverCategory


class ItineraryPlan(NamedTuple):
    available_minutes: int
    activity_minutes: int
    free_minutes: int
    overbooked: bool
    timeline: tuple[TimelineSegment, ...]


# =============================================================================
# HELPERS
# =============================================================================


def _distance_km(distance: float, unit: str) -> float:
    validate_choice(unit, "distance_unit", DISTANCE_UNITS)
    return distance * KM_PER_MILE if unit == "miles" else distance


def _speed_kmh(speed: float, unit: str) -> float:
    validate_choice(unit, "speed_unit", SPEED_UNITS)
    return speed * KM_PER_MILE if unit == "mph" else speed


def _zone(name: str, field: str) -> ZoneInfo:
    """
    Raises:
        CalculatorInputError: Неизвестный часовой пояс IANA
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError):
        raise CalculatorInputError(f"Unknown time zone: {name!r}", field=field)


def _utc_offset_hours(zone: ZoneInfo, at: datetime) -> float:
    return at.astimezone(zone).utcoffset().total_seconds() / 3600


def _aware_utc(at) -> datetime:
    if at is None:
        return datetime.now(timezone.utc)
    moment = coerce_datetime(at, "at")
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


# =============================================================================
# TRAVEL TIME
# =============================================================================


def travel_time(distance: float, distance_unit: str, speed: float, speed_unit: str) -> TravelTime:
    """
    Время в пути при постоянной скорости.

    Examples:
        >>> travel_time(120, "kilometers", 60, "kmh")
        TravelTime(hours=2.0, text='2 hours')
    """
    validate_non_negative(distance, "distance")
    validate_positive(speed, "speed")

    hours = _distance_km(distance, distance_unit) / _speed_kmh(speed, speed_unit)
    text = format_duration(hours * MINUTES_PER_HOUR) if hours > 0 else "0 minutes"
    return TravelTime(hours=hours, text=text)


def driving_time_with_breaks(
    distance: float,
    distance_unit: str,
    speed: float,
    speed_unit: str,
    break_frequency_hours: float,
    break_duration_minutes: float,
) -> DrivingWithBreaks:
    """
    Время поездки на машине с регулярными перерывами.

    Перерыв делается после каждых break_frequency_hours вождения,
    но не в момент прибытия.

    Examples:
        >>> r = driving_time_with_breaks(500, "kilometers", 100, "kmh", 2, 15)
        >>> (r.number_of_breaks, r.total_hours)
        (2, 5.5)
    """
    validate_positive(distance, "distance")
    validate_positive(speed, "speed")
    validate_positive(break_frequency_hours, "break_frequency_hours")
    validate_non_negative(break_duration_minutes, "break_duration_minutes")

    driving_hours = _distance_km(distance, distance_unit) / _speed_kmh(speed, speed_unit)
    breaks = math.floor(driving_hours / break_frequency_hours)
    if breaks and is_zero(driving_hours - breaks * break_frequency_hours, tol=1e-9):
        breaks -= 1

    driving_minutes = driving_hours * MINUTES_PER_HOUR
    leg_minutes = break_frequency_hours * MINUTES_PER_HOUR
    timeline = []
    clock = 0.0
    driven = 0.0
    for index in range(breaks + 1):
        leg = min(leg_minutes, driving_minutes - driven)
        timeline.append(TimelineSegment("drive", f"Drive leg {index + 1}", clock, clock + leg))
        clock += leg
        driven += leg
        if index < breaks:
            timeline.append(
                TimelineSegment("break", f"Break {index + 1}", clock, clock + break_duration_minutes)
            )
            clock += break_duration_minutes

    break_minutes = breaks * break_duration_minutes
    total_minutes = driving_minutes + break_minutes
    return DrivingWithBreaks(
        driving_hours=driving_hours,
        number_of_breaks=breaks,
        break_minutes=break_minutes,
        total_hours=total_minutes / MINUTES_PER_HOUR,
        text=format_duration(total_minutes),
        timeline=tuple(timeline),
    )


def travel_buffer_time(base_minutes: float, buffer_percentage: float) -> BufferTime:
    """
    Запас времени к базовой длительности поездки.

    Examples:
        >>> travel_buffer_time(60, 25)
        BufferTime(buffer_minutes=15.0, total_minutes=75.0, text='1 hour, 15 minutes')
    """
    validate_positive(base_minutes, "base_minutes")
    validate_in_range(buffer_percentage, "buffer_percentage", 0.0, 100.0)

    buffer = base_minutes * buffer_percentage / 100
    total = base_minutes + buffer
    return BufferTime(buffer_minutes=buffer, total_minutes=total, text=format_duration(total))


def hiking_time(
    distance: float,
    distance_unit: str,
    elevation_gain: float,
    elevation_unit: str,
    pace: str = "average",
    config: HikingConfig | None = None,
) -> HikingTime:
    """
    Время похода по правилу Нейсмита.

    Args:
        distance: Длина маршрута
        distance_unit: "miles" (темп в mph) или "kilometers" (темп в км/ч)
        elevation_gain: Суммарный набор высоты (>= 0)
        elevation_unit: "feet" (+1 ч / 2000 ft) или "meters" (+1 ч / 600 м)
        pace: "slow", "average" или "fast"

    Examples:
        >>> hiking_time(6, "miles", 2000, "feet", "average").total_hours
        3.0
    """
    config = config or HikingConfig()
    validate_positive(distance, "distance")
    validate_non_negative(elevation_gain, "elevation_gain")
    validate_choice(distance_unit, "distance_unit", DISTANCE_UNITS)
    validate_choice(elevation_unit, "elevation_unit", ELEVATION_UNITS)
    validate_choice(pace, "pace", {p.value for p in HikingPace})

    paces = dict(config.pace_mph if distance_unit == "miles" else config.pace_kmh)
    walking = distance / paces[pace]
    per_hour = config.feet_per_hour if elevation_unit == "feet" else config.meters_per_hour
    ascent = elevation_gain / per_hour

    total = walking + ascent
    return HikingTime(
        walking_hours=walking,
        ascent_hours=ascent,
        total_hours=total,
        text=format_duration(total * MINUTES_PER_HOUR),
    )


# =============================================================================
# TIME ZONES
# =============================================================================


def flight_duration(departure, departure_tz: str, arrival, arrival_tz: str) -> FlightDuration:
    """
    Длительность перелёта по местным временам вылета и прилёта.

    Examples:
        >>> flight_duration("2024-06-01T10:00", "America/New_York",
        ...                 "2024-06-01T22:00", "Europe/London").text
        '7 hours, 0 minutes'
    """
    dep_zone = _zone(departure_tz, "departure_tz")
    arr_zone = _zone(arrival_tz, "arrival_tz")
    dep = coerce_local_datetime(departure, "departure").replace(tzinfo=dep_zone)
    arr = coerce_local_datetime(arrival, "arrival").replace(tzinfo=arr_zone)

    minutes = int((arr.astimezone(timezone.utc) - dep.astimezone(timezone.utc)).total_seconds() // 60)
    if minutes < 0:
        raise DateRangeError("arrival is before departure", field="arrival")

    hours, rest = divmod(minutes, MINUTES_PER_HOUR)
    text = f"{hours} hour{'s' if hours != 1 else ''}, {rest} minute{'s' if rest != 1 else ''}"
    return FlightDuration(total_minutes=minutes, hours=hours, minutes=rest, text=text)


def time_zone_difference(tz1: str, tz2: str, at=None) -> TimeZoneDifference:
    """
    Разница между часовыми поясами в момент at (default: сейчас).

    Examples:
        >>> time_zone_difference("UTC", "Asia/Kolkata", "2024-01-01T00:00").text
        'Asia/Kolkata is ahead by 5 hours and 30 minutes.'
    """
    moment = _aware_utc(at)
    offset1 = _utc_offset_hours(_zone(tz1, "tz1"), moment)
    offset2 = _utc_offset_hours(_zone(tz2, "tz2"), moment)
    diff = offset2 - offset1

    if is_zero(diff):
        return TimeZoneDifference(offset1, offset2, 0.0, None, f"{tz1} and {tz2} are in the same time zone.")

    ahead = tz2 if diff > 0 else tz1
    total_minutes = int(round(abs(diff) * MINUTES_PER_HOUR))
    hours, minutes = divmod(total_minutes, MINUTES_PER_HOUR)
    parts = []
    if hours:
        parts.append(f"{hours} hour{'s' if hours > 1 else ''}")
    if minutes:
        parts.append(f"{minutes} minute{'s' if minutes > 1 else ''}")
    return TimeZoneDifference(
        offset_hours_1=offset1,
        offset_hours_2=offset2,
        difference_hours=diff,
        ahead=ahead,
        text=f"{ahead} is ahead by {' and '.join(parts)}.",
    )


def jet_lag(
    origin_tz: str,
    destination_tz: str,
    flight_hours: float,
    at=None,
    config: JetLagConfig | None = None,
) -> JetLag:
    """
    Оценка восстановления после перелёта через часовые пояса.

    Восток тяжелее запада: восток — config.days_per_zone_east дней на пояс,
    запад — config.days_per_zone_west; длинный перелёт добавляет полдня.
    Результат округляется вверх до половины дня.
    """
    config = config or JetLagConfig()
    validate_positive(flight_hours, "flight_hours")
    diff = time_zone_difference(origin_tz, destination_tz, at).difference_hours
    zones = abs(diff)

    if is_zero(zones):
        direction = "none"
        days = 0.0
        advice = ["No time zone change: keep your usual sleep schedule."]
    elif diff > 0:
        direction = "east"
        days = zones * config.days_per_zone_east
        advice = [
            "Shift bedtime one hour earlier each day for a few days before departure.",
            "Seek morning daylight at your destination.",
            "Avoid bright light in the evening.",
        ]
    else:
        direction = "west"
        days = zones * config.days_per_zone_west
        advice = [
            "Shift bedtime one hour later each day before departure.",
            "Seek afternoon and evening daylight at your destination.",
            "Stay awake until local bedtime on arrival.",
        ]

    if flight_hours >= config.long_flight_hours:
        days += config.long_flight_extra_days
        advice.append("Stay hydrated and move around the cabin on long flights.")

    return JetLag(
        time_zones_crossed=zones,
        direction=direction,
        recovery_days=math.ceil(days * 2) / 2,
        advice=tuple(advice),
    )


# =============================================================================
# DATE RANGES
# =============================================================================


def travel_days(start_date, end_date) -> TravelDays:
    """
    Дни и ночи поездки (обе даты включительно).

    Examples:
        >>> travel_days("2024-07-01", "2024-07-01")[:2]
        (1, 0)
        >>> travel_days("2024-07-01", "2024-07-05")[:2]
        (5, 4)
    """
    start = coerce_date(start_date, "start_date")
    end = coerce_date(end_date, "end_date")
    validate_date_range(start, end)

    total = (end - start).days + 1
    weekend = sum(1 for i in range(total) if (start + timedelta(days=i)).weekday() >= 5)
    return TravelDays(
        total_days=total,
        total_nights=total - 1,
        weekdays=total - weekend,
        weekend_days=weekend,
    )


def layover_time(arrival, departure, config: LayoverConfig | None = None) -> LayoverTime:
    """
    Длительность пересадки и время, доступное вне аэропорта.

    Examples:
        >>> r = layover_time("2024-05-10T08:15", "2024-05-10T14:45")
        >>> (r.total_minutes, r.usable_minutes, r.category.value)
        (390, 210, 'long')
    """
    config = config or LayoverConfig()
    arrived = coerce_local_datetime(arrival, "arrival")
    departing = coerce_local_datetime(departure, "departure")
    if departing < arrived:
        raise DateRangeError("departure is before arrival", field="departure")

    total = int((departing - arrived).total_seconds() // 60)
    overhead = config.deplaning_minutes + config.security_and_boarding_minutes
    usable = max(0, total - overhead)

    if total < config.tight_below_minutes:
        category = LayoverCategory.TIGHT
    elif total < config.long_from_minutes:
        category = LayoverCategory.COMFORTABLE
    else:
        category = LayoverCategory.LONG

    return LayoverTime(
        total_minutes=total,
        text=format_duration(total),
        usable_minutes=usable,
        category=category,
    )


def itinerary_plan(start, end, activities) -> ItineraryPlan:
    """
    План маршрута: активности подряд от start, остаток — свободное время.

    Raises:
        DateRangeError: end раньше start
    """
    began = coerce_local_datetime(start, "start")
    finished = coerce_local_datetime(end, "end")
    if finished < began:
        raise DateRangeError("itinerary end is before its start", field="end")
    activities = [a if isinstance(a, Activity) else Activity(**a) for a in activities]

    available = int((finished - began).total_seconds() // 60)
    timeline = []
    clock = 0
    for activity in activities:
        timeline.append(TimelineSegment("activity", activity.name, clock, clock + activity.duration))
        clock += activity.duration

    booked = clock
    free = available - booked
    if free > 0:
        timeline.append(TimelineSegment("free", "Free time", booked, available))
    if free < 0:
        logger.debug("itinerary_plan: overbooked by %d minutes", -free)

    return ItineraryPlan(
        available_minutes=available,
        activity_minutes=booked,
        free_minutes=free,
        overbooked=free < 0,
        timeline=tuple(timeline),
    )
