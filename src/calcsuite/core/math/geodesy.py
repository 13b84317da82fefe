"""
Geodesy — Great-Circle Distance & Multi-Stop Routes

Расстояние между точками на поверхности Земли (сфера среднего радиуса)
по формуле Haversine.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Широта ∈ [−90, 90], долгота ∈ [−180, 180] (иначе CalculatorInputError)
2. distance(A, B) = distance(B, A); distance(A, A) = 0
3. Результат всегда в км и милях одновременно

ФОРМУЛЫ:
    a = sin²(Δφ/2) + cos φ1 · cos φ2 · sin²(Δλ/2)
    d = 2R · atan2(√a, √(1 − a))
"""

import math
from enum import Enum
from typing import Final, NamedTuple

from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
    clamp,
    validate_choice,
    validate_in_range,
    validate_positive,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Средний радиус Земли (км)
EARTH_RADIUS_KM: Final[float] = 6371.0

# Километров в миле
KM_PER_MILE: Final[float] = 1.60934

LATITUDE_RANGE: Final[tuple[float, float]] = (-90.0, 90.0)
LONGITUDE_RANGE: Final[tuple[float, float]] = (-180.0, 180.0)


class SpeedUnit(str, Enum):
    """Единица средней скорости маршрута."""

    MPH = "mph"
    KMH = "kmh"


# =============================================================================
# RESULT TYPES
# =============================================================================


class Distance(NamedTuple):
    kilometers: float
    miles: float


class RouteLeg(NamedTuple):
    origin: str
    destination: str
    distance: float  # в единицах маршрута (mi для mph, km для kmh)
    hours: float


class RouteSummary(NamedTuple):
    legs: tuple[RouteLeg, ...]
    total_distance: float
    total_hours: float
    distance_unit: str  # "mi" или "km"


# =============================================================================
# DISTANCE
# =============================================================================


def validate_coordinates(
    lat: float, lon: float, lat_field: str = "latitude", lon_field: str = "longitude"
) -> None:
    """
    Проверка диапазонов координат.

    Ошибка называет поле формы (lat_field / lon_field).

    Raises:
        CalculatorInputError: Широта или долгота вне диапазона
    """
    validate_in_range(lat, lat_field, *LATITUDE_RANGE)
    validate_in_range(lon, lon_field, *LONGITUDE_RANGE)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Расстояние по большому кругу в километрах (без валидации)."""
    phi1, phi2 = map(math.radians, (lat1, lat2))
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Ошибки округления могут вывести a за [0, 1] для антиподов
    a = clamp(a, 0.0, 1.0)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def great_circle_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> Distance:
    """
    Расстояние по большому кругу между двумя точками.

    Args:
        lat1, lon1: Первая точка (градусы)
        lat2, lon2: Вторая точка (градусы)

    Returns:
        Distance в км и милях

    Raises:
        CalculatorInputError: Координаты вне диапазона

    Examples:
        >>> round(great_circle_distance(34.0522, -118.2437, 40.7128, -74.0060).kilometers)
        3936
    """
    validate_coordinates(lat1, lon1, "lat1", "lon1")
    validate_coordinates(lat2, lon2, "lat2", "lon2")

    km = haversine_km(lat1, lon1, lat2, lon2)
    return Distance(kilometers=km, miles=km / KM_PER_MILE)


# =============================================================================
# MULTI-STOP ROUTE
# =============================================================================


def multi_stop_route(stops, average_speed: float, speed_unit: str = "mph") -> RouteSummary:
    """
    Маршрут через несколько остановок: участки, суммарное расстояние и время.

    Args:
        stops: Последовательность остановок с атрибутами name, latitude, longitude
        average_speed: Средняя скорость (> 0)
        speed_unit: "mph" (расстояния в милях) или "kmh" (в км)

    Raises:
        CalculatorInputError: Меньше двух остановок, невалидные координаты или скорость
    """
    stops = list(stops)
    if len(stops) < 2:
        raise CalculatorInputError("a route needs at least two stops", field="stops")
    validate_positive(average_speed, "average_speed")
    validate_choice(speed_unit, "speed_unit", {u.value for u in SpeedUnit})

    for index, stop in enumerate(stops):
        validate_coordinates(
            stop.latitude, stop.longitude, f"stops[{index}].latitude", f"stops[{index}].longitude"
        )

    in_miles = speed_unit == SpeedUnit.MPH.value
    legs = []
    for origin, destination in zip(stops, stops[1:]):
        km = haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)
        distance = km / KM_PER_MILE if in_miles else km
        legs.append(
            RouteLeg(
                origin=origin.name,
                destination=destination.name,
                distance=distance,
                hours=distance / average_speed,
            )
        )

    total = sum(leg.distance for leg in legs)
    return RouteSummary(
        legs=tuple(legs),
        total_distance=total,
        total_hours=total / average_speed,
        distance_unit="mi" if in_miles else "km",
    )
