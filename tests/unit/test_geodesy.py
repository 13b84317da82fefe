"""
Тесты для модуля Geodesy

Проверяет:
1. Haversine против известных расстояний
2. Симметричность и нулевое расстояние
3. Валидацию координат
4. Многоточечный маршрут (участки, суммарное время)
"""

import math

import pytest

from calcsuite.core.domain.geo import RouteStop
from calcsuite.core.math.geodesy import (
    EARTH_RADIUS_KM,
    KM_PER_MILE,
    great_circle_distance,
    haversine_km,
    multi_stop_route,
)
from calcsuite.core.math.numerical_safeguards import CalculatorInputError


class TestGreatCircleDistance:
    """Тесты для great_circle_distance"""

    def test_los_angeles_new_york(self) -> None:
        result = great_circle_distance(34.0522, -118.2437, 40.7128, -74.0060)
        assert result.kilometers == pytest.approx(3936, abs=1.0)
        assert result.miles == pytest.approx(result.kilometers / KM_PER_MILE)

    def test_same_point_is_zero(self) -> None:
        assert great_circle_distance(51.5, -0.12, 51.5, -0.12).kilometers == 0.0

    def test_symmetric(self) -> None:
        a = great_circle_distance(48.8566, 2.3522, 35.6762, 139.6503)
        b = great_circle_distance(35.6762, 139.6503, 48.8566, 2.3522)
        assert a.kilometers == pytest.approx(b.kilometers)

    def test_antipodes_half_circumference(self) -> None:
        """Антиподы → π·R"""
        assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM)

    def test_quarter_meridian(self) -> None:
        assert haversine_km(0.0, 0.0, 90.0, 0.0) == pytest.approx(math.pi / 2 * EARTH_RADIUS_KM)

    @pytest.mark.parametrize(
        "args,field",
        [
            ((91, 0, 0, 0), "lat1"),
            ((0, -181, 0, 0), "lon1"),
            ((0, 0, -90.5, 0), "lat2"),
            ((0, 0, 0, 200), "lon2"),
        ],
    )
    def test_out_of_range(self, args, field: str) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            great_circle_distance(*args)
        assert exc.value.field == field


class TestMultiStopRoute:
    """Тесты для multi_stop_route"""

    @pytest.fixture
    def stops(self) -> list[RouteStop]:
        return [
            RouteStop(name="A", latitude=0.0, longitude=0.0),
            RouteStop(name="B", latitude=0.0, longitude=1.0),
            RouteStop(name="C", latitude=0.0, longitude=2.0),
        ]

    def test_legs_in_kilometers(self, stops: list[RouteStop]) -> None:
        result = multi_stop_route(stops, 100, "kmh")
        leg_km = math.radians(1.0) * EARTH_RADIUS_KM
        assert result.distance_unit == "km"
        assert [(leg.origin, leg.destination) for leg in result.legs] == [("A", "B"), ("B", "C")]
        assert result.legs[0].distance == pytest.approx(leg_km)
        assert result.total_distance == pytest.approx(2 * leg_km)
        assert result.total_hours == pytest.approx(2 * leg_km / 100)

    def test_legs_in_miles(self, stops: list[RouteStop]) -> None:
        result = multi_stop_route(stops, 60)
        assert result.distance_unit == "mi"
        assert result.total_distance == pytest.approx(2 * math.radians(1.0) * EARTH_RADIUS_KM / KM_PER_MILE)
        assert sum(leg.hours for leg in result.legs) == pytest.approx(result.total_hours)

    def test_single_stop_rejected(self, stops: list[RouteStop]) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            multi_stop_route(stops[:1], 60)
        assert exc.value.field == "stops"

    def test_zero_speed(self, stops: list[RouteStop]) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            multi_stop_route(stops, 0)
        assert exc.value.field == "average_speed"

    def test_unknown_speed_unit(self, stops: list[RouteStop]) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            multi_stop_route(stops, 50, "knots")
        assert exc.value.field == "speed_unit"
