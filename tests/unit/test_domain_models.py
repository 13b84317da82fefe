"""
Тесты для доменных моделей (Pydantic) и приведения дат

Проверяет:
1. Валидацию и иммутабельность моделей входов (shift, trip, geo)
2. Приведение ISO-строк к date/datetime и "HH:MM" к минутам
3. Форматирование длительностей
"""

from datetime import date, datetime, time

import pytest
from pydantic import ValidationError

from calcsuite.core.domain import (
    Activity,
    BillableTask,
    DateRangeError,
    Expense,
    GeoPoint,
    Habit,
    HabitFrequency,
    ItemWeightUnit,
    OnCallSegment,
    PackItem,
    RouteStop,
    TeamMember,
    WorkSegment,
    coerce_date,
    coerce_datetime,
    coerce_local_datetime,
    format_duration,
    parse_hhmm,
)
from calcsuite.core.domain.dates import format_hhmm, format_hours, validate_date_range
from calcsuite.core.math.numerical_safeguards import CalculatorInputError

# =============================================================================
# SHIFT MODELS
# =============================================================================


class TestShiftModels:
    """Тесты моделей рабочего времени"""

    def test_work_segment_valid(self) -> None:
        segment = WorkSegment(start="09:00", end="13:30")
        assert segment.start == "09:00"

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon"])
    def test_work_segment_bad_time(self, value: str) -> None:
        with pytest.raises(ValidationError):
            WorkSegment(start=value, end="13:00")

    def test_segment_is_frozen(self) -> None:
        segment = WorkSegment(start="09:00", end="10:00")
        with pytest.raises(ValidationError):
            segment.start = "08:00"

    def test_on_call_negative_rate(self) -> None:
        with pytest.raises(ValidationError):
            OnCallSegment(hours=4, rate=-1)

    def test_billable_task_total_minutes(self) -> None:
        assert BillableTask(name="Design", hours=2, minutes=15).total_minutes == 135

    def test_billable_task_minutes_limit(self) -> None:
        with pytest.raises(ValidationError):
            BillableTask(name="Design", hours=1, minutes=60)

    def test_team_member_offset_range(self) -> None:
        TeamMember(name="Priya", utc_offset=5.5, work_start="09:00", work_end="17:00")
        with pytest.raises(ValidationError):
            TeamMember(name="X", utc_offset=15, work_start="09:00", work_end="17:00")


# =============================================================================
# TRIP MODELS
# =============================================================================


class TestTripModels:
    """Тесты моделей поездок"""

    def test_expense_split_tuple(self) -> None:
        expense = Expense(name="Dinner", amount=60, paid_by="Ann", split_between=["Ann", "Bob"])
        assert expense.split_between == ("Ann", "Bob")

    def test_expense_duplicate_participants(self) -> None:
        with pytest.raises(ValidationError, match="duplicate"):
            Expense(name="Taxi", amount=20, paid_by="Ann", split_between=["Bob", "Bob"])

    def test_expense_amount_positive(self) -> None:
        with pytest.raises(ValidationError):
            Expense(name="Taxi", amount=0, paid_by="Ann", split_between=["Ann"])

    def test_expense_needs_participants(self) -> None:
        with pytest.raises(ValidationError):
            Expense(name="Taxi", amount=5, paid_by="Ann", split_between=[])

    def test_pack_item_unit_enum(self) -> None:
        item = PackItem(name="Tent", weight=1.2, unit="pounds")
        assert item.unit is ItemWeightUnit.POUNDS
        with pytest.raises(ValidationError):
            PackItem(name="Tent", weight=1.2, unit="stones")

    def test_activity_duration_positive(self) -> None:
        with pytest.raises(ValidationError):
            Activity(name="Museum", duration=0)

    def test_habit_frequency(self) -> None:
        assert Habit(name="Coffee", cost=4.5, frequency="daily").frequency is HabitFrequency.DAILY


class TestGeoModels:
    """Тесты географических моделей"""

    def test_route_stop_is_geo_point(self) -> None:
        stop = RouteStop(name="Oslo", latitude=59.91, longitude=10.75)
        assert isinstance(stop, GeoPoint)

    @pytest.mark.parametrize("lat,lon", [(90.1, 0), (-91, 0), (0, 180.5), (0, -181)])
    def test_out_of_range(self, lat: float, lon: float) -> None:
        with pytest.raises(ValidationError):
            GeoPoint(latitude=lat, longitude=lon)


# =============================================================================
# DATES
# =============================================================================


class TestCoercion:
    """Тесты приведения дат и времени"""

    def test_coerce_date_variants(self) -> None:
        assert coerce_date("2024-03-15") == date(2024, 3, 15)
        assert coerce_date("2024-03-15T08:30") == date(2024, 3, 15)
        assert coerce_date(datetime(2024, 3, 15, 23, 59)) == date(2024, 3, 15)
        assert coerce_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_coerce_date_invalid(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            coerce_date("15/03/2024", field="start_date")
        assert exc.value.field == "start_date"

    def test_coerce_datetime(self) -> None:
        assert coerce_datetime("2024-03-15T08:30") == datetime(2024, 3, 15, 8, 30)
        assert coerce_datetime(date(2024, 3, 15)) == datetime(2024, 3, 15)

    def test_coerce_datetime_invalid(self) -> None:
        with pytest.raises(CalculatorInputError):
            coerce_datetime(42)

    def test_coerce_local_datetime(self) -> None:
        assert coerce_local_datetime("2024-03-15 08:30") == datetime(2024, 3, 15, 8, 30)
        with pytest.raises(CalculatorInputError) as exc:
            coerce_local_datetime("2024-03-15T08:30+01:00", "departure")
        assert exc.value.field == "departure"

    def test_parse_hhmm(self) -> None:
        assert parse_hhmm("08:30") == 510
        assert parse_hhmm("23:59") == 1439
        assert parse_hhmm(time(1, 5)) == 65

    @pytest.mark.parametrize("value", ["24:00", "8", "ab:cd", "12:75"])
    def test_parse_hhmm_invalid(self, value: str) -> None:
        with pytest.raises(CalculatorInputError):
            parse_hhmm(value, field="start")

    def test_date_range(self) -> None:
        validate_date_range(date(2024, 1, 1), date(2024, 1, 1))
        with pytest.raises(DateRangeError) as exc:
            validate_date_range(date(2024, 1, 2), date(2024, 1, 1))
        assert exc.value.field == "end_date"


class TestFormatting:
    """Тесты форматирования длительностей"""

    def test_format_duration(self) -> None:
        assert format_duration(1565) == "1 day, 2 hours, 5 minutes"
        assert format_duration(61) == "1 hour, 1 minute"
        assert format_duration(0.2) == "Less than a minute"

    def test_format_duration_without_days(self) -> None:
        assert format_duration(1565, include_days=False) == "26 hours, 5 minutes"

    def test_format_duration_negative(self) -> None:
        with pytest.raises(CalculatorInputError):
            format_duration(-1)

    def test_format_hhmm_wraps(self) -> None:
        assert format_hhmm(1530) == "01:30"
        assert format_hhmm(-30) == "23:30"

    def test_format_hours(self) -> None:
        assert format_hours(135) == "2h 15m"
        assert format_hours(-90) == "-1h 30m"
