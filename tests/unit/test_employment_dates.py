"""
Тесты для модуля Employment Dates

Проверяет:
1. Период длительности D от дня S заканчивается в S + D − 1
2. Календарное добавление месяцев (конец месяца)
3. Последний рабочий день с выходными и праздниками
4. Длительность контракта включительно
5. Годовщины и сменную ротацию
"""

from datetime import date

import pytest

from calcsuite.core.domain.dates import DateRangeError
from calcsuite.core.math.numerical_safeguards import CalculatorInputError
from calcsuite.employment.dates import (
    ANNIVERSARY_WINDOW,
    RotationConfig,
    contract_duration,
    employment_anniversaries,
    last_working_day,
    notice_period_end,
    probation_end,
    shift_rotation,
)

# =============================================================================
# PERIOD END DATES
# =============================================================================


class TestPeriodEnd:
    """Тесты для probation_end / notice_period_end"""

    def test_probation_months(self) -> None:
        assert probation_end("2024-01-15", 3, "months") == date(2024, 4, 14)

    def test_probation_month_end_clamped(self) -> None:
        """31 янв + 1 мес = 29 фев → последний день 28 фев"""
        assert probation_end("2024-01-31", 1, "months") == date(2024, 2, 28)

    def test_probation_days(self) -> None:
        assert probation_end("2024-01-01", 10, "days") == date(2024, 1, 10)

    def test_notice_weeks(self) -> None:
        assert notice_period_end("2024-03-01", 2, "weeks") == date(2024, 3, 14)

    def test_single_day_period(self) -> None:
        assert notice_period_end(date(2024, 3, 1), 1, "days") == date(2024, 3, 1)

    @pytest.mark.parametrize("duration", [0, -3, 1.5])
    def test_invalid_duration(self, duration) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            probation_end("2024-01-01", duration, "months")
        assert exc.value.field == "duration"

    def test_unknown_unit(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            probation_end("2024-01-01", 1, "years")
        assert exc.value.field == "unit"

    def test_bad_date(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            notice_period_end("01.03.2024", 1, "weeks")
        assert exc.value.field == "resignation_date"


class TestLastWorkingDay:
    """Тесты для last_working_day"""

    def test_weeks_on_weekday(self) -> None:
        result = last_working_day("2024-03-01", 4, "weeks")
        assert result.notice_period_end == date(2024, 3, 28)
        assert result.last_working_day == date(2024, 3, 28)

    def test_weeks_ending_on_weekend(self) -> None:
        """Конец периода в воскресенье → пятница"""
        result = last_working_day("2024-03-04", 2, "weeks")
        assert result.notice_period_end == date(2024, 3, 17)
        assert result.last_working_day == date(2024, 3, 15)

    def test_business_days(self) -> None:
        """2024-03-01 — пятница; 5 рабочих дней → следующая пятница"""
        assert last_working_day("2024-03-01", 5, "days").last_working_day == date(2024, 3, 8)

    def test_business_days_skip_holiday(self) -> None:
        result = last_working_day("2024-03-01", 5, "days", public_holidays="2024-03-06")
        assert result.last_working_day == date(2024, 3, 11)
        assert result.holidays_in_period == 1

    def test_holiday_list_moves_last_day_back(self) -> None:
        result = last_working_day("2024-03-01", 4, "weeks", public_holidays=["2024-03-28", "2024-12-25"])
        assert result.last_working_day == date(2024, 3, 27)
        assert result.holidays_in_period == 0


# =============================================================================
# CONTRACT DURATION
# =============================================================================


class TestContractDuration:
    """Тесты для contract_duration"""

    def test_full_leap_year(self) -> None:
        result = contract_duration("2024-01-01", "2024-12-31")
        assert (result.years, result.months, result.days) == (1, 0, 0)
        assert result.total_days == 366

    def test_same_day_is_one_day(self) -> None:
        result = contract_duration("2024-05-05", "2024-05-05")
        assert result.total_days == 1
        assert (result.years, result.months, result.days) == (0, 0, 1)

    def test_months(self) -> None:
        result = contract_duration("2024-01-15", "2024-03-14")
        assert (result.years, result.months, result.days) == (0, 2, 0)
        assert result.total_days == 60
        assert result.total_weeks == pytest.approx(60 / 7)

    def test_end_before_start(self) -> None:
        with pytest.raises(DateRangeError):
            contract_duration("2024-03-01", "2024-02-01")


# =============================================================================
# ANNIVERSARIES & ROTATION
# =============================================================================


class TestAnniversaries:
    """Тесты для employment_anniversaries"""

    def test_schedule(self) -> None:
        result = employment_anniversaries("2015-06-10", today="2024-06-01")
        assert result.years_of_service == 8
        assert [a.year for a in result.past] == [4, 5, 6, 7, 8]
        assert [a.year for a in result.upcoming] == [9, 10, 11, 12, 13]
        assert result.next_anniversary.date == date(2024, 6, 10)
        assert result.next_anniversary.days_until == 9
        assert result.past[-1].days_ago == 357

    def test_first_year(self) -> None:
        result = employment_anniversaries("2024-01-01", today="2024-06-01")
        assert result.years_of_service == 0
        assert result.past == ()
        assert len(result.upcoming) == ANNIVERSARY_WINDOW

    def test_on_anniversary_day(self) -> None:
        result = employment_anniversaries("2020-06-01", today="2024-06-01")
        assert result.years_of_service == 4
        assert result.past[-1].days_ago == 0
        assert result.next_anniversary.year == 5

    def test_future_hire(self) -> None:
        with pytest.raises(DateRangeError) as exc:
            employment_anniversaries("2030-01-01", today="2024-06-01")
        assert exc.value.field == "hire_date"


class TestShiftRotation:
    """Тесты для shift_rotation"""

    def test_two_on_two_off(self) -> None:
        result = shift_rotation("2024-01-01", 2, 2)
        assert result.cycle_length == 4
        assert result.work_days[:3] == (date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 5))
        assert result.off_days[:2] == (date(2024, 1, 3), date(2024, 1, 4))

    def test_covers_horizon(self) -> None:
        result = shift_rotation("2024-01-01", 4, 3, config=RotationConfig(horizon_days=28))
        days = len(result.work_days) + len(result.off_days)
        assert days >= 28
        assert days % 7 == 0

    def test_no_days_off(self) -> None:
        result = shift_rotation("2024-01-01", 5, 0)
        assert result.off_days == ()

    def test_days_on_required(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            shift_rotation("2024-01-01", 0, 2)
        assert exc.value.field == "days_on"
