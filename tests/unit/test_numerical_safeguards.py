"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Безопасное деление
2. NaN/Inf санитизацию
3. Epsilon-сравнения float
4. Округление и форматирование чисел
5. Валидацию входов с field-level ошибкой
"""

import math

import pytest

from calcsuite.core.math.numerical_safeguards import (
    EPS_CALC,
    CalculatorInputError,
    clamp,
    finite_or_none,
    format_number,
    is_close,
    is_valid_float,
    is_zero,
    round_to_epsilon,
    safe_divide,
    sanitize_float,
    validate_choice,
    validate_finite,
    validate_in_range,
    validate_integer,
    validate_non_negative,
    validate_non_zero,
    validate_positive,
)

# =============================================================================
# ТЕСТЫ БЕЗОПАСНОГО ДЕЛЕНИЯ
# =============================================================================


class TestSafeDivide:
    """Тесты для safe_divide"""

    def test_normal_division(self) -> None:
        """Обычное деление"""
        assert safe_divide(10.0, 4.0) == 2.5

    def test_zero_denominator_returns_fallback(self) -> None:
        """Деление на ноль → fallback"""
        assert safe_divide(10.0, 0.0) == 0.0
        assert safe_divide(10.0, 0.0, fallback=-1.0) == -1.0

    def test_denominator_below_eps(self) -> None:
        """Знаменатель меньше eps считается нулём"""
        assert safe_divide(1.0, EPS_CALC / 10, fallback=7.0) == 7.0

    def test_nan_inputs(self) -> None:
        """NaN во входе → fallback"""
        assert safe_divide(float("nan"), 1.0) == 0.0
        assert safe_divide(1.0, float("inf"), fallback=3.0) == 3.0


# =============================================================================
# ТЕСТЫ NaN/Inf
# =============================================================================


class TestSanitization:
    """Тесты для is_valid_float / sanitize_float / finite_or_none"""

    def test_valid_float(self) -> None:
        assert is_valid_float(1.0)
        assert not is_valid_float(float("nan"))
        assert not is_valid_float(float("-inf"))

    def test_sanitize(self) -> None:
        assert sanitize_float(2.0) == 2.0
        assert sanitize_float(float("inf"), fallback=9.0) == 9.0

    def test_finite_or_none(self) -> None:
        """Для точек графика: нечисловые значения → None"""
        assert finite_or_none(1.5) == 1.5
        assert finite_or_none(float("-inf")) is None


# =============================================================================
# ТЕСТЫ СРАВНЕНИЙ И УТИЛИТ
# =============================================================================


class TestComparisons:
    """Тесты epsilon-сравнений"""

    def test_is_close_handles_float_noise(self) -> None:
        assert is_close(0.1 + 0.2, 0.3)
        assert not is_close(0.3, 0.31)

    def test_is_zero(self) -> None:
        assert is_zero(0.0)
        assert is_zero(1e-13)
        assert not is_zero(1e-6)
        assert is_zero(1e-6, tol=1e-5)


class TestUtilities:
    """Тесты clamp / round_to_epsilon"""

    def test_clamp(self) -> None:
        assert clamp(5.0, 0.0, 1.0) == 1.0
        assert clamp(-5.0, 0.0, 1.0) == 0.0
        assert clamp(0.5, 0.0, 1.0) == 0.5

    def test_clamp_invalid_range(self) -> None:
        with pytest.raises(ValueError, match="must be <="):
            clamp(1.0, 2.0, 1.0)

    def test_round_to_epsilon(self) -> None:
        assert round_to_epsilon(12.37, 0.05) == pytest.approx(12.35)
        assert round_to_epsilon(7.0, 2.0) == pytest.approx(8.0)

    def test_round_to_epsilon_invalid_eps(self) -> None:
        with pytest.raises(ValueError):
            round_to_epsilon(1.0, 0.0)


class TestFormatNumber:
    """Тесты канонического текстового представления"""

    def test_integral_values_without_point(self) -> None:
        assert format_number(4.0) == "4"
        assert format_number(-12.0) == "-12"

    def test_trailing_zeros_stripped(self) -> None:
        assert format_number(2.5) == "2.5"
        assert format_number(0.125) == "0.125"

    def test_negative_zero_normalized(self) -> None:
        assert format_number(-0.0) == "0"
        assert format_number(-1e-12) == "0"

    def test_max_decimals(self) -> None:
        assert format_number(1 / 3) == "0.3333333333"
        assert format_number(2 / 3, max_decimals=3) == "0.667"

    def test_non_finite_passthrough(self) -> None:
        assert format_number(float("inf")) == "inf"


# =============================================================================
# ТЕСТЫ ВАЛИДАЦИИ
# =============================================================================


class TestValidation:
    """Тесты validate_* — ошибка содержит имя поля"""

    def test_finite_rejects_nan_and_inf(self) -> None:
        with pytest.raises(CalculatorInputError, match="NaN/Inf") as exc:
            validate_finite(float("nan"), "price")
        assert exc.value.field == "price"

        with pytest.raises(CalculatorInputError):
            validate_finite(math.inf, "price")

    def test_finite_rejects_non_numbers(self) -> None:
        """Строки и bool не являются числами"""
        with pytest.raises(CalculatorInputError, match="must be a number"):
            validate_finite("12", "amount")
        with pytest.raises(CalculatorInputError):
            validate_finite(True, "amount")

    def test_positive(self) -> None:
        validate_positive(0.1, "rate")
        with pytest.raises(CalculatorInputError, match="must be positive") as exc:
            validate_positive(0, "rate")
        assert exc.value.field == "rate"

    def test_non_negative(self) -> None:
        validate_non_negative(0, "extras")
        with pytest.raises(CalculatorInputError, match="must be non-negative"):
            validate_non_negative(-1, "extras")

    def test_non_zero(self) -> None:
        validate_non_zero(-3, "goal")
        with pytest.raises(CalculatorInputError, match="must not be zero"):
            validate_non_zero(0.0, "goal")

    def test_in_range(self) -> None:
        validate_in_range(50, "buffer", 0, 100)
        validate_in_range(0, "buffer", 0, 100)
        with pytest.raises(CalculatorInputError, match="must be <= 100"):
            validate_in_range(101, "buffer", 0, 100)
        with pytest.raises(CalculatorInputError, match="must be >= 0"):
            validate_in_range(-1, "buffer", 0, 100)

    def test_integer(self) -> None:
        """Float с целым значением допускается"""
        validate_integer(3, "periods")
        validate_integer(3.0, "periods")
        with pytest.raises(CalculatorInputError, match="must be an integer"):
            validate_integer(2.5, "periods")
        with pytest.raises(CalculatorInputError):
            validate_integer(0, "periods", min_value=1)

    def test_choice(self) -> None:
        validate_choice("mph", "speed_unit", {"mph", "kmh"})
        with pytest.raises(CalculatorInputError, match="must be one of: kmh, mph") as exc:
            validate_choice("knots", "speed_unit", {"mph", "kmh"})
        assert exc.value.field == "speed_unit"

    def test_error_is_value_error(self) -> None:
        """CalculatorInputError совместим с ValueError"""
        with pytest.raises(ValueError):
            validate_positive(-1, "x")

    def test_field_defaults_to_none(self) -> None:
        assert CalculatorInputError("bad").field is None
