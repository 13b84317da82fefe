"""
Numerical Safeguards — Safe Math Primitives & Input Validation

Модуль обеспечивает численную устойчивость и единую валидацию входов
для всех калькуляторов:
- Безопасное деление с защитой от деления на ноль
- NaN/Inf санитизация для предотвращения распространения невалидных значений
- Epsilon-защиты для сравнений float с учётом машинной точности
- Валидация входов с field-level ошибкой (CalculatorInputError)
- Каноническое текстовое представление чисел (format_number)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Невалидный вход отклоняется ДО вычисления (CalculatorInputError)
2. NaN/Inf никогда не принимаются как вход
3. Float сравнения всегда учитывают машинную точность
4. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для общих вычислений и сравнений
EPS_CALC: Final[float] = 1e-12

# Epsilon для сравнения float (относительная толерантность)
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Epsilon для сравнения float (абсолютная толерантность)
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12

# Максимум знаков после запятой в format_number
FORMAT_MAX_DECIMALS: Final[int] = 10


# =============================================================================
# EXCEPTIONS
# =============================================================================


class CalculatorInputError(ValueError):
    """
    Невалидный вход калькулятора.

    Поднимается синхронно до любого вычисления. Атрибут `field` содержит
    имя поля формы, к которому относится ошибка (inline-сообщение),
    или None, если ошибка относится ко входу в целом.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ
# =============================================================================


def safe_divide(
    numerator: float,
    denominator: float,
    eps: float = EPS_CALC,
    fallback: float = 0.0,
) -> float:
    """
    Безопасное деление с защитой от деления на ноль и NaN/Inf.

    Args:
        numerator: Числитель
        denominator: Знаменатель
        eps: Порог, ниже которого знаменатель считается нулём
        fallback: Значение при делении на ноль или невалидном результате

    Returns:
        numerator / denominator или fallback

    Examples:
        >>> safe_divide(10.0, 2.0)
        5.0
        >>> safe_divide(10.0, 0.0)
        0.0
        >>> safe_divide(10.0, 0.0, fallback=-1.0)
        -1.0
    """
    if not is_valid_float(numerator) or not is_valid_float(denominator):
        return fallback

    if abs(denominator) < eps:
        return fallback

    return sanitize_float(numerator / denominator, fallback=fallback)


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, что значение является валидным конечным числом.

    Returns:
        True если value не NaN и не Inf
    """
    return math.isfinite(value)


def sanitize_float(value: float, fallback: float = 0.0) -> float:
    """
    Замена NaN/Inf на fallback.

    Examples:
        >>> sanitize_float(1.5)
        1.5
        >>> sanitize_float(float("nan"))
        0.0
    """
    if is_valid_float(value):
        return value
    return fallback


def finite_or_none(value: float) -> float | None:
    """Конечное значение или None (для точек графика)."""
    return value if is_valid_float(value) else None


# =============================================================================
# EPSILON-СРАВНЕНИЯ
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом относительной и абсолютной толерантности.

    Examples:
        >>> is_close(0.1 + 0.2, 0.3)
        True
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def is_zero(value: float, tol: float = EPS_FLOAT_COMPARE_ABS) -> bool:
    """Проверка |value| <= tol."""
    return abs(value) <= tol


# =============================================================================
# УТИЛИТЫ
# =============================================================================


def clamp(value: float, min_value: float, max_value: float) -> float:
    """
    Ограничение значения диапазоном [min_value, max_value].

    Raises:
        ValueError: Если min_value > max_value
    """
    if min_value > max_value:
        raise ValueError(f"min_value ({min_value}) must be <= max_value ({max_value})")
    return max(min_value, min(value, max_value))


def round_to_epsilon(value: float, eps: float) -> float:
    """
    Округление к ближайшему кратному eps.

    Examples:
        >>> round_to_epsilon(12.37, 0.05)
        12.35
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")
    steps = round(value / eps)
    return round(steps * eps, 12)


def format_number(value: float, max_decimals: int = FORMAT_MAX_DECIMALS) -> str:
    """
    Каноническое короткое текстовое представление числа.

    - Целые значения выводятся без десятичной точки ("4", а не "4.0")
    - Хвостовые нули отбрасываются ("2.5", а не "2.5000000000")
    - "-0" нормализуется в "0"

    Examples:
        >>> format_number(4.0)
        '4'
        >>> format_number(-2.5)
        '-2.5'
        >>> format_number(1 / 3)
        '0.3333333333'
        >>> format_number(-0.0)
        '0'
    """
    if not is_valid_float(value):
        return str(value)

    rounded = round(value, max_decimals)
    if rounded == int(rounded):
        return str(int(rounded))

    text = f"{rounded:.{max_decimals}f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


# =============================================================================
# ВАЛИДАЦИЯ ВХОДОВ
# =============================================================================


def validate_finite(value: float, name: str) -> None:
    """
    Валидация, что значение является конечным числом.

    Raises:
        CalculatorInputError: Если value NaN/Inf или не число
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CalculatorInputError(f"{name} must be a number, got {value!r}", field=name)

    if not is_valid_float(value):
        raise CalculatorInputError(
            f"{name} must be a valid number (not NaN/Inf), got {value}", field=name
        )


def validate_positive(value: float, name: str) -> None:
    """
    Валидация, что значение строго положительное.

    Raises:
        CalculatorInputError: Если value <= 0 или NaN/Inf
    """
    validate_finite(value, name)

    if value <= 0:
        raise CalculatorInputError(f"{name} must be positive, got {value}", field=name)


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        CalculatorInputError: Если value < 0 или NaN/Inf
    """
    validate_finite(value, name)

    if value < 0:
        raise CalculatorInputError(f"{name} must be non-negative, got {value}", field=name)


def validate_non_zero(value: float, name: str) -> None:
    """
    Валидация делителя: значение не должно быть нулём.

    Raises:
        CalculatorInputError: Если value == 0 или NaN/Inf
    """
    validate_finite(value, name)

    if is_zero(value):
        raise CalculatorInputError(f"{name} must not be zero", field=name)


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Валидация, что значение в заданном диапазоне (границы включительно).

    Raises:
        CalculatorInputError: Если value вне диапазона или NaN/Inf
    """
    validate_finite(value, name)

    if min_value is not None and value < min_value:
        raise CalculatorInputError(f"{name} must be >= {min_value}, got {value}", field=name)

    if max_value is not None and value > max_value:
        raise CalculatorInputError(f"{name} must be <= {max_value}, got {value}", field=name)


def validate_integer(
    value: int,
    name: str,
    min_value: int | None = None,
    max_value: int | None = None,
) -> None:
    """
    Валидация целочисленного входа (порядок функции, число периодов и т.п.).

    Float с целым значением (например, 3.0 из формы) допускается.

    Raises:
        CalculatorInputError: Если value не целое или вне диапазона
    """
    validate_finite(value, name)

    if isinstance(value, float) and not value.is_integer():
        raise CalculatorInputError(f"{name} must be an integer, got {value}", field=name)

    validate_in_range(value, name, min_value, max_value)


def validate_choice(value: str, name: str, choices) -> None:
    """
    Валидация enum-выбора формы.

    Raises:
        CalculatorInputError: Если value не входит в choices
    """
    if value not in choices:
        allowed = ", ".join(sorted(str(c) for c in choices))
        raise CalculatorInputError(
            f"{name} must be one of: {allowed}; got {value!r}", field=name
        )
