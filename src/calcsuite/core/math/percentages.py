"""
Percentages — Percentage Arithmetic Calculators

Все проценты выражены в процентных единицах (25 означает 25%).

ФОРМУЛЫ:
    discount%         = (original − sale) / original × 100
    percent error     = |observed − true| / |true| × 100
    relative change   = (new − old) / |old| × 100
    percentage points = final% − initial%
    % of %            = p1 × p2 / 100
    comparative diff  = |a − b| / ((a + b) / 2) × 100
    slope grade       = rise / run × 100

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Делитель никогда не равен нулю (CalculatorInputError до вычисления)
2. Вход NaN/Inf отклоняется
"""

import math
from enum import Enum
from typing import NamedTuple

from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
    is_zero,
    validate_finite,
    validate_non_negative,
    validate_non_zero,
    validate_positive,
)


class ChangeDirection(str, Enum):
    """Направление изменения."""

    INCREASE = "increase"
    DECREASE = "decrease"
    NO_CHANGE = "no change"


# =============================================================================
# RESULT TYPES
# =============================================================================


class SaleDiscount(NamedTuple):
    amount_saved: float
    discount_percentage: float


class RelativeChange(NamedTuple):
    absolute_change: float
    percentage_change: float
    direction: ChangeDirection


class PercentagePointChange(NamedTuple):
    percentage_points: float
    relative_change: float | None  # None при initial = 0
    direction: ChangeDirection


class GoalProgress(NamedTuple):
    progress_percentage: float
    remaining: float
    goal_reached: bool


class AveragePercentage(NamedTuple):
    average: float
    minimum: float
    maximum: float
    count: int
    weighted: bool


class SlopeGrade(NamedTuple):
    grade_percentage: float
    angle_degrees: float
    ratio: str  # "1:20"


# =============================================================================
# CALCULATORS
# =============================================================================


def calculate_sale_discount(original_price: float, sale_price: float) -> SaleDiscount:
    """
    Скидка: сэкономленная сумма и процент скидки.

    Args:
        original_price: Исходная цена (> 0)
        sale_price: Цена со скидкой (>= 0)

    Raises:
        CalculatorInputError: original_price <= 0 или sale_price < 0

    Examples:
        >>> calculate_sale_discount(120, 90)
        SaleDiscount(amount_saved=30, discount_percentage=25.0)
    """
    validate_positive(original_price, "original_price")
    validate_non_negative(sale_price, "sale_price")

    saved = original_price - sale_price
    return SaleDiscount(
        amount_saved=saved,
        discount_percentage=saved / original_price * 100,
    )


def percent_error(observed: float, true_value: float) -> float:
    """
    Процентная ошибка |observed − true| / |true| × 100.

    Examples:
        >>> percent_error(9.5, 10)
        5.0
    """
    validate_finite(observed, "observed")
    validate_non_zero(true_value, "true_value")
    return abs(observed - true_value) / abs(true_value) * 100


def _direction(delta: float) -> ChangeDirection:
    if is_zero(delta):
        return ChangeDirection.NO_CHANGE
    return ChangeDirection.INCREASE if delta > 0 else ChangeDirection.DECREASE


def relative_change(original: float, new: float) -> RelativeChange:
    """
    Относительное (историческое) изменение между двумя значениями.

    Делитель берётся по модулю, чтобы знак процента совпадал
    с направлением изменения при отрицательном исходном значении.

    Examples:
        >>> relative_change(50, 75).percentage_change
        50.0
    """
    validate_non_zero(original, "original")
    validate_finite(new, "new")

    delta = new - original
    return RelativeChange(
        absolute_change=delta,
        percentage_change=delta / abs(original) * 100,
        direction=_direction(delta),
    )


def percentage_point_difference(initial: float, final: float) -> PercentagePointChange:
    """
    Разница в процентных пунктах и относительное изменение.

    Examples:
        >>> percentage_point_difference(10, 15).percentage_points
        5
    """
    validate_finite(initial, "initial")
    validate_finite(final, "final")

    points = final - initial
    relative = None if is_zero(initial) else points / abs(initial) * 100
    return PercentagePointChange(
        percentage_points=points,
        relative_change=relative,
        direction=_direction(points),
    )


def percentage_of_percentage(first: float, second: float) -> float:
    """
    Процент от процента: first% от second%.

    Examples:
        >>> percentage_of_percentage(50, 20)
        10.0
    """
    validate_finite(first, "first")
    validate_finite(second, "second")
    return first * second / 100


def value_percentage(percentage: float, total: float) -> float:
    """
    Значение, соответствующее percentage% от total.

    Examples:
        >>> value_percentage(15, 200)
        30.0
    """
    validate_non_negative(percentage, "percentage")
    validate_finite(total, "total")
    return percentage / 100 * total


def percent_to_goal(current: float, goal: float) -> GoalProgress:
    """Прогресс к цели в процентах и остаток."""
    validate_finite(current, "current")
    validate_non_zero(goal, "goal")

    progress = current / goal * 100
    return GoalProgress(
        progress_percentage=progress,
        remaining=max(goal - current, 0.0) if goal > 0 else min(goal - current, 0.0),
        goal_reached=progress >= 100,
    )


def decimal_to_percent(decimal: float) -> float:
    """Десятичная дробь → проценты (0.25 → 25)."""
    validate_finite(decimal, "decimal")
    return decimal * 100


def fraction_to_percent(numerator: float, denominator: float) -> float:
    """Обыкновенная дробь → проценты (3/4 → 75)."""
    validate_finite(numerator, "numerator")
    validate_non_zero(denominator, "denominator")
    return numerator / denominator * 100


def average_percentage(values, weights=None) -> AveragePercentage:
    """
    Среднее (простое или взвешенное) набора процентов.

    Args:
        values: Непустой список процентов
        weights: Веса той же длины (опционально), сумма весов > 0

    Raises:
        CalculatorInputError: Пустой список, несовпадение длин, нулевая сумма весов
    """
    values = list(values)
    if not values:
        raise CalculatorInputError("values must not be empty", field="values")
    for index, value in enumerate(values):
        validate_finite(value, f"values[{index}]")

    if weights is None:
        average = sum(values) / len(values)
    else:
        weights = list(weights)
        if len(weights) != len(values):
            raise CalculatorInputError(
                f"weights must have {len(values)} entries, got {len(weights)}", field="weights"
            )
        for index, weight in enumerate(weights):
            validate_non_negative(weight, f"weights[{index}]")
        total_weight = sum(weights)
        if is_zero(total_weight):
            raise CalculatorInputError("weights must not sum to zero", field="weights")
        average = sum(v * w for v, w in zip(values, weights)) / total_weight

    return AveragePercentage(
        average=average,
        minimum=min(values),
        maximum=max(values),
        count=len(values),
        weighted=weights is not None,
    )


def comparative_difference(a: float, b: float) -> float:
    """
    Процентная разница двух значений относительно их среднего.

    Examples:
        >>> comparative_difference(40, 60)
        40.0
    """
    validate_non_negative(a, "a")
    validate_non_negative(b, "b")
    if is_zero(a + b):
        raise CalculatorInputError("a and b must not both be zero", field="b")
    return abs(a - b) / ((a + b) / 2) * 100


def slope_percentage(rise: float, run: float) -> SlopeGrade:
    """
    Уклон в процентах, угол в градусах и отношение 1:N.

    Знак угла совпадает со знаком уклона (rise / run).

    Examples:
        >>> slope_percentage(5, 100).grade_percentage
        5.0
    """
    validate_finite(rise, "rise")
    validate_non_zero(run, "run")

    grade = rise / run * 100
    angle = math.degrees(math.atan(rise / run))
    if is_zero(rise):
        ratio = "0"
    else:
        ratio = f"1:{abs(run / rise):.2f}".rstrip("0").rstrip(".")
    return SlopeGrade(grade_percentage=grade, angle_degrees=angle, ratio=ratio)


def time_percentage(partial_seconds: float, total_seconds: float) -> float:
    """
    Доля промежутка времени в процентах.

    Examples:
        >>> time_percentage(1800, 3600)
        50.0
    """
    validate_non_negative(partial_seconds, "partial_seconds")
    validate_positive(total_seconds, "total_seconds")
    return partial_seconds / total_seconds * 100
