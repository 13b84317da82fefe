"""
Special Functions — Bessel Functions of the First and Second Kind

Целочисленный порядок n ∈ [0, 10], действительный аргумент x.

Для порядков 0 и 1 используются рациональные / асимптотические
аппроксимации Abramowitz & Stegun (в форме Numerical Recipes, точность ~1e-8).
Для n ≥ 2:
- Y_n: прямая (upward) рекуррентность — устойчива для Y при любом x > 0
- J_n: прямая рекуррентность при |x| > n, иначе обратная рекуррентность
  Миллера с нормировкой J_0 + 2·ΣJ_2k = 1

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. J_n(−x) = (−1)^n · J_n(x)
2. Y_n(0) = −inf (сингулярность, infinity sentinel)
3. Y_n(x) для x < 0 не является действительным → nan
4. Точки графика с нечисловыми значениями заменяются на None

ФОРМУЛЫ:
    Рекуррентность: B_{n+1}(x) = (2n / x) · B_n(x) − B_{n−1}(x)
"""

import math
from typing import Final, NamedTuple

from calcsuite.core.math.numerical_safeguards import (
    finite_or_none,
    validate_finite,
    validate_integer,
    validate_positive,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Допустимый порядок
BESSEL_MIN_ORDER: Final[int] = 0
BESSEL_MAX_ORDER: Final[int] = 10

# Обратная рекуррентность Миллера
MILLER_ACC: Final[float] = 160.0  # определяет стартовый индекс
MILLER_BIGNO: Final[float] = 1.0e10  # порог перенормировки
MILLER_BIGNI: Final[float] = 1.0e-10

# Граница перехода от рациональной к асимптотической аппроксимации
ASYMPTOTIC_THRESHOLD: Final[float] = 8.0

TWO_OVER_PI: Final[float] = 0.636619772

# График
CHART_POINTS_DEFAULT: Final[int] = 100
CHART_MIN_RANGE: Final[float] = 20.0
CHART_RANGE_FACTOR: Final[float] = 1.5


# =============================================================================
# RESULT TYPES
# =============================================================================


class BesselResult(NamedTuple):
    """Значения J_n(x) и Y_n(x)."""

    order: int
    x: float
    j: float
    y: float  # −inf при x = 0, nan при x < 0


class BesselChartPoint(NamedTuple):
    """Точка графика; None для нечисловых значений."""

    x: float
    j: float | None
    y: float | None


# =============================================================================
# ORDER 0 & 1
# =============================================================================


def _j0(x: float) -> float:
    ax = abs(x)
    if ax == 0.0:
        return 1.0

    if ax < ASYMPTOTIC_THRESHOLD:
        y = x * x
        num = 57568490574.0 + y * (-13362590354.0 + y * (651619640.7 + y * (
            -11214424.18 + y * (77392.33017 + y * (-184.9052456)))))
        den = 57568490411.0 + y * (1029532985.0 + y * (9494680.718 + y * (
            59272.64853 + y * (267.8532712 + y * 1.0))))
        return num / den

    z = 8.0 / ax
    y = z * z
    xx = ax - 0.785398164
    p0, q0 = _asymptotic_order0(y)
    return math.sqrt(TWO_OVER_PI / ax) * (math.cos(xx) * p0 - z * math.sin(xx) * q0)


def _j1(x: float) -> float:
    ax = abs(x)
    if ax == 0.0:
        return 0.0

    if ax < ASYMPTOTIC_THRESHOLD:
        y = x * x
        num = x * (72362614232.0 + y * (-7895059235.0 + y * (242396853.1 + y * (
            -2972611.439 + y * (15704.48260 + y * (-30.16036606))))))
        den = 144725228442.0 + y * (2300535178.0 + y * (18583304.74 + y * (
            99447.43394 + y * (376.9991397 + y * 1.0))))
        return num / den

    z = 8.0 / ax
    y = z * z
    xx = ax - 2.356194491
    p1, q1 = _asymptotic_order1(y)
    value = math.sqrt(TWO_OVER_PI / ax) * (math.cos(xx) * p1 - z * math.sin(xx) * q1)
    return -value if x < 0 else value


def _y0(x: float) -> float:
    # x > 0 гарантируется вызывающим кодом
    if x < ASYMPTOTIC_THRESHOLD:
        y = x * x
        num = -2957821389.0 + y * (7062834065.0 + y * (-512359803.6 + y * (
            10879881.29 + y * (-86327.92757 + y * 228.4622733))))
        den = 40076544269.0 + y * (745249964.8 + y * (7189466.438 + y * (
            47447.26470 + y * (226.1030244 + y * 1.0))))
        return num / den + TWO_OVER_PI * _j0(x) * math.log(x)

    z = 8.0 / x
    y = z * z
    xx = x - 0.785398164
    p0, q0 = _asymptotic_order0(y)
    return math.sqrt(TWO_OVER_PI / x) * (math.sin(xx) * p0 + z * math.cos(xx) * q0)


def _y1(x: float) -> float:
    if x < ASYMPTOTIC_THRESHOLD:
        y = x * x
        num = x * (-0.4900604943e13 + y * (0.1275274390e13 + y * (-0.5153438139e11 + y * (
            0.7349264551e9 + y * (-0.4237922726e7 + y * 0.8511937935e4)))))
        den = 0.2499580570e14 + y * (0.4244419664e12 + y * (0.3733650367e10 + y * (
            0.2245904002e8 + y * (0.1020426050e6 + y * (0.3549632885e3 + y)))))
        return num / den + TWO_OVER_PI * (_j1(x) * math.log(x) - 1.0 / x)

    z = 8.0 / x
    y = z * z
    xx = x - 2.356194491
    p1, q1 = _asymptotic_order1(y)
    return math.sqrt(TWO_OVER_PI / x) * (math.sin(xx) * p1 + z * math.cos(xx) * q1)


def _asymptotic_order0(y: float) -> tuple[float, float]:
    p0 = 1.0 + y * (-0.1098628627e-2 + y * (0.2734510407e-4 + y * (
        -0.2073370639e-5 + y * 0.2093887211e-6)))
    q0 = -0.1562499995e-1 + y * (0.1430488765e-3 + y * (-0.6911147651e-5 + y * (
        0.7621095161e-6 - y * 0.934935152e-7)))
    return p0, q0


def _asymptotic_order1(y: float) -> tuple[float, float]:
    p1 = 1.0 + y * (0.183105e-2 + y * (-0.3516396496e-4 + y * (
        0.2457520174e-5 + y * (-0.240337019e-6))))
    q1 = 0.04687499995 + y * (-0.2002690873e-3 + y * (0.8449199096e-5 + y * (
        -0.88228987e-6 + y * 0.105787412e-6)))
    return p1, q1


# =============================================================================
# INTEGER ORDER
# =============================================================================


def _validate_order(n: int) -> int:
    validate_integer(n, "n", min_value=BESSEL_MIN_ORDER, max_value=BESSEL_MAX_ORDER)
    return int(n)


def bessel_j(n: int, x: float) -> float:
    """
    Функция Бесселя первого рода J_n(x).

    Args:
        n: Порядок (целое, 0..10)
        x: Аргумент (любое действительное)

    Returns:
        J_n(x)

    Raises:
        CalculatorInputError: Если порядок вне диапазона или x не число

    Examples:
        >>> round(bessel_j(0, 1.0), 6)
        0.765198
        >>> bessel_j(3, 0.0)
        0.0
    """
    n = _validate_order(n)
    validate_finite(x, "x")

    if n == 0:
        return _j0(x)
    if n == 1:
        return _j1(x)

    ax = abs(x)
    if ax == 0.0:
        return 0.0

    tox = 2.0 / ax
    if ax > n:
        # Прямая рекуррентность от J_0, J_1
        bjm = _j0(ax)
        bj = _j1(ax)
        for j in range(1, n):
            bjp = j * tox * bj - bjm
            bjm = bj
            bj = bjp
        value = bj
    else:
        # Обратная рекуррентность Миллера
        m = 2 * ((n + int(math.sqrt(MILLER_ACC * n))) // 2)
        use_in_sum = False
        bjp = 0.0
        value = 0.0
        norm = 0.0
        bj = 1.0
        for j in range(m, 0, -1):
            bjm = j * tox * bj - bjp
            bjp = bj
            bj = bjm
            if abs(bj) > MILLER_BIGNO:
                bj *= MILLER_BIGNI
                bjp *= MILLER_BIGNI
                value *= MILLER_BIGNI
                norm *= MILLER_BIGNI
            if use_in_sum:
                norm += bj
            use_in_sum = not use_in_sum
            if j == n:
                value = bjp
        norm = 2.0 * norm - bj
        value /= norm

    return -value if x < 0 and n % 2 == 1 else value


def bessel_y(n: int, x: float) -> float:
    """
    Функция Бесселя второго рода (Неймана) Y_n(x).

    Args:
        n: Порядок (целое, 0..10)
        x: Аргумент

    Returns:
        Y_n(x); −inf при x = 0; nan при x < 0

    Examples:
        >>> round(bessel_y(0, 1.0), 6)
        0.088257
        >>> bessel_y(2, 0.0)
        -inf
    """
    n = _validate_order(n)
    validate_finite(x, "x")

    if x == 0.0:
        return -math.inf
    if x < 0:
        return math.nan

    if n == 0:
        return _y0(x)
    if n == 1:
        return _y1(x)

    tox = 2.0 / x
    bym = _y0(x)
    by = _y1(x)
    for j in range(1, n):
        byp = j * tox * by - bym
        bym = by
        by = byp
    return by


def bessel_functions(n: int, x: float) -> BesselResult:
    """J_n(x) и Y_n(x) одним вызовом (форма калькулятора)."""
    return BesselResult(order=int(n), x=x, j=bessel_j(n, x), y=bessel_y(n, x))


def bessel_chart_series(
    n: int, x: float, points: int = CHART_POINTS_DEFAULT
) -> list[BesselChartPoint]:
    """
    Точки графика J_n и Y_n на отрезке [0, max(20, 1.5·|x|)].

    Args:
        n: Порядок
        x: Выбранный аргумент (определяет ширину отрезка)
        points: Число интервалов (точек будет points + 1)

    Returns:
        Список BesselChartPoint; сингулярные значения Y заменены на None
    """
    validate_finite(x, "x")
    validate_positive(points, "points")
    validate_integer(points, "points", min_value=1)
    points = int(points)

    x_max = max(CHART_MIN_RANGE, CHART_RANGE_FACTOR * abs(x))
    step = x_max / points

    series = []
    for i in range(points + 1):
        xi = i * step
        series.append(
            BesselChartPoint(
                x=xi,
                j=finite_or_none(bessel_j(n, xi)),
                y=finite_or_none(bessel_y(n, xi)),
            )
        )
    return series
