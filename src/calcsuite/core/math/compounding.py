"""
Compounding — Discrete Growth, Doubling Time & Annuity Projections

Модуль обеспечивает расчёты сложного роста:
- Итеративный рост на фиксированный процент за N периодов (с серией для графика)
- Время удвоения: точная логарифмическая формула и Rule of 72
- Будущая стоимость единовременной суммы и аннуитета
- Opportunity cost: будущая стоимость регулярных трат при инвестировании
- Рост благосостояния при отказе от привычек

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. compounding(v, 0%, N) = v для любого N
2. Нулевая ставка аннуитета → P × n (без деления на ноль)
3. Серии начинаются с периода 0 (исходное значение)

ФОРМУЛЫ:
    v_k = v_{k−1} × (1 + p / 100)
    T_double = ln 2 / ln(1 + r / 100);   T_72 ≈ 72 / r
    FV_lump = PV × (1 + r / 100)^t
    FV_annuity = P × ((1 + i)^n − 1) / i,  i = r / 12 / 100,  n = 12 × years
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, NamedTuple

from calcsuite.core.domain.trip import HabitFrequency
from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
    is_zero,
    validate_choice,
    validate_in_range,
    validate_integer,
    validate_non_negative,
    validate_positive,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Rule of 72
RULE_OF_72: Final[float] = 72.0

MONTHS_PER_YEAR: Final[int] = 12

# Ограничение горизонта (защита от переполнения в сериях)
MAX_PERIODS: Final[int] = 1000
MAX_YEARS: Final[int] = 100

# Ставка доходности: верхняя граница формы
MAX_ANNUAL_RATE: Final[float] = 100.0


class SpendingFrequency(str, Enum):
    """Частота покупок для opportunity cost."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# Покупок в год на единицу частоты
PURCHASES_PER_YEAR: Final[dict[str, int]] = {
    SpendingFrequency.WEEKLY.value: 52,
    SpendingFrequency.MONTHLY.value: 12,
    SpendingFrequency.YEARLY.value: 1,
}

# Множитель перевода стоимости привычки в месячную
HABIT_MONTHLY_MULTIPLIER: Final[dict[str, float]] = {
    HabitFrequency.DAILY.value: 30.44,
    HabitFrequency.WEEKLY.value: 4.33,
    HabitFrequency.MONTHLY.value: 1.0,
}


@dataclass(frozen=True)
class OpportunityCostConfig:
    """Горизонты проекции opportunity cost (годы)."""

    horizons_years: tuple[int, ...] = field(default=(10, 20, 30))


# =============================================================================
# RESULT TYPES
# =============================================================================


class GrowthPoint(NamedTuple):
    """Точка серии роста."""

    period: int
    value: float


class CompoundingResult(NamedTuple):
    final_value: float
    total_growth: float
    total_growth_percentage: float
    series: tuple[GrowthPoint, ...]


class DoublingTime(NamedTuple):
    exact_periods: float
    rule_of_72_periods: float
    approximation_error: float  # rule_of_72 − exact


class InvestmentGrowth(NamedTuple):
    net_growth: float
    growth_percentage: float


class DelayedGratification(NamedTuple):
    future_value: float
    total_growth: float
    growth_multiple: float
    series: tuple[GrowthPoint, ...]


class HorizonProjection(NamedTuple):
    years: int
    total_spent: float
    future_value: float
    investment_gain: float


class OpportunityCost(NamedTuple):
    annual_spending: float
    monthly_contribution: float
    projections: tuple[HorizonProjection, ...]


class HabitWealth(NamedTuple):
    monthly_savings: float
    total_invested: float
    future_value: float
    profit: float


# =============================================================================
# DISCRETE GROWTH
# =============================================================================


def compounding_increase(
    initial_value: float, percentage_increase: float, periods: int
) -> CompoundingResult:
    """
    Итеративный рост на фиксированный процент за N дискретных периодов.

    Args:
        initial_value: Начальное значение (> 0)
        percentage_increase: Рост за период в процентах (>= 0)
        periods: Число периодов (целое, 1..MAX_PERIODS)

    Returns:
        CompoundingResult с серией периодов 0..N

    Raises:
        CalculatorInputError: Невалидный вход

    Examples:
        >>> compounding_increase(100, 10, 1).final_value
        110.00000000000001
        >>> compounding_increase(100, 0, 5).final_value
        100.0
    """
    validate_positive(initial_value, "initial_value")
    validate_non_negative(percentage_increase, "percentage_increase")
    validate_integer(periods, "periods", min_value=1, max_value=MAX_PERIODS)

    factor = 1 + percentage_increase / 100
    value = float(initial_value)
    series = [GrowthPoint(0, value)]
    for period in range(1, int(periods) + 1):
        value *= factor
        series.append(GrowthPoint(period, value))

    growth = value - initial_value
    return CompoundingResult(
        final_value=value,
        total_growth=growth,
        total_growth_percentage=growth / initial_value * 100,
        series=tuple(series),
    )


def doubling_time(rate: float) -> DoublingTime:
    """
    Время удвоения при ставке rate% за период.

    Examples:
        >>> round(doubling_time(8).exact_periods, 2)
        9.01
        >>> doubling_time(8).rule_of_72_periods
        9.0
    """
    validate_positive(rate, "rate")

    exact = math.log(2) / math.log1p(rate / 100)
    rule_72 = RULE_OF_72 / rate
    return DoublingTime(
        exact_periods=exact,
        rule_of_72_periods=rule_72,
        approximation_error=rule_72 - exact,
    )


def investment_growth(initial_amount: float, final_amount: float) -> InvestmentGrowth:
    """
    Рост инвестиции: чистый прирост и процент.

    Examples:
        >>> investment_growth(1000, 1500)
        InvestmentGrowth(net_growth=500, growth_percentage=50.0)
    """
    validate_positive(initial_amount, "initial_amount")
    validate_non_negative(final_amount, "final_amount")

    net = final_amount - initial_amount
    return InvestmentGrowth(net_growth=net, growth_percentage=net / initial_amount * 100)


# =============================================================================
# FUTURE VALUE
# =============================================================================


def future_value(present_value: float, annual_rate: float, years: float) -> float:
    """
    Будущая стоимость единовременной суммы: PV × (1 + r/100)^t.
    """
    validate_non_negative(present_value, "present_value")
    validate_in_range(annual_rate, "annual_rate", 0.0, MAX_ANNUAL_RATE)
    validate_in_range(years, "years", 0.0, MAX_YEARS)
    return present_value * (1 + annual_rate / 100) ** years


def future_value_of_annuity(monthly_payment: float, annual_rate: float, years: float) -> float:
    """
    Будущая стоимость ежемесячного аннуитета (взнос в конце месяца).

    Args:
        monthly_payment: Ежемесячный взнос (>= 0)
        annual_rate: Годовая ставка в процентах (0..100)
        years: Горизонт в годах (0..MAX_YEARS)

    Returns:
        P × ((1 + i)^n − 1) / i; при i = 0 → P × n

    Examples:
        >>> future_value_of_annuity(100, 0, 1)
        1200
        >>> round(future_value_of_annuity(100, 12, 1), 2)
        1268.25
    """
    validate_non_negative(monthly_payment, "monthly_payment")
    validate_in_range(annual_rate, "annual_rate", 0.0, MAX_ANNUAL_RATE)
    validate_in_range(years, "years", 0.0, MAX_YEARS)

    months = years * MONTHS_PER_YEAR
    monthly_rate = annual_rate / MONTHS_PER_YEAR / 100
    if is_zero(monthly_rate):
        return monthly_payment * months
    return monthly_payment * ((1 + monthly_rate) ** months - 1) / monthly_rate


def delayed_gratification(
    purchase_cost: float, annual_rate: float, years: int
) -> DelayedGratification:
    """
    Будущая стоимость суммы покупки, если её инвестировать вместо траты.

    Returns:
        DelayedGratification с годовой серией 0..years
    """
    validate_positive(purchase_cost, "purchase_cost")
    validate_integer(years, "years", min_value=1, max_value=MAX_YEARS)

    series = tuple(
        GrowthPoint(year, future_value(purchase_cost, annual_rate, year))
        for year in range(int(years) + 1)
    )
    final = series[-1].value
    return DelayedGratification(
        future_value=final,
        total_growth=final - purchase_cost,
        growth_multiple=final / purchase_cost,
        series=series,
    )


# =============================================================================
# OPPORTUNITY COST
# =============================================================================


def opportunity_cost(
    item_cost: float,
    purchase_frequency: float,
    frequency_unit: str,
    annual_return_rate: float,
    config: OpportunityCostConfig | None = None,
) -> OpportunityCost:
    """
    Opportunity cost регулярных покупок.

    Годовые траты = cost × frequency × {weekly 52, monthly 12, yearly 1};
    ежемесячный взнос = годовые / 12; проекция аннуитета на горизонтах конфига.

    Args:
        item_cost: Стоимость одной покупки (> 0)
        purchase_frequency: Количество покупок за единицу частоты (> 0)
        frequency_unit: "weekly", "monthly" или "yearly"
        annual_return_rate: Ожидаемая годовая доходность в процентах
        config: Горизонты проекции (default: 10/20/30 лет)

    Examples:
        >>> result = opportunity_cost(5, 5, "weekly", 0)
        >>> result.annual_spending
        1300
        >>> round(result.projections[0].future_value, 2)
        13000.0
    """
    config = config or OpportunityCostConfig()
    validate_positive(item_cost, "item_cost")
    validate_positive(purchase_frequency, "purchase_frequency")
    validate_choice(frequency_unit, "frequency_unit", PURCHASES_PER_YEAR)
    validate_in_range(annual_return_rate, "annual_return_rate", 0.0, MAX_ANNUAL_RATE)

    annual = item_cost * purchase_frequency * PURCHASES_PER_YEAR[frequency_unit]
    monthly = annual / MONTHS_PER_YEAR

    projections = []
    for years in config.horizons_years:
        fv = future_value_of_annuity(monthly, annual_return_rate, years)
        spent = annual * years
        projections.append(
            HorizonProjection(
                years=years,
                total_spent=spent,
                future_value=fv,
                investment_gain=fv - spent,
            )
        )

    logger.debug(
        "opportunity_cost: annual=%.2f monthly=%.2f horizons=%s",
        annual,
        monthly,
        config.horizons_years,
    )
    return OpportunityCost(
        annual_spending=annual,
        monthly_contribution=monthly,
        projections=tuple(projections),
    )


def habit_wealth_growth(habits, annual_return_rate: float, years: int) -> HabitWealth:
    """
    Рост благосостояния при инвестировании денег, потраченных на привычки.

    Args:
        habits: Последовательность Habit (cost, frequency) или dict с теми же ключами
        annual_return_rate: Годовая доходность в процентах
        years: Горизонт в годах

    Raises:
        CalculatorInputError: Пустой список привычек
    """
    habits = list(habits)
    if not habits:
        raise CalculatorInputError("at least one habit is required", field="habits")
    validate_integer(years, "years", min_value=1, max_value=MAX_YEARS)

    monthly = 0.0
    for index, habit in enumerate(habits):
        cost = habit["cost"] if isinstance(habit, dict) else habit.cost
        frequency = habit["frequency"] if isinstance(habit, dict) else habit.frequency
        frequency = getattr(frequency, "value", frequency)
        validate_non_negative(cost, f"habits[{index}].cost")
        validate_choice(frequency, f"habits[{index}].frequency", HABIT_MONTHLY_MULTIPLIER)
        monthly += cost * HABIT_MONTHLY_MULTIPLIER[frequency]

    fv = future_value_of_annuity(monthly, annual_return_rate, years)
    invested = monthly * MONTHS_PER_YEAR * years
    return HabitWealth(
        monthly_savings=monthly,
        total_invested=invested,
        future_value=fv,
        profit=fv - invested,
    )
