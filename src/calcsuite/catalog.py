"""
Catalog — Реестр калькуляторов и диспетчеризация payload форм

Каждая страница калькулятора или конвертера описывается CalculatorEntry:
slug страницы, категория, имя JSON Schema контракта и чистая функция.

Поток run_calculator:
    payload (dict) → JSON Schema → адаптация (списки → pydantic записи)
    → функция(**kwargs) → результат

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ошибка контракта или валидации → CalculatorInputError с путём к полю
2. Неизвестный slug → UnknownCalculatorError (KeyError)
3. Функции вызываются только с payload, прошедшим контракт
"""

import dataclasses
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from functools import partial
from typing import Any, Callable, Final

from jsonschema import ValidationError
from pydantic import BaseModel
from pydantic import ValidationError as RecordValidationError

from calcsuite.core.contracts import error_field, validate_payload
from calcsuite.core.domain.geo import RouteStop
from calcsuite.core.domain.shift import BillableTask, OnCallSegment, TeamMember, WorkSegment
from calcsuite.core.domain.trip import Activity, Expense, Habit, PackItem
from calcsuite.core.domain.units import CONVERTERS, convert_material, convert_units
from calcsuite.core.math import algebra, compounding, geodesy, percentages, polynomials
from calcsuite.core.math import electrical, special_functions
from calcsuite.core.math.numerical_safeguards import CalculatorInputError
from calcsuite.employment import dates as employment_dates
from calcsuite.employment import hours
from calcsuite.travel import trip_costs, trip_time

logger = logging.getLogger(__name__)


# =============================================================================
# TYPES
# =============================================================================


class Category(str, Enum):
    """Раздел сайта калькуляторов."""

    MATH = "math"
    FINANCE = "finance"
    CONVERSION = "conversion"
    EMPLOYMENT = "employment"
    TRAVEL = "travel"


class UnknownCalculatorError(KeyError):
    """Калькулятор с таким slug не зарегистрирован."""

    pass


@dataclass(frozen=True)
class CalculatorEntry:
    """
    Запись реестра.

    adapt — преобразование payload в kwargs функции (None — payload как есть).
    """

    slug: str
    category: Category
    schema_name: str
    func: Callable[..., Any]
    adapt: Callable[[dict], dict] | None = None


# =============================================================================
# ADAPTERS
# =============================================================================


def _records(key: str, model: type[BaseModel]) -> Callable[[dict], dict]:
    """Адаптер: список dict под ключом key → кортеж pydantic записей."""

    def adapt(payload: dict) -> dict:
        built = []
        for index, raw in enumerate(payload.get(key, ())):
            try:
                built.append(model(**raw))
            except RecordValidationError as e:
                first = e.errors()[0]
                path = ".".join(str(p) for p in first["loc"])
                raise CalculatorInputError(first["msg"], field=f"{key}[{index}].{path}") from e
        return {**payload, key: tuple(built)}

    return adapt


# =============================================================================
# REGISTRY
# =============================================================================


def _entries() -> list[CalculatorEntry]:
    M, F, E, T = Category.MATH, Category.FINANCE, Category.EMPLOYMENT, Category.TRAVEL
    entries = [
        # Math
        CalculatorEntry("absolute-value-equation", M, "absolute_value_equation", algebra.solve_absolute_value_equation),
        CalculatorEntry("absolute-value-inequality", M, "absolute_value_inequality", algebra.solve_absolute_value_inequality),
        CalculatorEntry("binomial-coefficient", M, "binomial_coefficient", algebra.binomial_coefficient),
        CalculatorEntry("polynomial-add-subtract", M, "polynomial_add_subtract", polynomials.add_subtract_polynomials),
        CalculatorEntry("polynomial-box-multiplication", M, "polynomial_box_multiplication", polynomials.multiply_polynomials_box),
        CalculatorEntry("bessel-functions", M, "bessel_functions", special_functions.bessel_functions),
        CalculatorEntry("bessel-chart", M, "bessel_chart", special_functions.bessel_chart_series),
        CalculatorEntry("sale-discount", M, "sale_discount", percentages.calculate_sale_discount),
        CalculatorEntry("percent-error", M, "percent_error", percentages.percent_error),
        CalculatorEntry("relative-change", M, "relative_change", percentages.relative_change),
        CalculatorEntry("percentage-point-difference", M, "percentage_point_difference", percentages.percentage_point_difference),
        CalculatorEntry("percentage-of-percentage", M, "percentage_of_percentage", percentages.percentage_of_percentage),
        CalculatorEntry("value-percentage", M, "value_percentage", percentages.value_percentage),
        CalculatorEntry("percent-to-goal", M, "percent_to_goal", percentages.percent_to_goal),
        CalculatorEntry("decimal-to-percent", M, "decimal_to_percent", percentages.decimal_to_percent),
        CalculatorEntry("fraction-to-percent", M, "fraction_to_percent", percentages.fraction_to_percent),
        CalculatorEntry("average-percentage", M, "average_percentage", percentages.average_percentage),
        CalculatorEntry("comparative-difference", M, "comparative_difference", percentages.comparative_difference),
        CalculatorEntry("slope-percentage", M, "slope_percentage", percentages.slope_percentage),
        CalculatorEntry("time-percentage", M, "time_percentage", percentages.time_percentage),
        CalculatorEntry("great-circle-distance", M, "great_circle_distance", geodesy.great_circle_distance),
        # Finance
        CalculatorEntry("compounding-increase", F, "compounding_increase", compounding.compounding_increase),
        CalculatorEntry("doubling-time", F, "doubling_time", compounding.doubling_time),
        CalculatorEntry("investment-growth", F, "investment_growth", compounding.investment_growth),
        CalculatorEntry("future-value", F, "future_value", compounding.future_value),
        CalculatorEntry("annuity-future-value", F, "annuity_future_value", compounding.future_value_of_annuity),
        CalculatorEntry("delayed-gratification", F, "delayed_gratification", compounding.delayed_gratification),
        CalculatorEntry("opportunity-cost", F, "opportunity_cost", compounding.opportunity_cost),
        CalculatorEntry(
            "habit-wealth-growth", F, "habit_wealth_growth", compounding.habit_wealth_growth, _records("habits", Habit)
        ),
        # Employment
        CalculatorEntry("probation-end", E, "probation_end", employment_dates.probation_end),
        CalculatorEntry("notice-period-end", E, "notice_period_end", employment_dates.notice_period_end),
        CalculatorEntry("last-working-day", E, "last_working_day", employment_dates.last_working_day),
        CalculatorEntry("contract-duration", E, "contract_duration", employment_dates.contract_duration),
        CalculatorEntry("employment-anniversaries", E, "employment_anniversaries", employment_dates.employment_anniversaries),
        CalculatorEntry("shift-rotation", E, "shift_rotation", employment_dates.shift_rotation),
        CalculatorEntry("time-duration", E, "time_duration", hours.time_duration),
        CalculatorEntry(
            "night-shift-duration", E, "night_shift_duration", partial(hours.time_duration, allow_overnight=True)
        ),
        CalculatorEntry("split-shift-hours", E, "split_shift_hours", hours.split_shift_hours),
        CalculatorEntry("timesheet-rounding", E, "timesheet_rounding", hours.timesheet_rounding),
        CalculatorEntry("compensatory-off-days", E, "compensatory_off_days", hours.compensatory_off_days),
        CalculatorEntry("on-call-pay", E, "on_call_pay", hours.on_call_pay, _records("segments", OnCallSegment)),
        CalculatorEntry("pto-accrual", E, "pto_accrual", hours.pto_accrual),
        CalculatorEntry(
            "work-from-home-hours", E, "work_from_home_hours", hours.work_from_home_hours, _records("segments", WorkSegment)
        ),
        CalculatorEntry(
            "freelance-billable-hours",
            E,
            "freelance_billable_hours",
            hours.freelance_billable_hours,
            _records("tasks", BillableTask),
        ),
        CalculatorEntry(
            "time-zone-overlap", E, "time_zone_overlap", hours.time_zone_overlap, _records("members", TeamMember)
        ),
        # Travel
        CalculatorEntry("travel-time", T, "travel_time", trip_time.travel_time),
        CalculatorEntry("driving-time-with-breaks", T, "driving_time_with_breaks", trip_time.driving_time_with_breaks),
        CalculatorEntry("travel-buffer-time", T, "travel_buffer_time", trip_time.travel_buffer_time),
        CalculatorEntry("hiking-time", T, "hiking_time", trip_time.hiking_time),
        CalculatorEntry("flight-duration", T, "flight_duration", trip_time.flight_duration),
        CalculatorEntry("time-zone-difference", T, "time_zone_difference", trip_time.time_zone_difference),
        CalculatorEntry("jet-lag", T, "jet_lag", trip_time.jet_lag),
        CalculatorEntry("travel-days", T, "travel_days", trip_time.travel_days),
        CalculatorEntry("layover-time", T, "layover_time", trip_time.layover_time),
        CalculatorEntry(
            "itinerary-planner", T, "itinerary_plan", trip_time.itinerary_plan, _records("activities", Activity)
        ),
        CalculatorEntry(
            "multi-stop-route", T, "multi_stop_route", geodesy.multi_stop_route, _records("stops", RouteStop)
        ),
        CalculatorEntry("fuel-cost", T, "fuel_cost", trip_costs.fuel_cost),
        CalculatorEntry("ev-charging-cost", T, "ev_charging_cost", trip_costs.ev_charging_cost),
        CalculatorEntry("cost-per-distance", T, "cost_per_distance", trip_costs.cost_per_distance),
        CalculatorEntry("hotel-cost", T, "hotel_cost", trip_costs.hotel_cost),
        CalculatorEntry("rental-car-cost", T, "rental_car_cost", trip_costs.rental_car_cost),
        CalculatorEntry("cruise-cost", T, "cruise_cost", trip_costs.cruise_cost),
        CalculatorEntry("trip-budget", T, "trip_budget", trip_costs.trip_budget),
        CalculatorEntry("bus-vs-train", T, "bus_vs_train", trip_costs.bus_vs_train),
        CalculatorEntry("car-vs-flight", T, "car_vs_flight", trip_costs.car_vs_flight),
        CalculatorEntry(
            "split-group-expenses",
            T,
            "split_group_expenses",
            trip_costs.split_group_expenses,
            _records("expenses", Expense),
        ),
        CalculatorEntry(
            "backpack-weight", T, "backpack_weight", trip_costs.backpack_weight, _records("items", PackItem)
        ),
        CalculatorEntry("hiking-calories", T, "hiking_calories", trip_costs.hiking_calories),
    ]

    # Табличные конвертеры: общий контракт unit_conversion
    for converter in CONVERTERS:
        entries.append(
            CalculatorEntry(
                f"{converter}-converter",
                Category.CONVERSION,
                "unit_conversion",
                partial(convert_units, converter),
            )
        )
    entries.append(
        CalculatorEntry("material-converter", Category.CONVERSION, "material_conversion", convert_material)
    )
    entries.append(CalculatorEntry("electrical-converter", Category.CONVERSION, "ohms_law", electrical.ohms_law))
    return entries


CALCULATORS: Final[dict[str, CalculatorEntry]] = {entry.slug: entry for entry in _entries()}


# =============================================================================
# LOOKUP
# =============================================================================


def get_calculator(slug: str) -> CalculatorEntry:
    """
    Raises:
        UnknownCalculatorError: slug не зарегистрирован
    """
    try:
        return CALCULATORS[slug]
    except KeyError:
        raise UnknownCalculatorError(slug) from None


def list_calculators(category: str | Category | None = None) -> list[str]:
    """Отсортированные slug калькуляторов (опционально — одной категории)."""
    if category is None:
        return sorted(CALCULATORS)
    category = Category(category)
    return sorted(slug for slug, entry in CALCULATORS.items() if entry.category == category)


# =============================================================================
# DISPATCH
# =============================================================================


def run_calculator(slug: str, payload: dict) -> Any:
    """
    Валидация payload, адаптация и вызов калькулятора.

    Args:
        slug: Идентификатор калькулятора
        payload: Данные формы (JSON object)

    Returns:
        Результат функции калькулятора (число, NamedTuple, date, список)

    Raises:
        UnknownCalculatorError: Неизвестный slug
        CalculatorInputError: Нарушение контракта или невалидный ввод

    Examples:
        >>> run_calculator("hotel-cost", {"cost_per_night": 100, "nights": 2}).total_cost
        200.0
    """
    entry = get_calculator(slug)

    if not isinstance(payload, dict):
        raise CalculatorInputError("payload must be a JSON object")

    try:
        validate_payload(entry.schema_name, payload)
    except ValidationError as e:
        field = error_field(e)
        logger.warning("Rejected payload for %s: %s (field=%s)", slug, e.message, field)
        raise CalculatorInputError(e.message, field=field) from e

    logger.debug("Running calculator %s with %s", slug, payload)
    try:
        kwargs = entry.adapt(payload) if entry.adapt else dict(payload)
        return entry.func(**kwargs)
    except CalculatorInputError as e:
        logger.warning("Rejected input for %s: %s (field=%s)", slug, e, e.field)
        raise


# =============================================================================
# SERIALIZATION
# =============================================================================


def result_to_dict(result: Any) -> Any:
    """
    Результат калькулятора → JSON-совместимая структура.

    NamedTuple и dataclass → dict, pydantic → dict, Enum → value,
    date/datetime → ISO-строка, NaN/Inf → None.

    Examples:
        >>> result_to_dict(date(2024, 1, 31))
        '2024-01-31'
    """
    if isinstance(result, Enum):
        return result.value
    if isinstance(result, BaseModel):
        return result_to_dict(result.model_dump())
    if isinstance(result, (date, datetime)):
        return result.isoformat()
    if isinstance(result, tuple) and hasattr(result, "_asdict"):
        return {key: result_to_dict(value) for key, value in result._asdict().items()}
    if dataclasses.is_dataclass(result) and not isinstance(result, type):
        return {f.name: result_to_dict(getattr(result, f.name)) for f in dataclasses.fields(result)}
    if isinstance(result, dict):
        return {str(key): result_to_dict(value) for key, value in result.items()}
    if isinstance(result, (list, tuple, set, frozenset)):
        return [result_to_dict(item) for item in result]
    if isinstance(result, float) and not math.isfinite(result):
        return None
    return result
