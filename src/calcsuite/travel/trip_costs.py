"""
Trip Costs — Стоимость поездок, бюджеты и снаряжение

Калькуляторы:
- Топливо (mpg или L/100km, цена за галлон или литр) и зарядка EV
- Стоимость на единицу расстояния
- Отель, аренда автомобиля, круиз
- Бюджет поездки с разбивкой по категориям
- Сравнение: автобус и поезд, автомобиль и самолёт
- Раздел расходов группы (балансы и минимальные переводы)
- Вес рюкзака относительно веса тела
- Калории похода (MET)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все суммы и количества валидируются до вычисления
2. В разделе расходов балансы в центах и их сумма ровно 0
3. Переводы погашают все балансы

ФОРМУЛЫ:
    fuel = distance_km / km_per_liter × price_per_liter
    kcal = MET × body_kg × 3.5 / 200 × minutes
"""

import logging
import math
from enum import Enum
from typing import Final, NamedTuple

from calcsuite.core.domain.trip import Expense, ItemWeightUnit, PackItem
from calcsuite.core.math.geodesy import KM_PER_MILE
from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
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

LITERS_PER_US_GALLON: Final[float] = 3.78541

DISTANCE_UNITS: Final[frozenset[str]] = frozenset({"kilometers", "miles"})
FUEL_EFFICIENCY_UNITS: Final[frozenset[str]] = frozenset({"mpg", "lp100km"})
FUEL_PRICE_UNITS: Final[frozenset[str]] = frozenset({"per_gallon", "per_liter"})
EV_EFFICIENCY_UNITS: Final[frozenset[str]] = frozenset({"kWh_per_100km", "miles_per_kWh"})
BODY_WEIGHT_UNITS: Final[frozenset[str]] = frozenset({"pounds", "kilograms"})

# Единица веса предмета → кг
ITEM_WEIGHT_TO_KG: Final[dict[str, float]] = {
    ItemWeightUnit.GRAMS.value: 0.001,
    ItemWeightUnit.OUNCES.value: 0.0283495,
    ItemWeightUnit.POUNDS.value: 0.453592,
}
KG_PER_POUND: Final[float] = 0.453592

# Пороги веса рюкзака (% от веса тела)
PACK_LIGHT_MAX_PCT: Final[float] = 10.0
PACK_MODERATE_MAX_PCT: Final[float] = 20.0
PACK_HEAVY_MAX_PCT: Final[float] = 30.0

# Погрешность при сравнении денежных сумм
CENT: Final[float] = 0.005


class HikeIntensity(str, Enum):
    """Интенсивность похода."""

    EASY = "easy"
    MODERATE = "moderate"
    STRENUOUS = "strenuous"


HIKING_MET: Final[dict[str, float]] = {
    HikeIntensity.EASY.value: 4.0,
    HikeIntensity.MODERATE.value: 6.0,
    HikeIntensity.STRENUOUS.value: 8.0,
}


class PackLoad(str, Enum):
    """Оценка нагрузки рюкзака."""

    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"
    TOO_HEAVY = "too_heavy"


# =============================================================================
# RESULT TYPES
# =============================================================================


class FuelCost(NamedTuple):
    fuel_needed: float
    fuel_unit: str  # "liters" | "gallons"
    total_cost: float


class EnergyCost(NamedTuple):
    energy_kwh: float
    total_cost: float


class CostPerDistance(NamedTuple):
    cost_per_unit: float
    cost_per_mile: float
    cost_per_kilometer: float


class HotelCost(NamedTuple):
    base_cost: float
    taxes_and_fees: float
    total_cost: float
    cost_per_night: float


class RentalCarCost(NamedTuple):
    base_cost: float
    taxes_and_fees: float
    insurance_cost: float
    extras: float
    total_cost: float
    cost_per_day: float


class CruiseCost(NamedTuple):
    fare: float
    gratuities: float
    excursions: float
    other: float
    total_cost: float
    cost_per_person: float


class BudgetLine(NamedTuple):
    category: str
    total: float
    per_person: float


class TripBudget(NamedTuple):
    lines: tuple[BudgetLine, ...]
    total_cost: float
    cost_per_person: float
    cost_per_day: float


class OptionCost(NamedTuple):
    name: str
    total_cost: float
    cost_per_person: float


class CostComparison(NamedTuple):
    options: tuple[OptionCost, ...]
    cheaper: str | None  # None при равенстве
    savings: float


class Settlement(NamedTuple):
    payer: str
    payee: str
    amount: float


class ExpenseSplit(NamedTuple):
    total_spent: float
    balances: dict[str, float]  # > 0: должны получить; < 0: должны заплатить
    settlements: tuple[Settlement, ...]


class BackpackWeight(NamedTuple):
    total_kg: float
    total_lb: float
    body_weight_percentage: float
    load: PackLoad
    recommendation: str


class HikingCalories(NamedTuple):
    met: float
    calories: float
    calories_per_hour: float


# =============================================================================
# FUEL & ENERGY
# =============================================================================


def _to_km(distance: float, unit: str) -> float:
    validate_choice(unit, "distance_unit", DISTANCE_UNITS)
    return distance * KM_PER_MILE if unit == "miles" else distance


def fuel_cost(
    distance: float,
    distance_unit: str,
    efficiency: float,
    efficiency_unit: str,
    fuel_price: float,
    price_unit: str,
) -> FuelCost:
    """
    Стоимость топлива на поездку.

    Args:
        distance: Расстояние
        distance_unit: "kilometers" или "miles"
        efficiency: Расход ("mpg" — миль на галлон США, "lp100km" — л/100 км)
        efficiency_unit: "mpg" или "lp100km"
        fuel_price: Цена топлива
        price_unit: "per_gallon" или "per_liter"

    Returns:
        FuelCost; объём в галлонах для mpg, иначе в литрах

    Examples:
        >>> round(fuel_cost(300, "miles", 30, "mpg", 3.5, "per_gallon").total_cost, 2)
        35.0
    """
    validate_positive(distance, "distance")
    validate_positive(efficiency, "efficiency")
    validate_positive(fuel_price, "fuel_price")
    validate_choice(efficiency_unit, "efficiency_unit", FUEL_EFFICIENCY_UNITS)
    validate_choice(price_unit, "price_unit", FUEL_PRICE_UNITS)

    km = _to_km(distance, distance_unit)
    if efficiency_unit == "mpg":
        liters = km / KM_PER_MILE / efficiency * LITERS_PER_US_GALLON
    else:
        liters = km * efficiency / 100

    price_per_liter = fuel_price / LITERS_PER_US_GALLON if price_unit == "per_gallon" else fuel_price
    total = liters * price_per_liter

    if efficiency_unit == "mpg":
        return FuelCost(fuel_needed=liters / LITERS_PER_US_GALLON, fuel_unit="gallons", total_cost=total)
    return FuelCost(fuel_needed=liters, fuel_unit="liters", total_cost=total)


def ev_charging_cost(
    distance: float,
    distance_unit: str,
    efficiency: float,
    efficiency_unit: str,
    cost_per_kwh: float,
) -> EnergyCost:
    """
    Стоимость зарядки электромобиля на поездку.

    Examples:
        >>> ev_charging_cost(250, "kilometers", 18, "kWh_per_100km", 0.2)
        EnergyCost(energy_kwh=45.0, total_cost=9.0)
    """
    validate_positive(distance, "distance")
    validate_positive(efficiency, "efficiency")
    validate_positive(cost_per_kwh, "cost_per_kwh")
    validate_choice(efficiency_unit, "efficiency_unit", EV_EFFICIENCY_UNITS)

    km = _to_km(distance, distance_unit)
    if efficiency_unit == "kWh_per_100km":
        kwh = km * efficiency / 100
    else:
        kwh = km / KM_PER_MILE / efficiency
    return EnergyCost(energy_kwh=kwh, total_cost=kwh * cost_per_kwh)


def cost_per_distance(total_cost: float, total_distance: float, distance_unit: str) -> CostPerDistance:
    """Стоимость поездки на милю и на километр."""
    validate_positive(total_cost, "total_cost")
    validate_positive(total_distance, "total_distance")

    km = _to_km(total_distance, distance_unit)
    per_km = total_cost / km
    per_mile = per_km * KM_PER_MILE
    return CostPerDistance(
        cost_per_unit=per_mile if distance_unit == "miles" else per_km,
        cost_per_mile=per_mile,
        cost_per_kilometer=per_km,
    )


# =============================================================================
# ACCOMMODATION & RENTALS
# =============================================================================


def hotel_cost(
    cost_per_night: float, nights: int, rooms: int = 1, taxes_and_fees_pct: float = 0
) -> HotelCost:
    """
    Стоимость проживания с налогами и сборами (в процентах).

    Examples:
        >>> hotel_cost(150, 3, 2, 10)
        HotelCost(base_cost=900, taxes_and_fees=90.0, total_cost=990.0, cost_per_night=330.0)
    """
    validate_positive(cost_per_night, "cost_per_night")
    validate_integer(nights, "nights", min_value=1)
    validate_integer(rooms, "rooms", min_value=1)
    validate_non_negative(taxes_and_fees_pct, "taxes_and_fees_pct")

    base = cost_per_night * nights * rooms
    taxes = base * taxes_and_fees_pct / 100
    total = base + taxes
    return HotelCost(base_cost=base, taxes_and_fees=taxes, total_cost=total, cost_per_night=total / nights)


def rental_car_cost(
    daily_rate: float,
    rental_days: int,
    taxes_and_fees_pct: float = 0,
    insurance_per_day: float = 0,
    extras: float = 0,
) -> RentalCarCost:
    """
    Стоимость аренды автомобиля.

    total = rate × days × (1 + tax%) + insurance × days + extras
    """
    validate_positive(daily_rate, "daily_rate")
    validate_integer(rental_days, "rental_days", min_value=1)
    validate_non_negative(taxes_and_fees_pct, "taxes_and_fees_pct")
    validate_non_negative(insurance_per_day, "insurance_per_day")
    validate_non_negative(extras, "extras")

    base = daily_rate * rental_days
    taxes = base * taxes_and_fees_pct / 100
    insurance = insurance_per_day * rental_days
    total = base + taxes + insurance + extras
    return RentalCarCost(
        base_cost=base,
        taxes_and_fees=taxes,
        insurance_cost=insurance,
        extras=extras,
        total_cost=total,
        cost_per_day=total / rental_days,
    )


def cruise_cost(
    fare_per_person: float,
    travelers: int,
    nights: int,
    gratuity_per_person_per_night: float = 0,
    excursions_per_person: float = 0,
    other_per_person: float = 0,
) -> CruiseCost:
    """
    Стоимость круиза: все статьи на человека, чаевые — на человека за ночь.
    """
    validate_positive(fare_per_person, "fare_per_person")
    validate_integer(travelers, "travelers", min_value=1)
    validate_integer(nights, "nights", min_value=1)
    validate_non_negative(gratuity_per_person_per_night, "gratuity_per_person_per_night")
    validate_non_negative(excursions_per_person, "excursions_per_person")
    validate_non_negative(other_per_person, "other_per_person")

    fare = fare_per_person * travelers
    gratuities = gratuity_per_person_per_night * travelers * nights
    excursions = excursions_per_person * travelers
    other = other_per_person * travelers
    total = fare + gratuities + excursions + other
    return CruiseCost(
        fare=fare,
        gratuities=gratuities,
        excursions=excursions,
        other=other,
        total_cost=total,
        cost_per_person=total / travelers,
    )


# =============================================================================
# BUDGETS & COMPARISONS
# =============================================================================


def trip_budget(
    travelers: int,
    days: int,
    flights_per_person: float = 0,
    accommodation_per_night: float = 0,
    food_per_person_per_day: float = 0,
    activities_per_person: float = 0,
    local_transport: float = 0,
    miscellaneous: float = 0,
) -> TripBudget:
    """
    Бюджет поездки с разбивкой по категориям.

    Проживание — за ночь (ночей = days − 1), питание — на человека в день,
    перелёты и активности — на человека, транспорт и прочее — общие суммы.

    Examples:
        >>> trip_budget(2, 5, flights_per_person=300, accommodation_per_night=100).total_cost
        1000
    """
    validate_integer(travelers, "travelers", min_value=1)
    validate_integer(days, "days", min_value=1)
    for name, value in (
        ("flights_per_person", flights_per_person),
        ("accommodation_per_night", accommodation_per_night),
        ("food_per_person_per_day", food_per_person_per_day),
        ("activities_per_person", activities_per_person),
        ("local_transport", local_transport),
        ("miscellaneous", miscellaneous),
    ):
        validate_non_negative(value, name)

    nights = days - 1
    totals = (
        ("Flights", flights_per_person * travelers),
        ("Accommodation", accommodation_per_night * nights),
        ("Food", food_per_person_per_day * travelers * days),
        ("Activities", activities_per_person * travelers),
        ("Local transport", local_transport),
        ("Miscellaneous", miscellaneous),
    )
    lines = tuple(BudgetLine(category, total, total / travelers) for category, total in totals)
    grand = sum(line.total for line in lines)
    return TripBudget(
        lines=lines,
        total_cost=grand,
        cost_per_person=grand / travelers,
        cost_per_day=grand / days,
    )


def _compare(first: OptionCost, second: OptionCost) -> CostComparison:
    diff = first.total_cost - second.total_cost
    if abs(diff) < CENT:
        cheaper = None
    else:
        cheaper = second.name if diff > 0 else first.name
    return CostComparison(options=(first, second), cheaper=cheaper, savings=abs(diff))


def bus_vs_train(
    travelers: int,
    bus_ticket: float,
    train_ticket: float,
    bus_baggage: float = 0,
    train_baggage: float = 0,
    bus_other: float = 0,
    train_other: float = 0,
) -> CostComparison:
    """
    Сравнение автобуса и поезда: (билет + багаж) на человека × путешественники
    плюс общие прочие расходы.

    Examples:
        >>> r = bus_vs_train(2, 40, 60)
        >>> (r.cheaper, r.savings)
        ('bus', 40)
    """
    validate_integer(travelers, "travelers", min_value=1)
    for name, value in (
        ("bus_ticket", bus_ticket),
        ("train_ticket", train_ticket),
        ("bus_baggage", bus_baggage),
        ("train_baggage", train_baggage),
        ("bus_other", bus_other),
        ("train_other", train_other),
    ):
        validate_non_negative(value, name)

    bus = (bus_ticket + bus_baggage) * travelers + bus_other
    train = (train_ticket + train_baggage) * travelers + train_other
    return _compare(
        OptionCost("bus", bus, bus / travelers),
        OptionCost("train", train, train / travelers),
    )


def car_vs_flight(
    distance: float,
    distance_unit: str,
    travelers: int,
    fuel_efficiency: float,
    efficiency_unit: str,
    fuel_price: float,
    price_unit: str,
    flight_cost_per_person: float,
    other_car_costs: float = 0,
    baggage_fees_per_person: float = 0,
    airport_transport: float = 0,
) -> CostComparison:
    """
    Сравнение поездки на машине и перелёта в одну сторону.

    Машина: топливо + прочие расходы (общие на машину).
    Самолёт: (билет + багаж) × путешественники + дорога до/из аэропорта.
    """
    validate_integer(travelers, "travelers", min_value=1)
    validate_positive(flight_cost_per_person, "flight_cost_per_person")
    validate_non_negative(other_car_costs, "other_car_costs")
    validate_non_negative(baggage_fees_per_person, "baggage_fees_per_person")
    validate_non_negative(airport_transport, "airport_transport")

    fuel = fuel_cost(distance, distance_unit, fuel_efficiency, efficiency_unit, fuel_price, price_unit)
    car = fuel.total_cost + other_car_costs
    flight = (flight_cost_per_person + baggage_fees_per_person) * travelers + airport_transport
    return _compare(
        OptionCost("car", car, car / travelers),
        OptionCost("flight", flight, flight / travelers),
    )


# =============================================================================
# GROUP EXPENSES
# =============================================================================


def _round_to_cents(balances: dict[str, float]) -> dict[str, int]:
    """
    Округление балансов до центов методом наибольшего остатка.

    Каждый баланс округляется вниз; недостающие центы (их столько, сколько
    набирается из дробных остатков) получают участники с наибольшими
    остатками. Сумма результата ровно 0.
    """
    exact = {name: value * 100 for name, value in balances.items()}
    floored = {name: math.floor(value) for name, value in exact.items()}
    missing = -sum(floored.values())
    by_remainder = sorted(exact, key=lambda name: exact[name] - floored[name], reverse=True)
    for name in by_remainder[:missing]:
        floored[name] += 1
    return floored


def split_group_expenses(participants, expenses) -> ExpenseSplit:
    """
    Раздел расходов группы.

    Каждый расход делится поровну между split_between. Баланс участника =
    оплачено − его доля, округлённая до цента так, что сумма балансов
    ровно 0. Переводы строятся жадно: крупнейший должник
    платит крупнейшему кредитору, пока все балансы не погашены.

    Raises:
        CalculatorInputError: Пустой список участников или неизвестный участник в расходе

    Examples:
        >>> split = split_group_expenses(
        ...     ["Ann", "Bob"],
        ...     [{"name": "Dinner", "amount": 60, "paid_by": "Ann", "split_between": ["Ann", "Bob"]}],
        ... )
        >>> split.settlements
        (Settlement(payer='Bob', payee='Ann', amount=30.0),)
    """
    names = [str(p).strip() for p in participants]
    if not names or any(not n for n in names):
        raise CalculatorInputError("participants must be non-empty names", field="participants")
    if len(set(names)) != len(names):
        raise CalculatorInputError("participant names must be unique", field="participants")

    expenses = [e if isinstance(e, Expense) else Expense(**e) for e in expenses]
    balances = {name: 0.0 for name in names}

    for index, expense in enumerate(expenses):
        involved = (expense.paid_by, *expense.split_between)
        unknown = [n for n in involved if n not in balances]
        if unknown:
            raise CalculatorInputError(
                f"expense {expense.name!r} references unknown participants: {unknown}",
                field=f"expenses[{index}]",
            )
        share = expense.amount / len(expense.split_between)
        balances[expense.paid_by] += expense.amount
        for name in expense.split_between:
            balances[name] -= share

    cents = _round_to_cents(balances)
    balances = {name: value / 100 for name, value in cents.items()}

    credit = sorted(([c, n] for n, c in cents.items() if c > 0), reverse=True)
    debt = sorted(([-c, n] for n, c in cents.items() if c < 0), reverse=True)

    settlements = []
    i = j = 0
    while i < len(debt) and j < len(credit):
        amount = min(debt[i][0], credit[j][0])
        settlements.append(Settlement(payer=debt[i][1], payee=credit[j][1], amount=amount / 100))
        debt[i][0] -= amount
        credit[j][0] -= amount
        if debt[i][0] == 0:
            i += 1
        if credit[j][0] == 0:
            j += 1

    total = sum(e.amount for e in expenses)
    logger.debug("split_group_expenses: %d expenses, %d settlements", len(expenses), len(settlements))
    return ExpenseSplit(total_spent=total, balances=balances, settlements=tuple(settlements))


# =============================================================================
# HIKING GEAR & ENERGY
# =============================================================================


def backpack_weight(items, body_weight: float, body_weight_unit: str = "pounds") -> BackpackWeight:
    """
    Вес рюкзака и его доля от веса тела.

    Пороги: ≤10% лёгкий, ≤20% умеренный, ≤30% тяжёлый, >30% слишком тяжёлый.

    Examples:
        >>> r = backpack_weight([{"name": "Tent", "weight": 2, "unit": "pounds"}], 100, "pounds")
        >>> (round(r.body_weight_percentage, 6), r.load.value)
        (2.0, 'light')
    """
    validate_positive(body_weight, "body_weight")
    validate_choice(body_weight_unit, "body_weight_unit", BODY_WEIGHT_UNITS)
    items = [i if isinstance(i, PackItem) else PackItem(**i) for i in items]

    total_kg = sum(item.weight * ITEM_WEIGHT_TO_KG[item.unit.value] for item in items)
    body_kg = body_weight * KG_PER_POUND if body_weight_unit == "pounds" else body_weight
    pct = total_kg / body_kg * 100

    if pct <= PACK_LIGHT_MAX_PCT:
        load, text = PackLoad.LIGHT, "Ideal for day hikes and fast, light travel."
    elif pct <= PACK_MODERATE_MAX_PCT:
        load, text = PackLoad.MODERATE, "Comfortable for most overnight backpacking trips."
    elif pct <= PACK_HEAVY_MAX_PCT:
        load, text = PackLoad.HEAVY, "Manageable for short distances; consider lightening your load."
    else:
        load, text = PackLoad.TOO_HEAVY, "Too heavy: risk of strain and injury. Remove non-essential items."

    return BackpackWeight(
        total_kg=total_kg,
        total_lb=total_kg / KG_PER_POUND,
        body_weight_percentage=pct,
        load=load,
        recommendation=text,
    )


def hiking_calories(
    body_weight: float, body_weight_unit: str, duration_minutes: float, intensity: str = "moderate"
) -> HikingCalories:
    """
    Калории похода: MET × кг × 3.5 / 200 × минуты.

    Examples:
        >>> round(hiking_calories(70, "kilograms", 60, "moderate").calories, 2)
        441.0
    """
    validate_positive(body_weight, "body_weight")
    validate_choice(body_weight_unit, "body_weight_unit", BODY_WEIGHT_UNITS)
    validate_in_range(duration_minutes, "duration_minutes", 1, 24 * 60 * 30)
    validate_choice(intensity, "intensity", HIKING_MET)

    kg = body_weight * KG_PER_POUND if body_weight_unit == "pounds" else body_weight
    met = HIKING_MET[intensity]
    per_minute = met * kg * 3.5 / 200
    return HikingCalories(met=met, calories=per_minute * duration_minutes, calories_per_hour=per_minute * 60)
