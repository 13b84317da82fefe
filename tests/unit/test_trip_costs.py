"""
Тесты для модуля Trip Costs

Проверяет:
1. Топливо и зарядку EV в разных единицах
2. Отель, аренду автомобиля, круиз и бюджет поездки
3. Сравнения (включая равенство стоимостей)
4. Раздел расходов группы: сумма балансов = 0, переводы гасят долги
5. Вес рюкзака и калории похода
"""

import pytest
from pydantic import ValidationError

from calcsuite.core.domain.trip import Expense, PackItem
from calcsuite.core.math.numerical_safeguards import CalculatorInputError
from calcsuite.travel.trip_costs import (
    PackLoad,
    Settlement,
    backpack_weight,
    bus_vs_train,
    car_vs_flight,
    cost_per_distance,
    cruise_cost,
    ev_charging_cost,
    fuel_cost,
    hiking_calories,
    hotel_cost,
    rental_car_cost,
    split_group_expenses,
    trip_budget,
)

# =============================================================================
# FUEL & ENERGY
# =============================================================================


class TestFuelCost:
    """Тесты для fuel_cost"""

    def test_mpg_per_gallon(self) -> None:
        result = fuel_cost(300, "miles", 30, "mpg", 3.5, "per_gallon")
        assert result.fuel_unit == "gallons"
        assert result.fuel_needed == pytest.approx(10.0)
        assert result.total_cost == pytest.approx(35.0)

    def test_liters_per_100km(self) -> None:
        result = fuel_cost(200, "kilometers", 8, "lp100km", 1.5, "per_liter")
        assert result.fuel_unit == "liters"
        assert result.fuel_needed == pytest.approx(16.0)
        assert result.total_cost == pytest.approx(24.0)

    def test_mixed_price_unit(self) -> None:
        """Цена за литр при расходе в mpg"""
        by_gallon = fuel_cost(300, "miles", 30, "mpg", 3.78541, "per_gallon")
        by_liter = fuel_cost(300, "miles", 30, "mpg", 1.0, "per_liter")
        assert by_gallon.total_cost == pytest.approx(by_liter.total_cost)

    def test_invalid_efficiency_unit(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            fuel_cost(100, "miles", 30, "kmpl", 3, "per_gallon")
        assert exc.value.field == "efficiency_unit"


class TestEnergyAndDistance:
    """Тесты для ev_charging_cost и cost_per_distance"""

    def test_ev_kwh_per_100km(self) -> None:
        result = ev_charging_cost(250, "kilometers", 18, "kWh_per_100km", 0.2)
        assert result.energy_kwh == pytest.approx(45.0)
        assert result.total_cost == pytest.approx(9.0)

    def test_ev_miles_per_kwh(self) -> None:
        result = ev_charging_cost(120, "miles", 4, "miles_per_kWh", 0.15)
        assert result.energy_kwh == pytest.approx(30.0)
        assert result.total_cost == pytest.approx(4.5)

    def test_cost_per_distance(self) -> None:
        result = cost_per_distance(100, 200, "miles")
        assert result.cost_per_unit == pytest.approx(0.5)
        assert result.cost_per_mile == pytest.approx(0.5)
        assert result.cost_per_kilometer == pytest.approx(0.5 / 1.60934)


# =============================================================================
# ACCOMMODATION & BUDGETS
# =============================================================================


class TestAccommodation:
    """Тесты отеля, аренды и круиза"""

    def test_hotel(self) -> None:
        result = hotel_cost(150, 3, 2, 10)
        assert result.base_cost == 900
        assert result.taxes_and_fees == pytest.approx(90.0)
        assert result.total_cost == pytest.approx(990.0)
        assert result.cost_per_night == pytest.approx(330.0)

    def test_hotel_zero_nights(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            hotel_cost(150, 0)
        assert exc.value.field == "nights"

    def test_rental_car(self) -> None:
        result = rental_car_cost(40, 5, taxes_and_fees_pct=15, insurance_per_day=10, extras=25)
        assert result.base_cost == 200
        assert result.taxes_and_fees == pytest.approx(30.0)
        assert result.insurance_cost == 50
        assert result.total_cost == pytest.approx(305.0)
        assert result.cost_per_day == pytest.approx(61.0)

    def test_cruise(self) -> None:
        result = cruise_cost(1000, 2, 7, gratuity_per_person_per_night=15, excursions_per_person=200)
        assert result.fare == 2000
        assert result.gratuities == 210
        assert result.excursions == 400
        assert result.total_cost == pytest.approx(2610.0)
        assert result.cost_per_person == pytest.approx(1305.0)


class TestTripBudget:
    """Тесты для trip_budget"""

    def test_categories(self) -> None:
        result = trip_budget(
            2,
            5,
            flights_per_person=300,
            accommodation_per_night=100,
            food_per_person_per_day=40,
            activities_per_person=50,
            local_transport=60,
            miscellaneous=40,
        )
        totals = {line.category: line.total for line in result.lines}
        assert totals == {
            "Flights": 600,
            "Accommodation": 400,
            "Food": 400,
            "Activities": 100,
            "Local transport": 60,
            "Miscellaneous": 40,
        }
        assert result.total_cost == pytest.approx(1600.0)
        assert result.cost_per_person == pytest.approx(800.0)
        assert result.cost_per_day == pytest.approx(320.0)

    def test_day_trip_has_no_accommodation(self) -> None:
        result = trip_budget(1, 1, accommodation_per_night=150, food_per_person_per_day=30)
        assert result.total_cost == pytest.approx(30.0)

    def test_negative_amount(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            trip_budget(1, 2, food_per_person_per_day=-1)
        assert exc.value.field == "food_per_person_per_day"


class TestComparisons:
    """Тесты сравнений"""

    def test_bus_cheaper(self) -> None:
        result = bus_vs_train(2, 40, 60)
        assert result.cheaper == "bus"
        assert result.savings == pytest.approx(40.0)
        assert [o.name for o in result.options] == ["bus", "train"]

    def test_train_cheaper_with_fees(self) -> None:
        result = bus_vs_train(1, 40, 45, bus_baggage=10)
        assert result.cheaper == "train"
        assert result.savings == pytest.approx(5.0)

    def test_tie(self) -> None:
        result = bus_vs_train(3, 25, 25)
        assert result.cheaper is None
        assert result.savings == 0

    def test_car_vs_flight(self) -> None:
        result = car_vs_flight(300, "miles", 2, 30, "mpg", 3.5, "per_gallon", 100, other_car_costs=15)
        car, flight = result.options
        assert car.total_cost == pytest.approx(50.0)
        assert flight.total_cost == pytest.approx(200.0)
        assert flight.cost_per_person == pytest.approx(100.0)
        assert result.cheaper == "car"
        assert result.savings == pytest.approx(150.0)


# =============================================================================
# GROUP EXPENSES
# =============================================================================


class TestSplitGroupExpenses:
    """Тесты для split_group_expenses"""

    def test_two_people(self) -> None:
        split = split_group_expenses(
            ["Ann", "Bob"],
            [{"name": "Dinner", "amount": 60, "paid_by": "Ann", "split_between": ["Ann", "Bob"]}],
        )
        assert split.total_spent == 60
        assert split.balances == {"Ann": 30.0, "Bob": -30.0}
        assert split.settlements == (Settlement("Bob", "Ann", 30.0),)

    def test_three_people_greedy(self) -> None:
        expenses = [
            Expense(name="Cabin", amount=90, paid_by="Ann", split_between=["Ann", "Bob", "Cat"]),
            Expense(name="Fuel", amount=30, paid_by="Bob", split_between=["Ann", "Bob"]),
        ]
        split = split_group_expenses(["Ann", "Bob", "Cat"], expenses)
        assert split.balances == {"Ann": 45.0, "Bob": -15.0, "Cat": -30.0}
        assert split.settlements == (
            Settlement("Cat", "Ann", 30.0),
            Settlement("Bob", "Ann", 15.0),
        )

    def test_balances_sum_to_zero(self) -> None:
        """Округление до центов не оставляет остатка: 100 / 3"""
        split = split_group_expenses(
            ["A", "B", "C"],
            [{"name": "Taxi", "amount": 100, "paid_by": "A", "split_between": ["A", "B", "C"]}],
        )
        assert round(sum(split.balances.values()), 2) == 0.0
        exact = {"A": 100 - 100 / 3, "B": -100 / 3, "C": -100 / 3}
        for name, value in split.balances.items():
            assert round(value, 2) == value
            assert abs(value - exact[name]) < 0.01
        paid_back = sum(s.amount for s in split.settlements)
        assert round(paid_back, 2) == split.balances["A"]

    @pytest.mark.parametrize("amount", [10, 99.99, 100, 250.01, 1000])
    def test_uneven_shares_sum_to_zero(self, amount: float) -> None:
        names = ["A", "B", "C", "D", "E", "F", "G"]
        split = split_group_expenses(
            names,
            [
                {"name": "Boat", "amount": amount, "paid_by": "A", "split_between": names},
                {"name": "Snacks", "amount": 7.01, "paid_by": "C", "split_between": ["B", "C", "D"]},
            ],
        )
        assert round(sum(split.balances.values()), 2) == 0.0
        owed = sum(v for v in split.balances.values() if v > 0)
        assert round(sum(s.amount for s in split.settlements), 2) == round(owed, 2)

    def test_settled_group_has_no_transfers(self) -> None:
        split = split_group_expenses(
            ["A", "B"],
            [
                {"name": "Lunch", "amount": 20, "paid_by": "A", "split_between": ["A", "B"]},
                {"name": "Coffee", "amount": 20, "paid_by": "B", "split_between": ["A", "B"]},
            ],
        )
        assert split.settlements == ()

    def test_unknown_participant(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            split_group_expenses(
                ["Ann"],
                [{"name": "Dinner", "amount": 60, "paid_by": "Zed", "split_between": ["Ann"]}],
            )
        assert exc.value.field == "expenses[0]"

    def test_duplicate_participants(self) -> None:
        with pytest.raises(CalculatorInputError, match="unique"):
            split_group_expenses(["Ann", "Ann"], [])

    def test_empty_participants(self) -> None:
        with pytest.raises(CalculatorInputError):
            split_group_expenses([], [])

    def test_malformed_expense(self) -> None:
        with pytest.raises(ValidationError):
            split_group_expenses(["Ann"], [{"name": "X", "amount": -5, "paid_by": "Ann", "split_between": ["Ann"]}])


# =============================================================================
# HIKING
# =============================================================================


class TestBackpackWeight:
    """Тесты для backpack_weight"""

    @pytest.mark.parametrize(
        "pounds,load",
        [(5, PackLoad.LIGHT), (15, PackLoad.MODERATE), (25, PackLoad.HEAVY), (40, PackLoad.TOO_HEAVY)],
    )
    def test_load_thresholds(self, pounds: float, load: PackLoad) -> None:
        result = backpack_weight([{"name": "Gear", "weight": pounds, "unit": "pounds"}], 100, "pounds")
        assert result.load is load
        assert result.body_weight_percentage == pytest.approx(pounds)

    def test_mixed_units(self) -> None:
        items = [
            PackItem(name="Tent", weight=1500, unit="grams"),
            PackItem(name="Stove", weight=500, unit="grams"),
        ]
        result = backpack_weight(items, 80, "kilograms")
        assert result.total_kg == pytest.approx(2.0)
        assert result.body_weight_percentage == pytest.approx(2.5)
        assert result.total_lb == pytest.approx(2.0 / 0.453592)

    def test_empty_pack(self) -> None:
        result = backpack_weight([], 70, "kilograms")
        assert result.total_kg == 0
        assert result.load is PackLoad.LIGHT


class TestHikingCalories:
    """Тесты для hiking_calories"""

    def test_moderate(self) -> None:
        result = hiking_calories(70, "kilograms", 60, "moderate")
        assert result.met == 6.0
        assert result.calories == pytest.approx(441.0)
        assert result.calories_per_hour == pytest.approx(441.0)

    def test_pounds(self) -> None:
        kg = hiking_calories(100 * 0.453592, "kilograms", 90, "strenuous")
        lb = hiking_calories(100, "pounds", 90, "strenuous")
        assert lb.calories == pytest.approx(kg.calories)

    def test_unknown_intensity(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            hiking_calories(70, "kilograms", 60, "extreme")
        assert exc.value.field == "intensity"

    def test_duration_range(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            hiking_calories(70, "kilograms", 0, "easy")
        assert exc.value.field == "duration_minutes"
