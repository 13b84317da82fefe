"""
Тесты для модуля Electrical (закон Ома)

Проверяет:
1. Все шесть пар заданных величин дают согласованную четвёрку
2. Требование ровно двух положительных величин
"""

import pytest

from calcsuite.core.math.electrical import ohms_law
from calcsuite.core.math.numerical_safeguards import CalculatorInputError

# 12 В, 2 А, 6 Ом, 24 Вт
CIRCUIT = {"voltage": 12.0, "current": 2.0, "resistance": 6.0, "power": 24.0}


class TestOhmsLaw:
    """Тесты для ohms_law"""

    @pytest.mark.parametrize(
        "given",
        [
            ("voltage", "current"),
            ("voltage", "resistance"),
            ("voltage", "power"),
            ("current", "resistance"),
            ("current", "power"),
            ("resistance", "power"),
        ],
    )
    def test_any_pair_solves_circuit(self, given: tuple[str, str]) -> None:
        result = ohms_law(**{name: CIRCUIT[name] for name in given})
        assert result.given == given
        for name, expected in CIRCUIT.items():
            assert getattr(result, name) == pytest.approx(expected)

    def test_consistency(self) -> None:
        """V = I·R, P = V·I"""
        r = ohms_law(power=100, resistance=8)
        assert r.voltage == pytest.approx(r.current * r.resistance)
        assert r.power == pytest.approx(r.voltage * r.current)

    def test_single_value(self) -> None:
        with pytest.raises(CalculatorInputError, match="exactly two") as exc:
            ohms_law(voltage=5)
        assert exc.value.field == "current"

    def test_three_values(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            ohms_law(voltage=5, current=1, power=5)
        assert exc.value.field == "power"

    def test_non_positive(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            ohms_law(voltage=5, resistance=0)
        assert exc.value.field == "resistance"
