"""
Electrical — Закон Ома и закон мощности

По любым двум из четырёх величин (напряжение, ток, сопротивление,
мощность) вычисляются две остальные.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Задано ровно две величины, обе > 0
2. Результат согласован: V = I × R и P = V × I

ФОРМУЛЫ:
    V = I × R
    P = V × I = I² × R = V² / R
"""

import math
from typing import NamedTuple

from calcsuite.core.math.numerical_safeguards import CalculatorInputError, validate_positive

QUANTITIES = ("voltage", "current", "resistance", "power")


class OhmsLaw(NamedTuple):
    """Согласованная четвёрка величин цепи."""

    voltage: float  # В
    current: float  # А
    resistance: float  # Ом
    power: float  # Вт
    given: tuple[str, str]


def ohms_law(
    voltage: float | None = None,
    current: float | None = None,
    resistance: float | None = None,
    power: float | None = None,
) -> OhmsLaw:
    """
    Недостающие величины цепи постоянного тока.

    Raises:
        CalculatorInputError: Задано не две величины или величина <= 0

    Examples:
        >>> r = ohms_law(voltage=12, resistance=4)
        >>> (r.current, r.power)
        (3.0, 36.0)
    """
    values = dict(zip(QUANTITIES, (voltage, current, resistance, power)))
    given = [name for name in QUANTITIES if values[name] is not None]
    if len(given) != 2:
        missing = [name for name in QUANTITIES if name not in given]
        field = given[2] if len(given) > 2 else missing[0]
        raise CalculatorInputError(
            f"exactly two of {', '.join(QUANTITIES)} are required, got {len(given)}", field=field
        )
    for name in given:
        validate_positive(values[name], name)

    v, i, r, p = voltage, current, resistance, power
    pair = frozenset(given)
    if pair == {"voltage", "current"}:
        r, p = v / i, v * i
    elif pair == {"voltage", "resistance"}:
        i = v / r
        p = v * i
    elif pair == {"voltage", "power"}:
        i = p / v
        r = v / i
    elif pair == {"current", "resistance"}:
        v = i * r
        p = v * i
    elif pair == {"current", "power"}:
        v = p / i
        r = v / i
    else:
        i = math.sqrt(p / r)
        v = i * r

    return OhmsLaw(voltage=v, current=i, resistance=r, power=p, given=(given[0], given[1]))
