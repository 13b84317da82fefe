"""
Units — Централизованный модуль конверсии физических единиц

Каждый конвертер хранит статическую таблицу: идентификатор единицы →
множитель относительно одной базовой единицы. Конверсия всегда идёт
через базу:

    value_base = value × factor[from_unit]
    result     = value_base / factor[to_unit]

Конвертеры вне одной таблицы:
- temperature: аффинное преобразование через Кельвин
- fuel-economy: L/100km обратно пропорционален км/л и mpg
- construction: три таблицы (длина, площадь, объём), вид определяется по единице
- material: масса ↔ объём через плотность материала

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Неизвестная единица → UnknownUnitError (поле from_unit / to_unit)
2. convert(convert(x, U1, U2), U2, U1) ≈ x для любой пары единиц таблицы
3. Температура ниже абсолютного нуля отклоняется
4. ЗАПРЕЩЕНО конвертировать единицы вне этого модуля
"""

import math
from dataclasses import dataclass
from typing import Callable, Final, Mapping

from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
    is_zero,
    validate_finite,
    validate_non_negative,
)


class UnknownUnitError(CalculatorInputError):
    """Идентификатор единицы не найден в таблице конвертера."""

    pass


class UnknownConverterError(CalculatorInputError):
    """Конвертер с таким именем не зарегистрирован."""

    pass


# =============================================================================
# ТАБЛИЦЫ МНОЖИТЕЛЕЙ
# =============================================================================

# База: метр
LENGTH_FACTORS: Final[dict[str, float]] = {
    "millimeter": 0.001,
    "centimeter": 0.01,
    "meter": 1.0,
    "kilometer": 1000.0,
    "inch": 0.0254,
    "foot": 0.3048,
    "yard": 0.9144,
    "mile": 1609.34,
    "nautical-mile": 1852.0,
    "micron": 1e-6,
    "nanometer": 1e-9,
}

# База: квадратный метр
AREA_FACTORS: Final[dict[str, float]] = {
    "square-millimeter": 1e-6,
    "square-centimeter": 1e-4,
    "square-meter": 1.0,
    "hectare": 10_000.0,
    "square-kilometer": 1e6,
    "square-inch": 0.00064516,
    "square-foot": 0.09290304,
    "square-yard": 0.83612736,
    "acre": 4046.8564224,
    "square-mile": 2_589_988.110336,
}

# База: литр
VOLUME_FACTORS: Final[dict[str, float]] = {
    "milliliter": 0.001,
    "liter": 1.0,
    "cubic-meter": 1000.0,
    "cubic-centimeter": 0.001,
    "teaspoon-us": 0.00492892,
    "tablespoon-us": 0.0147868,
    "fluid-ounce-us": 0.0295735,
    "cup-us": 0.236588,
    "pint-us": 0.473176,
    "quart-us": 0.946353,
    "gallon-us": 3.78541,
    "pint-imperial": 0.568261,
    "gallon-imperial": 4.54609,
    "cubic-inch": 0.0163871,
    "cubic-foot": 28.3168,
}

# База: килограмм
WEIGHT_FACTORS: Final[dict[str, float]] = {
    "milligram": 1e-6,
    "gram": 0.001,
    "kilogram": 1.0,
    "metric-ton": 1000.0,
    "ounce": 0.0283495,
    "pound": 0.453592,
    "stone": 6.35029,
    "short-ton": 907.185,
    "long-ton": 1016.05,
}

# База: метр в секунду
SPEED_FACTORS: Final[dict[str, float]] = {
    "meter-per-second": 1.0,
    "kilometer-per-hour": 1000.0 / 3600.0,
    "mile-per-hour": 0.44704,
    "foot-per-second": 0.3048,
    "knot": 1852.0 / 3600.0,
    "mach": 343.0,
}

# База: ньютон
FORCE_FACTORS: Final[dict[str, float]] = {
    "newton": 1.0,
    "kilonewton": 1000.0,
    "dyne": 1e-5,
    "pound-force": 4.4482216152605,
    "kilogram-force": 9.80665,
    "poundal": 0.138254954376,
}

# База: секунда
TIME_FACTORS: Final[dict[str, float]] = {
    "nanosecond": 1e-9,
    "microsecond": 1e-6,
    "millisecond": 0.001,
    "second": 1.0,
    "minute": 60.0,
    "hour": 3600.0,
    "day": 86_400.0,
    "week": 604_800.0,
    "month": 2_629_746.0,  # средний григорианский месяц
    "year": 31_556_952.0,  # средний григорианский год
}

# База: радиан
ANGLE_FACTORS: Final[dict[str, float]] = {
    "radian": 1.0,
    "degree": math.pi / 180.0,
    "gradian": math.pi / 200.0,
    "arcminute": math.pi / 10_800.0,
    "arcsecond": math.pi / 648_000.0,
    "revolution": 2.0 * math.pi,
}

# База: кубический метр в секунду
FLOW_RATE_FACTORS: Final[dict[str, float]] = {
    "cubic-meter-per-second": 1.0,
    "cubic-meter-per-hour": 1.0 / 3600.0,
    "liter-per-second": 0.001,
    "liter-per-minute": 0.001 / 60.0,
    "gallon-us-per-minute": 0.00378541 / 60.0,
    "cubic-foot-per-second": 0.0283168,
    "cubic-foot-per-minute": 0.0283168 / 60.0,
}

# База: байт
DATA_STORAGE_FACTORS: Final[dict[str, float]] = {
    "bit": 0.125,
    "byte": 1.0,
    "kilobyte": 1e3,
    "megabyte": 1e6,
    "gigabyte": 1e9,
    "terabyte": 1e12,
    "petabyte": 1e15,
    "kibibyte": 1024.0,
    "mebibyte": 1024.0**2,
    "gibibyte": 1024.0**3,
    "tebibyte": 1024.0**4,
}

# База: бит в секунду
DATA_TRANSFER_FACTORS: Final[dict[str, float]] = {
    "bit-per-second": 1.0,
    "kilobit-per-second": 1e3,
    "megabit-per-second": 1e6,
    "gigabit-per-second": 1e9,
    "terabit-per-second": 1e12,
    "byte-per-second": 8.0,
    "kilobyte-per-second": 8e3,
    "megabyte-per-second": 8e6,
    "gigabyte-per-second": 8e9,
}

# База: джоуль
ENERGY_FACTORS: Final[dict[str, float]] = {
    "joule": 1.0,
    "kilojoule": 1000.0,
    "calorie": 4.184,
    "kilocalorie": 4184.0,
    "watt-hour": 3600.0,
    "kilowatt-hour": 3.6e6,
    "btu": 1055.06,
    "electronvolt": 1.602176634e-19,
    "foot-pound": 1.35582,
}

# База: ватт
POWER_FACTORS: Final[dict[str, float]] = {
    "watt": 1.0,
    "kilowatt": 1000.0,
    "megawatt": 1e6,
    "horsepower": 745.7,
    "metric-horsepower": 735.49875,
    "btu-per-hour": 0.29307107,
}

# База: паскаль
PRESSURE_FACTORS: Final[dict[str, float]] = {
    "pascal": 1.0,
    "kilopascal": 1000.0,
    "megapascal": 1e6,
    "bar": 100_000.0,
    "millibar": 100.0,
    "atmosphere": 101_325.0,
    "psi": 6894.757,
    "torr": 133.322368,
    "mmhg": 133.322387415,
    "inhg": 3386.389,
}

# База: герц
FREQUENCY_FACTORS: Final[dict[str, float]] = {
    "hertz": 1.0,
    "kilohertz": 1e3,
    "megahertz": 1e6,
    "gigahertz": 1e9,
    "rpm": 1.0 / 60.0,
}

# База: ньютон-метр
TORQUE_FACTORS: Final[dict[str, float]] = {
    "newton-meter": 1.0,
    "kilonewton-meter": 1000.0,
    "pound-foot": 1.3558179483,
    "pound-inch": 0.112984829,
    "kilogram-force-meter": 9.80665,
}

# База: литр (кухонные меры объёма, US и метрические)
COOKING_FACTORS: Final[dict[str, float]] = {
    "milliliter": 0.001,
    "liter": 1.0,
    "teaspoon-us": 0.00492892,
    "tablespoon-us": 0.0147868,
    "fluid-ounce-us": 0.0295735,
    "cup-us": 0.236588,
    "pint-us": 0.473176,
    "quart-us": 0.946353,
    "gallon-us": 3.78541,
    "teaspoon-metric": 0.005,
    "tablespoon-metric": 0.015,
    "cup-metric": 0.25,
}

# База: килограмм на кубический метр
DENSITY_FACTORS: Final[dict[str, float]] = {
    "kilogram-per-cubic-meter": 1.0,
    "gram-per-cubic-centimeter": 1000.0,
    "gram-per-milliliter": 1000.0,
    "kilogram-per-liter": 1000.0,
    "gram-per-liter": 1.0,
    "pound-per-cubic-foot": 16.018463374,
    "pound-per-cubic-inch": 27_679.904710,
    "pound-per-gallon-us": 119.826427,
}

# База: кандела на квадратный метр (нит)
LUMINANCE_FACTORS: Final[dict[str, float]] = {
    "candela-per-square-meter": 1.0,
    "nit": 1.0,
    "candela-per-square-centimeter": 10_000.0,
    "candela-per-square-foot": 10.763910417,
    "candela-per-square-inch": 1550.0031,
    "stilb": 10_000.0,
    "lambert": 10_000.0 / math.pi,
    "apostilb": 1.0 / math.pi,
    "foot-lambert": 10.763910417 / math.pi,
}

# База: моль на литр (молярность)
CONCENTRATION_FACTORS: Final[dict[str, float]] = {
    "mole-per-liter": 1.0,
    "millimole-per-liter": 1e-3,
    "micromole-per-liter": 1e-6,
    "nanomole-per-liter": 1e-9,
    "picomole-per-liter": 1e-12,
    "mole-per-cubic-meter": 1e-3,
    "millimole-per-milliliter": 1.0,
}


# =============================================================================
# МУЛЬТИПЛИКАТИВНЫЕ ТАБЛИЦЫ
# =============================================================================


@dataclass(frozen=True)
class UnitTable:
    """
    Таблица единиц с общей базой.

    Attributes:
        name: Имя конвертера (например, "length")
        base_unit: Базовая единица (множитель 1.0)
        factors: Идентификатор единицы → множитель относительно базы
    """

    name: str
    base_unit: str
    factors: Mapping[str, float]

    def __post_init__(self):
        if self.factors.get(self.base_unit) != 1.0:
            raise ValueError(f"{self.name}: base unit {self.base_unit!r} must have factor 1.0")

    @property
    def units(self) -> tuple[str, ...]:
        return tuple(self.factors)

    def factor(self, unit: str, field: str = "unit") -> float:
        """
        Множитель единицы.

        Raises:
            UnknownUnitError: Единица не найдена
        """
        try:
            return self.factors[unit]
        except KeyError:
            raise UnknownUnitError(f"Unknown {self.name} unit: {unit!r}", field=field)

    def to_base(self, value: float, unit: str) -> float:
        return value * self.factor(unit, "from_unit")

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        """
        Конверсия value из from_unit в to_unit через базовую единицу.

        Examples:
            >>> LENGTH.convert(2500, "meter", "kilometer")
            2.5
        """
        validate_finite(value, "value")
        from_factor = self.factor(from_unit, "from_unit")
        to_factor = self.factor(to_unit, "to_unit")
        if from_unit == to_unit:
            return float(value)
        return value * from_factor / to_factor


LENGTH: Final[UnitTable] = UnitTable("length", "meter", LENGTH_FACTORS)
AREA: Final[UnitTable] = UnitTable("area", "square-meter", AREA_FACTORS)
VOLUME: Final[UnitTable] = UnitTable("volume", "liter", VOLUME_FACTORS)
WEIGHT: Final[UnitTable] = UnitTable("weight", "kilogram", WEIGHT_FACTORS)
SPEED: Final[UnitTable] = UnitTable("speed", "meter-per-second", SPEED_FACTORS)
FORCE: Final[UnitTable] = UnitTable("force", "newton", FORCE_FACTORS)
TIME: Final[UnitTable] = UnitTable("time", "second", TIME_FACTORS)
ANGLE: Final[UnitTable] = UnitTable("angle", "radian", ANGLE_FACTORS)
FLOW_RATE: Final[UnitTable] = UnitTable("flow-rate", "cubic-meter-per-second", FLOW_RATE_FACTORS)
DATA_STORAGE: Final[UnitTable] = UnitTable("data-storage", "byte", DATA_STORAGE_FACTORS)
DATA_TRANSFER: Final[UnitTable] = UnitTable("data-transfer", "bit-per-second", DATA_TRANSFER_FACTORS)
ENERGY: Final[UnitTable] = UnitTable("energy", "joule", ENERGY_FACTORS)
POWER: Final[UnitTable] = UnitTable("power", "watt", POWER_FACTORS)
PRESSURE: Final[UnitTable] = UnitTable("pressure", "pascal", PRESSURE_FACTORS)
FREQUENCY: Final[UnitTable] = UnitTable("frequency", "hertz", FREQUENCY_FACTORS)
TORQUE: Final[UnitTable] = UnitTable("torque", "newton-meter", TORQUE_FACTORS)
COOKING: Final[UnitTable] = UnitTable("cooking", "liter", COOKING_FACTORS)
DENSITY: Final[UnitTable] = UnitTable("density", "kilogram-per-cubic-meter", DENSITY_FACTORS)
LUMINANCE: Final[UnitTable] = UnitTable("luminance", "candela-per-square-meter", LUMINANCE_FACTORS)
CHEMICAL_CONCENTRATION: Final[UnitTable] = UnitTable(
    "chemical-concentration", "mole-per-liter", CONCENTRATION_FACTORS
)


# =============================================================================
# TEMPERATURE (аффинная)
# =============================================================================

ABSOLUTE_ZERO_KELVIN: Final[float] = 0.0

# unit → (в Кельвин, из Кельвина)
_TEMPERATURE_SCALES: Final[dict[str, tuple[Callable[[float], float], Callable[[float], float]]]] = {
    "celsius": (lambda v: v + 273.15, lambda k: k - 273.15),
    "fahrenheit": (lambda v: (v - 32) * 5 / 9 + 273.15, lambda k: (k - 273.15) * 9 / 5 + 32),
    "kelvin": (lambda v: v, lambda k: k),
    "rankine": (lambda v: v * 5 / 9, lambda k: k * 9 / 5),
}

TEMPERATURE_UNITS: Final[tuple[str, ...]] = tuple(_TEMPERATURE_SCALES)


def convert_temperature(value: float, from_unit: str, to_unit: str) -> float:
    """
    Конверсия температуры через Кельвин.

    Raises:
        UnknownUnitError: Неизвестная шкала
        CalculatorInputError: Значение ниже абсолютного нуля

    Examples:
        >>> round(convert_temperature(100, "celsius", "fahrenheit"), 6)
        212.0
    """
    validate_finite(value, "value")
    if from_unit not in _TEMPERATURE_SCALES:
        raise UnknownUnitError(f"Unknown temperature unit: {from_unit!r}", field="from_unit")
    if to_unit not in _TEMPERATURE_SCALES:
        raise UnknownUnitError(f"Unknown temperature unit: {to_unit!r}", field="to_unit")

    kelvin = _TEMPERATURE_SCALES[from_unit][0](value)
    # Толерантность к ошибке округления у самого абсолютного нуля
    if kelvin < ABSOLUTE_ZERO_KELVIN - 1e-9:
        raise CalculatorInputError(
            f"{value} {from_unit} is below absolute zero", field="value"
        )
    if from_unit == to_unit:
        return float(value)
    return _TEMPERATURE_SCALES[to_unit][1](kelvin)


# =============================================================================
# FUEL ECONOMY (обратная)
# =============================================================================

# Прямые единицы (расстояние / объём) → км/л
_FUEL_DISTANCE_PER_VOLUME: Final[dict[str, float]] = {
    "kilometer-per-liter": 1.0,
    "mile-per-gallon-us": 1.60934 / 3.78541,
    "mile-per-gallon-imperial": 1.60934 / 4.54609,
}

# Обратная единица (объём / расстояние)
LITERS_PER_100KM: Final[str] = "liter-per-100km"

FUEL_ECONOMY_UNITS: Final[tuple[str, ...]] = (*_FUEL_DISTANCE_PER_VOLUME, LITERS_PER_100KM)


def convert_fuel_economy(value: float, from_unit: str, to_unit: str) -> float:
    """
    Конверсия расхода топлива.

    L/100km = 100 / (км/л); нулевое значение невозможно обратить.

    Raises:
        UnknownUnitError: Неизвестная единица
        CalculatorInputError: value <= 0

    Examples:
        >>> convert_fuel_economy(10, "kilometer-per-liter", "liter-per-100km")
        10.0
    """
    validate_finite(value, "value")
    for unit, field in ((from_unit, "from_unit"), (to_unit, "to_unit")):
        if unit not in FUEL_ECONOMY_UNITS:
            raise UnknownUnitError(f"Unknown fuel economy unit: {unit!r}", field=field)
    if value <= 0 or is_zero(value):
        raise CalculatorInputError("fuel economy value must be positive", field="value")
    if from_unit == to_unit:
        return float(value)

    if from_unit == LITERS_PER_100KM:
        km_per_liter = 100.0 / value
    else:
        km_per_liter = value * _FUEL_DISTANCE_PER_VOLUME[from_unit]

    if to_unit == LITERS_PER_100KM:
        return 100.0 / km_per_liter
    return km_per_liter / _FUEL_DISTANCE_PER_VOLUME[to_unit]


# =============================================================================
# CONSTRUCTION (длина / площадь / объём стройплощадки)
# =============================================================================

CONSTRUCTION_LENGTH: Final[UnitTable] = UnitTable(
    "construction length",
    "meter",
    {
        "millimeter": 0.001,
        "centimeter": 0.01,
        "meter": 1.0,
        "inch": 0.0254,
        "foot": 0.3048,
        "yard": 0.9144,
    },
)
CONSTRUCTION_AREA: Final[UnitTable] = UnitTable(
    "construction area",
    "square-meter",
    {
        "square-inch": 0.00064516,
        "square-foot": 0.09290304,
        "square-yard": 0.83612736,
        "square-meter": 1.0,
        "acre": 4046.8564224,
        "hectare": 10_000.0,
    },
)
CONSTRUCTION_VOLUME: Final[UnitTable] = UnitTable(
    "construction volume",
    "cubic-meter",
    {
        "cubic-inch": 1.6387064e-5,
        "cubic-foot": 0.028316846592,
        "cubic-yard": 0.764554857984,
        "cubic-meter": 1.0,
        "liter": 0.001,
        "gallon-us": 0.003785411784,
    },
)

_CONSTRUCTION_TABLES: Final[tuple[UnitTable, ...]] = (
    CONSTRUCTION_LENGTH,
    CONSTRUCTION_AREA,
    CONSTRUCTION_VOLUME,
)

CONSTRUCTION_UNITS: Final[tuple[str, ...]] = tuple(
    unit for table in _CONSTRUCTION_TABLES for unit in table.units
)


def _construction_table(unit: str, field: str) -> UnitTable:
    for table in _CONSTRUCTION_TABLES:
        if unit in table.factors:
            return table
    raise UnknownUnitError(f"Unknown construction unit: {unit!r}", field=field)


def convert_construction(value: float, from_unit: str, to_unit: str) -> float:
    """
    Конверсия строительных единиц.

    Вид величины (длина, площадь, объём) определяется по from_unit;
    to_unit обязан быть того же вида.

    Raises:
        UnknownUnitError: Неизвестная единица
        CalculatorInputError: Единицы разного вида (например, foot → square-foot)

    Examples:
        >>> round(convert_construction(1, "cubic-yard", "cubic-foot"), 9)
        27.0
    """
    source = _construction_table(from_unit, "from_unit")
    target = _construction_table(to_unit, "to_unit")
    if target is not source:
        raise CalculatorInputError(
            f"cannot convert {source.name} ({from_unit}) to {target.name} ({to_unit})", field="to_unit"
        )
    return source.convert(value, from_unit, to_unit)


# =============================================================================
# MATERIAL (масса ↔ объём через плотность)
# =============================================================================

# Средние плотности при комнатной температуре, кг/м³
MATERIAL_DENSITIES: Final[dict[str, float]] = {
    "water": 1000.0,
    "ice": 917.0,
    "milk": 1030.0,
    "gasoline": 740.0,
    "olive-oil": 910.0,
    "steel": 7850.0,
    "iron": 7874.0,
    "aluminum": 2700.0,
    "copper": 8960.0,
    "lead": 11_340.0,
    "gold": 19_300.0,
    "silver": 10_490.0,
    "concrete": 2400.0,
    "sand": 1600.0,
    "gravel": 1680.0,
    "glass": 2500.0,
    "pine-wood": 510.0,
    "oak-wood": 750.0,
    "flour": 593.0,
    "sugar": 845.0,
}

LITERS_PER_CUBIC_METER: Final[float] = 1000.0

MATERIAL_UNITS: Final[tuple[str, ...]] = (*WEIGHT.units, *VOLUME.units)


def _quantity_table(unit: str, field: str) -> UnitTable:
    if unit in WEIGHT.factors:
        return WEIGHT
    if unit in VOLUME.factors:
        return VOLUME
    raise UnknownUnitError(f"Unknown mass or volume unit: {unit!r}", field=field)


def convert_material(value: float, from_unit: str, to_unit: str, material: str = "water") -> float:
    """
    Конверсия массы и объёма материала.

    ФОРМУЛЫ:
        volume_m3 = mass_kg / density
        mass_kg   = volume_m3 × density

    Масса ↔ масса и объём ↔ объём от материала не зависят.

    Raises:
        UnknownUnitError: Единица не является единицей массы или объёма
        CalculatorInputError: Неизвестный материал или value < 0

    Examples:
        >>> convert_material(1, "kilogram", "liter", "water")
        1.0
    """
    validate_non_negative(value, "value")
    try:
        density = MATERIAL_DENSITIES[material]
    except KeyError:
        raise CalculatorInputError(f"Unknown material: {material!r}", field="material") from None

    source = _quantity_table(from_unit, "from_unit")
    target = _quantity_table(to_unit, "to_unit")
    if source is target:
        return source.convert(value, from_unit, to_unit)

    base = source.to_base(value, from_unit)
    if source is WEIGHT:
        converted = base / density * LITERS_PER_CUBIC_METER
    else:
        converted = base / LITERS_PER_CUBIC_METER * density
    return converted / target.factor(to_unit, "to_unit")


# =============================================================================
# РЕЕСТР КОНВЕРТЕРОВ
# =============================================================================

UNIT_TABLES: Final[dict[str, UnitTable]] = {
    table.name: table
    for table in (
        LENGTH,
        AREA,
        VOLUME,
        WEIGHT,
        SPEED,
        FORCE,
        TIME,
        ANGLE,
        FLOW_RATE,
        DATA_STORAGE,
        DATA_TRANSFER,
        ENERGY,
        POWER,
        PRESSURE,
        FREQUENCY,
        TORQUE,
        COOKING,
        DENSITY,
        LUMINANCE,
        CHEMICAL_CONCENTRATION,
    )
}

CONVERTERS: Final[dict[str, Callable[[float, str, str], float]]] = {
    **{name: table.convert for name, table in UNIT_TABLES.items()},
    "temperature": convert_temperature,
    "fuel-economy": convert_fuel_economy,
    "construction": convert_construction,
}

# Конвертеры без общей таблицы: имя → идентификаторы единиц
_UNIT_LISTS: Final[dict[str, tuple[str, ...]]] = {
    "temperature": TEMPERATURE_UNITS,
    "fuel-economy": FUEL_ECONOMY_UNITS,
    "construction": CONSTRUCTION_UNITS,
    "material": MATERIAL_UNITS,
}


def list_units(converter: str) -> tuple[str, ...]:
    """
    Идентификаторы единиц конвертера.

    Raises:
        UnknownConverterError: Конвертер не зарегистрирован
    """
    if converter in UNIT_TABLES:
        return UNIT_TABLES[converter].units
    if converter in _UNIT_LISTS:
        return _UNIT_LISTS[converter]
    raise UnknownConverterError(f"Unknown converter: {converter!r}", field="converter")


def convert_units(converter: str, value: float, from_unit: str, to_unit: str) -> float:
    """
    Единая точка входа для всех конвертеров.

    Examples:
        >>> convert_units("data-transfer", 1, "megabyte-per-second", "megabit-per-second")
        8.0
    """
    try:
        convert = CONVERTERS[converter]
    except KeyError:
        raise UnknownConverterError(f"Unknown converter: {converter!r}", field="converter")
    return convert(value, from_unit, to_unit)
