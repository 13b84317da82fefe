"""
Domain models для calcsuite

Immutable pydantic записи списочных входов, таблицы единиц измерения,
приведение дат и времени.
"""

from .dates import (
    DateRangeError,
    coerce_date,
    coerce_datetime,
    coerce_local_datetime,
    format_duration,
    parse_hhmm,
)
from .geo import GeoPoint, RouteStop
from .shift import BillableTask, OnCallSegment, TeamMember, WorkSegment
from .trip import Activity, Expense, Habit, HabitFrequency, ItemWeightUnit, PackItem
from .units import (
    CONVERTERS,
    MATERIAL_DENSITIES,
    UNIT_TABLES,
    UnitTable,
    UnknownConverterError,
    UnknownUnitError,
    convert_construction,
    convert_material,
    convert_units,
    list_units,
)

__all__ = [
    # Dates
    "DateRangeError",
    "coerce_date",
    "coerce_datetime",
    "coerce_local_datetime",
    "format_duration",
    "parse_hhmm",
    # Geo
    "GeoPoint",
    "RouteStop",
    # Shift
    "BillableTask",
    "OnCallSegment",
    "TeamMember",
    "WorkSegment",
    # Trip
    "Activity",
    "Expense",
    "Habit",
    "HabitFrequency",
    "ItemWeightUnit",
    "PackItem",
    # Units
    "CONVERTERS",
    "MATERIAL_DENSITIES",
    "UNIT_TABLES",
    "UnitTable",
    "UnknownConverterError",
    "UnknownUnitError",
    "convert_construction",
    "convert_material",
    "convert_units",
    "list_units",
]
