"""
calcsuite — библиотека калькуляторов и конвертеров единиц.

Каждый калькулятор — чистая функция над примитивными входами;
catalog связывает slug страницы, JSON Schema контракт формы и функцию.
"""

from calcsuite.catalog import (
    CALCULATORS,
    CalculatorEntry,
    Category,
    UnknownCalculatorError,
    get_calculator,
    list_calculators,
    result_to_dict,
    run_calculator,
)
from calcsuite.core.math.numerical_safeguards import CalculatorInputError

__version__ = "0.1.0"

__all__ = [
    # Catalog
    "CALCULATORS",
    "CalculatorEntry",
    "Category",
    "get_calculator",
    "list_calculators",
    "run_calculator",
    "result_to_dict",
    # Errors
    "CalculatorInputError",
    "UnknownCalculatorError",
]
