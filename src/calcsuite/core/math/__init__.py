"""
Core math modules для calcsuite

Математические примитивы и формулы калькуляторов с гарантией валидации входов.
"""

# Numerical Safeguards
from calcsuite.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_CALC,
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    # Errors
    CalculatorInputError,
    # Safe division
    safe_divide,
    # NaN/Inf sanitization
    finite_or_none,
    is_valid_float,
    sanitize_float,
    # Epsilon comparisons
    is_close,
    is_zero,
    # Utilities
    clamp,
    format_number,
    round_to_epsilon,
    # Validation
    validate_choice,
    validate_finite,
    validate_in_range,
    validate_integer,
    validate_non_negative,
    validate_non_zero,
    validate_positive,
)

# Algebra
from calcsuite.core.math.algebra import (
    AbsoluteEquationSolution,
    AbsoluteInequalitySolution,
    BinomialResult,
    InequalityOperator,
    SolutionKind,
    binomial_coefficient,
    solve_absolute_value_equation,
    solve_absolute_value_inequality,
)

# Polynomials
from calcsuite.core.math.polynomials import (
    PolynomialParseError,
    Term,
    add_subtract_polynomials,
    format_polynomial,
    multiply_polynomials_box,
    parse_polynomial,
)

# Special functions
from calcsuite.core.math.special_functions import (
    BesselChartPoint,
    BesselResult,
    bessel_chart_series,
    bessel_functions,
    bessel_j,
    bessel_y,
)

# Compounding
from calcsuite.core.math.compounding import (
    OpportunityCostConfig,
    compounding_increase,
    delayed_gratification,
    doubling_time,
    future_value,
    future_value_of_annuity,
    habit_wealth_growth,
    investment_growth,
    opportunity_cost,
)

# Geodesy
from calcsuite.core.math.geodesy import (
    EARTH_RADIUS_KM,
    KM_PER_MILE,
    great_circle_distance,
    haversine_km,
    multi_stop_route,
)

# Electrical
from calcsuite.core.math.electrical import OhmsLaw, ohms_law

__all__ = [
    # Numerical Safeguards: Epsilon constants
    "EPS_CALC",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    # Numerical Safeguards: Errors
    "CalculatorInputError",
    # Numerical Safeguards: Safe division
    "safe_divide",
    # Numerical Safeguards: NaN/Inf sanitization
    "finite_or_none",
    "is_valid_float",
    "sanitize_float",
    # Numerical Safeguards: Epsilon comparisons
    "is_close",
    "is_zero",
    # Numerical Safeguards: Utilities
    "clamp",
    "format_number",
    "round_to_epsilon",
    # Numerical Safeguards: Validation
    "validate_choice",
    "validate_finite",
    "validate_in_range",
    "validate_integer",
    "validate_non_negative",
    "validate_non_zero",
    "validate_positive",
    # Algebra: Types
    "AbsoluteEquationSolution",
    "AbsoluteInequalitySolution",
    "BinomialResult",
    "InequalityOperator",
    "SolutionKind",
    # Algebra: Functions
    "binomial_coefficient",
    "solve_absolute_value_equation",
    "solve_absolute_value_inequality",
    # Polynomials
    "PolynomialParseError",
    "Term",
    "add_subtract_polynomials",
    "format_polynomial",
    "multiply_polynomials_box",
    "parse_polynomial",
    # Special functions
    "BesselChartPoint",
    "BesselResult",
    "bessel_chart_series",
    "bessel_functions",
    "bessel_j",
    "bessel_y",
    # Compounding
    "OpportunityCostConfig",
    "compounding_increase",
    "delayed_gratification",
    "doubling_time",
    "future_value",
    "future_value_of_annuity",
    "habit_wealth_growth",
    "investment_growth",
    "opportunity_cost",
    # Geodesy
    "EARTH_RADIUS_KM",
    "KM_PER_MILE",
    "great_circle_distance",
    "haversine_km",
    "multi_stop_route",
    # Electrical
    "OhmsLaw",
    "ohms_law",
]
