"""
Algebra — Absolute Value Equations, Inequalities & Binomial Coefficients

Модуль решает линейные уравнения и неравенства с модулем:
- |ax + b| = c
- |ax + b| <op> c, где op ∈ {<, <=, >, >=}
- биномиальный коэффициент C(n, k) и строка треугольника Паскаля

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. a ≠ 0 (иначе CalculatorInputError на поле "a")
2. Для c ≥ 0 уравнение имеет ровно два значения x₁ ≤ x₂ (при c = 0 совпадают)
3. Для c < 0 уравнение и неравенства типа "<" не имеют решений
4. Каждое решение x удовлетворяет a·x + b ∈ {c, −c}

ФОРМУЛЫ:
    |ax + b| = c  ⇔  ax + b = c  ∨  ax + b = −c
    x₁ = (c − b) / a,  x₂ = (−c − b) / a

    |ax + b| < c  ⇔  −c < ax + b < c
    |ax + b| > c  ⇔  ax + b < −c  ∨  ax + b > c
"""

import math
from enum import Enum
from typing import Final, NamedTuple

from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
    format_number,
    is_zero,
    validate_finite,
    validate_integer,
    validate_non_zero,
)

# =============================================================================
# ENUMS & CONSTANTS
# =============================================================================


class InequalityOperator(str, Enum):
    """Оператор сравнения в неравенстве."""

    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


class SolutionKind(str, Enum):
    """Форма множества решений неравенства."""

    NO_SOLUTION = "no_solution"
    ALL_REALS = "all_reals"
    POINT = "point"
    ALL_EXCEPT_POINT = "all_except_point"
    INTERVAL = "interval"
    UNION = "union"


# Алиасы операторов, принимаемые из формы
OPERATOR_ALIASES: Final[dict[str, InequalityOperator]] = {
    "<": InequalityOperator.LT,
    "<=": InequalityOperator.LE,
    "≤": InequalityOperator.LE,
    ">": InequalityOperator.GT,
    ">=": InequalityOperator.GE,
    "≥": InequalityOperator.GE,
}

# Максимальное n для треугольника Паскаля (размер вывода)
BINOMIAL_MAX_N: Final[int] = 1000


# =============================================================================
# RESULT TYPES
# =============================================================================


class AbsoluteEquationSolution(NamedTuple):
    """Решение уравнения |ax + b| = c."""

    has_solution: bool
    solutions: tuple[float, ...]  # по возрастанию; пусто если нет решений
    explanation: str


class AbsoluteInequalitySolution(NamedTuple):
    """Решение неравенства |ax + b| op c."""

    kind: SolutionKind
    lower: float | None
    upper: float | None
    inclusive: bool
    solution: str  # запись через x, например "-1 < x < 3"
    interval_notation: str  # например "(-1, 3)"
    explanation: str


class BinomialResult(NamedTuple):
    """Биномиальный коэффициент и строка треугольника Паскаля."""

    n: int
    k: int
    coefficient: int
    pascal_row: tuple[int, ...]


# =============================================================================
# |ax + b| = c
# =============================================================================


def solve_absolute_value_equation(a: float, b: float, c: float) -> AbsoluteEquationSolution:
    """
    Решение уравнения |ax + b| = c.

    Args:
        a: Коэффициент при x (a ≠ 0)
        b: Свободный член под модулем
        c: Правая часть

    Returns:
        AbsoluteEquationSolution; при c < 0 has_solution=False

    Raises:
        CalculatorInputError: Если a == 0 или вход не число

    Examples:
        >>> solve_absolute_value_equation(2, -4, 6).solutions
        (-1.0, 5.0)
        >>> solve_absolute_value_equation(1, 0, -1).has_solution
        False
    """
    validate_non_zero(a, "a")
    validate_finite(b, "b")
    validate_finite(c, "c")

    if c < 0:
        return AbsoluteEquationSolution(
            has_solution=False,
            solutions=(),
            explanation=(
                f"An absolute value is never negative, so |{_linear_text(a, b)}| = "
                f"{format_number(c)} has no solution."
            ),
        )

    x_pos = (c - b) / a
    x_neg = (-c - b) / a
    x1, x2 = sorted((x_pos, x_neg))

    linear = _linear_text(a, b)
    if is_zero(c):
        explanation = (
            f"|{linear}| = 0 only when {linear} = 0, so x = {format_number(x1)}."
        )
    else:
        explanation = (
            f"Split into {linear} = {format_number(c)} giving x = {format_number(x_pos)}, "
            f"and {linear} = {format_number(-c)} giving x = {format_number(x_neg)}."
        )

    return AbsoluteEquationSolution(
        has_solution=True,
        solutions=(x1, x2),
        explanation=explanation,
    )


# =============================================================================
# |ax + b| op c
# =============================================================================


def parse_operator(operator: str) -> InequalityOperator:
    """
    Нормализация оператора из формы.

    Raises:
        CalculatorInputError: Если оператор не поддерживается
    """
    if isinstance(operator, InequalityOperator):
        return operator
    op = OPERATOR_ALIASES.get(str(operator).strip())
    if op is None:
        raise CalculatorInputError(
            f"operator must be one of <, <=, >, >=; got {operator!r}", field="operator"
        )
    return op


def solve_absolute_value_inequality(
    a: float, b: float, operator: str, c: float
) -> AbsoluteInequalitySolution:
    """
    Решение неравенства |ax + b| op c.

    Вырожденные случаи:
    - c < 0: "<"/"<=" → нет решений; ">"/">=" → все действительные числа
    - c = 0: "<" → нет решений; "<=" → единственная точка x = −b/a;
             ">" → все кроме x = −b/a; ">=" → все действительные числа

    Args:
        a: Коэффициент при x (a ≠ 0)
        b: Свободный член под модулем
        operator: "<", "<=", ">", ">=" (допускаются "≤", "≥")
        c: Правая часть

    Returns:
        AbsoluteInequalitySolution

    Raises:
        CalculatorInputError: Если a == 0 или оператор неизвестен

    Examples:
        >>> solve_absolute_value_inequality(1, -1, "<", 2).interval_notation
        '(-1, 3)'
        >>> solve_absolute_value_inequality(1, 0, ">=", 2).solution
        'x ≤ -2 or x ≥ 2'
    """
    validate_non_zero(a, "a")
    validate_finite(b, "b")
    validate_finite(c, "c")
    op = parse_operator(operator)

    linear = _linear_text(a, b)
    is_less = op in (InequalityOperator.LT, InequalityOperator.LE)
    inclusive = op in (InequalityOperator.LE, InequalityOperator.GE)
    statement = f"|{linear}| {op.value} {format_number(c)}"

    # c < 0: модуль всегда >= 0
    if c < 0:
        if is_less:
            return _no_solution(statement, "an absolute value is never negative")
        return _all_reals(statement, "an absolute value is always greater than a negative number")

    # c = 0: вырожденные случаи
    if is_zero(c):
        root = -b / a
        if op == InequalityOperator.LT:
            return _no_solution(statement, "an absolute value is never less than zero")
        if op == InequalityOperator.GE:
            return _all_reals(statement, "an absolute value is always at least zero")
        if op == InequalityOperator.LE:
            return AbsoluteInequalitySolution(
                kind=SolutionKind.POINT,
                lower=root,
                upper=root,
                inclusive=True,
                solution=f"x = {format_number(root)}",
                interval_notation="{" + format_number(root) + "}",
                explanation=f"{statement} holds only where {linear} = 0.",
            )
        return AbsoluteInequalitySolution(
            kind=SolutionKind.ALL_EXCEPT_POINT,
            lower=root,
            upper=root,
            inclusive=False,
            solution=f"x ≠ {format_number(root)}",
            interval_notation=f"(-∞, {format_number(root)}) ∪ ({format_number(root)}, ∞)",
            explanation=f"{statement} holds everywhere except where {linear} = 0.",
        )

    # c > 0: границы (при a < 0 меняются местами)
    lower, upper = sorted(((-c - b) / a, (c - b) / a))
    lo, hi = format_number(lower), format_number(upper)

    if is_less:
        sign = "≤" if inclusive else "<"
        left, right = ("[", "]") if inclusive else ("(", ")")
        return AbsoluteInequalitySolution(
            kind=SolutionKind.INTERVAL,
            lower=lower,
            upper=upper,
            inclusive=inclusive,
            solution=f"{lo} {sign} x {sign} {hi}",
            interval_notation=f"{left}{lo}, {hi}{right}",
            explanation=(
                f"Rewrite as {format_number(-c)} {sign} {linear} {sign} {format_number(c)} "
                f"and solve for x."
            ),
        )

    less_sign, greater_sign = ("≤", "≥") if inclusive else ("<", ">")
    left, right = ("]", "[") if inclusive else (")", "(")
    return AbsoluteInequalitySolution(
        kind=SolutionKind.UNION,
        lower=lower,
        upper=upper,
        inclusive=inclusive,
        solution=f"x {less_sign} {lo} or x {greater_sign} {hi}",
        interval_notation=f"(-∞, {lo}{left} ∪ {right}{hi}, ∞)",
        explanation=(
            f"Split into {linear} {less_sign} {format_number(-c)} or "
            f"{linear} {greater_sign} {format_number(c)} and solve each for x."
        ),
    )


def _no_solution(statement: str, reason: str) -> AbsoluteInequalitySolution:
    return AbsoluteInequalitySolution(
        kind=SolutionKind.NO_SOLUTION,
        lower=None,
        upper=None,
        inclusive=False,
        solution="No solution",
        interval_notation="∅",
        explanation=f"{statement} has no solution: {reason}.",
    )


def _all_reals(statement: str, reason: str) -> AbsoluteInequalitySolution:
    return AbsoluteInequalitySolution(
        kind=SolutionKind.ALL_REALS,
        lower=None,
        upper=None,
        inclusive=True,
        solution="All real numbers",
        interval_notation="(-∞, ∞)",
        explanation=f"{statement} holds for every x: {reason}.",
    )


def _linear_text(a: float, b: float) -> str:
    """Текст линейного выражения: 2x - 4, -x + 3, x."""
    if a == 1:
        head = "x"
    elif a == -1:
        head = "-x"
    else:
        head = f"{format_number(a)}x"

    if is_zero(b):
        return head
    sign = "+" if b > 0 else "-"
    return f"{head} {sign} {format_number(abs(b))}"


# =============================================================================
# BINOMIAL COEFFICIENT
# =============================================================================


def binomial_coefficient(n: int, k: int) -> BinomialResult:
    """
    Биномиальный коэффициент C(n, k) = n! / (k! (n − k)!).

    Args:
        n: Число элементов (0 ≤ n ≤ BINOMIAL_MAX_N)
        k: Размер выборки (0 ≤ k ≤ n)

    Returns:
        BinomialResult со строкой n треугольника Паскаля

    Raises:
        CalculatorInputError: Если n, k не целые неотрицательные или k > n

    Examples:
        >>> binomial_coefficient(5, 2).coefficient
        10
        >>> binomial_coefficient(4, 1).pascal_row
        (1, 4, 6, 4, 1)
    """
    validate_integer(n, "n", min_value=0, max_value=BINOMIAL_MAX_N)
    validate_integer(k, "k", min_value=0)
    n, k = int(n), int(k)

    if k > n:
        raise CalculatorInputError(f"k ({k}) must not exceed n ({n})", field="k")

    row = tuple(math.comb(n, i) for i in range(n + 1))
    return BinomialResult(n=n, k=k, coefficient=row[k], pascal_row=row)
