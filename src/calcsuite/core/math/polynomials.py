"""
Polynomials — Parsing, Like-Term Merging & Arithmetic

Полиномы одной переменной x:
- Разбор текста в список термов (coefficient, exponent)
- Сложение / вычитание (знаки второго операнда инвертируются)
- Умножение методом "box" (сетка частичных произведений)
- Каноническое форматирование по убыванию степени

ГРАММАТИКА:
    polynomial := term (("+" | "-") term)*
    term       := [coefficient] ["x" ["^" exponent]]   (хотя бы одно из двух)
    coefficient:= digits ["." digits]
    exponent   := digits

    Пробелы игнорируются, "X" эквивалентен "x".

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Некорректный текст → PolynomialParseError (до вычисления)
2. Подобные термы (одинаковая степень) объединяются, нулевые отбрасываются
3. Формат: убывание степени, без пробелов, "0" для нулевого полинома
"""

import re
from enum import Enum
from typing import Final, NamedTuple

from calcsuite.core.math.numerical_safeguards import (
    CalculatorInputError,
    format_number,
    is_zero,
)

# =============================================================================
# GRAMMAR
# =============================================================================

# Разбиение на термы: знак + всё до следующего знака
TERM_SPLIT_PATTERN: Final[re.Pattern] = re.compile(r"[+-]?[^+-]+")

# Один терм: знак, коэффициент, x, степень
TERM_PATTERN: Final[re.Pattern] = re.compile(r"([+-]?)(\d+(?:\.\d+)?)?(x(?:\^(\d+))?)?")

# Максимальная степень (защита от вырожденного ввода)
MAX_EXPONENT: Final[int] = 100


class PolynomialParseError(CalculatorInputError):
    """Некорректный текст полинома."""

    pass


class PolynomialOperation(str, Enum):
    """Операция над двумя полиномами."""

    ADD = "add"
    SUBTRACT = "subtract"


# =============================================================================
# TYPES
# =============================================================================


class Term(NamedTuple):
    """Терм coefficient · x^exponent."""

    coefficient: float
    exponent: int


class PolynomialResult(NamedTuple):
    """Результат сложения / вычитания."""

    result: str
    terms: tuple[Term, ...]
    steps: tuple[str, ...]


class BoxCell(NamedTuple):
    """Ячейка сетки box-метода."""

    row_term: str
    column_term: str
    product: str


class BoxMultiplicationResult(NamedTuple):
    """Результат умножения методом box."""

    result: str
    terms: tuple[Term, ...]
    grid: tuple[tuple[BoxCell, ...], ...]
    steps: tuple[str, ...]


# =============================================================================
# PARSING
# =============================================================================


def parse_polynomial(text: str, field: str = "polynomial") -> list[Term]:
    """
    Разбор текста полинома в список термов (без объединения).

    Args:
        text: Полином, например "3x^2 + 2x - 5"
        field: Имя поля формы для сообщения об ошибке

    Returns:
        Термы в порядке записи

    Raises:
        PolynomialParseError: Пустой или некорректный ввод

    Examples:
        >>> parse_polynomial("3x^2+2x-5")
        [Term(coefficient=3.0, exponent=2), Term(coefficient=2.0, exponent=1), Term(coefficient=-5.0, exponent=0)]
    """
    if not isinstance(text, str):
        raise PolynomialParseError(f"{field} must be text, got {text!r}", field=field)

    normalized = re.sub(r"\s+", "", text).lower()
    if not normalized:
        raise PolynomialParseError(f"{field} is empty", field=field)

    chunks = TERM_SPLIT_PATTERN.findall(normalized)
    # Остаток, не покрытый термами (например, "3x+" или "--2")
    if "".join(chunks) != normalized:
        raise PolynomialParseError(f"{field} is malformed: {text!r}", field=field)

    terms = []
    for chunk in chunks:
        match = TERM_PATTERN.fullmatch(chunk)
        if match is None or (match.group(2) is None and match.group(3) is None):
            raise PolynomialParseError(
                f"{field} has an invalid term {chunk!r}", field=field
            )

        sign, digits, x_part, power = match.groups()
        coefficient = float(digits) if digits is not None else 1.0
        if sign == "-":
            coefficient = -coefficient

        if x_part is None:
            exponent = 0
        elif power is None:
            exponent = 1
        else:
            exponent = int(power)

        if exponent > MAX_EXPONENT:
            raise PolynomialParseError(
                f"{field} exponent {exponent} exceeds {MAX_EXPONENT}", field=field
            )

        terms.append(Term(coefficient, exponent))

    return terms


def combine_like_terms(terms) -> list[Term]:
    """
    Объединение подобных термов.

    Returns:
        Термы по убыванию степени, без нулевых коэффициентов
    """
    by_exponent: dict[int, float] = {}
    for term in terms:
        by_exponent[term.exponent] = by_exponent.get(term.exponent, 0.0) + term.coefficient

    return [
        Term(coefficient, exponent)
        for exponent, coefficient in sorted(by_exponent.items(), reverse=True)
        if not is_zero(coefficient, tol=1e-12)
    ]


# =============================================================================
# FORMATTING
# =============================================================================


def format_term(term: Term, leading: bool = True) -> str:
    """
    Текст одного терма.

    Коэффициент ±1 опускается для ненулевой степени, x^1 пишется как x.
    При leading=False положительный терм получает ведущий "+".
    """
    coefficient, exponent = term
    magnitude = abs(coefficient)

    if exponent == 0:
        body = format_number(magnitude)
    else:
        head = "" if magnitude == 1 else format_number(magnitude)
        body = f"{head}x" if exponent == 1 else f"{head}x^{exponent}"

    if coefficient < 0:
        return f"-{body}"
    return body if leading else f"+{body}"


def format_polynomial(terms) -> str:
    """
    Каноническая запись полинома.

    Examples:
        >>> format_polynomial([Term(4, 2), Term(-5, 1), Term(-3, 0)])
        '4x^2-5x-3'
        >>> format_polynomial([])
        '0'
    """
    combined = combine_like_terms(terms)
    if not combined:
        return "0"

    return "".join(
        format_term(term, leading=(index == 0)) for index, term in enumerate(combined)
    )


# =============================================================================
# ARITHMETIC
# =============================================================================


def add_subtract_polynomials(first: str, second: str, operation: str = "add") -> PolynomialResult:
    """
    Сложение или вычитание двух полиномов.

    Args:
        first: Первый полином (текст)
        second: Второй полином (текст)
        operation: "add" или "subtract"

    Returns:
        PolynomialResult с канонической записью и шагами

    Raises:
        PolynomialParseError: Некорректный текст
        CalculatorInputError: Неизвестная операция

    Examples:
        >>> add_subtract_polynomials("3x^2+2x-5", "x^2-7x+2").result
        '4x^2-5x-3'
        >>> add_subtract_polynomials("x^2+1", "x^2-1", "subtract").result
        '2'
    """
    try:
        op = PolynomialOperation(operation)
    except ValueError:
        raise CalculatorInputError(
            f"operation must be 'add' or 'subtract', got {operation!r}", field="operation"
        )

    first_terms = parse_polynomial(first, field="first")
    second_terms = parse_polynomial(second, field="second")

    first_text = format_polynomial(first_terms)
    second_text = format_polynomial(second_terms)
    steps = [f"First polynomial: {first_text}", f"Second polynomial: {second_text}"]

    if op == PolynomialOperation.SUBTRACT:
        second_terms = [Term(-t.coefficient, t.exponent) for t in second_terms]
        steps.append(
            f"Distribute the minus sign: -({second_text}) = {format_polynomial(second_terms)}"
        )

    all_terms = first_terms + second_terms
    steps.append(
        "Group like terms: "
        + ", ".join(
            f"x^{exponent}: {format_number(sum(t.coefficient for t in all_terms if t.exponent == exponent))}"
            for exponent in sorted({t.exponent for t in all_terms}, reverse=True)
        )
    )

    combined = combine_like_terms(all_terms)
    result = format_polynomial(combined)
    steps.append(f"Result: {result}")

    return PolynomialResult(result=result, terms=tuple(combined), steps=tuple(steps))


def multiply_polynomials_box(first: str, second: str) -> BoxMultiplicationResult:
    """
    Умножение двух полиномов методом box.

    Строки сетки соответствуют термам первого полинома, столбцы — второго;
    каждая ячейка содержит частичное произведение.

    Examples:
        >>> multiply_polynomials_box("x+2", "x^2-3x+5").result
        'x^3-x^2-x+10'
    """
    rows = combine_like_terms(parse_polynomial(first, field="first"))
    columns = combine_like_terms(parse_polynomial(second, field="second"))

    products = []
    grid = []
    for row in rows:
        cells = []
        for column in columns:
            product = Term(row.coefficient * column.coefficient, row.exponent + column.exponent)
            products.append(product)
            cells.append(
                BoxCell(
                    row_term=format_term(row),
                    column_term=format_term(column),
                    product=format_term(product),
                )
            )
        grid.append(tuple(cells))

    combined = combine_like_terms(products)
    result = format_polynomial(combined)

    steps = (
        f"Place {format_polynomial(rows)} along the rows and {format_polynomial(columns)} along the columns",
        "Multiply each row term by each column term: "
        + ", ".join(cell.product for row in grid for cell in row),
        f"Combine like terms: {result}",
    )

    return BoxMultiplicationResult(
        result=result, terms=tuple(combined), grid=tuple(grid), steps=steps
    )
