"""
Тесты для модуля Polynomials

Проверяет:
1. Разбор текста полинома и отклонение некорректного ввода
2. Объединение подобных термов и каноническое форматирование
3. Сложение / вычитание с шагами решения
4. Умножение методом box (сетка частичных произведений)
"""

import pytest

from calcsuite.core.math.numerical_safeguards import CalculatorInputError
from calcsuite.core.math.polynomials import (
    PolynomialParseError,
    Term,
    add_subtract_polynomials,
    combine_like_terms,
    format_polynomial,
    format_term,
    multiply_polynomials_box,
    parse_polynomial,
)

# =============================================================================
# PARSING
# =============================================================================


class TestParsePolynomial:
    """Тесты для parse_polynomial"""

    def test_basic(self) -> None:
        assert parse_polynomial("3x^2 + 2x - 5") == [Term(3.0, 2), Term(2.0, 1), Term(-5.0, 0)]

    def test_implicit_coefficients(self) -> None:
        """x → 1·x^1, -x^3 → -1·x^3"""
        assert parse_polynomial("-x^3+x") == [Term(-1.0, 3), Term(1.0, 1)]

    def test_decimal_coefficient_and_uppercase(self) -> None:
        assert parse_polynomial("2.5X^2") == [Term(2.5, 2)]

    def test_constant_only(self) -> None:
        assert parse_polynomial("7") == [Term(7.0, 0)]

    @pytest.mark.parametrize("text", ["", "   ", "3x+", "--2", "2y", "x^", "3x^2x", "+"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(PolynomialParseError):
            parse_polynomial(text)

    def test_error_names_field(self) -> None:
        with pytest.raises(PolynomialParseError) as exc:
            parse_polynomial("2y", field="second")
        assert exc.value.field == "second"

    def test_non_text_rejected(self) -> None:
        with pytest.raises(PolynomialParseError, match="must be text"):
            parse_polynomial(42)

    def test_exponent_limit(self) -> None:
        with pytest.raises(PolynomialParseError, match="exceeds"):
            parse_polynomial("x^101")

    def test_parse_error_is_input_error(self) -> None:
        assert issubclass(PolynomialParseError, CalculatorInputError)


# =============================================================================
# LIKE TERMS & FORMATTING
# =============================================================================


class TestFormatting:
    """Тесты combine_like_terms / format_term / format_polynomial"""

    def test_combine_sorted_descending(self) -> None:
        terms = [Term(1.0, 0), Term(2.0, 2), Term(3.0, 0), Term(-2.0, 2), Term(1.0, 1)]
        assert combine_like_terms(terms) == [Term(1.0, 1), Term(4.0, 0)]

    def test_format_term(self) -> None:
        assert format_term(Term(1.0, 1)) == "x"
        assert format_term(Term(-1.0, 2)) == "-x^2"
        assert format_term(Term(3.0, 0), leading=False) == "+3"
        assert format_term(Term(2.5, 3)) == "2.5x^3"

    def test_zero_polynomial(self) -> None:
        assert format_polynomial([Term(2.0, 1), Term(-2.0, 1)]) == "0"

    def test_canonical(self) -> None:
        assert format_polynomial([Term(-3, 0), Term(4, 2), Term(-5, 1)]) == "4x^2-5x-3"


# =============================================================================
# ADD / SUBTRACT
# =============================================================================


class TestAddSubtract:
    """Тесты для add_subtract_polynomials"""

    def test_add(self) -> None:
        result = add_subtract_polynomials("3x^2+2x-5", "x^2-7x+2")
        assert result.result == "4x^2-5x-3"
        assert result.terms == (Term(4.0, 2), Term(-5.0, 1), Term(-3.0, 0))
        assert result.steps[-1] == "Result: 4x^2-5x-3"

    def test_subtract_distributes_sign(self) -> None:
        result = add_subtract_polynomials("x^2+1", "x^2-1", "subtract")
        assert result.result == "2"
        assert any("Distribute the minus sign" in step for step in result.steps)

    def test_subtract_self_is_zero(self) -> None:
        assert add_subtract_polynomials("5x^3-x", "5x^3-x", "subtract").result == "0"

    def test_commutative_addition(self) -> None:
        a, b = "2x^2-x+4", "-x^3+3x"
        assert add_subtract_polynomials(a, b).result == add_subtract_polynomials(b, a).result

    def test_unknown_operation(self) -> None:
        with pytest.raises(CalculatorInputError) as exc:
            add_subtract_polynomials("x", "x", "multiply")
        assert exc.value.field == "operation"

    def test_bad_second_operand_field(self) -> None:
        with pytest.raises(PolynomialParseError) as exc:
            add_subtract_polynomials("x", "x+")
        assert exc.value.field == "second"


# =============================================================================
# BOX MULTIPLICATION
# =============================================================================


class TestBoxMultiplication:
    """Тесты для multiply_polynomials_box"""

    def test_product(self) -> None:
        """(x + 2)(x^2 - 3x + 5) = x^3 - x^2 - x + 10"""
        result = multiply_polynomials_box("x+2", "x^2-3x+5")
        assert result.result == "x^3-x^2-x+10"

    def test_grid_shape(self) -> None:
        """Строки — термы первого полинома, столбцы — второго"""
        result = multiply_polynomials_box("x+2", "x^2-3x+5")
        assert len(result.grid) == 2
        assert all(len(row) == 3 for row in result.grid)
        cell = result.grid[1][1]
        assert (cell.row_term, cell.column_term, cell.product) == ("2", "-3x", "-6x")

    def test_difference_of_squares(self) -> None:
        assert multiply_polynomials_box("x+3", "x-3").result == "x^2-9"

    def test_multiply_by_constant(self) -> None:
        assert multiply_polynomials_box("2", "x^2+0.5").result == "2x^2+1"

    def test_steps(self) -> None:
        result = multiply_polynomials_box("x+1", "x+1")
        assert result.result == "x^2+2x+1"
        assert result.steps[-1] == "Combine like terms: x^2+2x+1"
