"""
Tests for the two-stack expression evaluator.
"""

import itertools

import pytest

from calcserve.core.errors import (
    DivisionByZeroError,
    EmptyExpressionError,
    ErrorKind,
    EvaluationError,
    InvalidCharacterError,
    MalformedExpressionError,
    NumberFormatError,
    UnknownOperatorError,
)
from calcserve.core.evaluator import apply_operator, evaluate, evaluate_expression
from calcserve.core.formatter import format_result


@pytest.mark.parametrize("expr,expected", [
    ("2+3*5", "17"),
    ("(2+3)*5", "25"),
    ("10/4", "2.5"),
    ("-5+3", "-2"),
    ("(2+3)*2", "10"),
    ("2+3*2", "8"),
    ("10-2-3", "5"),
    ("100/10/5", "2"),
    ("2*3+4*5", "26"),
    ("8-6/3*2", "4"),
    ("((1+2)*(3+4))", "21"),
    ("1/3", "0.3333333333333333"),
    ("0.1+0.2", "0.30000000000000004"),
])
def test_standard_precedence(expr, expected):
    assert evaluate(expr) == expected


@pytest.mark.parametrize("expr,expected", [
    ("2*-3", "-6"),
    ("5--3", "8"),
    ("2-(-3)", "5"),
    ("(-2)*(-2)", "4"),
    ("-0.5*4", "-2"),
    ("-0", "0"),
])
def test_unary_minus(expr, expected):
    assert evaluate(expr) == expected


def test_whitespace_and_glyphs():
    assert evaluate(" 2 + 3 × 5 ") == "17"
    assert evaluate("9 ÷ 2") == "4.5"


def test_constants():
    assert evaluate("π") == "3.141592653589793"
    assert evaluate("e") == "2.718281828459045"
    assert evaluate("2×π") == repr(2 * 3.141592653589793)


def test_e_inside_number_becomes_one_literal():
    assert evaluate("2e3").startswith("22.71828")


def test_precedence_law():
    """a op1 b op2 c with additive op1 and multiplicative op2 groups as a op1 (b op2 c)."""
    additive = {"+": lambda x, y: x + y, "-": lambda x, y: x - y}
    multiplicative = {"*": lambda x, y: x * y, "/": lambda x, y: x / y}
    for a, b, c in [(1, 2, 7), (9, 4, 3), (0.5, 8, 2)]:
        for (op1, f1), (op2, f2) in itertools.product(additive.items(), multiplicative.items()):
            expected = format_result(f1(float(a), f2(float(b), float(c))))
            assert evaluate(f"{a}{op1}{b}{op2}{c}") == expected, f"{a}{op1}{b}{op2}{c}"


def test_unmatched_close_paren_is_lenient():
    assert evaluate("2)") == "2"
    assert evaluate("2+3)*4") == "20"


def test_deep_nesting_does_not_recurse():
    depth = 5000
    assert evaluate("(" * depth + "1+1" + ")" * depth) == "2"


def test_large_literal_overflows_to_inf():
    assert evaluate("9" * 400) == "inf"
    assert evaluate("9" * 400 + "*0") == "nan"


class TestErrors:
    """Each failure raises its own EvaluationError subclass."""

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZeroError) as exc_info:
            evaluate("3/0")
        assert exc_info.value.kind is ErrorKind.DIVISION_BY_ZERO
        assert exc_info.value.message == "Cannot divide by zero"

    @pytest.mark.parametrize("expr", ["1/0.0", "1/-0", "1/(2-2)", "0/0"])
    def test_division_by_any_zero(self, expr):
        with pytest.raises(DivisionByZeroError):
            evaluate(expr)

    def test_empty(self):
        with pytest.raises(EmptyExpressionError):
            evaluate("")

    @pytest.mark.parametrize("expr", ["2+", "+", "*3", "()", "(2+3", "2(3)", "(1)(2)"])
    def test_malformed(self, expr):
        with pytest.raises(MalformedExpressionError) as exc_info:
            evaluate(expr)
        assert exc_info.value.kind is ErrorKind.MALFORMED_EXPRESSION
        assert "reason" in exc_info.value.detail

    def test_trailing_operator_reason(self):
        with pytest.raises(MalformedExpressionError) as exc_info:
            evaluate("2+")
        assert exc_info.value.reason == "missing operand for '+'"

    def test_invalid_character(self):
        with pytest.raises(InvalidCharacterError) as exc_info:
            evaluate("2$3")
        assert exc_info.value.char == "$"
        assert exc_info.value.detail == {"char": "$", "position": 1}

    def test_invalid_character_words(self):
        with pytest.raises(InvalidCharacterError) as exc_info:
            evaluate("sqrt(4)")
        assert exc_info.value.char == "s"

    def test_exponent_operator_not_supported(self):
        with pytest.raises(InvalidCharacterError):
            evaluate("2^3")

    @pytest.mark.parametrize("expr", ["1.2.3+1", "-(2)", "--5", "."])
    def test_number_format(self, expr):
        with pytest.raises(NumberFormatError):
            evaluate(expr)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            evaluate("3/0")

    def test_to_dict(self):
        try:
            evaluate("2$3")
        except EvaluationError as e:
            assert e.to_dict() == {
                "error": "invalid_character",
                "message": "Invalid character: $",
                "detail": {"char": "$", "position": 1},
            }
        else:
            pytest.fail("expected InvalidCharacterError")


def test_apply_operator_unknown_symbol():
    with pytest.raises(UnknownOperatorError) as exc_info:
        apply_operator("^", 2.0, 3.0)
    assert exc_info.value.operator == "^"
    assert str(exc_info.value) == "Invalid operator: ^"


def test_apply_operator_operand_order():
    assert apply_operator("-", 10.0, 4.0) == 6.0
    assert apply_operator("/", 10.0, 4.0) == 2.5


def test_evaluate_expression_returns_float():
    assert evaluate_expression("7*6") == 42.0
