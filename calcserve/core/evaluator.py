"""
Two-stack arithmetic expression evaluator.

Scans a normalized expression left to right once, keeping an operand stack
and an operator stack, and applies operators as precedence allows. No parse
tree is built and nothing recurses: nesting depth only grows the operator
list.
"""

from __future__ import annotations

import operator
from typing import Callable, Dict, List

from .errors import (
    DivisionByZeroError,
    MalformedExpressionError,
    UnknownOperatorError,
)
from .formatter import format_result
from .normalizer import normalize_expression
from .tokenizer import TokenKind, tokenize

PRECEDENCE: Dict[str, int] = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
}

_OPERATIONS: Dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}


def apply_operator(op: str, left: float, right: float) -> float:
    """Compute ``left op right``."""
    fn = _OPERATIONS.get(op)
    if fn is None:
        raise UnknownOperatorError(op)
    if op == "/" and right == 0.0:
        raise DivisionByZeroError()
    return fn(left, right)


def _reduce(operands: List[float], operators: List[str]) -> None:
    op = operators.pop()
    if op == "(":
        raise MalformedExpressionError("unmatched '('")
    if len(operands) < 2:
        raise MalformedExpressionError(f"missing operand for '{op}'")
    right = operands.pop()
    left = operands.pop()
    operands.append(apply_operator(op, left, right))


def evaluate_expression(text: str) -> float:
    """
    Evaluate an already-normalized expression to a float.

    Raises an EvaluationError subclass on any failure.
    """
    operands: List[float] = []
    operators: List[str] = []

    for token in tokenize(text):
        if token.kind is TokenKind.NUMBER:
            operands.append(token.value)
        elif token.kind is TokenKind.LPAREN:
            operators.append("(")
        elif token.kind is TokenKind.RPAREN:
            while operators and operators[-1] != "(":
                _reduce(operands, operators)
            # An unmatched ')' just drains the stack.
            if operators:
                operators.pop()
        else:
            incoming = PRECEDENCE[token.text]
            while operators and operators[-1] != "(" and PRECEDENCE[operators[-1]] >= incoming:
                _reduce(operands, operators)
            operators.append(token.text)

    while operators:
        _reduce(operands, operators)

    if len(operands) != 1:
        if not operands:
            raise MalformedExpressionError("no value")
        raise MalformedExpressionError(f"{len(operands)} values left without operators")
    return operands[0]


def evaluate(expression: str) -> str:
    """
    Evaluate a raw expression string and return the display string.

    >>> evaluate("2 + 3 × 5")
    '17'
    >>> evaluate("10/4")
    '2.5'
    """
    text = normalize_expression(expression)
    return format_result(evaluate_expression(text))
