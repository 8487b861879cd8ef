"""
Evaluation error taxonomy.

Every failure of the expression evaluator is raised as a subclass of
EvaluationError. Each class carries a stable ``kind`` tag so callers can
branch on the failure without parsing messages, and a ``detail`` dict with
the offending character, literal, operator or reason.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Stable identifiers for evaluation failures."""
    EMPTY_EXPRESSION = "empty_expression"
    INVALID_CHARACTER = "invalid_character"
    NUMBER_FORMAT = "number_format"
    DIVISION_BY_ZERO = "division_by_zero"
    MALFORMED_EXPRESSION = "malformed_expression"
    UNKNOWN_OPERATOR = "unknown_operator"


class EvaluationError(ValueError):
    """Base class for all evaluation failures."""

    kind: ErrorKind = ErrorKind.MALFORMED_EXPRESSION

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind.value, "message": self.message, "detail": dict(self.detail)}


class EmptyExpressionError(EvaluationError):
    kind = ErrorKind.EMPTY_EXPRESSION

    def __init__(self):
        super().__init__("Empty expression")


class InvalidCharacterError(EvaluationError):
    kind = ErrorKind.INVALID_CHARACTER

    def __init__(self, char: str, position: int):
        super().__init__(f"Invalid character: {char}", {"char": char, "position": position})
        self.char = char
        self.position = position


class NumberFormatError(EvaluationError):
    kind = ErrorKind.NUMBER_FORMAT

    def __init__(self, literal: str):
        super().__init__(f"Invalid number: {literal}", {"literal": literal})
        self.literal = literal


class DivisionByZeroError(EvaluationError):
    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(self):
        super().__init__("Cannot divide by zero")


class MalformedExpressionError(EvaluationError):
    kind = ErrorKind.MALFORMED_EXPRESSION

    def __init__(self, reason: str = "Invalid expression"):
        super().__init__("Invalid expression", {"reason": reason})
        self.reason = reason


class UnknownOperatorError(EvaluationError):
    kind = ErrorKind.UNKNOWN_OPERATOR

    def __init__(self, operator: str):
        super().__init__(f"Invalid operator: {operator}", {"operator": operator})
        self.operator = operator
