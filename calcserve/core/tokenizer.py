"""
Tokenizer for normalized arithmetic expressions.

The scanner is a pure function from (text, position) to (token, next
position). Multi-character tokens (numeric literals, signed literals) are
consumed greedily and the caller resumes at the returned position.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import InvalidCharacterError, NumberFormatError

DIGITS = "0123456789"
NUMBER_CHARS = DIGITS + "."
OPERATORS = "+-*/"


class TokenKind(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"


@dataclass(frozen=True)
class Token:
    """A single scanned token."""
    kind: TokenKind
    text: str
    position: int
    value: Optional[float] = None


def _scan_number_run(text: str, position: int) -> int:
    end = position
    while end < len(text) and text[end] in NUMBER_CHARS:
        end += 1
    return end


def _parse_literal(literal: str) -> float:
    try:
        return float(literal)
    except ValueError:
        raise NumberFormatError(literal) from None


def is_unary_minus(text: str, position: int) -> bool:
    """True if the '-' at ``position`` is a sign rather than subtraction."""
    if text[position] != "-":
        return False
    if position == 0:
        return True
    return text[position - 1] in "(" + OPERATORS


def next_token(text: str, position: int) -> Tuple[Token, int]:
    """
    Scan one token starting at ``position``.

    Returns the token and the position just past it. Raises
    InvalidCharacterError for characters outside the token set and
    NumberFormatError for literals float() rejects (e.g. ``1.2.3`` or a
    lone sign).
    """
    c = text[position]

    if c in NUMBER_CHARS:
        end = _scan_number_run(text, position)
        literal = text[position:end]
        return Token(TokenKind.NUMBER, literal, position, _parse_literal(literal)), end

    if c == "(":
        return Token(TokenKind.LPAREN, c, position), position + 1

    if c == ")":
        return Token(TokenKind.RPAREN, c, position), position + 1

    if c in OPERATORS:
        if is_unary_minus(text, position):
            end = _scan_number_run(text, position + 1)
            literal = text[position:end]
            return Token(TokenKind.NUMBER, literal, position, _parse_literal(literal)), end
        return Token(TokenKind.OPERATOR, c, position), position + 1

    raise InvalidCharacterError(c, position)


def tokenize(text: str):
    """Yield every token of ``text`` in order."""
    position = 0
    while position < len(text):
        token, position = next_token(text, position)
        yield token
