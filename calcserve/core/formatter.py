import math


def format_result(value: float) -> str:
    """
    Render an evaluation result for display.

    Finite integral values print without a fractional part or exponent
    (``17.0`` -> ``"17"``, ``-0.0`` -> ``"0"``). Everything else, including
    inf and nan, uses Python's default float repr.
    """
    if math.isfinite(value) and value == math.floor(value):
        return str(int(value))
    return repr(float(value))
