from __future__ import annotations

from typing import Any, Dict

from calcserve.core.errors import EvaluationError
from calcserve.core.evaluator import evaluate


def run(inputs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deterministic math evaluator, tool entry point.

    Expects: { "expr": "<expression>" }
    Outputs on success:
      - result (formatted string, e.g. "17" or "2.5")
      - final_answer (same, human readable)
    Outputs on failure:
      - error (stable kind, e.g. "division_by_zero")
      - detail (offending character/literal/operator)
      - final_answer ("Error: <message>")
    Never raises for evaluation failures.
    """
    if not isinstance(inputs, dict):
        return {"final_answer": "Error: inputs must be a dict", "error": "invalid_inputs", "success": False}
    expr = inputs.get("expr", "")
    if not isinstance(expr, str):
        return {"final_answer": "Error: Expression must be a string", "error": "invalid_args", "success": False}
    try:
        result = evaluate(expr)
    except EvaluationError as e:
        return {
            "expr": expr,
            "error": e.kind.value,
            "detail": dict(e.detail),
            "final_answer": f"Error: {e.message}",
            "success": False,
        }
    return {"expr": expr, "result": result, "final_answer": result, "success": True}
