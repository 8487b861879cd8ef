"""
Command-line entry point.

  calcserve eval "2+3*5" "(2+3)*5"
  echo "10/4" | calcserve eval
  calcserve eval --json "3/0"
  calcserve serve --port 8080
"""

import argparse
import json
import logging
import sys
from typing import Iterable, List, Optional

from .core.errors import EvaluationError
from .core.evaluator import evaluate
from .core.settings import configure_logging, load_settings
from .tools import evalmath

logger = logging.getLogger(__name__)


def _read_expressions(args_exprs: List[str], stdin) -> List[str]:
    if args_exprs and args_exprs != ["-"]:
        return list(args_exprs)
    return [line.rstrip("\n") for line in stdin if line.strip()]


def run_eval(expressions: Iterable[str], as_json: bool = False, out=None, err=None) -> int:
    """Evaluate each expression; returns 0 if all succeeded, 1 otherwise."""
    out = out or sys.stdout
    err = err or sys.stderr
    failures = 0
    for expr in expressions:
        if as_json:
            result = evalmath.run({"expr": expr})
            if not result.get("success"):
                failures += 1
            print(json.dumps(result, ensure_ascii=False), file=out)
            continue
        try:
            print(evaluate(expr), file=out)
        except EvaluationError as e:
            failures += 1
            print(f"error: {e.message}", file=err)
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="calcserve", description="Arithmetic expression evaluator")
    ap.add_argument("--log-level", default=None, help="override the configured log level")
    sub = ap.add_subparsers(dest="command")

    # Expressions are collected from the unparsed remainder so that a leading
    # unary minus ("-5+3") is not mistaken for an option.
    ev = sub.add_parser("eval", usage="calcserve eval [-h] [--json] [EXPR ...]",
                        help="evaluate expressions (from arguments, or stdin lines)",
                        description="Evaluate expressions; '-' or none reads stdin lines.")
    ev.add_argument("--json", action="store_true", help="print one JSON result object per line")

    sv = sub.add_parser("serve", help="run the HTTP API")
    sv.add_argument("--host", default=None)
    sv.add_argument("--port", type=int, default=None)

    args, rest = ap.parse_known_args(argv)
    if args.command is None:
        ap.print_help()
        return 2
    if args.command != "eval" and rest:
        ap.error(f"unrecognized arguments: {' '.join(rest)}")

    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)

    if args.command == "serve":
        from .api import serve
        serve(args.host, args.port)
        return 0

    if "--" in rest:
        rest.remove("--")
    expressions = _read_expressions(rest, sys.stdin)
    logger.debug(f"Evaluating {len(expressions)} expression(s)")
    return run_eval(expressions, as_json=args.json)


if __name__ == "__main__":
    sys.exit(main())
