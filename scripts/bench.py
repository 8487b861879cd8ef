"""
Load a running calcserve API with a mix of expressions.

  python scripts/bench.py --concurrency 16 --total 200
"""

import argparse
import asyncio
import json
import time
from collections import defaultdict
from statistics import median
from typing import Dict, List, Tuple

import httpx


BASE = "http://127.0.0.1:8000"
HEADERS = {"X-User-Id": "1"}

# label -> (expression, expected status)
CASES: Dict[str, Tuple[str, int]] = {
    "precedence": ("2+3*5-8/4", 200),
    "nested": ("((1+2)*(3+4))/(5-(6-7))", 200),
    "constants": ("π × 2 ÷ e", 200),
    "long_chain": ("+".join(str(k) for k in range(100)), 200),
    "div_zero": ("1/(2-2)", 400),
}


def percentile(values: List[float], q: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    return ordered[max(int(q * len(ordered)) - 1, 0)]


async def timed_post(client: httpx.AsyncClient, gate: asyncio.Semaphore, label: str):
    expression, expected = CASES[label]
    async with gate:
        t0 = time.perf_counter()
        try:
            r = await client.post(BASE + "/api/calculator/evaluate",
                                  json={"expression": expression}, headers=HEADERS)
            status = r.status_code
        except httpx.HTTPError as e:
            return label, (time.perf_counter() - t0) * 1000.0, False, str(e)
    ms = (time.perf_counter() - t0) * 1000.0
    return label, ms, status == expected, None if status == expected else f"status {status}"


async def main(concurrency: int, total: int, out_path: str):
    labels = list(CASES)
    gate = asyncio.Semaphore(concurrency)
    limits = httpx.Limits(max_keepalive_connections=concurrency, max_connections=concurrency)
    started = time.perf_counter()
    async with httpx.AsyncClient(limits=limits, timeout=10.0) as client:
        results = await asyncio.gather(*(
            timed_post(client, gate, labels[i % len(labels)]) for i in range(total)
        ))
    wall = time.perf_counter() - started

    by_label: Dict[str, List[float]] = defaultdict(list)
    errors = []
    for label, ms, ok, why in results:
        if ok:
            by_label[label].append(ms)
        else:
            errors.append((label, why))

    all_ms = [ms for values in by_label.values() for ms in values]
    report = {
        "total": total,
        "ok": len(all_ms),
        "unexpected": len(errors),
        "wall_s": round(wall, 3),
        "req_s": round(total / wall, 1) if wall else 0,
        "p50_ms": median(all_ms) if all_ms else 0,
        "p95_ms": percentile(all_ms, 0.95),
        "per_case_p50_ms": {label: median(v) for label, v in sorted(by_label.items())},
    }
    print(json.dumps(report, indent=2))
    for label, why in errors[:5]:
        print(f"- {label}: {why}")
    with open(out_path, "w") as f:
        json.dump(report, f)


if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--concurrency", type=int, default=32)
    ap.add_argument("--total", type=int, default=100)
    ap.add_argument("--out", default="bench.json")
    args = ap.parse_args()
    asyncio.run(main(args.concurrency, args.total, args.out))
