"""Simple smoke test for the FastAPI app using TestClient.
Run with: python scripts/smoke_api.py (from repo root). Uses an in-memory store.
"""

import os
import sys
from fastapi.testclient import TestClient

# Ensure we can import the package 'calcserve' when running as a script
HERE = os.path.dirname(__file__)
PROJ_ROOT = os.path.abspath(os.path.join(HERE, os.pardir))
if PROJ_ROOT not in sys.path:
    sys.path.insert(0, PROJ_ROOT)

from calcserve.api import app, get_api
from calcserve.main import CalculatorAPI


def main():
    api = CalculatorAPI(":memory:")
    app.dependency_overrides[get_api] = lambda: api
    c = TestClient(app)
    headers = {"X-User-Id": "1"}

    r = c.get("/v1/status")
    print("STATUS:", r.status_code, r.json())

    r = c.post("/api/calculator/evaluate", json={"expression": "2 + 3 × 5"}, headers=headers)
    print("EVAL:", r.status_code, r.json())

    r = c.post("/api/calculator/evaluate", json={"expression": "3/0"}, headers=headers)
    print("DIV0:", r.status_code, r.json())

    r = c.post("/api/calculator/evaluate", json={"expression": "2$3"}, headers=headers)
    print("BAD CHAR:", r.status_code, r.json())

    r = c.post("/api/calculator/archive", json={"expression": "(2+3)*5", "result": "25"}, headers=headers)
    print("ARCHIVE:", r.status_code, r.json())
    archived_id = r.json().get("id")

    r = c.get("/api/calculator/history", headers=headers)
    print("HISTORY:", r.status_code, r.json())

    r = c.delete(f"/api/calculator/archive/{archived_id}", headers={"X-User-Id": "2"})
    print("DELETE other user:", r.status_code, r.json())

    r = c.delete(f"/api/calculator/archive/{archived_id}", headers=headers)
    print("DELETE:", r.status_code, r.json())

    r = c.delete("/api/calculator/history", headers=headers)
    print("CLEAR:", r.status_code, r.json())

    r = c.get("/api/calculator/history")
    print("NO USER:", r.status_code, r.json())

    app.dependency_overrides.clear()
    api.close()


if __name__ == "__main__":
    main()
