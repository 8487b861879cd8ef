"""
Calculation store.

SQLite persistence for per-user calculation history and archive. The
evaluator never touches this module; callers record results here after
evaluating.
"""

import sqlite3
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass
import logging
import threading

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "db" / "schema.sql"


class CalculationType(str, Enum):
    """Where a saved calculation lives."""
    HISTORY = "HISTORY"
    ARCHIVE = "ARCHIVE"


@dataclass
class Calculation:
    """A saved calculation."""
    id: Optional[int]
    user_id: int
    expression: str
    result: str
    type: CalculationType
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "expression": self.expression,
            "result": self.result,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "type": self.type.value,
        }


class CalculationStore:
    """Database interface for saved calculations."""

    def __init__(self, db_path: str = ":memory:"):
        """Open (and create if needed) the database at ``db_path``."""
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        # Allow use across threads (FastAPI/TestClient/uvicorn)
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        try:
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")
            self.conn.execute("PRAGMA busy_timeout=3000")
        except sqlite3.DatabaseError as e:
            logger.warning(f"Could not apply pragmas to {db_path}: {e}")
        # Serialize DB access across threads
        self._lock = threading.RLock()
        self._create_tables()

    def _create_tables(self):
        """Create the calculation table."""
        with self._lock:
            with open(SCHEMA_PATH, "r") as f:
                schema_sql = f.read()
            self.conn.executescript(schema_sql)
            self.conn.commit()

    @staticmethod
    def _row_to_calculation(row: sqlite3.Row) -> Calculation:
        return Calculation(
            id=row["id"],
            user_id=row["user_id"],
            expression=row["expression"],
            result=row["result"],
            type=CalculationType(row["type"]),
            timestamp=datetime.fromisoformat(row["timestamp"]) if row["timestamp"] else None,
        )

    def save(self, calculation: Calculation) -> Calculation:
        """Insert a calculation and return it with id and timestamp filled in."""
        timestamp = calculation.timestamp or datetime.now()
        with self._lock:
            cursor = self.conn.cursor()
            cursor.execute("""
            INSERT INTO calculation (user_id, expression, result, timestamp, type)
            VALUES (?, ?, ?, ?, ?)
        """, (
                calculation.user_id,
                calculation.expression,
                calculation.result,
                timestamp.isoformat(timespec="microseconds"),
                calculation.type.value,
            ))
            self.conn.commit()
            new_id = cursor.lastrowid
        return Calculation(
            id=new_id,
            user_id=calculation.user_id,
            expression=calculation.expression,
            result=calculation.result,
            type=calculation.type,
            timestamp=timestamp,
        )

    def list_by_user_and_type(self, user_id: int, calc_type: CalculationType) -> List[Calculation]:
        """Get a user's calculations of one type, newest first."""
        with self._lock:
            cursor = self.conn.cursor()
            cursor.execute("""
            SELECT * FROM calculation WHERE user_id = ? AND type = ?
            ORDER BY timestamp DESC, id DESC
        """, (user_id, calc_type.value))
            rows = cursor.fetchall()
        return [self._row_to_calculation(row) for row in rows]

    def get_by_id_and_user(self, calc_id: int, user_id: int) -> Optional[Calculation]:
        """Get a calculation only if it belongs to ``user_id``."""
        with self._lock:
            cursor = self.conn.cursor()
            cursor.execute("""
            SELECT * FROM calculation WHERE id = ? AND user_id = ?
        """, (calc_id, user_id))
            row = cursor.fetchone()
        return self._row_to_calculation(row) if row else None

    def delete(self, calc_id: int):
        """Delete a calculation by id."""
        with self._lock:
            self.conn.execute("DELETE FROM calculation WHERE id = ?", (calc_id,))
            self.conn.commit()

    def delete_by_user_and_type(self, user_id: int, calc_type: CalculationType) -> int:
        """Delete all of a user's calculations of one type; returns the row count."""
        with self._lock:
            cursor = self.conn.cursor()
            cursor.execute("""
            DELETE FROM calculation WHERE user_id = ? AND type = ?
        """, (user_id, calc_type.value))
            self.conn.commit()
            return cursor.rowcount

    def count(self) -> int:
        with self._lock:
            row = self.conn.execute("SELECT COUNT(*) AS n FROM calculation").fetchone()
        return int(row["n"])

    def close(self):
        """Close the database connection."""
        self.conn.close()
