"""
Calculator service and API facade.

This module wires the expression evaluator to the calculation store:
evaluate an expression, record it in the caller's history, and manage the
per-user archive.
"""

import json
import logging
from typing import Dict, Any, List, Optional
from datetime import datetime

from .core.database import Calculation, CalculationStore, CalculationType
from .core.evaluator import evaluate
from .core.settings import Settings, load_settings

logger = logging.getLogger(__name__)


class CalculatorServiceError(Exception):
    """Base class for service-level failures (not evaluation failures)."""
    kind = "service_error"


class CalculationNotFoundError(CalculatorServiceError):
    kind = "not_found"

    def __init__(self, calc_id: int):
        super().__init__("Calculation not found or access denied")
        self.calc_id = calc_id


class NotArchivedError(CalculatorServiceError):
    kind = "not_archived"

    def __init__(self, calc_id: int):
        super().__init__("Can only delete from archive")
        self.calc_id = calc_id


class ExpressionTooLongError(CalculatorServiceError):
    kind = "expression_too_long"

    def __init__(self, length: int, limit: int):
        super().__init__(f"Expression is {length} characters long, limit is {limit}")
        self.length = length
        self.limit = limit


class CalculatorService:
    """Business logic for evaluating and saving calculations."""

    def __init__(self, db_path: str = None, settings: Optional[Settings] = None):
        """Initialize the service.

        If db_path is None, the configured db_path is used.
        Use ":memory:" explicitly for ephemeral testing.
        """
        self.settings = settings or load_settings()
        self.store = CalculationStore(db_path or self.settings.db_path)
        logger.info(f"Calculator service initialized (db={self.store.db_path})")

    def evaluate(self, expression: str) -> str:
        """Evaluate an expression; raises EvaluationError or ExpressionTooLongError."""
        expression = expression if expression is not None else ""
        limit = self.settings.max_expression_length
        if len(expression) > limit:
            logger.warning(f"Rejected expression of length {len(expression)} (limit {limit})")
            raise ExpressionTooLongError(len(expression), limit)
        return evaluate(expression)

    def _save(self, user_id: int, expression: str, result: str, calc_type: CalculationType) -> Calculation:
        calc = self.store.save(Calculation(
            id=None,
            user_id=user_id,
            expression=expression,
            result=result,
            type=calc_type,
        ))
        logger.info(f"Saved calculation {calc.id} to {calc_type.value} for user {user_id}")
        return calc

    def save_to_history(self, user_id: int, expression: str, result: str) -> Calculation:
        return self._save(user_id, expression, result, CalculationType.HISTORY)

    def save_to_archive(self, user_id: int, expression: str, result: str) -> Calculation:
        return self._save(user_id, expression, result, CalculationType.ARCHIVE)

    def get_history(self, user_id: int) -> List[Calculation]:
        return self.store.list_by_user_and_type(user_id, CalculationType.HISTORY)

    def get_archive(self, user_id: int) -> List[Calculation]:
        return self.store.list_by_user_and_type(user_id, CalculationType.ARCHIVE)

    def delete_from_archive(self, calc_id: int, user_id: int):
        """Delete an archived calculation owned by ``user_id``."""
        calc = self.store.get_by_id_and_user(calc_id, user_id)
        if calc is None:
            raise CalculationNotFoundError(calc_id)
        if calc.type is not CalculationType.ARCHIVE:
            raise NotArchivedError(calc_id)
        self.store.delete(calc_id)
        logger.info(f"Deleted archived calculation {calc_id} for user {user_id}")

    def clear_history(self, user_id: int) -> int:
        removed = self.store.delete_by_user_and_type(user_id, CalculationType.HISTORY)
        logger.info(f"Cleared {removed} history entries for user {user_id}")
        return removed

    def get_system_status(self) -> Dict[str, Any]:
        """Get service status."""
        return {
            "status": "running",
            "timestamp": datetime.now().isoformat(),
            "database_path": self.store.db_path,
            "calculations_stored": self.store.count(),
            "max_expression_length": self.settings.max_expression_length,
        }

    def close(self):
        """Close database connection."""
        self.store.close()


class CalculatorAPI:
    """Dict-in / dict-out wrapper over CalculatorService."""

    def __init__(self, db_path: str = None, settings: Optional[Settings] = None):
        """Initialize API.

        If db_path is None, the configured db_path is used.
        Use ":memory:" explicitly for ephemeral testing.
        """
        self.service = CalculatorService(db_path, settings)

    def calculate(self, user_id: int, expression: str) -> Dict[str, Any]:
        """
        Evaluate an expression and record it in the user's history.

        Args:
            user_id: Caller identity
            expression: Raw expression as typed

        Returns:
            Dict: id, expression, result, timestamp of the history entry

        Raises:
            EvaluationError: the expression could not be evaluated
            ExpressionTooLongError: the expression exceeds the configured limit
        """
        result = self.service.evaluate(expression)
        calc = self.service.save_to_history(user_id, expression, result)
        logger.info(f"Evaluated {expression!r} = {result} for user {user_id}")
        return {
            "id": calc.id,
            "expression": calc.expression,
            "result": calc.result,
            "timestamp": calc.timestamp.isoformat(),
        }

    def history(self, user_id: int) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in self.service.get_history(user_id)]

    def archive(self, user_id: int) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in self.service.get_archive(user_id)]

    def archive_calculation(self, user_id: int, expression: str, result: str) -> Dict[str, Any]:
        return self.service.save_to_archive(user_id, expression, result).to_dict()

    def delete_archived(self, user_id: int, calc_id: int):
        self.service.delete_from_archive(calc_id, user_id)

    def clear_history(self, user_id: int) -> int:
        return self.service.clear_history(user_id)

    def status(self) -> Dict[str, Any]:
        """Get system status."""
        return self.service.get_system_status()

    def close(self):
        """Close the system."""
        self.service.close()


# Example usage
if __name__ == "__main__":
    api = CalculatorAPI(":memory:")

    for expression in ["2+3*5", "(2+3)*5", "10/4", "-5+3", "π×2"]:
        entry = api.calculate(1, expression)
        print(f"{expression} = {entry['result']}")

    print("\n=== History ===")
    print(json.dumps(api.history(1), indent=2))

    print("\n=== System Status ===")
    print(json.dumps(api.status(), indent=2))

    api.close()
