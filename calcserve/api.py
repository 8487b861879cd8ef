"""
Calculator HTTP API (FastAPI)

Endpoints:
- POST   /api/calculator/evaluate
- GET    /api/calculator/history
- DELETE /api/calculator/history
- GET    /api/calculator/archive
- POST   /api/calculator/archive
- DELETE /api/calculator/archive/{calc_id}
- GET    /v1/status

The caller is identified by the X-User-Id header.

Maps outcomes to HTTP statuses:
- 200 OK: evaluated | listed | archived | deleted | cleared
- 400 Bad Request: evaluation error, expression too long, not an archive entry
- 401 Unauthorized: missing or non-integer X-User-Id
- 404 Not Found: calculation missing or owned by another user
"""

import logging
import threading
from typing import Optional, List

from fastapi import Depends, FastAPI, HTTPException, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
import uvicorn

from .core.errors import EvaluationError, MalformedExpressionError
from .core.settings import configure_logging, load_settings
from .main import (
    CalculatorAPI,
    CalculatorServiceError,
    CalculationNotFoundError,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Calculator API", version="0.1.0")

_api: Optional[CalculatorAPI] = None
_api_lock = threading.Lock()


class CalculationRequest(BaseModel):
    expression: str = Field(..., description="Arithmetic expression, e.g. '2 + 3 × 5'.")
    result: Optional[str] = Field(None, description="Result to store when archiving.")


class CalculationResponse(BaseModel):
    id: int
    expression: str
    result: str
    timestamp: str


class CalculationRecord(CalculationResponse):
    user_id: int
    type: str


class MessageResponse(BaseModel):
    message: str


def get_api() -> CalculatorAPI:
    """Return the process-wide CalculatorAPI, creating it on first use."""
    global _api
    with _api_lock:
        if _api is None:
            _api = CalculatorAPI()
        return _api


def current_user_id(x_user_id: Optional[str] = Header(default=None)) -> int:
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="X-User-Id header required")
    try:
        return int(x_user_id.strip())
    except ValueError:
        raise HTTPException(status_code=401, detail="X-User-Id must be an integer")


@app.exception_handler(EvaluationError)
async def evaluation_error_handler(request: Request, exc: EvaluationError):
    reason = exc.reason if isinstance(exc, MalformedExpressionError) else exc.message
    logger.info(f"Evaluation failed ({exc.kind.value}): {exc.message}")
    return JSONResponse(status_code=400, content={
        "error": exc.kind.value,
        "detail": exc.detail,
        "message": f"Invalid expression: {reason}",
    })


@app.exception_handler(CalculatorServiceError)
async def service_error_handler(request: Request, exc: CalculatorServiceError):
    code = 404 if isinstance(exc, CalculationNotFoundError) else 400
    return JSONResponse(status_code=code, content={"error": exc.kind, "message": str(exc)})


@app.post("/api/calculator/evaluate", response_model=CalculationResponse)
def evaluate_expression(body: CalculationRequest,
                        user_id: int = Depends(current_user_id),
                        api: CalculatorAPI = Depends(get_api)):
    return api.calculate(user_id, body.expression)


@app.get("/api/calculator/history", response_model=List[CalculationRecord])
def get_history(user_id: int = Depends(current_user_id), api: CalculatorAPI = Depends(get_api)):
    return api.history(user_id)


@app.delete("/api/calculator/history", response_model=MessageResponse)
def clear_history(user_id: int = Depends(current_user_id), api: CalculatorAPI = Depends(get_api)):
    api.clear_history(user_id)
    return {"message": "History cleared"}


@app.get("/api/calculator/archive", response_model=List[CalculationRecord])
def get_archive(user_id: int = Depends(current_user_id), api: CalculatorAPI = Depends(get_api)):
    return api.archive(user_id)


@app.post("/api/calculator/archive", response_model=CalculationRecord)
def save_to_archive(body: CalculationRequest,
                    user_id: int = Depends(current_user_id),
                    api: CalculatorAPI = Depends(get_api)):
    if body.result is None:
        raise HTTPException(status_code=400, detail="result is required when archiving")
    return api.archive_calculation(user_id, body.expression, body.result)


@app.delete("/api/calculator/archive/{calc_id}", response_model=MessageResponse)
def delete_from_archive(calc_id: int,
                        user_id: int = Depends(current_user_id),
                        api: CalculatorAPI = Depends(get_api)):
    api.delete_archived(user_id, calc_id)
    return {"message": "Deleted successfully"}


@app.get("/v1/status")
def status(api: CalculatorAPI = Depends(get_api)):
    return api.status()


def serve(host: Optional[str] = None, port: Optional[int] = None):
    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run("calcserve.api:app", host=host or settings.host, port=port or settings.port, reload=False)


if __name__ == "__main__":
    serve()
