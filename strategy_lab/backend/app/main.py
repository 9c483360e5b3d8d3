"""FastAPI entrypoint for the Strategy Lab backend."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from strategy_lab.backend.app.api import api_router
from strategy_lab.backend.app.errors import ErrorResponse, register_exception_handlers
from strategy_lab.backend.app.logging_config import configure_logging

configure_logging()
logger = logging.getLogger("strategy_lab")

app = FastAPI(title="Strategy Lab Backend", version="0.1.0")


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled exception during request", extra={"request_id": request_id})
        error = ErrorResponse(detail="Internal server error", error_code="internal_error", request_id=request_id)
        response = JSONResponse(status_code=500, content=error.model_dump())
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "request completed | method=%s path=%s status=%s duration_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        extra={"request_id": request_id},
    )
    response.headers["X-Request-ID"] = request_id
    return response


register_exception_handlers(app)
app.include_router(api_router, prefix="/api")

__all__ = ["app"]
