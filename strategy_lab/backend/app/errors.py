"""Global error handling utilities for the Strategy Lab backend."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from strategy_lab.backend.core.strategy_builder.dsl_serializer import InterchangeFormatError

logger = logging.getLogger("strategy_lab")


class ErrorResponse(BaseModel):
    """Standardized error response envelope."""

    detail: str
    error_code: str
    request_id: str | None = None


def _error_code_from_status(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code == 400:
        return "bad_request"
    if status_code == 422:
        return "validation_error"
    return "http_error"


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers for standardized responses."""

    @app.exception_handler(HTTPException)
    async def _handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        request_id = getattr(request.state, "request_id", None)
        detail = exc.detail if isinstance(exc.detail, str) and exc.detail else str(exc.detail or "HTTP error")
        error = ErrorResponse(detail=detail, error_code=_error_code_from_status(exc.status_code), request_id=request_id)
        logger.warning("HTTPException: %s", error.model_dump(), extra={"request_id": request_id})
        return JSONResponse(status_code=exc.status_code, content=error.model_dump())

    @app.exception_handler(InterchangeFormatError)
    async def _handle_interchange_error(request: Request, exc: InterchangeFormatError) -> JSONResponse:
        request_id = getattr(request.state, "request_id", None)
        error = ErrorResponse(detail=str(exc), error_code="bad_request", request_id=request_id)
        logger.warning("Rejected interchange payload", extra={"request_id": request_id})
        return JSONResponse(status_code=400, content=error.model_dump())

    @app.exception_handler(Exception)
    async def _handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
        request_id = getattr(request.state, "request_id", None)
        error = ErrorResponse(detail="Internal server error", error_code="internal_error", request_id=request_id)
        logger.exception("Unhandled exception", extra={"request_id": request_id})
        return JSONResponse(status_code=500, content=error.model_dump())


__all__ = ["ErrorResponse", "register_exception_handlers"]
