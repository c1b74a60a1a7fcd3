"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Ce module convertit les erreurs du domaine et les exceptions HTTP en une enveloppe commune
(`code`, `message`, `trace_id`, `details`) et enregistre les handlers sur l'application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from salat.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_FORBIDDEN,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_UNPROCESSABLE_ENTITY,
)
from salat.domain.errors import (
    CalculationFailed,
    DateRangeTooLarge,
    InvalidDate,
    LocationUnavailable,
    LookaheadExceeded,
    PermissionDenied,
    ScheduleError,
)

log = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[ScheduleError], int] = {
    LookaheadExceeded: HTTP_UNPROCESSABLE_ENTITY,
    DateRangeTooLarge: HTTP_UNPROCESSABLE_ENTITY,
    InvalidDate: HTTP_UNPROCESSABLE_ENTITY,
    PermissionDenied: HTTP_FORBIDDEN,
    LocationUnavailable: HTTP_SERVICE_UNAVAILABLE,
    CalculationFailed: HTTP_BAD_GATEWAY,
}

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
}


@dataclass
class ErrorEnvelope:
    """Standard error envelope for API responses."""

    code: str
    message: str
    trace_id: str | None = None
    details: dict[str, Any] | None = None


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    envelope = ErrorEnvelope(code=code, message=message, trace_id=trace_id, details=details)
    return JSONResponse(
        status_code=status_code,
        content={
            "code": envelope.code,
            "message": envelope.message,
            "trace_id": envelope.trace_id,
            **({"details": envelope.details} if envelope.details else {}),
        },
    )


def extract_trace_id(request: Request) -> str | None:
    """Extract trace ID from request headers or request state."""
    trace_id = request.headers.get("X-Trace-ID")
    if trace_id:
        return trace_id
    return getattr(request.state, "trace_id", None)


def status_for(exc: ScheduleError) -> int:
    for error_type, status in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status
    return HTTP_INTERNAL_SERVER_ERROR


def handle_schedule_error(request: Request, exc: ScheduleError) -> JSONResponse:
    """Handle domain errors: typed code, stable status, structured details."""
    trace_id = extract_trace_id(request)
    status_code = status_for(exc)
    log.warning(
        "Schedule error occurred",
        extra={
            "code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "trace_id": trace_id,
            "details": exc.details,
        },
    )
    return create_error_response(
        status_code=status_code,
        code=exc.code,
        message=exc.message,
        trace_id=trace_id,
        details=exc.details or None,
    )


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPException with standard envelope."""
    trace_id = extract_trace_id(request)
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    log.error(
        "HTTP exception occurred",
        extra={
            "code": code,
            "error_message": str(exc.detail),
            "status_code": exc.status_code,
            "trace_id": trace_id,
        },
    )
    return create_error_response(
        status_code=exc.status_code, code=code, message=str(exc.detail), trace_id=trace_id
    )


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle malformed query/path parameters."""
    trace_id = extract_trace_id(request)
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()
    ]
    return create_error_response(
        status_code=HTTP_UNPROCESSABLE_ENTITY,
        code="VALIDATION_ERROR",
        message="Invalid request parameters",
        trace_id=trace_id,
        details={"errors": errors},
    )


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle generic exceptions with standard envelope."""
    trace_id = extract_trace_id(request)
    log.error(
        "Unexpected error occurred",
        extra={
            "code": "INTERNAL_ERROR",
            "trace_id": trace_id,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=True,
    )
    return create_error_response(
        status_code=HTTP_INTERNAL_SERVER_ERROR,
        code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        trace_id=trace_id,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ScheduleError, handle_schedule_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_generic_exception)
