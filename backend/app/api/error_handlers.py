"""Error Handlers — render every failure in the adoption error envelope.

Invariants:
    - ShelterError → its own http_status and to_response() body
    - Unavailable errors (503) carry a Retry-After header; clients retry the whole request
    - RequestValidationError → 400 VALIDATION_ERROR with per-field details
    - Anything else → 500 INTERNAL_ERROR, message never includes internals

Design Decisions:
    - Client errors logged at warning, Unavailable at error: a 409 is not an incident
    - Handlers are plain module functions registered by register_error_handlers,
      so main.py stays a wiring file (ADR: ExMA import fan-out < 10)
"""

import logging
import math

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import ErrorCategory, ErrorSeverity, ShelterError

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 1


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShelterError, handle_shelter_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_shelter_error(request: Request, exc: ShelterError) -> JSONResponse:
    unavailable = exc.http_status >= 500
    logger.log(
        logging.ERROR if unavailable else logging.WARNING,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "application_id": exc.context.application_id,
            "animal_id": exc.context.animal_id,
            "actor_id": exc.context.actor_id,
        },
    )
    headers = None
    if exc.retryable:
        retry_ms = exc.context.retry_after_ms
        seconds = math.ceil(retry_ms / 1000) if retry_ms else DEFAULT_RETRY_AFTER_SECONDS
        headers = {"Retry-After": str(seconds)}
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request body on {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
            details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "retryable": False,
            **extra,
        },
    }
