"""Error Handlers — every failure leaves the API as a WallError envelope.

Invariants:
    - WallError → its own to_response() (PaymentRequiredError → x402 challenge)
    - Malformed path/query parameters answer exactly like a sanitizer rejection:
      400 VALIDATION_ERROR naming the offending field
    - Anything else → 500 INTERNAL_ERROR, logged with traceback, never echoed

Design Decisions:
    - One response shape per status family: clients of /wall and /api/v1 parse a
      single error schema, and x402 clients see only x402 bodies on 402
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wall.core.errors import (
    ErrorCategory, ErrorSeverity, MessageValidationError, WallError,
)

logger = logging.getLogger(__name__)


def _respond(request: Request, exc: WallError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level, f"{exc.code}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(WallError)
    async def wall_error_handler(request: Request, exc: WallError):
        return _respond(request, exc)

    @app.exception_handler(RequestValidationError)
    async def parameter_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {"loc": ("request",), "msg": "Invalid request"}
        field = str(first["loc"][-1])
        return _respond(request, MessageValidationError(f"{field}: {first['msg']}", field))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        internal = WallError(
            "An unexpected error occurred", "INTERNAL_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        )
        return JSONResponse(status_code=500, content=internal.to_response())
