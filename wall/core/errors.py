"""Error Hierarchy — typed, categorized exceptions for all message wall failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are never retried; infrastructure errors (500-level) are critical
    - AuthorizationError never reveals whether the target message exists
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with WallError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from x402.common import x402_VERSION
from x402.types import PaymentRequirements, x402PaymentRequiredResponse


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHORIZATION = "authorization"
    PAYMENT = "payment"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    field_name: str | None = None
    message_id: int | None = None
    debug_info: dict[str, Any] | None = None


class WallError(Exception):
    """Base exception for all message wall errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "field": self.context.field_name,
                    "message_id": self.context.message_id,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class MessageValidationError(WallError):
    """Submitted body or author failed sanitization."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field_name = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.field = field


class PendingNotFoundError(WallError):
    """Pending token is unknown, already consumed, or expired."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Pending message not found",
            "PENDING_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, context, 404,
        )


class MessageNotFoundError(WallError):
    """Committed message does not exist."""
    def __init__(self, message_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.message_id = message_id
        super().__init__(
            f"Message '{message_id}' not found",
            "MESSAGE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class AuthorizationError(WallError):
    """Administrative credential missing or wrong."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid or missing admin credential",
            "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class PaymentRequiredError(WallError):
    """Request reached a paid route without an acceptable X-PAYMENT header."""
    def __init__(
        self, reason: str, accepts: list[PaymentRequirements],
        context: ErrorContext | None = None,
    ):
        super().__init__(
            reason, "PAYMENT_REQUIRED", ErrorCategory.PAYMENT,
            ErrorSeverity.INFO, context, 402,
        )
        self.accepts = accepts

    def to_response(self) -> dict:
        """x402 challenge body: clients read `accepts` to build a payment."""
        return x402PaymentRequiredResponse(
            x402_version=x402_VERSION, accepts=self.accepts, error=self.message,
        ).model_dump(mode="json", by_alias=True)


class PaymentConfirmationError(WallError):
    """Payment confirmation header could not be decoded into a payer identity."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid payment confirmation: {message}",
            "PAYMENT_CONFIRMATION_INVALID", ErrorCategory.PAYMENT,
            ErrorSeverity.ERROR, context, 402,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(WallError):
    """Storage backend operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class PaymentVerifierError(WallError):
    """Facilitator could not be reached or answered with garbage."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Payment facilitator {operation} failed: {message}",
            "PAYMENT_VERIFIER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.operation = operation
