"""Error Hierarchy — every way an adoption operation can fail, as one exception tree.

Invariants:
    - Each error class fixes its code, category, severity and HTTP status; instances
      only add a message and an ErrorContext
    - Domain errors (4xx) are final; Unavailable errors (503) are safe to retry in full
    - Each Conflict cause has its own code so clients can branch on it
    - Messages are written for end users: no SQL, no stack traces, no internal ids

Design Decisions:
    - Class attributes instead of constructor plumbing: a new error is one small class
      (ADR: uniform error shape, rendered by api/error_handlers)
    - ErrorContext is filled in by the coordinator after a pure rule returns the error,
      so rules stay free of request data
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Routing key for handlers and dashboards."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    BUSINESS_RULE = "business_rule"
    CONFLICT = "conflict"
    DATABASE = "database"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


_RETRYABLE = frozenset({ErrorCategory.DATABASE, ErrorCategory.TIMEOUT})


@dataclass
class ErrorContext:
    """Identifiers attached to an error for logs and the response body."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    application_id: str | None = None
    animal_id: str | None = None
    actor_id: str | None = None
    retry_after_ms: int | None = None
    debug_info: dict[str, Any] | None = None


class ShelterError(Exception):
    """Root of the hierarchy; the global handler renders any subclass."""

    code: str = "INTERNAL_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.ERROR
    http_status: int = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        category: ErrorCategory | None = None,
        severity: ErrorSeverity | None = None,
        context: ErrorContext | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if category is not None:
            self.category = category
        if severity is not None:
            self.severity = severity
        if http_status is not None:
            self.http_status = http_status
        self.context = context or ErrorContext()

    @property
    def retryable(self) -> bool:
        return self.category in _RETRYABLE

    def to_response(self) -> dict:
        """REST error envelope. actor_id and debug_info stay in the logs."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "application_id": self.context.application_id,
                    "animal_id": self.context.animal_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Request errors ──────────────────────────────────────────────

class CommandValidationError(ShelterError):
    """Body parsed, but the command is empty or malformed."""
    code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(message, context=context)
        self.field = field


class AuthenticationRequiredError(ShelterError):
    code = "AUTHENTICATION_REQUIRED"
    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.WARNING
    http_status = 401

    def __init__(
        self, message: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, context=context)


class ForbiddenError(ShelterError):
    code = "FORBIDDEN"
    category = ErrorCategory.AUTHORIZATION
    severity = ErrorSeverity.WARNING
    http_status = 403

    def __init__(
        self, message: str = "Access denied. Insufficient permissions.",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, context=context)


class ResourceNotFoundError(ShelterError):
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context=context)
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Lifecycle errors ────────────────────────────────────────────

class InvalidTransitionError(ShelterError):
    """Status change not permitted from the current state."""
    code = "INVALID_TRANSITION"
    category = ErrorCategory.BUSINESS_RULE
    http_status = 400

    def __init__(
        self, from_status: str, to_status: str, message: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message or f"Cannot change application status from '{from_status}' to '{to_status}'",
            context=context,
        )
        self.from_status = from_status
        self.to_status = to_status


class ConflictError(ShelterError):
    """The operation would break an adoption invariant given current state."""
    code = "CONFLICT"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(
        self, message: str, code: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, code=code, context=context)


class AnimalUnavailableError(ConflictError):
    code = "ANIMAL_UNAVAILABLE"

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("This animal is no longer available for adoption", context=context)


class DuplicateApplicationError(ConflictError):
    code = "DUPLICATE_APPLICATION"

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You already have an open application for this animal", context=context,
        )


class AnimalAlreadyAdoptedError(ConflictError):
    code = "ANIMAL_ALREADY_ADOPTED"

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Another application for this animal has already been approved",
            context=context,
        )


class AvailabilityLockedError(ConflictError):
    code = "AVAILABILITY_MANAGED_BY_ADOPTION"

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Availability is controlled by an approved adoption; "
            "change the application status instead",
            context=context,
        )


class ConcurrencyError(ConflictError):
    """A guarded write matched no row: someone else changed it first."""
    code = "CONCURRENCY_CONFLICT"

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, context=context)


# ─── Unavailable (retry the whole request) ───────────────────────

class UnavailableError(ShelterError):
    code = "UNAVAILABLE"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503


class DatabaseError(UnavailableError):
    code = "DATABASE_ERROR"

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Database {operation} failed: {message}", context=context)
        self.operation = operation


class TransactionTimeoutError(UnavailableError):
    code = "TRANSACTION_TIMEOUT"
    category = ErrorCategory.TIMEOUT

    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Operation timed out after {timeout_seconds}s and was rolled back",
            context=context,
        )
        self.timeout_seconds = timeout_seconds
