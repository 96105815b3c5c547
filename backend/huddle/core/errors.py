"""Error Hierarchy — typed, categorized exceptions for all Huddle failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are exactly two kinds: NotFoundError (404) and NotAllowedError (403)
    - Infrastructure errors (503) are retryable and never confused with domain rejections
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with HuddleError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Rejection is the pure-core twin of the two domain errors: core/ returns it,
      the shell raises it via raise_for() (ADR: core never raises, shell never returns codes)
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


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
    NOT_ALLOWED = "not_allowed"
    DATABASE = "database"
    INTERNAL = "internal"


class RejectionKind(str, Enum):
    """The two domain failure kinds."""
    NOT_FOUND = "not_found"
    NOT_ALLOWED = "not_allowed"


@dataclass(frozen=True)
class Rejection:
    """Tagged result of a failed rule check. Produced by core/, raised by the shell."""
    kind: RejectionKind
    code: str
    message: str


@dataclass
class ErrorContext:
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    retry_after_ms: int | None = None  # set only on retryable failures


class HuddleError(Exception):
    """Base exception for all Huddle errors."""

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
                "retry_after_ms": self.context.retry_after_ms,
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotFoundError(HuddleError):
    """Referenced entity does not exist in its owning store."""
    def __init__(
        self,
        message: str,
        code: str = "RESOURCE_NOT_FOUND",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class NotAllowedError(HuddleError):
    """Entity exists but the requested action violates a precondition."""
    def __init__(
        self,
        message: str,
        code: str = "NOT_ALLOWED",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.NOT_ALLOWED,
            ErrorSeverity.ERROR, context, 403,
        )


def raise_for(rejection: Rejection | None) -> None:
    """Raise the domain error matching a rule rejection. No-op on None."""
    if rejection is None:
        return
    if rejection.kind is RejectionKind.NOT_FOUND:
        raise NotFoundError(rejection.message, rejection.code)
    raise NotAllowedError(rejection.message, rejection.code)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(HuddleError):
    """Database operation failed. Retryable, unlike domain rejections."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        if ctx.retry_after_ms is None:
            ctx.retry_after_ms = 1000
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
