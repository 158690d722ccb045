"""Error Hierarchy — typed, categorized exceptions for every chargeback store failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - NotFoundError is the only 400-level error the store raises; Decode/Engine errors are 500-level
    - NotFoundError is never raised by create or delete
    - to_response() produces the REST envelope; no internal details leaked in messages

Design Decisions:
    - Single hierarchy with ChargebackError base: FastAPI global handler catches all (ADR: uniform error shape)
    - LockTimeoutError subclasses EngineError: callers that only care about "storage failed"
      catch one type, startup code can still single out the lock case
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
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
    DECODE = "decode"
    STORAGE = "storage"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    chargeback_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class ChargebackError(Exception):
    """Base exception for all chargeback store errors."""

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
                    "chargeback_id": self.context.chargeback_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotFoundError(ChargebackError):
    """Update or get targeted an id with no stored record."""
    def __init__(self, chargeback_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.chargeback_id = chargeback_id
        super().__init__(
            f"Chargeback '{chargeback_id}' not found",
            "CHARGEBACK_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.chargeback_id = chargeback_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DecodeError(ChargebackError):
    """Stored or incoming bytes could not be parsed into a chargeback."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Malformed chargeback payload: {message}",
            "DECODE_ERROR", ErrorCategory.DECODE,
            ErrorSeverity.CRITICAL, context, 500,
        )


class EngineError(ChargebackError):
    """Storage engine operation failed (I/O, driver, lock)."""
    def __init__(
        self,
        message: str,
        operation: str,
        context: ErrorContext | None = None,
        code: str = "ENGINE_ERROR",
        category: ErrorCategory = ErrorCategory.STORAGE,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Storage {operation} failed: {message}",
            code, category, ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation


class LockTimeoutError(EngineError):
    """Another process holds the store's exclusive file lock."""
    def __init__(
        self, path: str, timeout_seconds: float, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"could not lock '{path}' within {timeout_seconds}s",
            "open", context, "LOCK_TIMEOUT", ErrorCategory.TIMEOUT,
        )
        self.path = path
        self.timeout_seconds = timeout_seconds
