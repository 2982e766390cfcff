"""Error Hierarchy — typed, categorized exceptions for all Shaker failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Lookup misses and auth failures are 400-level; store failures are 500-level
    - to_response() produces the REST envelope
    - No driver details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ShakerError base: one FastAPI handler catches all
    - ErrorContext as dataclass: carries identifiers for logs without coupling to logging
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
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORE = "store"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    handshake_id: int | None = None
    external_id: str | None = None
    display_name: str | None = None
    debug_info: dict[str, Any] | None = None


class ShakerError(Exception):
    """Base exception for all Shaker errors."""

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
                    "user_id": self.context.user_id,
                    "handshake_id": self.context.handshake_id,
                    "external_id": self.context.external_id,
                    "display_name": self.context.display_name,
                },
            }
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class NotFoundError(ShakerError):
    """Lookup-only query matched no stored record."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class MissingTokenError(ShakerError):
    """A token is configured but the request carried none."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "missing token", "MISSING_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 400,
        )


class InvalidTokenError(ShakerError):
    """The request carried a token that does not match the configured one."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "invalid token", "INVALID_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreError(ShakerError):
    """Persistence operation failed (connectivity, constraint, driver)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_ERROR", ErrorCategory.STORE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
