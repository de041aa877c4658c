"""Error Hierarchy: typed, categorized exceptions for every Books API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries the HTTP status and the public message it maps to
    - to_response() produces the {"message": ...} envelope; internal detail stays in logs

Design Decisions:
    - Single hierarchy with BookServiceError base: one FastAPI handler catches all
    - InvalidIdError maps to 400; the remaining data-access kinds share a generic 500
"""

from dataclasses import dataclass
from enum import Enum


INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    DATABASE = "database"
    DATA_MAPPING = "data_mapping"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    book_id: str | None = None
    operation: str | None = None


class BookServiceError(Exception):
    """Base exception for all Books API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        public_message: str = INTERNAL_ERROR_MESSAGE,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.public_message = public_message

    def to_response(self) -> dict:
        """Convert to the public REST error body."""
        return {"message": self.public_message}

    def to_log_extra(self) -> dict:
        """Fields attached to the log record for this error."""
        return {
            "error_code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "book_id": self.context.book_id,
            "operation": self.context.operation,
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class InvalidIdError(BookServiceError):
    """Caller-supplied id is not a well-formed identifier."""
    def __init__(self, raw_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.book_id = raw_id
        super().__init__(
            f"Invalid ID used: {raw_id}",
            "INVALID_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400, "Invalid ID",
        )
        self.raw_id = raw_id


# ─── Data Access Errors (500-level) ─────────────────────────────

class DatabaseConnectionError(BookServiceError):
    """Connection or driver-level failure."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Database connection failed during {operation}: {message}",
            "DATABASE_CONNECTION_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation


class DatabaseQueryError(BookServiceError):
    """A query against the collection failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Error during database {operation}: {message}",
            "DATABASE_QUERY_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.operation = operation


class DocumentMappingError(BookServiceError):
    """A stored document is missing an expected field or holds the wrong type."""
    def __init__(self, field_name: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Could not access field '{field_name}' in document: {reason}",
            "DOCUMENT_MAPPING_ERROR", ErrorCategory.DATA_MAPPING,
            ErrorSeverity.ERROR, context, 500,
        )
        self.field_name = field_name
        self.reason = reason
