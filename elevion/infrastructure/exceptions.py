"""
Custom Exceptions for Elevion

Hierarchical exception classes for proper error handling across layers.
"""

from typing import Optional, Dict, Any


class ElevionError(Exception):
    """Base exception for all Elevion errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the API error envelope."""
        return {
            "success": False,
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ValidationError(ElevionError):
    """Raised when input validation fails."""
    pass


class DatabaseError(ElevionError):
    """Raised when database operations fail."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(message, details, original_error)


class NotFoundError(DatabaseError):
    """Raised when a mutation targets a row that does not exist."""
    pass


class ConstraintViolationError(DatabaseError):
    """
    Raised when a uniqueness or foreign-key constraint rejects a write.

    `constraint` names what was violated as far as the driver reports it:
    the constraint name on PostgreSQL, the offending columns on SQLite
    (e.g. "users.username").
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        constraint: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message, operation, table, original_error)
        self.constraint = constraint
        if constraint:
            self.details["constraint"] = constraint


class PaymentServiceError(ElevionError):
    """Raised when the payment processor rejects or fails a request."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details, original_error)


class ConfigurationError(ElevionError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(message, details, original_error)
