"""
Custom Exceptions - Application-specific error classes.

This module defines a hierarchy of exceptions for clean error handling:
- Each exception has a status code and error code
- Used by the API layer for consistent error responses
- No stack traces leaked in production
"""
from typing import Optional


class FrontDeskException(Exception):
    """
    Base exception for all front desk errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(FrontDeskException):
    """Raised when a caller supplies an unusable payload."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class EntryNotFoundError(FrontDeskException):
    """Raised when a knowledge entry id does not exist."""
    status_code = 404
    error_code = "entry_not_found"

    def __init__(self, entry_id: str):
        super().__init__(
            message=f"Knowledge entry not found: {entry_id}",
            details=f"id={entry_id}"
        )
        self.entry_id = entry_id


class LLMError(FrontDeskException):
    """
    Raised when the language model call fails.

    Wraps every provider error into a single type so the orchestrator
    can recover without knowing which SDK is in use.
    """
    status_code = 503
    error_code = "llm_error"

    def __init__(self, message: str = "LLM service unavailable"):
        super().__init__(message)
