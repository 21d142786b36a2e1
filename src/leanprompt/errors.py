"""
LeanPrompt — Core Error Types

Defines the exception hierarchy for the optimization runtime.
All exceptions inherit from LeanPromptError for consistent error handling.

Propagation rules:
- InvalidInputError / ConfigurationError / InvalidPatternError surface to the caller
- PatternApplicationError is always contained by the optimizer
- TokenizationError is always recovered by a heuristic fallback
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for MCP tool responses.

    Used for structured error handling and client-side error recovery.
    """

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    INVALID_PARAMETER_VALUE = "INVALID_PARAMETER_VALUE"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Pattern errors
    INVALID_PATTERN = "INVALID_PATTERN"
    DUPLICATE_PATTERN = "DUPLICATE_PATTERN"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class LeanPromptError(Exception):
    """Base exception for all LeanPrompt errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(LeanPromptError):
    """Raised when a caller passes input of the wrong shape (e.g. non-string text)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=400)


class ConfigurationError(InvalidInputError):
    """Raised when a configuration value is invalid (cache size, balance, model...)."""

    pass


class InvalidPatternError(LeanPromptError):
    """Raised when a pattern fails validation at registration time."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=422)


class DuplicatePatternError(InvalidPatternError):
    """Raised when registering a pattern id that already exists without overwrite."""

    def __init__(self, pattern_id: str, details: dict[str, Any] | None = None):
        message = f"Pattern with ID '{pattern_id}' already exists"
        super().__init__(message, {"pattern_id": pattern_id, **(details or {})})
        self.pattern_id = pattern_id


class PatternApplicationError(LeanPromptError):
    """Raised when a guard, transform or replacer fails while applying one pattern."""

    def __init__(self, pattern_id: str, cause: Exception):
        message = f"Pattern '{pattern_id}' failed: {cause}"
        super().__init__(
            message,
            {"pattern_id": pattern_id, "error_type": type(cause).__name__},
        )
        self.pattern_id = pattern_id


class TokenizationError(LeanPromptError):
    """Raised when a tokenizer backend cannot count tokens."""

    def __init__(self, model: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(f"Tokenization failed for {model}: {message}", {"model": model, **(details or {})})
        self.model = model


_ERROR_CODES: dict[type[LeanPromptError], ErrorCode] = {
    DuplicatePatternError: ErrorCode.DUPLICATE_PATTERN,
    InvalidPatternError: ErrorCode.INVALID_PATTERN,
    ConfigurationError: ErrorCode.CONFIGURATION_ERROR,
    InvalidInputError: ErrorCode.INVALID_INPUT,
}


def error_code_for(exc: Exception) -> ErrorCode:
    """Map an exception to the ErrorCode reported by tool responses."""
    for exc_type, code in _ERROR_CODES.items():
        if isinstance(exc, exc_type):
            return code
    return ErrorCode.INTERNAL_ERROR


def make_error_response(
    error_code: ErrorCode,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a structured error response for MCP tools.

    Args:
        error_code: Standard error code from ErrorCode enum
        message: Human-readable error message
        context: Optional additional context (field names, values, etc.)

    Returns:
        Structured error response dictionary

    Example:
        >>> make_error_response(
        ...     ErrorCode.INVALID_INPUT,
        ...     "Text must be a string",
        ...     {"field": "text"}
        ... )
        {
            "success": False,
            "error_code": "INVALID_INPUT",
            "message": "Text must be a string",
            "details": {"field": "text"}
        }
    """
    return {
        "success": False,
        "error_code": error_code.value,
        "message": message,
        "details": context or {},
    }
