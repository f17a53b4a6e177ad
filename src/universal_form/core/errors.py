"""
Centralized error types for Universal Form.

This module provides the error taxonomy and custom exception hierarchy used
to report configuration problems and to describe field validation failures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Error type categories for consistent error handling."""

    VALIDATION = "validation"
    CONFIG = "config"
    SYSTEM = "system"


class ErrorCode(Enum):
    """Specific error codes for common scenarios."""

    # Field validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_FORMAT = "INVALID_FORMAT"
    VALUE_OUT_OF_RANGE = "VALUE_OUT_OF_RANGE"
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"

    # Configuration errors
    UNKNOWN_FIELD_TYPE = "UNKNOWN_FIELD_TYPE"
    DUPLICATE_FIELD_ID = "DUPLICATE_FIELD_ID"
    UNKNOWN_FIELD_ID = "UNKNOWN_FIELD_ID"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"

    # System errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    OS_ERROR = "OS_ERROR"

    # Generic
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class BaseAppError(Exception):
    """
    Base application error with structured metadata.

    This is the root of all custom application errors, providing
    structured information for consistent logging and user feedback.
    """

    type: ErrorType
    code: ErrorCode
    user_message: str
    technical_message: str | None = None
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    retriable: bool = False
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return user-friendly error message."""
        return self.user_message

    def __repr__(self) -> str:
        """Return detailed error representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"type={self.type.value}, "
            f"code={self.code.value}, "
            f"message='{self.user_message}'"
            f")"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "code": self.code.value,
            "user_message": self.user_message,
            "technical_message": self.technical_message,
            "severity": self.severity.value,
            "retriable": self.retriable,
            "context": self.context,
        }


class ValidationError(BaseAppError):
    """
    A settled field validation failure.

    Field validation failures are ordinary form state and are never raised
    by the form engine; this type only describes one for logging.
    """

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        field: str | None = None,
        technical_message: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.LOW,
        retriable: bool = False,
        context: dict[str, Any] | None = None,
    ):
        context = context or {}
        if field:
            context["field"] = field

        super().__init__(
            type=ErrorType.VALIDATION,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=severity,
            retriable=retriable,
            context=context,
        )

    @property
    def field(self) -> str | None:
        """Get the field that caused the validation error."""
        return self.context.get("field")


class ConfigurationError(BaseAppError):
    """
    Programmer error in the form configuration.

    Raised when a descriptor list cannot be turned into a working form,
    e.g. an unknown field type or a duplicated field id.
    """

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_message: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        retriable: bool = False,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            type=ErrorType.CONFIG,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=severity,
            retriable=retriable,
            context=context or {},
        )


class SystemError(BaseAppError):
    """System level errors such as unreadable files."""

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_message: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        retriable: bool = False,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            type=ErrorType.SYSTEM,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=severity,
            retriable=retriable,
            context=context or {},
        )


def create_validation_error(
    field: str,
    message: str,
    value: Any = None,
    code: ErrorCode = ErrorCode.INVALID_INPUT,
) -> ValidationError:
    """
    Create a ValidationError for logging purposes.

    Args:
        field: Field id that failed validation
        message: Validation error message
        value: The invalid value
        code: Error code carried by the failed validation result

    Returns:
        ValidationError instance
    """
    return ValidationError(
        code=code,
        user_message=message,
        field=field,
        technical_message=f"Validation failed for field '{field}': {message}",
        context={"value": value} if value is not None else {},
    )


# Exception mapping configuration
_EXCEPTION_MAPPING: dict[type[Exception], tuple[ErrorType, ErrorCode, str]] = {
    FileNotFoundError: (ErrorType.SYSTEM, ErrorCode.FILE_NOT_FOUND, "File not found"),
    OSError: (ErrorType.SYSTEM, ErrorCode.OS_ERROR, "System error occurred"),
    ValueError: (ErrorType.CONFIG, ErrorCode.CONFIG_INVALID, "Invalid configuration"),
    KeyError: (ErrorType.CONFIG, ErrorCode.UNKNOWN_FIELD_ID, "Unknown field"),
}


def map_exception(exc: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
    """
    Map a built-in exception to a custom application error.

    Args:
        exc: The exception to map
        context: Optional context information

    Returns:
        BaseAppError instance with appropriate type and metadata
    """
    context = context or {}

    # Handle existing custom errors
    if isinstance(exc, BaseAppError):
        return exc

    exc_type = type(exc)
    if exc_type in _EXCEPTION_MAPPING:
        error_type, error_code, default_message = _EXCEPTION_MAPPING[exc_type]

        error_class_map: dict[ErrorType, type[BaseAppError]] = {
            ErrorType.SYSTEM: SystemError,
            ErrorType.CONFIG: ConfigurationError,
        }

        error_class = error_class_map[error_type]
        user_message = str(exc) if str(exc) else default_message

        result: BaseAppError = error_class(
            code=error_code,
            user_message=user_message,
            technical_message=f"{exc_type.__name__}: {exc}",
            context=context,
        )
        return result

    # Fallback for unknown exceptions
    logger.warning(f"Unknown exception type: {exc_type.__name__}: {exc}")
    return SystemError(
        code=ErrorCode.UNKNOWN,
        user_message="An unexpected error occurred",
        technical_message=f"{exc_type.__name__}: {exc}",
        context=context,
    )


def from_exception(exc: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
    """
    Convert any exception to a BaseAppError.

    This is an alias for map_exception for convenience.
    """
    return map_exception(exc, context)
