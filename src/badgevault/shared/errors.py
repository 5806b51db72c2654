"""BadgeVault Error Handling Module

This module defines the error handling system for BadgeVault, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved

Nothing in the fetch pipeline is fatal: StorageError, RemoteError and
InvalidCacheEntryError are raised at the lowest layer and converted into
degraded values (cache miss, default payload) by the component that owns
the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("api_key",)


class ErrorCode(str, Enum):
    """Error codes for BadgeVault.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Network and API Errors
    NETWORK_ERROR = "NETWORK_ERROR"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_INVALID_RESPONSE = "API_INVALID_RESPONSE"
    API_AUTHENTICATION_FAILED = "API_AUTHENTICATION_FAILED"

    # Cache Errors
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_OPEN_FAILED = "CACHE_OPEN_FAILED"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_DELETE_FAILED = "CACHE_DELETE_FAILED"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Configuration Errors
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"

    # Scheduler Errors
    QUEUE_OPERATION_ERROR = "QUEUE_OPERATION_ERROR"
    PRESENTER_ERROR = "PRESENTER_ERROR"

    # CLI Errors
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data so the context can always be serialized into a log
    record.

    Attributes:
        operation: Optional operation name that caused the error
        item_id: Optional item id the operation was working on
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    item_id: int | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with secret masking.

        Args:
            mask_keys: Keys of additional_data to mask. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with a guaranteed additional_data key.

        Example:
            >>> ErrorContext(operation="put", item_id=730).safe_dict()
            {'operation': 'put', 'item_id': 730, 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.item_id is not None:
            data["item_id"] = self.item_id

        extra = dict(self.additional_data or {})
        for key in mask_keys:
            if key in extra:
                extra[key] = "***"
        data["additional_data"] = extra

        return data


class BadgeVaultError(Exception):
    """Base exception class for all BadgeVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize BadgeVaultError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary with code, message, masked context and original_error
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(BadgeVaultError):
    """Domain-specific errors.

    Raised when data violates a domain rule, e.g. a stored cache record
    that no longer matches the entry schema.
    """


class InfrastructureError(BadgeVaultError):
    """Infrastructure-related errors.

    Raised when interacting with external systems like the cache database
    or the remote badge services.
    """


class StorageError(InfrastructureError):
    """Cache database open/read/write failure.

    Non-fatal: degrades to a cache miss or an unsaved result.
    """


class RemoteError(InfrastructureError):
    """Network failure or malformed response from a remote badge service.

    Non-fatal: degrades to the documented default payload for that call.
    """


class InvalidCacheEntryError(DomainError):
    """Structurally malformed stored cache record.

    Treated as an absent entry, which triggers a refetch.
    """


class ApplicationError(BadgeVaultError):
    """Application-level errors (configuration, command handling)."""


def create_storage_error(
    code: ErrorCode,
    operation: str,
    error: Exception,
    item_id: int | None = None,
) -> StorageError:
    """Wrap a low-level database exception into a StorageError.

    Args:
        code: Error code describing the failed storage step
        operation: Operation name for the log context
        error: Original exception
        item_id: Item id involved, if any

    Returns:
        StorageError with the original error chained
    """
    return StorageError(
        code=code,
        message=f"Cache storage failure during {operation}: {error!s}",
        context=ErrorContext(operation=operation, item_id=item_id),
        original_error=error,
    )
