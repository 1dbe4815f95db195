"""
Storage Infrastructure Exceptions

Exceptions raised by key-value backends.
They never cross ResilientKeyValueStore, which degrades them to no-ops.
"""

from typing import Any, Dict, Optional


class StorageException(Exception):
    """Base exception for storage backend errors.

    Backends raise this or its subclasses and always preserve context.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class StorageUnavailableException(StorageException):
    """Raised when the backend is disabled or cannot be reached."""

    def __init__(
        self,
        message: str = "Storage backend unavailable",
        backend: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if backend:
            details["backend"] = backend
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=message, error_code="STORAGE_UNAVAILABLE", details=details
        )
        # Preserve exception context for debugging (exception chaining)
        if original_error:
            self.__cause__ = original_error


class StorageQuotaException(StorageException):
    """Raised when a write would exceed the backend's capacity."""

    def __init__(self, limit: Optional[int] = None, key: Optional[str] = None):
        details: Dict[str, Any] = {}
        message = "Storage quota exceeded"
        if limit is not None:
            details["limit"] = limit
            message = f"{message} (limit {limit} entries)"
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            error_code="STORAGE_QUOTA_EXCEEDED",
            details=details,
        )


class StorageSerializationException(StorageException):
    """Raised when a payload cannot be encoded or a stored value decoded."""

    def __init__(self, key: str, original_error: Optional[Exception] = None):
        details = {"key": key}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message=f"Could not (de)serialize payload for key {key}",
            error_code="STORAGE_SERIALIZATION_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error
