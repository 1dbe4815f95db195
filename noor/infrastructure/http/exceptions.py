"""
Remote Fetch Exceptions

Exceptions raised by the remote content fetcher and the provider clients.
Services treat every FetchException as "fetch unavailable" and move on to
the next cache tier.
"""

from typing import Any, Dict, Optional


class FetchException(Exception):
    """Base exception for remote fetch failures."""

    transient = False

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.url = url
        self.error_code = error_code or "FETCH_ERROR"
        self.details = details or {}
        if url:
            self.details["url"] = url
        if original_error:
            self.details["original_error"] = str(original_error)
            self.details["original_error_type"] = type(original_error).__name__
        super().__init__(self.message)
        if original_error:
            self.__cause__ = original_error


class FetchTimeoutException(FetchException):
    """Raised when one attempt exceeds its timeout."""

    transient = True

    def __init__(self, url: str, timeout: float, original_error: Optional[Exception] = None):
        super().__init__(
            message=f"Request to {url} timed out after {timeout}s",
            url=url,
            error_code="FETCH_TIMEOUT",
            details={"timeout_seconds": timeout},
            original_error=original_error,
        )


class FetchConnectionException(FetchException):
    """Raised on network or transport errors."""

    transient = True

    def __init__(self, url: str, original_error: Optional[Exception] = None):
        super().__init__(
            message=f"Network error while requesting {url}",
            url=url,
            error_code="FETCH_CONNECTION_ERROR",
            original_error=original_error,
        )


class FetchHTTPStatusException(FetchException):
    """Raised on a non-success HTTP status; only 5xx is retried."""

    def __init__(self, url: str, status_code: int):
        super().__init__(
            message=f"Request to {url} failed with HTTP {status_code}",
            url=url,
            error_code="FETCH_HTTP_STATUS",
            details={"status_code": status_code},
        )
        self.status_code = status_code
        self.transient = status_code >= 500


class FetchDecodeException(FetchException):
    """Raised when a response body is not parseable JSON."""

    def __init__(self, url: str, original_error: Optional[Exception] = None):
        super().__init__(
            message=f"Response from {url} is not valid JSON",
            url=url,
            error_code="FETCH_DECODE_ERROR",
            original_error=original_error,
        )


class PayloadShapeException(FetchException):
    """Raised when a provider response lacks the structure a client maps."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message=message, url=url, error_code="FETCH_PAYLOAD_SHAPE")


class SourceNotConfiguredException(FetchException):
    """Raised when a domain has no remote endpoint configured."""

    def __init__(self, domain: str):
        super().__init__(
            message=f"No remote source configured for {domain}",
            error_code="FETCH_SOURCE_NOT_CONFIGURED",
            details={"domain": domain},
        )


class PlaceNotFoundException(FetchException):
    """Raised when forward geocoding finds no match."""

    def __init__(self, query: str):
        super().__init__(
            message=f"Place not found: {query}",
            error_code="PLACE_NOT_FOUND",
            details={"query": query},
        )


class FetchRequestException(FetchException):
    """Raised when a request cannot be made or completed (bad URL, redirect loop)."""

    def __init__(self, url: str, original_error: Optional[Exception] = None):
        super().__init__(
            message=f"Request to {url} could not be completed",
            url=url,
            error_code="FETCH_REQUEST_ERROR",
            original_error=original_error,
        )
