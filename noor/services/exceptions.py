"""
Service Layer Exceptions

Errors that cache services let reach their callers.
Everything else (network, storage, validation) is recovered inside the
services through the fallback chain.
"""

from typing import Any, Dict, Optional

from ..constants import CONTENT_UNAVAILABLE_MESSAGE


class NoorServiceException(Exception):
    """Base exception for service-level errors."""

    status_code = 500

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


class ContentUnavailableException(NoorServiceException):
    """Raised when network, store and bundled data all failed for an item."""

    status_code = 503

    def __init__(self, domain: str, item_id: Any):
        super().__init__(
            message=CONTENT_UNAVAILABLE_MESSAGE,
            error_code="CONTENT_UNAVAILABLE",
            details={"domain": domain, "item_id": str(item_id)},
        )
        self.domain = domain
        self.item_id = item_id


class RefreshFailedException(NoorServiceException):
    """Raised by the API layer when a forced refresh could not reach the network."""

    status_code = 503

    def __init__(self, domain: str, item_id: Any):
        super().__init__(
            message=f"Refreshing {domain} item {item_id} from the network failed",
            error_code="REFRESH_FAILED",
            details={"domain": domain, "item_id": str(item_id)},
        )


class SyncAlreadyRunningException(NoorServiceException):
    """Raised when a bulk synchronization is started twice."""

    status_code = 409

    def __init__(self, domain: str):
        super().__init__(
            message=f"A bulk download for {domain} is already running",
            error_code="SYNC_ALREADY_RUNNING",
            details={"domain": domain},
        )

