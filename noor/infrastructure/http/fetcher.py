"""
Remote Content Fetcher

HTTP GET with bounded retries and incremental backoff.
Only asserts "HTTP succeeded and the body is JSON"; semantic validation is
left to the cache services.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from ...domain.cache.value_objects import FetchOptions
from .exceptions import (
    FetchConnectionException,
    FetchDecodeException,
    FetchException,
    FetchHTTPStatusException,
    FetchRequestException,
    FetchTimeoutException,
)

logger = logging.getLogger(__name__)


def is_transient(error: BaseException) -> bool:
    """Timeouts, network errors and 5xx responses are worth another attempt."""
    return isinstance(error, FetchException) and error.transient


class RemoteContentFetcher:
    """
    Retrying JSON fetcher shared by every provider client.

    Waits attempt_index * base_delay between attempts (1s, 2s, ... by default)
    and re-raises the last failure once the attempt budget is spent.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_delay: float = 1.0,
        default_options: Optional[FetchOptions] = None,
        user_agent: Optional[str] = None,
    ):
        headers = {"Accept": "application/json"}
        if user_agent:
            headers["User-Agent"] = user_agent
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(headers=headers, follow_redirects=True)
        self.base_delay = base_delay
        self.default_options = default_options or FetchOptions()

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        options: Optional[FetchOptions] = None,
    ) -> Any:
        """
        Fetch and parse a JSON document.

        Args:
            url: Absolute endpoint URL
            params: Query string parameters
            headers: Extra request headers
            options: Timeout and attempt budget (defaults apply when omitted)

        Returns:
            Parsed JSON body

        Raises:
            FetchException: After the final attempt fails, or immediately for
                non-transient failures (HTTP 4xx, undecodable body)
        """
        opts = options or self.default_options
        attempts = 0

        retrying = AsyncRetrying(
            stop=stop_after_attempt(opts.max_retries),
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            retry=retry_if_exception(is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts += 1
                    return await self._get_once(url, params, headers, opts.timeout)
        except FetchException as e:
            e.details["attempts"] = attempts
            logger.info(
                f"Fetch failed for {url} after {attempts} attempt(s): {e.message}",
                extra={"url": url, "error_code": e.error_code, "attempts": attempts},
            )
            raise

    async def _get_once(
        self,
        url: str,
        params: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
        timeout: float,
    ) -> Any:
        try:
            response = await self._client.get(
                url, params=params, headers=headers, timeout=timeout
            )
        except httpx.TimeoutException as e:
            raise FetchTimeoutException(url, timeout, e) from e
        except httpx.TransportError as e:
            raise FetchConnectionException(url, e) from e
        except httpx.DecodingError as e:
            raise FetchDecodeException(url, e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchRequestException(url, e) from e

        if not response.is_success:
            raise FetchHTTPStatusException(url, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise FetchDecodeException(url, e) from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RemoteContentFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
