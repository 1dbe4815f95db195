"""
Unit tests for the retrying remote content fetcher.
"""

import httpx
import pytest

from noor.domain.cache.value_objects import FetchOptions
from noor.infrastructure.http import (
    FetchConnectionException,
    FetchDecodeException,
    FetchHTTPStatusException,
    FetchRequestException,
    FetchTimeoutException,
    RemoteContentFetcher,
)
from noor.infrastructure.http.fetcher import is_transient

URL = "https://api.example.test/v1/resource"


def make_fetcher(handler, max_retries=3):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteContentFetcher(
        client=client,
        base_delay=0,
        default_options=FetchOptions(timeout=1.0, max_retries=max_retries),
    )


class TestRemoteContentFetcher:
    """Test retry policy and error mapping."""

    @pytest.mark.asyncio
    async def test_returns_parsed_json(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"data": [1, 2]})

        fetcher = make_fetcher(handler)
        body = await fetcher.get_json(URL, params={"q": "x"})

        assert body == {"data": [1, 2]}
        assert len(calls) == 1
        assert calls[0].url.params["q"] == "x"

    @pytest.mark.asyncio
    async def test_retries_server_errors_then_succeeds(self):
        responses = iter(
            [
                httpx.Response(503),
                httpx.Response(500),
                httpx.Response(200, json={"ok": True}),
            ]
        )
        fetcher = make_fetcher(lambda request: next(responses))

        assert await fetcher.get_json(URL) == {"ok": True}

    @pytest.mark.asyncio
    async def test_gives_up_after_attempt_budget(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(502)

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchHTTPStatusException) as exc_info:
            await fetcher.get_json(URL, options=FetchOptions(timeout=1.0, max_retries=2))

        assert len(calls) == 2
        assert exc_info.value.status_code == 502
        assert exc_info.value.details["attempts"] == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchHTTPStatusException) as exc_info:
            await fetcher.get_json(URL)

        assert len(calls) == 1
        assert exc_info.value.transient is False

    @pytest.mark.asyncio
    async def test_timeout_is_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        fetcher = make_fetcher(handler, max_retries=3)

        with pytest.raises(FetchTimeoutException) as exc_info:
            await fetcher.get_json(URL)

        assert len(calls) == 3
        assert exc_info.value.details["timeout_seconds"] == 1.0
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        fetcher = make_fetcher(handler, max_retries=1)

        with pytest.raises(FetchConnectionException):
            await fetcher.get_json(URL)

    @pytest.mark.asyncio
    async def test_invalid_json_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, content=b"<html>maintenance</html>")

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchDecodeException):
            await fetcher.get_json(URL)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_undecodable_content_encoding(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.DecodingError("invalid gzip stream", request=request)

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchDecodeException) as exc_info:
            await fetcher.get_json(URL)
        assert len(calls) == 1
        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)

    @pytest.mark.asyncio
    async def test_redirect_loop(self):
        def handler(request):
            raise httpx.TooManyRedirects("Exceeded maximum allowed redirects", request=request)

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchRequestException) as exc_info:
            await fetcher.get_json(URL)
        assert exc_info.value.error_code == "FETCH_REQUEST_ERROR"
        assert exc_info.value.details["attempts"] == 1

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        def handler(request):
            raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchRequestException) as exc_info:
            await fetcher.get_json(URL)
        assert exc_info.value.transient is False
        assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={}))
        )
        async with RemoteContentFetcher(client=client, base_delay=0):
            pass
        assert not client.is_closed
        await client.aclose()


class TestIsTransient:
    def test_classification(self):
        assert is_transient(FetchTimeoutException(URL, 1.0))
        assert is_transient(FetchConnectionException(URL))
        assert is_transient(FetchHTTPStatusException(URL, 500))
        assert not is_transient(FetchHTTPStatusException(URL, 429))
        assert not is_transient(FetchDecodeException(URL))
        assert not is_transient(FetchRequestException(URL))
        assert not is_transient(ValueError("not a fetch error"))
