"""
Athkar collection client.

The collection is a static JSON document; the endpoint is optional and a
deployment without one serves athkar from cache or the bundled copy.
"""

from typing import Optional

from pydantic import ValidationError

from ...constants import ATHKAR_ITEM_ID
from ...domain.cache.entities import AthkarCollection
from ...domain.cache.value_objects import FetchOptions
from .exceptions import PayloadShapeException, SourceNotConfiguredException
from .fetcher import RemoteContentFetcher


class AthkarClient:
    """Fetches the athkar collection from a configured URL."""

    def __init__(
        self,
        fetcher: RemoteContentFetcher,
        url: Optional[str] = None,
        options: Optional[FetchOptions] = None,
    ):
        self.fetcher = fetcher
        self.url = url
        self.options = options or FetchOptions(timeout=10.0, max_retries=2)

    async def fetch(
        self, item_id: str = ATHKAR_ITEM_ID, options: Optional[FetchOptions] = None
    ) -> AthkarCollection:
        if not self.url:
            raise SourceNotConfiguredException("athkar")

        body = await self.fetcher.get_json(self.url, options=options or self.options)

        # Accept both {"categories": [...]} and a bare list of categories
        if isinstance(body, list):
            body = {"categories": body}
        if not isinstance(body, dict) or "categories" not in body:
            raise PayloadShapeException("Athkar response has no categories", url=self.url)

        try:
            return AthkarCollection.model_validate(body)
        except ValidationError as e:
            raise PayloadShapeException(f"Malformed athkar response: {e}", url=self.url) from e
