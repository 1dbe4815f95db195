"""Athkar Cache Service"""

from typing import Optional

from ...constants import ATHKAR_ITEM_ID
from ...domain.cache.domain_services import has_real_athkar
from ...domain.cache.entities import AthkarCollection
from ...domain.cache.repository_interfaces import BundledDataset, KeyValueStore
from ...domain.cache.value_objects import (
    CachedStatus,
    CacheKey,
    ContentDomain,
    FetchOptions,
    LoadResult,
)
from ...infrastructure.http.athkar_client import AthkarClient
from .domain_cache_service import DomainCacheService


class AthkarService:
    """The daily athkar collection; a single item with id "daily"."""

    def __init__(
        self,
        store: KeyValueStore,
        client: AthkarClient,
        bundled: Optional[BundledDataset] = None,
    ):
        self.client = client
        self.cache: DomainCacheService[str, AthkarCollection] = DomainCacheService(
            domain=ContentDomain.ATHKAR,
            store=store,
            fetch=client.fetch,
            key_for=CacheKey.athkar,
            model=AthkarCollection,
            validator=has_real_athkar,
            bundled=bundled,
        )

    async def load(self) -> AthkarCollection:
        return await self.cache.load(ATHKAR_ITEM_ID)

    async def load_with_source(self) -> LoadResult[AthkarCollection]:
        return await self.cache.load_with_source(ATHKAR_ITEM_ID)

    async def refresh(self, options: Optional[FetchOptions] = None) -> Optional[AthkarCollection]:
        return await self.cache.refresh(ATHKAR_ITEM_ID, options)

    async def get_cached_status(self) -> CachedStatus:
        return await self.cache.get_cached_status(ATHKAR_ITEM_ID)
