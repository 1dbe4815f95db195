"""
Domain Cache Service

Generic network-first, offline-fallback cache used by every content domain.

Tier order for a load:
1. remote fetch; a validated payload is written through to the store
2. validated store entry (current key, then the legacy key when configured)
3. bundled dataset entry
4. ContentUnavailableException

Network and storage failures never escape this service; the only error a
caller can see is ContentUnavailableException.
"""

from typing import Awaitable, Callable, Generic, Hashable, Optional, Type, TypeVar

import structlog
from opentelemetry import trace
from pydantic import BaseModel, ValidationError

from ...domain.cache.domain_services import PayloadValidator
from ...domain.cache.repository_interfaces import BundledDataset, KeyValueStore
from ...domain.cache.value_objects import (
    CachedStatus,
    CacheKey,
    ContentDomain,
    FetchOptions,
    LoadResult,
    Partition,
    PayloadSource,
)
from ...infrastructure.http.exceptions import FetchException
from ..exceptions import ContentUnavailableException

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

ItemId = TypeVar("ItemId", bound=Hashable)
T = TypeVar("T", bound=BaseModel)

FetchFunction = Callable[[ItemId, Optional[FetchOptions]], Awaitable[T]]
KeyFunction = Callable[[ItemId], CacheKey]


class DomainCacheService(Generic[ItemId, T]):
    """
    Fallback chain for one content domain.

    Args:
        domain: Content domain served by this instance
        store: Persistence store (expected to be the resilient wrapper)
        fetch: Remote fetch for one item, raising FetchException on failure
        key_for: Current cache key of an item
        model: Payload model used to parse stored entries
        validator: Content check applied to fetched and stored payloads
        bundled: Static dataset used as the last tier
        legacy_key_for: Key of the previous cache schema, migrated on read
    """

    def __init__(
        self,
        domain: ContentDomain,
        store: KeyValueStore,
        fetch: FetchFunction,
        key_for: KeyFunction,
        model: Type[T],
        validator: PayloadValidator,
        bundled: Optional[BundledDataset] = None,
        legacy_key_for: Optional[KeyFunction] = None,
        partition: Partition = Partition.APP_CACHE,
    ):
        self.domain = domain
        self.store = store
        self.fetch = fetch
        self.key_for = key_for
        self.model = model
        self.validator = validator
        self.bundled = bundled
        self.legacy_key_for = legacy_key_for
        self.partition = partition

    async def load(self, item_id: ItemId) -> T:
        """Best available payload for item_id."""
        result = await self.load_with_source(item_id)
        return result.payload

    async def load_with_source(self, item_id: ItemId) -> LoadResult[T]:
        """
        Best available payload for item_id and the tier that produced it.

        Raises:
            ContentUnavailableException: When no tier has the item
        """
        with tracer.start_as_current_span("domain_cache.load") as span:
            span.set_attribute("cache.domain", self.domain.value)
            span.set_attribute("cache.item_id", str(item_id))

            payload = await self._fetch_valid(item_id)
            if payload is not None:
                await self._persist(item_id, payload)
                span.set_attribute("cache.source", PayloadSource.NETWORK.value)
                return LoadResult(payload=payload, source=PayloadSource.NETWORK)

            cached = await self.read_cached(item_id)
            if cached is not None:
                logger.info(
                    "Serving cached payload",
                    domain=self.domain.value,
                    item_id=str(item_id),
                )
                span.set_attribute("cache.source", PayloadSource.STORE.value)
                return LoadResult(payload=cached, source=PayloadSource.STORE)

            bundled = await self._read_bundled(item_id)
            if bundled is not None:
                logger.info(
                    "Serving bundled payload",
                    domain=self.domain.value,
                    item_id=str(item_id),
                )
                span.set_attribute("cache.source", PayloadSource.BUNDLED.value)
                return LoadResult(payload=bundled, source=PayloadSource.BUNDLED)

            logger.warning(
                "Content unavailable on every tier",
                domain=self.domain.value,
                item_id=str(item_id),
            )
            span.set_status(trace.Status(trace.StatusCode.ERROR, "content unavailable"))
            raise ContentUnavailableException(self.domain.value, item_id)

    async def refresh(
        self, item_id: ItemId, options: Optional[FetchOptions] = None
    ) -> Optional[T]:
        """Force a network fetch; None on failure, never falls back."""
        with tracer.start_as_current_span("domain_cache.refresh") as span:
            span.set_attribute("cache.domain", self.domain.value)
            span.set_attribute("cache.item_id", str(item_id))

            payload = await self._fetch_valid(item_id, options)
            if payload is None:
                return None
            await self._persist(item_id, payload)
            return payload

    async def sync_item(
        self, item_id: ItemId, options: Optional[FetchOptions] = None
    ) -> bool:
        """
        Fetch, validate and persist one item for bulk synchronization.

        Returns:
            True when a valid payload is now stored; failures are discarded
        """
        payload = await self._fetch_valid(item_id, options)
        if payload is None:
            return False
        return await self._persist(item_id, payload)

    async def get_cached_status(self, item_id: ItemId) -> CachedStatus:
        """Read-only probe of the current key; no network, no writes."""
        raw = await self.store.get(self.partition, str(self.key_for(item_id)))
        if self._parse(raw) is not None:
            return CachedStatus.hit()
        return CachedStatus.miss()

    async def read_cached(self, item_id: ItemId) -> Optional[T]:
        """Validated stored payload, migrating a legacy entry when present."""
        key = str(self.key_for(item_id))
        payload = self._parse(await self.store.get(self.partition, key))
        if payload is not None or self.legacy_key_for is None:
            return payload

        legacy_key = str(self.legacy_key_for(item_id))
        payload = self._parse(await self.store.get(self.partition, legacy_key))
        if payload is None:
            return None

        if await self.store.put(self.partition, key, payload.model_dump(mode="json")):
            await self.store.delete(self.partition, legacy_key)
            logger.info(
                "Migrated legacy cache entry",
                domain=self.domain.value,
                from_key=legacy_key,
                to_key=key,
            )
        return payload

    async def _fetch_valid(
        self, item_id: ItemId, options: Optional[FetchOptions] = None
    ) -> Optional[T]:
        try:
            payload = await self.fetch(item_id, options)
        except FetchException as e:
            logger.info(
                "Remote fetch unavailable",
                domain=self.domain.value,
                item_id=str(item_id),
                error_code=e.error_code,
                error=e.message,
            )
            return None

        if not self.validator(payload):
            logger.warning(
                "Discarding invalid remote payload",
                domain=self.domain.value,
                item_id=str(item_id),
            )
            return None
        return payload

    async def _persist(self, item_id: ItemId, payload: T) -> bool:
        stored = await self.store.put(
            self.partition, str(self.key_for(item_id)), payload.model_dump(mode="json")
        )
        if not stored:
            logger.warning(
                "Write-through skipped, store unavailable",
                domain=self.domain.value,
                item_id=str(item_id),
            )
        return stored

    async def _read_bundled(self, item_id: ItemId) -> Optional[T]:
        if self.bundled is None:
            return None
        return await self.bundled.get(item_id)

    def _parse(self, raw: object) -> Optional[T]:
        """Stored entry as a payload, None when absent, malformed or a placeholder."""
        if raw is None:
            return None
        try:
            payload = self.model.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed cache entry", domain=self.domain.value)
            return None
        if not self.validator(payload):
            return None
        return payload
