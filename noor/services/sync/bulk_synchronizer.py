"""
Bulk Synchronizer

Pre-populates the store with every item of an enumerable domain, one item at
a time, with progress reporting and cooperative cancellation.

Lifecycle: IDLE -> RUNNING -> COMPLETED | CANCELLED | IDLE (partial run).
Individual item failures never end a run; they are left for the next one.
"""

import asyncio
import inspect
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Hashable,
    List,
    Optional,
    Protocol,
    Sequence,
    Union,
)

import structlog

from ...constants import get_current_timestamp
from ...domain.cache.value_objects import (
    CachedStatus,
    ContentDomain,
    FetchOptions,
    SyncProgress,
    SyncState,
    SyncStatus,
)
from ..exceptions import SyncAlreadyRunningException
from .cancellation import CancellationToken

logger = structlog.get_logger()

ProgressCallback = Callable[[SyncProgress], Union[None, Awaitable[None]]]


class SyncTarget(Protocol):
    """Per-item cache operations a synchronizer drives."""

    async def get_cached_status(self, item_id: Any) -> CachedStatus: ...

    async def sync_item(
        self, item_id: Any, options: Optional[FetchOptions] = None
    ) -> bool: ...


class BulkSynchronizer:
    """
    Sequential download of every item of one domain.

    Args:
        domain: Domain being synchronized
        items: Item ids in processing order
        target: Cache service providing status probes and sync_item
        options: Fetch budget for each item
        delay_seconds: Pause after each network attempt, except after the last item
        sleep: Awaitable sleep used for the pause
    """

    def __init__(
        self,
        domain: ContentDomain,
        items: Sequence[Hashable],
        target: SyncTarget,
        options: Optional[FetchOptions] = None,
        delay_seconds: float = 0.25,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.domain = domain
        self.items = list(items)
        self.target = target
        self.options = options or FetchOptions(timeout=20.0, max_retries=2)
        self.delay_seconds = delay_seconds
        self.sleep = sleep

        self._status = SyncStatus()
        self._running = False
        self._subscribers: List[asyncio.Queue] = []

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._running

    def reserve(self) -> None:
        """
        Claim the single run slot and enter RUNNING.

        Raises:
            SyncAlreadyRunningException: If a run is already in flight
        """
        if self._running:
            raise SyncAlreadyRunningException(self.domain.value)
        self._running = True
        self._status = SyncStatus(
            state=SyncState.RUNNING,
            progress=SyncProgress(available=0, total=self.total, current=0),
            started_at=get_current_timestamp(),
        )

    async def download_all(
        self,
        on_progress: Optional[ProgressCallback] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> int:
        """
        Synchronize every item.

        Args:
            on_progress: Called (or awaited) with a SyncProgress after each item
            cancellation: Token checked before each item

        Returns:
            Number of items locally available when the run ended

        Raises:
            SyncAlreadyRunningException: If a run is already in flight
        """
        self.reserve()
        return await self.run_reserved(on_progress, cancellation)

    async def run_reserved(
        self,
        on_progress: Optional[ProgressCallback] = None,
        cancellation: Optional[CancellationToken] = None,
    ) -> int:
        """Run after a successful reserve()."""
        available = 0
        final_state = SyncState.IDLE
        logger.info("Bulk synchronization started", domain=self.domain.value, total=self.total)

        try:
            for index, item_id in enumerate(self.items, start=1):
                if cancellation is not None and cancellation.cancelled:
                    final_state = SyncState.CANCELLED
                    break

                attempted_network = False
                status = await self.target.get_cached_status(item_id)
                if status.cached:
                    available += 1
                else:
                    attempted_network = True
                    if await self.target.sync_item(item_id, self.options):
                        available += 1

                progress = SyncProgress(available=available, total=self.total, current=index)
                self._status.progress = progress
                await self._emit(progress, on_progress)

                if attempted_network and index < self.total and self.delay_seconds > 0:
                    await self.sleep(self.delay_seconds)
            else:
                final_state = (
                    SyncState.COMPLETED if available >= self.total else SyncState.IDLE
                )
        except asyncio.CancelledError:
            final_state = SyncState.CANCELLED
            raise
        finally:
            self._finish(final_state)
            logger.info(
                "Bulk synchronization finished",
                domain=self.domain.value,
                state=final_state.value,
                available=available,
                total=self.total,
            )

        return available

    def subscribe(self) -> asyncio.Queue:
        """Queue receiving each SyncProgress and a final None when the run ends."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def iter_progress(self) -> AsyncIterator[SyncProgress]:
        """
        Progress events of the run in flight, or of the next run when idle.

        Subscribes immediately; the iterator ends when that run finishes. The
        subscription is dropped when the run finishes even if the iterator is
        never consumed, so an abandoned iterator holds at most one run of events.
        """
        return self._drain(self.subscribe())

    async def _drain(self, queue: asyncio.Queue) -> AsyncIterator[SyncProgress]:
        try:
            while True:
                progress = await queue.get()
                if progress is None:
                    return
                yield progress
        finally:
            self.unsubscribe(queue)

    async def _emit(
        self, progress: SyncProgress, on_progress: Optional[ProgressCallback]
    ) -> None:
        for queue in list(self._subscribers):
            queue.put_nowait(progress)
        if on_progress is not None:
            result = on_progress(progress)
            if inspect.isawaitable(result):
                await result

    def _finish(self, state: SyncState) -> None:
        self._running = False
        self._status.state = state
        self._status.finished_at = get_current_timestamp()
        # Every queue now holds its terminal None; later runs get new subscribers
        for queue in self._subscribers:
            queue.put_nowait(None)
        self._subscribers.clear()
