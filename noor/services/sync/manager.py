"""
Bulk Sync Manager

Runs a BulkSynchronizer as a background task so HTTP clients can start,
poll, stream and cancel a download without holding a request open.

Progress is streamed as Server-Sent Events:
- "data: {...}\\n\\n" for every progress event and the final status
- ": keepalive\\n\\n" while the run is quiet
"""

import asyncio
import json
from typing import Any, AsyncGenerator, Dict, Optional

import structlog

from ...domain.cache.value_objects import SyncProgress
from .bulk_synchronizer import BulkSynchronizer
from .cancellation import CancellationToken

logger = structlog.get_logger()


class BulkSyncManager:
    """Owns at most one background run of a synchronizer."""

    def __init__(self, synchronizer: BulkSynchronizer, keepalive_interval: float = 15.0):
        self.synchronizer = synchronizer
        self.keepalive_interval = keepalive_interval
        self._task: Optional[asyncio.Task] = None
        self._token: Optional[CancellationToken] = None

    @property
    def is_running(self) -> bool:
        return self.synchronizer.is_running

    def status(self) -> Dict[str, Any]:
        return self.synchronizer.status.to_dict()

    def start(self) -> Dict[str, Any]:
        """
        Start a background run.

        Returns:
            Status snapshot (state "running")

        Raises:
            SyncAlreadyRunningException: If a run is already in flight
        """
        self.synchronizer.reserve()
        self._token = CancellationToken()
        self._task = asyncio.create_task(self._run(self._token))
        logger.info("Background download scheduled", domain=self.synchronizer.domain.value)
        return self.status()

    def cancel(self) -> bool:
        """Request cancellation; False when nothing is running."""
        if not self.is_running or self._token is None:
            return False
        self._token.cancel()
        logger.info(
            "Background download cancellation requested",
            domain=self.synchronizer.domain.value,
        )
        return True

    async def wait(self) -> Optional[int]:
        """Wait for the current run; its available count, None when there is none."""
        if self._task is None:
            return None
        return await self._task

    async def _run(self, token: CancellationToken) -> Optional[int]:
        try:
            return await self.synchronizer.run_reserved(cancellation=token)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                "Background download failed",
                domain=self.synchronizer.domain.value,
                error=str(e),
                exc_info=True,
            )
            return None

    async def stream_events(self) -> AsyncGenerator[str, None]:
        """
        Stream progress of the run in flight as SSE.

        Yields the current status first, then one event per processed item and
        the final status. When no run is active the stream ends after the
        first event.
        """
        queue = self.synchronizer.subscribe()
        try:
            yield self._format(self.status())
            if not self.is_running:
                return

            while True:
                try:
                    progress = await asyncio.wait_for(
                        queue.get(), timeout=self.keepalive_interval
                    )
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue

                if progress is None:
                    yield self._format(self.status())
                    break
                yield self._format(self._progress_event(progress))

        except asyncio.CancelledError:
            logger.info("SSE: Download stream cancelled by client")
            raise

        finally:
            self.synchronizer.unsubscribe(queue)

    async def aclose(self) -> None:
        """Stop a run still in flight (used at shutdown)."""
        if self._task is None or self._task.done():
            return
        if self._token is not None:
            self._token.cancel()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning("Error stopping background download", error=str(e))

    @staticmethod
    def _progress_event(progress: SyncProgress) -> Dict[str, Any]:
        return {"state": "running", "progress": progress.to_dict()}

    @staticmethod
    def _format(event: Dict[str, Any]) -> str:
        return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"
