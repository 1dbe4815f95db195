"""Cooperative cancellation signal for long-running synchronizations."""

import asyncio


class CancellationToken:
    """One-shot flag checked by a synchronizer between items."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()
