"""Cooperative cancellation for in-flight provider calls."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from chat_gateway.errors import RequestCancelled

T = TypeVar("T")


class CancellationToken:
    """One token per logical turn, owned by whoever started the turn.

    ``guard`` runs an awaitable as a task and cancels it (and with it any
    in-flight HTTP request) as soon as ``cancel`` is called.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelled()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first."""
        if self.cancelled:
            # close a never-awaited coroutine
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelled()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

        if task.cancelled():
            raise RequestCancelled()
        return task.result()
