"""Cooperative cancellation for in-flight analyses.

A CancellationToken is shared by every advisor in one analysis run. Calling
`cancel()` aborts the pending completion request in each advisor and makes
them raise AnalysisCancelled instead of producing a result.
"""

import asyncio
import contextlib
from typing import Awaitable, TypeVar

from ..errors import AnalysisCancelled

T = TypeVar("T")


class CancellationToken:
    def __init__(self):
        self._event = asyncio.Event()
        self.reason = ""

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "Analysis cancelled") -> None:
        self.reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise AnalysisCancelled(self.reason)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await `awaitable` unless the token fires first.

        Raises:
            AnalysisCancelled: the token was cancelled before the work finished;
                the work itself is cancelled and awaited
        """
        self.raise_if_cancelled()
        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
            if work in done:
                return work.result()
            work.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await work
            raise AnalysisCancelled(self.reason)
        finally:
            for task in (work, waiter):
                if not task.done():
                    task.cancel()
