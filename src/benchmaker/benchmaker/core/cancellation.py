"""CancellationToken — cooperative cancellation shared by a run and its tasks."""

import asyncio
import inspect
from collections.abc import Awaitable
from typing import TypeVar

from benchmaker.core.errors import RunCancelledError

T = TypeVar("T")


class CancellationToken:
    """A one-shot signal observed by the task runner and every network call.

    Once cancelled the token never resets; create a new token per run.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RunCancelledError()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        When the token wins the race the pending work is cancelled, allowed
        to unwind, and RunCancelledError is raised in its place.
        """
        if self._event.is_set():
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise RunCancelledError()
        work = asyncio.ensure_future(awaitable)
        signal = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, signal}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            work.cancel()
            signal.cancel()
            raise

        if work in done:
            signal.cancel()
            return work.result()

        work.cancel()
        await asyncio.gather(work, return_exceptions=True)
        raise RunCancelledError()
