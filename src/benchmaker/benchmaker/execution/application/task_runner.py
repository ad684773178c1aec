"""BoundedTaskRunner — runs coroutine factories with a concurrency ceiling."""

from typing import TypeAlias
import asyncio
from collections.abc import Awaitable, Callable, Sequence

from benchmaker.core.cancellation import CancellationToken
from benchmaker.core.errors import RunCancelledError
from benchmaker.execution.domain.observer import TaskObserver

TaskFactory: TypeAlias = Callable[[], Awaitable[None]]


class BoundedTaskRunner:
    """Starts each task once, never more than ``max_concurrent`` at a time.

    Tasks start in list order as slots free up. Failures are collected and
    reported, never re-raised. When the cancellation token fires the runner
    stops launching, waits for in-flight tasks to unwind, then raises
    RunCancelledError.
    """

    def __init__(self, max_concurrent: int, observer: TaskObserver) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._max_concurrent = max_concurrent
        self._observer = observer

    async def run(
        self,
        tasks: Sequence[TaskFactory],
        cancel_token: CancellationToken,
        run_id: str = "",
    ) -> list[Exception]:
        """Run every task and return the exceptions of those that failed.

        Raises:
            RunCancelledError: if cancellation stopped a launch or a task.
        """
        sem = asyncio.Semaphore(self._max_concurrent)
        errors: list[Exception] = []
        interrupted = False

        async def _run_one(index: int, factory: TaskFactory) -> None:
            nonlocal interrupted
            try:
                await factory()
            except RunCancelledError:
                interrupted = True
            except Exception as exc:
                errors.append(exc)
                self._observer.task_failed(run_id=run_id, task_index=index, reason=str(exc))
            finally:
                sem.release()

        async with asyncio.TaskGroup() as tg:
            for index, factory in enumerate(tasks):
                try:
                    await cancel_token.guard(sem.acquire())
                except RunCancelledError:
                    interrupted = True
                    break
                if cancel_token.cancelled:
                    sem.release()
                    interrupted = True
                    break
                tg.create_task(_run_one(index, factory))

        if interrupted:
            raise RunCancelledError()
        return errors
