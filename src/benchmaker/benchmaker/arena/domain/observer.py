"""Observer port for the code arena — defines events in domain language."""

from typing import Protocol


class ArenaObserver(Protocol):
    def arena_run_started(
        self, run_id: str, model_ids: list[str], max_concurrent: int
    ) -> None: ...

    def arena_run_completed(
        self,
        run_id: str,
        completed: int,
        failed: int,
        cancelled: int,
        elapsed_seconds: float,
        was_cancelled: bool,
    ) -> None: ...

    def arena_output_completed(
        self, run_id: str, model_id: str, latency_ms: int, code_chars: int
    ) -> None: ...

    def arena_output_failed(self, run_id: str, model_id: str, reason: str) -> None: ...

    def arena_output_cancelled(self, run_id: str, model_id: str) -> None: ...

    def task_failed(self, run_id: str, task_index: int, reason: str) -> None: ...
