"""StructlogArenaObserver — production observer that delegates to structlog."""

import structlog


class StructlogArenaObserver:
    """Logs code arena events to structlog.

    Does NOT inherit from ArenaObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def arena_run_started(
        self, run_id: str, model_ids: list[str], max_concurrent: int
    ) -> None:
        self._log.info(
            "arena.run.started",
            run_id=run_id,
            model_ids=model_ids,
            max_concurrent=max_concurrent,
        )

    def arena_run_completed(
        self,
        run_id: str,
        completed: int,
        failed: int,
        cancelled: int,
        elapsed_seconds: float,
        was_cancelled: bool,
    ) -> None:
        log = self._log.warning if was_cancelled else self._log.info
        log(
            "arena.run.completed",
            run_id=run_id,
            completed=completed,
            failed=failed,
            cancelled=cancelled,
            elapsed_seconds=round(elapsed_seconds, 2),
            was_cancelled=was_cancelled,
        )

    def arena_output_completed(
        self, run_id: str, model_id: str, latency_ms: int, code_chars: int
    ) -> None:
        self._log.info(
            "arena.output.completed",
            run_id=run_id,
            model_id=model_id,
            latency_ms=latency_ms,
            code_chars=code_chars,
        )

    def arena_output_failed(self, run_id: str, model_id: str, reason: str) -> None:
        self._log.error("arena.output.failed", run_id=run_id, model_id=model_id, reason=reason)

    def arena_output_cancelled(self, run_id: str, model_id: str) -> None:
        self._log.info("arena.output.cancelled", run_id=run_id, model_id=model_id)

    def task_failed(self, run_id: str, task_index: int, reason: str) -> None:
        self._log.error(
            "arena.task.failed", run_id=run_id, task_index=task_index, reason=reason
        )
