"""StructlogExecutionObserver — production observer that delegates to structlog."""

import structlog


class StructlogExecutionObserver:
    """Logs execution domain events to structlog.

    Does NOT inherit from ExecutionObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_started(
        self,
        run_id: str,
        suite_id: str,
        total_tasks: int,
        model_ids: list[str],
        max_concurrent: int,
    ) -> None:
        self._log.info(
            "execution.run.started",
            run_id=run_id,
            suite_id=suite_id,
            total_tasks=total_tasks,
            model_ids=model_ids,
            max_concurrent=max_concurrent,
        )

    def run_completed(
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
            "execution.run.completed",
            run_id=run_id,
            completed=completed,
            failed=failed,
            cancelled=cancelled,
            elapsed_seconds=round(elapsed_seconds, 2),
            was_cancelled=was_cancelled,
        )

    def result_started(self, run_id: str, test_case_id: str, model_id: str) -> None:
        self._log.debug(
            "execution.result.started",
            run_id=run_id,
            test_case_id=test_case_id,
            model_id=model_id,
        )

    def result_completed(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        latency_ms: int,
        score: float,
    ) -> None:
        self._log.info(
            "execution.result.completed",
            run_id=run_id,
            test_case_id=test_case_id,
            model_id=model_id,
            latency_ms=latency_ms,
            score=round(score, 4),
        )

    def result_failed(
        self, run_id: str, test_case_id: str, model_id: str, reason: str
    ) -> None:
        self._log.error(
            "execution.result.failed",
            run_id=run_id,
            test_case_id=test_case_id,
            model_id=model_id,
            reason=reason,
        )

    def result_cancelled(self, run_id: str, test_case_id: str, model_id: str) -> None:
        self._log.info(
            "execution.result.cancelled",
            run_id=run_id,
            test_case_id=test_case_id,
            model_id=model_id,
        )

    def empty_response_retry(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        attempt: int,
        backoff_seconds: float,
    ) -> None:
        self._log.warning(
            "execution.result.empty_response_retry",
            run_id=run_id,
            test_case_id=test_case_id,
            model_id=model_id,
            attempt=attempt,
            backoff_seconds=backoff_seconds,
        )

    def task_failed(self, run_id: str, task_index: int, reason: str) -> None:
        self._log.error(
            "execution.task.failed",
            run_id=run_id,
            task_index=task_index,
            reason=reason,
        )
