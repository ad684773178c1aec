"""CompositeExecutionObserver — fans out all events to a list of observers."""

from benchmaker.execution.domain.observer import ExecutionObserver


class CompositeExecutionObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from ExecutionObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[ExecutionObserver]) -> None:
        self._observers = observers

    def run_started(
        self,
        run_id: str,
        suite_id: str,
        total_tasks: int,
        model_ids: list[str],
        max_concurrent: int,
    ) -> None:
        for obs in self._observers:
            obs.run_started(
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
        for obs in self._observers:
            obs.run_completed(
                run_id=run_id,
                completed=completed,
                failed=failed,
                cancelled=cancelled,
                elapsed_seconds=elapsed_seconds,
                was_cancelled=was_cancelled,
            )

    def result_started(self, run_id: str, test_case_id: str, model_id: str) -> None:
        for obs in self._observers:
            obs.result_started(run_id=run_id, test_case_id=test_case_id, model_id=model_id)

    def result_completed(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        latency_ms: int,
        score: float,
    ) -> None:
        for obs in self._observers:
            obs.result_completed(
                run_id=run_id,
                test_case_id=test_case_id,
                model_id=model_id,
                latency_ms=latency_ms,
                score=score,
            )

    def result_failed(
        self, run_id: str, test_case_id: str, model_id: str, reason: str
    ) -> None:
        for obs in self._observers:
            obs.result_failed(
                run_id=run_id, test_case_id=test_case_id, model_id=model_id, reason=reason
            )

    def result_cancelled(self, run_id: str, test_case_id: str, model_id: str) -> None:
        for obs in self._observers:
            obs.result_cancelled(
                run_id=run_id, test_case_id=test_case_id, model_id=model_id
            )

    def empty_response_retry(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        attempt: int,
        backoff_seconds: float,
    ) -> None:
        for obs in self._observers:
            obs.empty_response_retry(
                run_id=run_id,
                test_case_id=test_case_id,
                model_id=model_id,
                attempt=attempt,
                backoff_seconds=backoff_seconds,
            )

    def task_failed(self, run_id: str, task_index: int, reason: str) -> None:
        for obs in self._observers:
            obs.task_failed(run_id=run_id, task_index=task_index, reason=reason)
