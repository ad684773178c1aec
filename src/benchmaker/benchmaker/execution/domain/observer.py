"""Observer port for the execution domain — defines events in domain language."""

from typing import Protocol


class TaskObserver(Protocol):
    """The one event BoundedTaskRunner emits; every run observer provides it."""

    def task_failed(self, run_id: str, task_index: int, reason: str) -> None: ...


class ExecutionObserver(Protocol):
    """Observer port emitting structured events while a run executes.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def run_started(
        self,
        run_id: str,
        suite_id: str,
        total_tasks: int,
        model_ids: list[str],
        max_concurrent: int,
    ) -> None: ...

    def run_completed(
        self,
        run_id: str,
        completed: int,
        failed: int,
        cancelled: int,
        elapsed_seconds: float,
        was_cancelled: bool,
    ) -> None: ...

    def result_started(self, run_id: str, test_case_id: str, model_id: str) -> None: ...

    def result_completed(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        latency_ms: int,
        score: float,
    ) -> None: ...

    def result_failed(
        self, run_id: str, test_case_id: str, model_id: str, reason: str
    ) -> None: ...

    def result_cancelled(self, run_id: str, test_case_id: str, model_id: str) -> None: ...

    def empty_response_retry(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        attempt: int,
        backoff_seconds: float,
    ) -> None: ...

    def task_failed(self, run_id: str, task_index: int, reason: str) -> None: ...
