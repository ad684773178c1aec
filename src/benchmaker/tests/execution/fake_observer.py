"""FakeExecutionObserver — records execution events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RunStartedEvent:
    run_id: str
    suite_id: str
    total_tasks: int
    model_ids: list[str]
    max_concurrent: int


@dataclass(frozen=True)
class RunCompletedEvent:
    run_id: str
    completed: int
    failed: int
    cancelled: int
    elapsed_seconds: float
    was_cancelled: bool


@dataclass(frozen=True)
class ResultEvent:
    run_id: str
    test_case_id: str
    model_id: str


@dataclass(frozen=True)
class ResultCompletedEvent:
    run_id: str
    test_case_id: str
    model_id: str
    latency_ms: int
    score: float


@dataclass(frozen=True)
class ResultFailedEvent:
    run_id: str
    test_case_id: str
    model_id: str
    reason: str


@dataclass(frozen=True)
class EmptyResponseRetryEvent:
    run_id: str
    test_case_id: str
    model_id: str
    attempt: int
    backoff_seconds: float


@dataclass(frozen=True)
class TaskFailedEvent:
    run_id: str
    task_index: int
    reason: str


class FakeExecutionObserver:
    """Records all emitted execution events as typed frozen dataclasses.

    Event lists use a leading underscore + public property pattern to avoid
    name collision between the list attributes and the Protocol method names.
    """

    def __init__(self) -> None:
        self._run_started: list[RunStartedEvent] = []
        self._run_completed: list[RunCompletedEvent] = []
        self._result_started: list[ResultEvent] = []
        self._result_completed: list[ResultCompletedEvent] = []
        self._result_failed: list[ResultFailedEvent] = []
        self._result_cancelled: list[ResultEvent] = []
        self._retries: list[EmptyResponseRetryEvent] = []
        self._task_failures: list[TaskFailedEvent] = []

    @property
    def runs_started(self) -> list[RunStartedEvent]:
        return self._run_started

    @property
    def runs_completed(self) -> list[RunCompletedEvent]:
        return self._run_completed

    @property
    def started(self) -> list[ResultEvent]:
        return self._result_started

    @property
    def completed(self) -> list[ResultCompletedEvent]:
        return self._result_completed

    @property
    def failed(self) -> list[ResultFailedEvent]:
        return self._result_failed

    @property
    def cancelled(self) -> list[ResultEvent]:
        return self._result_cancelled

    @property
    def retries(self) -> list[EmptyResponseRetryEvent]:
        return self._retries

    @property
    def task_failures(self) -> list[TaskFailedEvent]:
        return self._task_failures

    def run_started(
        self,
        run_id: str,
        suite_id: str,
        total_tasks: int,
        model_ids: list[str],
        max_concurrent: int,
    ) -> None:
        self._run_started.append(
            RunStartedEvent(
                run_id=run_id,
                suite_id=suite_id,
                total_tasks=total_tasks,
                model_ids=model_ids,
                max_concurrent=max_concurrent,
            )
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
        self._run_completed.append(
            RunCompletedEvent(
                run_id=run_id,
                completed=completed,
                failed=failed,
                cancelled=cancelled,
                elapsed_seconds=elapsed_seconds,
                was_cancelled=was_cancelled,
            )
        )

    def result_started(self, run_id: str, test_case_id: str, model_id: str) -> None:
        self._result_started.append(
            ResultEvent(run_id=run_id, test_case_id=test_case_id, model_id=model_id)
        )

    def result_completed(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        latency_ms: int,
        score: float,
    ) -> None:
        self._result_completed.append(
            ResultCompletedEvent(
                run_id=run_id,
                test_case_id=test_case_id,
                model_id=model_id,
                latency_ms=latency_ms,
                score=score,
            )
        )

    def result_failed(
        self, run_id: str, test_case_id: str, model_id: str, reason: str
    ) -> None:
        self._result_failed.append(
            ResultFailedEvent(
                run_id=run_id, test_case_id=test_case_id, model_id=model_id, reason=reason
            )
        )

    def result_cancelled(self, run_id: str, test_case_id: str, model_id: str) -> None:
        self._result_cancelled.append(
            ResultEvent(run_id=run_id, test_case_id=test_case_id, model_id=model_id)
        )

    def empty_response_retry(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        attempt: int,
        backoff_seconds: float,
    ) -> None:
        self._retries.append(
            EmptyResponseRetryEvent(
                run_id=run_id,
                test_case_id=test_case_id,
                model_id=model_id,
                attempt=attempt,
                backoff_seconds=backoff_seconds,
            )
        )

    def task_failed(self, run_id: str, task_index: int, reason: str) -> None:
        self._task_failures.append(
            TaskFailedEvent(run_id=run_id, task_index=task_index, reason=reason)
        )
