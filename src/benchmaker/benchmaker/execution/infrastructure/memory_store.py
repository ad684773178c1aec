"""InMemoryResultStore — thread-safe, dict-backed ResultStore."""

import threading
import uuid
from datetime import UTC, datetime
from typing import Any, TypeAlias

from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.execution.domain.result import (
    RunResult,
    RunStatus,
    TestCaseResult,
)
from benchmaker.execution.infrastructure.errors import (
    ResultNotFoundError,
    RunNotFoundError,
    RunSealedError,
)
from benchmaker.scoring.domain.result import ScoringResult
from benchmaker.suite.domain.suite import TestSuite

ResultKey: TypeAlias = tuple[str, str]


class InMemoryResultStore:
    """Holds runs in memory; callers receive deep copies.

    A single lock serializes every mutation, so concurrent updates to one
    key resolve as last-write-wins.

    Does NOT inherit from ResultStore (structural typing via Protocol).
    """

    def __init__(self, runs: list[RunResult] | None = None) -> None:
        self._lock = threading.Lock()
        self._runs: dict[str, RunResult] = {}
        self._index: dict[str, dict[ResultKey, int]] = {}
        for run in runs or []:
            self._insert(run.model_copy(deep=True))

    def _insert(self, run: RunResult) -> None:
        self._runs[run.id] = run
        self._index[run.id] = {
            (r.test_case_id, r.model_id): i for i, r in enumerate(run.results)
        }

    def _open_run(self, run_id: str) -> RunResult:
        run = self._runs.get(run_id)
        if run is None:
            raise RunNotFoundError(run_id=run_id)
        if run.status is RunStatus.COMPLETED:
            raise RunSealedError(run_id=run_id)
        return run

    def create_run(
        self,
        suite: TestSuite,
        models: list[str],
        parameters: ModelParameters,
        judge_model: str | None = None,
    ) -> RunResult:
        if len(set(models)) != len(models):
            raise ValueError(f"duplicate model ids: {', '.join(models)}")
        run = RunResult(
            id=str(uuid.uuid4()),
            test_suite_id=suite.id,
            test_suite_name=suite.name,
            models=list(models),
            parameters=parameters,
            judge_model=judge_model,
            results=[
                TestCaseResult(test_case_id=case.id, model_id=model)
                for case in suite.test_cases
                for model in models
            ],
            started_at=datetime.now(UTC),
        )
        with self._lock:
            self._insert(run)
            return run.model_copy(deep=True)

    def update_result(
        self, run_id: str, test_case_id: str, model_id: str, **changes: Any
    ) -> None:
        unknown = set(changes) - set(TestCaseResult.model_fields)
        if unknown:
            raise ValueError(f"unknown result fields: {', '.join(sorted(unknown))}")
        with self._lock:
            run = self._open_run(run_id)
            position = self._index[run_id].get((test_case_id, model_id))
            if position is None:
                raise ResultNotFoundError(
                    run_id=run_id, test_case_id=test_case_id, model_id=model_id
                )
            run.results[position] = run.results[position].model_copy(update=changes)

    def set_score(
        self, run_id: str, test_case_id: str, model_id: str, score: ScoringResult
    ) -> None:
        self.update_result(run_id, test_case_id, model_id, score=score)

    def seal_run(self, run_id: str, cancelled: bool = False) -> RunResult:
        with self._lock:
            run = self._open_run(run_id)
            run.status = RunStatus.COMPLETED
            run.completed_at = datetime.now(UTC)
            run.cancelled = cancelled
            return run.model_copy(deep=True)

    def get_run(self, run_id: str) -> RunResult:
        with self._lock:
            run = self._runs.get(run_id)
            if run is None:
                raise RunNotFoundError(run_id=run_id)
            return run.model_copy(deep=True)

    def list_runs(self) -> list[RunResult]:
        with self._lock:
            return [run.model_copy(deep=True) for run in self._runs.values()]

    def runs_for_suite(self, suite_id: str) -> list[RunResult]:
        """Sealed runs of ``suite_id`` in start order."""
        with self._lock:
            runs = [
                run.model_copy(deep=True)
                for run in self._runs.values()
                if run.test_suite_id == suite_id and run.status is RunStatus.COMPLETED
            ]
        return sorted(runs, key=lambda r: r.started_at)
