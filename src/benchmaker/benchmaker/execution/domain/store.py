"""ResultStore port — where runs and their per-pair results live while executing."""

from typing import Any, Protocol

from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.execution.domain.result import RunResult
from benchmaker.scoring.domain.result import ScoringResult
from benchmaker.suite.domain.suite import TestSuite


class ResultStore(Protocol):
    """Keyed, last-write-wins storage for runs.

    Updates may arrive in any order from concurrent tasks. Sealed runs reject
    further updates.
    """

    def create_run(
        self,
        suite: TestSuite,
        models: list[str],
        parameters: ModelParameters,
        judge_model: str | None = None,
    ) -> RunResult: ...

    def update_result(
        self, run_id: str, test_case_id: str, model_id: str, **changes: Any
    ) -> None: ...

    def set_score(
        self, run_id: str, test_case_id: str, model_id: str, score: ScoringResult
    ) -> None: ...

    def seal_run(self, run_id: str, cancelled: bool = False) -> RunResult: ...

    def get_run(self, run_id: str) -> RunResult: ...

    def list_runs(self) -> list[RunResult]: ...

    def runs_for_suite(self, suite_id: str) -> list[RunResult]: ...
