"""Run and per-pair result models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.gateway.domain.messages import TokenUsage
from benchmaker.scoring.domain.result import ScoringResult


class ExecutionStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RunStatus(StrEnum):
    RUNNING = "running"
    COMPLETED = "completed"


class TestCaseResult(BaseModel):
    """Outcome of one (test case, model) pair.

    ``score`` stays None until the response has been scored; None never
    means "scored zero".
    """

    __test__ = False  # not a pytest class

    test_case_id: str
    model_id: str
    response: str = ""
    streamed_content: str = ""
    status: ExecutionStatus = ExecutionStatus.IDLE
    latency_ms: int | None = None
    token_usage: TokenUsage | None = None
    cost: float | None = None
    score: ScoringResult | None = None
    error: str | None = None


class RunResult(BaseModel):
    """One execution of a suite against a set of models.

    ``results`` holds exactly one entry per (test case, model) pair from the
    moment the run is created.
    """

    id: str
    test_suite_id: str
    test_suite_name: str
    models: list[str] = Field(min_length=1)
    parameters: ModelParameters
    judge_model: str | None = None
    results: list[TestCaseResult]
    status: RunStatus = RunStatus.RUNNING
    started_at: datetime
    completed_at: datetime | None = None
    cancelled: bool = False

    def result_for(self, test_case_id: str, model_id: str) -> TestCaseResult | None:
        return next(
            (
                r
                for r in self.results
                if r.test_case_id == test_case_id and r.model_id == model_id
            ),
            None,
        )

    def results_for_model(self, model_id: str) -> list[TestCaseResult]:
        return [r for r in self.results if r.model_id == model_id]

    def count(self, status: ExecutionStatus) -> int:
        return sum(1 for r in self.results if r.status is status)
