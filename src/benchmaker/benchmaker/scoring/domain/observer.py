"""JudgeObserver port — domain events emitted during LLM-judge scoring."""

from typing import Protocol


class JudgeObserver(Protocol):
    """Observer port for judge domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def judge_scoring_started(
        self, test_case_id: str, model_id: str, judge_model: str
    ) -> None: ...

    def judge_scoring_completed(
        self, test_case_id: str, model_id: str, duration_ms: int, score: float
    ) -> None: ...

    def judge_scoring_failed(
        self, test_case_id: str, model_id: str, reason: str
    ) -> None: ...

    def judge_response_unparseable(
        self, test_case_id: str, model_id: str, preview: str
    ) -> None: ...
