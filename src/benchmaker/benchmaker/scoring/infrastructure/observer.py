"""Structlog implementation of the JudgeObserver port."""

import structlog


class StructlogJudgeObserver:
    """Delegates judge domain events to structlog.

    Satisfies the JudgeObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def judge_scoring_started(
        self, test_case_id: str, model_id: str, judge_model: str
    ) -> None:
        self._log.info(
            "judge.scoring_started",
            test_case_id=test_case_id,
            model_id=model_id,
            judge_model=judge_model,
        )

    def judge_scoring_completed(
        self, test_case_id: str, model_id: str, duration_ms: int, score: float
    ) -> None:
        self._log.info(
            "judge.scoring_completed",
            test_case_id=test_case_id,
            model_id=model_id,
            duration_ms=duration_ms,
            score=round(score, 4),
        )

    def judge_scoring_failed(self, test_case_id: str, model_id: str, reason: str) -> None:
        self._log.error(
            "judge.scoring_failed",
            test_case_id=test_case_id,
            model_id=model_id,
            reason=reason,
        )

    def judge_response_unparseable(
        self, test_case_id: str, model_id: str, preview: str
    ) -> None:
        self._log.warning(
            "judge.response_unparseable",
            test_case_id=test_case_id,
            model_id=model_id,
            preview=preview,
        )
