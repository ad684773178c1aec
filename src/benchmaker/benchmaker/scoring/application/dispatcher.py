"""ScoringDispatcher — routes a response to the strategy its test case names."""

from typing import TypeAlias
from collections.abc import Callable

from benchmaker.core.cancellation import CancellationToken
from benchmaker.scoring.application.llm_judge import LLMJudgeScorer
from benchmaker.scoring.domain.boolean_match import boolean_match
from benchmaker.scoring.domain.exact_match import exact_match
from benchmaker.scoring.domain.numeric_tolerance import numeric_tolerance
from benchmaker.scoring.domain.regex_match import regex_match
from benchmaker.scoring.domain.result import ScoringResult
from benchmaker.suite.domain.test_case import ScoringMethod, TestCase

SyncStrategy: TypeAlias = Callable[[str, TestCase], ScoringResult]

_STRATEGIES: dict[ScoringMethod, SyncStrategy] = {
    ScoringMethod.EXACT_MATCH: lambda r, tc: exact_match(r, tc.expected_output),
    ScoringMethod.REGEX_MATCH: lambda r, tc: regex_match(r, tc.expected_output),
    ScoringMethod.NUMERIC_TOLERANCE: lambda r, tc: numeric_tolerance(
        r, tc.expected_output, tc.tolerance
    ),
    ScoringMethod.BOOLEAN: lambda r, tc: boolean_match(r, tc.expected_output),
}


class ScoringDispatcher:
    """Scores a response by its test case's method.

    Rule-based strategies are pure and synchronous; llm-judge calls out to the
    judge model. Without a judge, llm-judge test cases are scored as boolean.
    """

    def __init__(self, judge: LLMJudgeScorer | None = None) -> None:
        self._judge = judge

    async def score(
        self,
        test_case: TestCase,
        response: str,
        judge_system_prompt: str | None = None,
        cancel_token: CancellationToken | None = None,
        model_id: str = "",
    ) -> ScoringResult:
        if test_case.scoring_method is ScoringMethod.LLM_JUDGE:
            if self._judge is None:
                fallback = boolean_match(response, test_case.expected_output)
                return fallback.model_copy(
                    update={"notes": f"No judge configured; boolean fallback: {fallback.notes}"}
                )
            return await self._judge.score(
                prompt=test_case.prompt,
                response=response,
                expected_output=test_case.expected_output,
                judge_system_prompt=judge_system_prompt,
                cancel_token=cancel_token,
                test_case_id=test_case.id,
                model_id=model_id,
            )
        return _STRATEGIES[test_case.scoring_method](response, test_case)
