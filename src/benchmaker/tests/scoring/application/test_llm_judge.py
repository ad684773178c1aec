"""Tests for LLMJudgeScorer."""

import pytest

from benchmaker.config.domain.judge import JudgeConfig
from benchmaker.core.cancellation import CancellationToken
from benchmaker.core.errors import RunCancelledError
from benchmaker.gateway.infrastructure.errors import GatewayRequestError
from benchmaker.scoring.application.llm_judge import (
    LLMJudgeScorer,
    build_system_prompt,
    build_user_message,
)
from tests.gateway.fake_gateway import FakeGateway
from tests.scoring.fake_observer import FakeJudgeObserver

JUDGE = "judge/model"


def _make_scorer(
    gateway: FakeGateway, temperature: float = 0.1
) -> tuple[LLMJudgeScorer, FakeJudgeObserver]:
    observer = FakeJudgeObserver()
    scorer = LLMJudgeScorer(
        gateway=gateway,
        config=JudgeConfig(model=JUDGE, temperature=temperature, max_tokens=300),
        observer=observer,
    )
    return scorer, observer


class TestPromptConstruction:
    def test_addendum_appended_under_heading(self) -> None:
        prompt = build_system_prompt("Penalize answers over 50 words.")

        assert "## Additional Benchmark Instructions" in prompt
        assert prompt.rstrip().endswith("Penalize answers over 50 words.")

    def test_blank_addendum_leaves_prompt_unchanged(self) -> None:
        assert build_system_prompt("   ") == build_system_prompt(None)

    def test_user_message_includes_reference_when_given(self) -> None:
        message = build_user_message("Task?", "Answer.", "Reference.")

        assert "## Original Task\nTask?" in message
        assert "## Model Response\nAnswer." in message
        assert "## Reference Answer\nReference." in message

    def test_user_message_omits_reference_when_missing(self) -> None:
        assert "## Reference Answer" not in build_user_message("Task?", "Answer.", None)


class TestLLMJudgeScorer:
    """The scorer sends one judge request and parses whatever comes back."""

    async def test_json_verdict_is_normalized(self) -> None:
        gateway = FakeGateway(
            completion_replies={JUDGE: '{"score": 85, "reasoning": "Mostly right."}'}
        )
        scorer, observer = _make_scorer(gateway)

        result = await scorer.score(
            prompt="Explain X", response="X is ...", test_case_id="tc-1", model_id="m"
        )

        assert result.score == pytest.approx(0.85)
        assert result.confidence == pytest.approx(0.9)
        assert result.notes == "Mostly right."
        assert observer.started[0].judge_model == JUDGE
        assert observer.completed[0].test_case_id == "tc-1"
        assert observer.completed[0].score == pytest.approx(0.85)

    async def test_request_uses_judge_parameters(self) -> None:
        gateway = FakeGateway(completion_replies={JUDGE: "Score: 7/10"})
        scorer, _ = _make_scorer(gateway, temperature=0.05)

        await scorer.score(prompt="p", response="r", judge_system_prompt="Be strict.")

        call = gateway.calls[0]
        assert call.model == JUDGE
        assert call.stream is False
        assert call.parameters.temperature == 0.05
        assert call.parameters.max_tokens == 300
        assert call.messages[0].role == "system"
        assert "Be strict." in call.messages[0].content

    async def test_empty_response_scores_zero_without_calling_judge(self) -> None:
        gateway = FakeGateway()
        scorer, observer = _make_scorer(gateway)

        result = await scorer.score(prompt="p", response="   ")

        assert result.score == 0.0
        assert result.confidence == 1.0
        assert gateway.calls == []
        assert observer.started == []

    async def test_gateway_failure_scores_zero_with_zero_confidence(self) -> None:
        gateway = FakeGateway(
            errors={JUDGE: GatewayRequestError(reason="upstream down", status_code=503)}
        )
        scorer, observer = _make_scorer(gateway)

        result = await scorer.score(prompt="p", response="r", test_case_id="tc")

        assert result.score == 0.0
        assert result.confidence == 0.0
        assert result.notes is not None
        assert result.notes.startswith("Judge evaluation failed:")
        assert len(observer.failed) == 1
        assert observer.completed == []

    async def test_unparseable_reply_is_reported(self) -> None:
        gateway = FakeGateway(completion_replies={JUDGE: "I cannot decide."})
        scorer, observer = _make_scorer(gateway)

        result = await scorer.score(prompt="p", response="r")

        assert result.score == 0.0
        assert result.confidence == 0.0
        assert observer.unparseable[0].preview == "I cannot decide."

    async def test_cancellation_propagates(self) -> None:
        gateway = FakeGateway(completion_replies={JUDGE: '{"score": 90}'})
        scorer, _ = _make_scorer(gateway)
        token = CancellationToken()
        token.cancel()

        with pytest.raises(RunCancelledError):
            await scorer.score(prompt="p", response="r", cancel_token=token)

    async def test_model_property_exposes_judge_model(self) -> None:
        scorer, _ = _make_scorer(FakeGateway())
        assert scorer.model == JUDGE
