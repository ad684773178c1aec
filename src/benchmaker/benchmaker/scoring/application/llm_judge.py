"""LLMJudgeScorer — scores a response by asking a judge model for a 0-100 verdict."""

import time

from benchmaker.config.domain.judge import JudgeConfig
from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.core.cancellation import CancellationToken
from benchmaker.core.errors import RunCancelledError
from benchmaker.gateway.domain.gateway import InferenceGateway
from benchmaker.gateway.domain.messages import ChatMessage
from benchmaker.scoring.domain.judge_parser import parse_judge_response
from benchmaker.scoring.domain.observer import JudgeObserver
from benchmaker.scoring.domain.result import ScoringResult

_SYSTEM_PROMPT = """\
You are an impartial evaluator grading a model's response to a task. Judge \
accuracy against the task and the reference answer when one is given, then \
completeness, then adherence to any stated format or constraints. Do not \
reward length or confident tone on their own.

Score the response on a 0-100 integer scale:

90-100 - Fully correct and complete. Meets every requirement of the task; any \
extra content is accurate and relevant.
70-89 - Correct on the essentials with minor omissions or imprecision that do \
not change the outcome.
40-69 - Partially correct. Gets some key points right but misses or garbles \
others a reader would need.
10-39 - Mostly incorrect or off-task, with only fragments of a correct answer.
0-9 - Wrong, empty, refuses without cause, or contradicts the reference answer.

## Output Format

Respond ONLY with a JSON object:
{"score": <integer 0-100>, "reasoning": "<one or two sentences>"}
"""

_ADDENDUM_HEADING = "## Additional Benchmark Instructions"


def build_system_prompt(judge_system_prompt: str | None = None) -> str:
    if judge_system_prompt and judge_system_prompt.strip():
        return f"{_SYSTEM_PROMPT}\n{_ADDENDUM_HEADING}\n{judge_system_prompt.strip()}\n"
    return _SYSTEM_PROMPT


def build_user_message(prompt: str, response: str, expected_output: str | None) -> str:
    sections = [
        f"## Original Task\n{prompt}",
        f"## Model Response\n{response}",
    ]
    if expected_output and expected_output.strip():
        sections.append(f"## Reference Answer\n{expected_output}")
    sections.append("Evaluate the model response and reply with the JSON object only.")
    return "\n\n".join(sections)


class LLMJudgeScorer:
    """Asks the configured judge model to grade a response.

    The judge reply goes through the parser cascade, so a judge that ignores
    the requested JSON shape still yields a score where one can be found.
    """

    def __init__(
        self,
        gateway: InferenceGateway,
        config: JudgeConfig,
        observer: JudgeObserver,
    ) -> None:
        self._gateway = gateway
        self._config = config
        self._observer = observer
        self._parameters = ModelParameters(
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    @property
    def model(self) -> str:
        return self._config.model

    async def score(
        self,
        prompt: str,
        response: str,
        expected_output: str | None = None,
        judge_system_prompt: str | None = None,
        cancel_token: CancellationToken | None = None,
        test_case_id: str = "",
        model_id: str = "",
    ) -> ScoringResult:
        """Return the judge's verdict for ``response``.

        Never raises for judge failures: an unreachable judge yields score 0
        with confidence 0. Cancellation propagates as RunCancelledError.
        """
        if not response.strip():
            return ScoringResult(
                score=0.0, confidence=1.0, raw_score=0.0, max_score=100.0,
                notes="Empty response",
            )

        self._observer.judge_scoring_started(
            test_case_id=test_case_id, model_id=model_id, judge_model=self._config.model
        )
        messages = [
            ChatMessage(role="system", content=build_system_prompt(judge_system_prompt)),
            ChatMessage(
                role="user",
                content=build_user_message(prompt, response, expected_output),
            ),
        ]

        start = time.monotonic()
        try:
            completion = await self._gateway.chat_completion(
                model=self._config.model,
                messages=messages,
                parameters=self._parameters,
                cancel_token=cancel_token,
            )
        except RunCancelledError:
            raise
        except Exception as exc:
            reason = str(exc)
            self._observer.judge_scoring_failed(
                test_case_id=test_case_id, model_id=model_id, reason=reason
            )
            return ScoringResult(
                score=0.0, confidence=0.0, notes=f"Judge evaluation failed: {reason}"
            )
        duration_ms = int((time.monotonic() - start) * 1000)

        result = parse_judge_response(completion.content)
        if result.confidence == 0.0:
            self._observer.judge_response_unparseable(
                test_case_id=test_case_id,
                model_id=model_id,
                preview=completion.content.strip()[:200],
            )
        self._observer.judge_scoring_completed(
            test_case_id=test_case_id,
            model_id=model_id,
            duration_ms=duration_ms,
            score=result.score,
        )
        return result
