"""CodeArenaOrchestrator — one code-generation prompt raced across several models."""

import functools
import time

from benchmaker.arena.domain.code_extractor import (
    DEFAULT_FRONTEND_SYSTEM_PROMPT,
    extract_code_from_response,
    extract_code_from_streaming_content,
)
from benchmaker.arena.domain.observer import ArenaObserver
from benchmaker.arena.domain.output import CodeArenaRun
from benchmaker.arena.domain.store import ArenaStore
from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.core.cancellation import CancellationToken
from benchmaker.core.errors import RunCancelledError
from benchmaker.execution.application.task_runner import BoundedTaskRunner
from benchmaker.execution.domain.result import ExecutionStatus
from benchmaker.gateway.domain.catalog import ModelPricing
from benchmaker.gateway.domain.gateway import InferenceGateway
from benchmaker.gateway.domain.messages import ChatMessage, TokenUsage
from benchmaker.scoring.application.llm_judge import LLMJudgeScorer

DEFAULT_MAX_CONCURRENT = 5

CODE_JUDGE_INSTRUCTIONS = """\
The response is a single-page HTML/CSS/JavaScript document. Weigh these criteria:
1. Visual accuracy (40%): layout, colors, typography and overall design match the request.
2. Code quality (30%): semantic HTML5, organized CSS, readable JavaScript, no obvious errors.
3. Functionality (20%): interactive elements and scripts work as requested.
4. Responsiveness (10%): the layout adapts to different screen sizes."""


def judged_code(code: str) -> str:
    return f"```html\n{code}\n```" if code.strip() else ""


class CodeArenaOrchestrator:
    """Streams the prompt to every model, extracts the code, and optionally judges it.

    Outputs are keyed by model id alone. There is no empty-response retry:
    an empty reply is recorded and judged as "no code".
    """

    def __init__(
        self,
        gateway: InferenceGateway,
        store: ArenaStore,
        observer: ArenaObserver,
        judge: LLMJudgeScorer | None = None,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        pricing: dict[str, ModelPricing] | None = None,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._observer = observer
        self._judge = judge
        self._max_concurrent = max_concurrent
        self._pricing = pricing or {}

    async def execute(
        self,
        prompt: str,
        models: list[str],
        parameters: ModelParameters,
        system_prompt: str = DEFAULT_FRONTEND_SYSTEM_PROMPT,
        cancel_token: CancellationToken | None = None,
    ) -> CodeArenaRun:
        """Run the arena and return it sealed; never raises for per-model failures."""
        token = cancel_token or CancellationToken()
        models = list(dict.fromkeys(models))
        run = self._store.create_run(
            prompt=prompt,
            system_prompt=system_prompt,
            models=models,
            parameters=parameters,
            judge_model=self._judge.model if self._judge else None,
        )
        self._observer.arena_run_started(
            run_id=run.id, model_ids=models, max_concurrent=self._max_concurrent
        )
        started_at = time.monotonic()

        messages: list[ChatMessage] = []
        if system_prompt.strip():
            messages.append(ChatMessage(role="system", content=system_prompt))
        messages.append(ChatMessage(role="user", content=prompt))

        sent = parameters.effective()
        tasks = [
            functools.partial(self._execute_model, run.id, prompt, model, messages, sent, token)
            for model in models
        ]
        runner = BoundedTaskRunner(max_concurrent=self._max_concurrent, observer=self._observer)
        was_cancelled = False
        try:
            await runner.run(tasks, cancel_token=token, run_id=run.id)
        except RunCancelledError:
            was_cancelled = True

        sealed = self._store.seal_run(run.id, cancelled=was_cancelled)
        self._observer.arena_run_completed(
            run_id=run.id,
            completed=sealed.count(ExecutionStatus.COMPLETED),
            failed=sealed.count(ExecutionStatus.FAILED),
            cancelled=sealed.count(ExecutionStatus.CANCELLED),
            elapsed_seconds=time.monotonic() - started_at,
            was_cancelled=was_cancelled,
        )
        return sealed

    async def _execute_model(
        self,
        run_id: str,
        prompt: str,
        model: str,
        messages: list[ChatMessage],
        parameters: ModelParameters,
        token: CancellationToken,
    ) -> None:
        key = {"run_id": run_id, "model_id": model}
        self._store.update_output(**key, status=ExecutionStatus.RUNNING)
        started = time.monotonic()
        try:
            streamed = ""
            usage: TokenUsage | None = None
            stream = self._gateway.stream_chat_completion(
                model=model, messages=messages, parameters=parameters, cancel_token=token
            )
            async for chunk in stream:
                if chunk.content:
                    streamed += chunk.content
                    self._store.update_output(
                        **key,
                        streamed_content=streamed,
                        extracted_code=extract_code_from_streaming_content(streamed),
                    )
                if chunk.usage is not None:
                    usage = chunk.usage

            latency_ms = int((time.monotonic() - started) * 1000)
            code = extract_code_from_response(streamed)
            pricing = self._pricing.get(model)
            cost = None
            if pricing is not None and usage is not None:
                cost = pricing.cost_for(usage)
            self._store.update_output(
                **key,
                status=ExecutionStatus.COMPLETED,
                raw_response=streamed,
                extracted_code=code,
                latency_ms=latency_ms,
                token_usage=usage,
                cost=cost,
            )
            self._observer.arena_output_completed(
                **key, latency_ms=latency_ms, code_chars=len(code)
            )

            if self._judge is not None:
                score = await self._judge.score(
                    prompt=prompt,
                    response=judged_code(code),
                    judge_system_prompt=CODE_JUDGE_INSTRUCTIONS,
                    cancel_token=token,
                    model_id=model,
                )
                self._store.update_output(**key, score=score)
        except RunCancelledError:
            self._store.update_output(**key, status=ExecutionStatus.CANCELLED)
            self._observer.arena_output_cancelled(**key)
            raise
        except Exception as exc:
            reason = str(exc)
            self._store.update_output(**key, status=ExecutionStatus.FAILED, error=reason)
            self._observer.arena_output_failed(**key, reason=reason)
