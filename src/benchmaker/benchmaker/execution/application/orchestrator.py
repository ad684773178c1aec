"""ExecutionOrchestrator — runs a suite against a set of models and scores every response."""

import asyncio
import functools
import time

from benchmaker.config.domain.execution import ExecutionConfig
from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.core.cancellation import CancellationToken
from benchmaker.core.errors import RunCancelledError
from benchmaker.execution.application.task_runner import BoundedTaskRunner
from benchmaker.execution.domain.observer import ExecutionObserver
from benchmaker.execution.domain.result import ExecutionStatus, RunResult
from benchmaker.execution.domain.store import ResultStore
from benchmaker.gateway.domain.catalog import ModelPricing
from benchmaker.gateway.domain.gateway import InferenceGateway
from benchmaker.gateway.domain.messages import ChatMessage, TokenUsage
from benchmaker.scoring.application.dispatcher import ScoringDispatcher
from benchmaker.suite.domain.suite import TestSuite
from benchmaker.suite.domain.test_case import TestCase


class ExecutionOrchestrator:
    """Executes one run: every (test case, model) pair, bounded and cancellable.

    The orchestrator is free of infrastructure dependencies; it receives the
    gateway, store and dispatcher so they can be swapped for testing.
    """

    def __init__(
        self,
        gateway: InferenceGateway,
        store: ResultStore,
        dispatcher: ScoringDispatcher,
        observer: ExecutionObserver,
        config: ExecutionConfig | None = None,
        pricing: dict[str, ModelPricing] | None = None,
        judge_model: str | None = None,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._dispatcher = dispatcher
        self._observer = observer
        self._config = config or ExecutionConfig()
        self._pricing = pricing or {}
        self._judge_model = judge_model

    async def execute_run(
        self,
        suite: TestSuite,
        models: list[str],
        parameters: ModelParameters,
        cancel_token: CancellationToken | None = None,
    ) -> RunResult:
        """Execute the run and return it sealed.

        Never raises for per-pair failures or cancellation: failed pairs are
        recorded as failed, and a cancelled run is sealed with whatever
        reached a terminal state, the rest left idle or cancelled.
        Repeated model ids are run once.
        """
        token = cancel_token or CancellationToken()
        models = list(dict.fromkeys(models))
        run = self._store.create_run(
            suite=suite,
            models=models,
            parameters=parameters,
            judge_model=self._judge_model,
        )
        self._observer.run_started(
            run_id=run.id,
            suite_id=suite.id,
            total_tasks=len(run.results),
            model_ids=list(models),
            max_concurrent=self._config.max_concurrent,
        )
        started_at = time.monotonic()

        sent = parameters.effective()
        tasks = [
            functools.partial(self._execute_pair, run.id, suite, case, model, sent, token)
            for case in suite.test_cases
            for model in models
        ]
        runner = BoundedTaskRunner(
            max_concurrent=self._config.max_concurrent, observer=self._observer
        )
        was_cancelled = False
        try:
            await runner.run(tasks, cancel_token=token, run_id=run.id)
        except RunCancelledError:
            was_cancelled = True

        sealed = self._store.seal_run(run.id, cancelled=was_cancelled)
        self._observer.run_completed(
            run_id=run.id,
            completed=sealed.count(ExecutionStatus.COMPLETED),
            failed=sealed.count(ExecutionStatus.FAILED),
            cancelled=sealed.count(ExecutionStatus.CANCELLED),
            elapsed_seconds=time.monotonic() - started_at,
            was_cancelled=was_cancelled,
        )
        return sealed

    async def _execute_pair(
        self,
        run_id: str,
        suite: TestSuite,
        test_case: TestCase,
        model: str,
        parameters: ModelParameters,
        token: CancellationToken,
    ) -> None:
        """Generate, record and score one response.

        Cancellation marks the pair cancelled and propagates; any other
        failure marks it failed and is absorbed here.
        """
        key = {"run_id": run_id, "test_case_id": test_case.id, "model_id": model}
        self._store.update_result(**key, status=ExecutionStatus.RUNNING)
        self._observer.result_started(**key)

        messages: list[ChatMessage] = []
        if suite.system_prompt.strip():
            messages.append(ChatMessage(role="system", content=suite.system_prompt))
        messages.append(ChatMessage(role="user", content=test_case.prompt))

        started = time.monotonic()
        try:
            response, usage = await self._generate(key, model, messages, parameters, token)
            latency_ms = int((time.monotonic() - started) * 1000)
            self._store.update_result(
                **key,
                status=ExecutionStatus.COMPLETED,
                response=response,
                latency_ms=latency_ms,
                token_usage=usage,
                cost=self._cost(model, usage),
            )
            score = await self._dispatcher.score(
                test_case,
                response,
                judge_system_prompt=suite.judge_system_prompt,
                cancel_token=token,
                model_id=model,
            )
            self._store.set_score(**key, score=score)
            self._observer.result_completed(
                **key, latency_ms=latency_ms, score=score.score
            )
        except RunCancelledError:
            self._store.update_result(**key, status=ExecutionStatus.CANCELLED)
            self._observer.result_cancelled(**key)
            raise
        except Exception as exc:
            reason = str(exc)
            self._store.update_result(**key, status=ExecutionStatus.FAILED, error=reason)
            self._observer.result_failed(**key, reason=reason)

    async def _generate(
        self,
        key: dict[str, str],
        model: str,
        messages: list[ChatMessage],
        parameters: ModelParameters,
        token: CancellationToken,
    ) -> tuple[str, TokenUsage | None]:
        """Stream a completion, retrying when the model returns nothing.

        Each attempt streams first, then tries a non-streaming call if the
        stream was empty. Retries wait ``backoff_base_seconds * attempt``.
        After the last retry an empty response is returned as-is.
        """
        retry = self._config.empty_response
        streamed = ""
        usage: TokenUsage | None = None

        for attempt in range(retry.max_retries + 1):
            streamed = ""
            self._store.update_result(**key, streamed_content="")
            stream = self._gateway.stream_chat_completion(
                model=model, messages=messages, parameters=parameters, cancel_token=token
            )
            async for chunk in stream:
                if chunk.content:
                    streamed += chunk.content
                    self._store.update_result(**key, streamed_content=streamed)
                if chunk.usage is not None:
                    usage = chunk.usage
            if streamed.strip():
                return streamed, usage

            fallback = await self._fallback(model, messages, parameters, token)
            if fallback is not None and fallback[0].strip():
                self._store.update_result(**key, streamed_content=fallback[0])
                return fallback[0], fallback[1] or usage

            if attempt < retry.max_retries:
                backoff = retry.backoff_base_seconds * (attempt + 1)
                self._observer.empty_response_retry(
                    **key, attempt=attempt + 1, backoff_seconds=backoff
                )
                await token.guard(asyncio.sleep(backoff))

        return streamed, usage

    async def _fallback(
        self,
        model: str,
        messages: list[ChatMessage],
        parameters: ModelParameters,
        token: CancellationToken,
    ) -> tuple[str, TokenUsage | None] | None:
        """Non-streaming attempt; its failures count as an empty response."""
        try:
            completion = await self._gateway.chat_completion(
                model=model, messages=messages, parameters=parameters, cancel_token=token
            )
        except RunCancelledError:
            raise
        except Exception:
            return None
        return completion.content, completion.usage

    def _cost(self, model: str, usage: TokenUsage | None) -> float | None:
        pricing = self._pricing.get(model)
        if pricing is None or usage is None:
            return None
        return pricing.cost_for(usage)
