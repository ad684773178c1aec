"""LiteLLMGateway — InferenceGateway backed by LiteLLM, with an httpx model catalog."""

import time
from collections.abc import AsyncIterator, Awaitable
from typing import Any

import httpx
import litellm

from benchmaker.config.domain.gateway import GatewayConfig
from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.core.cancellation import CancellationToken
from benchmaker.core.errors import RunCancelledError
from benchmaker.gateway.domain.catalog import ModelInfo, ModelPricing
from benchmaker.gateway.domain.messages import (
    ChatMessage,
    Completion,
    StreamChunk,
    TokenUsage,
)
from benchmaker.gateway.domain.observer import GatewayObserver
from benchmaker.gateway.infrastructure.errors import GatewayRequestError

litellm.suppress_debug_info = True

_END = object()


class LiteLLMGateway:
    """Sends chat requests through ``litellm.acompletion``.

    Model ids are routed as ``{provider}/{model}`` so that catalog ids such as
    ``openai/gpt-4o-mini`` reach OpenRouter unchanged. Every await on the
    network is raced against the cancellation token.

    Does NOT inherit from InferenceGateway (structural typing via Protocol).
    """

    def __init__(self, config: GatewayConfig, observer: GatewayObserver) -> None:
        self._config = config
        self._observer = observer

    def _headers(self) -> dict[str, str]:
        headers = {"X-Title": self._config.app_title}
        if self._config.app_url:
            headers["HTTP-Referer"] = self._config.app_url
        return headers

    def _request_kwargs(
        self, model: str, messages: list[ChatMessage], parameters: ModelParameters
    ) -> dict[str, Any]:
        return {
            "model": f"{self._config.provider}/{model}",
            "messages": [m.model_dump() for m in messages],
            "temperature": parameters.temperature,
            "top_p": parameters.top_p,
            "max_tokens": parameters.max_tokens,
            "frequency_penalty": parameters.frequency_penalty,
            "presence_penalty": parameters.presence_penalty,
            "api_key": self._config.api_key,
            "api_base": self._config.base_url,
            "timeout": self._config.timeout_seconds,
            "extra_headers": self._headers(),
        }

    async def fetch_models(self) -> list[ModelInfo]:
        """Fetch the model catalog with per-token pricing.

        Raises:
            GatewayRequestError: if the catalog cannot be fetched or decoded.
        """
        url = f"{self._config.base_url.rstrip('/')}/models"
        headers = {"Authorization": f"Bearer {self._config.api_key}", **self._headers()}
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
                resp = await client.get(url, headers=headers)
                if resp.status_code >= 400:
                    raise GatewayRequestError(
                        reason=f"model catalog returned {resp.status_code}: {resp.text}",
                        status_code=resp.status_code,
                    )
                payload = resp.json()
        except GatewayRequestError:
            raise
        except (httpx.HTTPError, ValueError) as exc:
            raise GatewayRequestError(reason=f"model catalog: {exc}") from exc

        models = [_model_info(entry) for entry in payload.get("data") or []]
        self._observer.gateway_catalog_fetched(num_models=len(models))
        return models

    async def chat_completion(
        self,
        model: str,
        messages: list[ChatMessage],
        parameters: ModelParameters,
        cancel_token: CancellationToken | None = None,
    ) -> Completion:
        self._observer.gateway_request_started(model=model, stream=False)
        start = time.monotonic()
        try:
            response = await _guarded(
                cancel_token,
                litellm.acompletion(**self._request_kwargs(model, messages, parameters)),
            )
            content = response.choices[0].message.content or ""
            usage = _usage(getattr(response, "usage", None))
        except RunCancelledError:
            raise
        except Exception as exc:
            reason = str(exc)
            self._observer.gateway_request_failed(model=model, stream=False, reason=reason)
            raise GatewayRequestError(
                reason=reason, status_code=getattr(exc, "status_code", None)
            ) from exc

        self._observer.gateway_request_completed(
            model=model,
            stream=False,
            duration_ms=int((time.monotonic() - start) * 1000),
            completion_tokens=usage.completion_tokens if usage else None,
        )
        return Completion(content=content, usage=usage)

    async def stream_chat_completion(
        self,
        model: str,
        messages: list[ChatMessage],
        parameters: ModelParameters,
        cancel_token: CancellationToken | None = None,
    ) -> AsyncIterator[StreamChunk]:
        self._observer.gateway_request_started(model=model, stream=True)
        start = time.monotonic()
        usage: TokenUsage | None = None
        response: Any = None
        try:
            response = await _guarded(
                cancel_token,
                litellm.acompletion(
                    **self._request_kwargs(model, messages, parameters),
                    stream=True,
                    stream_options={"include_usage": True},
                ),
            )
            iterator = aiter(response)
            while True:
                chunk = await _guarded(cancel_token, _next_or_end(iterator))
                if chunk is _END:
                    break
                delta = _delta_text(chunk)
                chunk_usage = _usage(getattr(chunk, "usage", None))
                if chunk_usage is not None:
                    usage = chunk_usage
                if delta or chunk_usage is not None:
                    yield StreamChunk(content=delta, usage=chunk_usage)
        except RunCancelledError:
            raise
        except Exception as exc:
            reason = str(exc)
            self._observer.gateway_request_failed(model=model, stream=True, reason=reason)
            raise GatewayRequestError(
                reason=reason, status_code=getattr(exc, "status_code", None)
            ) from exc
        finally:
            await _close_stream(response)

        self._observer.gateway_request_completed(
            model=model,
            stream=True,
            duration_ms=int((time.monotonic() - start) * 1000),
            completion_tokens=usage.completion_tokens if usage else None,
        )


async def _guarded(cancel_token: CancellationToken | None, awaitable: Awaitable[Any]) -> Any:
    if cancel_token is None:
        return await awaitable
    return await cancel_token.guard(awaitable)


async def _close_stream(response: Any) -> None:
    # The provider connection stays open until the stream is closed.
    aclose = getattr(response, "aclose", None)
    if aclose is not None:
        await aclose()


async def _next_or_end(iterator: AsyncIterator[Any]) -> Any:
    try:
        return await anext(iterator)
    except StopAsyncIteration:
        return _END


def _delta_text(chunk: Any) -> str:
    choices = getattr(chunk, "choices", None) or []
    if not choices:
        return ""
    delta = getattr(choices[0], "delta", None)
    return (getattr(delta, "content", None) or "") if delta is not None else ""


def _usage(raw: Any) -> TokenUsage | None:
    if raw is None:
        return None
    prompt = getattr(raw, "prompt_tokens", None)
    completion = getattr(raw, "completion_tokens", None)
    if prompt is None or completion is None:
        return None
    total = getattr(raw, "total_tokens", None) or prompt + completion
    return TokenUsage(
        prompt_tokens=int(prompt),
        completion_tokens=int(completion),
        total_tokens=int(total),
    )


def _model_info(entry: dict[str, Any]) -> ModelInfo:
    model_id = str(entry.get("id", ""))
    return ModelInfo(
        id=model_id,
        name=str(entry.get("name") or model_id),
        context_length=entry.get("context_length"),
        pricing=_pricing(entry.get("pricing")),
    )


def _pricing(raw: Any) -> ModelPricing | None:
    """Parse catalog pricing; prices arrive as per-token decimal strings."""
    if not isinstance(raw, dict):
        return None
    try:
        return ModelPricing(
            prompt=float(raw.get("prompt", 0) or 0),
            completion=float(raw.get("completion", 0) or 0),
        )
    except (TypeError, ValueError):
        return None
