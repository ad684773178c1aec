"""Tests for LiteLLMGateway infrastructure implementation."""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from benchmaker.config.domain.gateway import GatewayConfig
from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.core.cancellation import CancellationToken
from benchmaker.core.errors import RunCancelledError
from benchmaker.gateway.domain.messages import ChatMessage
from benchmaker.gateway.infrastructure.errors import GatewayRequestError
from benchmaker.gateway.infrastructure.litellm_gateway import LiteLLMGateway
from tests.gateway.fake_observer import FakeGatewayObserver

_ACOMPLETION = "benchmaker.gateway.infrastructure.litellm_gateway.litellm.acompletion"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_gateway(
    app_url: str | None = None,
) -> tuple[LiteLLMGateway, FakeGatewayObserver]:
    observer = FakeGatewayObserver()
    config = GatewayConfig(
        api_key="sk-test",
        base_url="https://openrouter.ai/api/v1",
        app_title="bench-tests",
        app_url=app_url,
    )
    return LiteLLMGateway(config=config, observer=observer), observer


def _messages() -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content="Be brief."),
        ChatMessage(role="user", content="What is 2 + 2?"),
    ]


def _make_response(content: str | None, prompt: int = 10, completion: int = 3) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage = MagicMock(
        prompt_tokens=prompt, completion_tokens=completion, total_tokens=prompt + completion
    )
    return response


def _make_chunk(content: str | None, usage: Any = None) -> MagicMock:
    chunk = MagicMock()
    if content is None:
        chunk.choices = []
    else:
        chunk.choices = [MagicMock()]
        chunk.choices[0].delta.content = content
    chunk.usage = usage
    return chunk


async def _stream(*chunks: MagicMock):
    for chunk in chunks:
        yield chunk


class _ClosableStream:
    """Async iterator over chunks that records whether aclose() was called."""

    def __init__(
        self, chunks: list[MagicMock], error: Exception | None = None, hang: bool = False
    ) -> None:
        self._chunks = list(chunks)
        self._error = error
        self._hang = hang
        self.closed = False

    def __aiter__(self) -> "_ClosableStream":
        return self

    async def __anext__(self) -> MagicMock:
        if self._chunks:
            return self._chunks.pop(0)
        if self._error is not None:
            raise self._error
        if self._hang:
            await asyncio.sleep(60)
        raise StopAsyncIteration

    async def aclose(self) -> None:
        self.closed = True


async def _collect(gateway: LiteLLMGateway, **kwargs: Any) -> list:
    return [
        c
        async for c in gateway.stream_chat_completion(
            model="openai/gpt-4o-mini",
            messages=_messages(),
            parameters=ModelParameters(),
            **kwargs,
        )
    ]


# ---------------------------------------------------------------------------
# Non-streaming
# ---------------------------------------------------------------------------


class TestChatCompletion:
    """chat_completion returns content and usage from the LiteLLM response."""

    async def test_returns_content_and_usage(self) -> None:
        gateway, _ = _make_gateway()
        with patch(_ACOMPLETION, new=AsyncMock(return_value=_make_response("4"))):
            completion = await gateway.chat_completion(
                model="openai/gpt-4o-mini",
                messages=_messages(),
                parameters=ModelParameters(),
            )

        assert completion.content == "4"
        assert completion.usage is not None
        assert completion.usage.prompt_tokens == 10
        assert completion.usage.completion_tokens == 3

    async def test_none_content_becomes_empty_string(self) -> None:
        gateway, _ = _make_gateway()
        with patch(_ACOMPLETION, new=AsyncMock(return_value=_make_response(None))):
            completion = await gateway.chat_completion(
                model="m", messages=_messages(), parameters=ModelParameters()
            )

        assert completion.content == ""

    async def test_routes_model_through_provider_prefix(self) -> None:
        gateway, _ = _make_gateway()
        mock = AsyncMock(return_value=_make_response("4"))
        with patch(_ACOMPLETION, new=mock):
            await gateway.chat_completion(
                model="openai/gpt-4o-mini",
                messages=_messages(),
                parameters=ModelParameters(temperature=0.3, max_tokens=64),
            )

        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "openrouter/openai/gpt-4o-mini"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 64
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["messages"][0] == {"role": "system", "content": "Be brief."}
        assert kwargs["extra_headers"]["X-Title"] == "bench-tests"

    async def test_referer_header_sent_when_app_url_configured(self) -> None:
        gateway, _ = _make_gateway(app_url="https://bench.example")
        mock = AsyncMock(return_value=_make_response("4"))
        with patch(_ACOMPLETION, new=mock):
            await gateway.chat_completion(
                model="m", messages=_messages(), parameters=ModelParameters()
            )

        assert mock.call_args.kwargs["extra_headers"]["HTTP-Referer"] == "https://bench.example"

    async def test_failure_raises_gateway_error_and_emits_failed(self) -> None:
        gateway, observer = _make_gateway()
        with patch(_ACOMPLETION, new=AsyncMock(side_effect=RuntimeError("upstream 502"))):
            with pytest.raises(GatewayRequestError, match="upstream 502"):
                await gateway.chat_completion(
                    model="m", messages=_messages(), parameters=ModelParameters()
                )

        assert len(observer.failed) == 1
        assert observer.failed[0].stream is False
        assert observer.completed == []

    async def test_emits_started_and_completed(self) -> None:
        gateway, observer = _make_gateway()
        with patch(_ACOMPLETION, new=AsyncMock(return_value=_make_response("4"))):
            await gateway.chat_completion(
                model="m", messages=_messages(), parameters=ModelParameters()
            )

        assert observer.started == [("m", False)]
        assert observer.completed[0].completion_tokens == 3

    async def test_cancellation_abandons_call(self) -> None:
        gateway, observer = _make_gateway()
        token = CancellationToken()

        async def hang(**_: Any) -> None:
            await asyncio.sleep(60)

        async def cancel_soon() -> None:
            await asyncio.sleep(0.01)
            token.cancel()

        with patch(_ACOMPLETION, new=hang):
            canceller = asyncio.create_task(cancel_soon())
            with pytest.raises(RunCancelledError):
                await gateway.chat_completion(
                    model="m",
                    messages=_messages(),
                    parameters=ModelParameters(),
                    cancel_token=token,
                )
            await canceller

        assert observer.failed == []


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------


class TestStreamChatCompletion:
    """stream_chat_completion yields text deltas and the trailing usage."""

    async def test_yields_deltas_in_order(self) -> None:
        gateway, _ = _make_gateway()
        stream = _stream(_make_chunk("Hel"), _make_chunk("lo"), _make_chunk("!"))
        with patch(_ACOMPLETION, new=AsyncMock(return_value=stream)):
            chunks = await _collect(gateway)

        assert "".join(c.content for c in chunks) == "Hello!"

    async def test_requests_stream_with_usage(self) -> None:
        gateway, _ = _make_gateway()
        mock = AsyncMock(return_value=_stream(_make_chunk("x")))
        with patch(_ACOMPLETION, new=mock):
            await _collect(gateway)

        assert mock.call_args.kwargs["stream"] is True
        assert mock.call_args.kwargs["stream_options"] == {"include_usage": True}

    async def test_usage_chunk_is_forwarded(self) -> None:
        gateway, observer = _make_gateway()
        usage = MagicMock(prompt_tokens=12, completion_tokens=5, total_tokens=17)
        stream = _stream(_make_chunk("ok"), _make_chunk(None, usage=usage))
        with patch(_ACOMPLETION, new=AsyncMock(return_value=stream)):
            chunks = await _collect(gateway)

        assert chunks[-1].usage is not None
        assert chunks[-1].usage.total_tokens == 17
        assert observer.completed[0].completion_tokens == 5

    async def test_empty_deltas_are_skipped(self) -> None:
        gateway, _ = _make_gateway()
        stream = _stream(_make_chunk(""), _make_chunk(None), _make_chunk("a"))
        with patch(_ACOMPLETION, new=AsyncMock(return_value=stream)):
            chunks = await _collect(gateway)

        assert [c.content for c in chunks] == ["a"]

    async def test_mid_stream_failure_raises_gateway_error(self) -> None:
        gateway, observer = _make_gateway()

        async def broken():
            yield _make_chunk("partial")
            raise RuntimeError("connection reset")

        with patch(_ACOMPLETION, new=AsyncMock(return_value=broken())):
            with pytest.raises(GatewayRequestError, match="connection reset"):
                await _collect(gateway)

        assert observer.failed[0].stream is True

    async def test_stream_closed_after_mid_stream_failure(self) -> None:
        gateway, _ = _make_gateway()
        stream = _ClosableStream([_make_chunk("partial")], error=RuntimeError("reset"))

        with patch(_ACOMPLETION, new=AsyncMock(return_value=stream)):
            with pytest.raises(GatewayRequestError):
                await _collect(gateway)

        assert stream.closed is True

    async def test_stream_closed_when_consumer_stops_early(self) -> None:
        gateway, _ = _make_gateway()
        stream = _ClosableStream([_make_chunk("a"), _make_chunk("b"), _make_chunk("c")])

        with patch(_ACOMPLETION, new=AsyncMock(return_value=stream)):
            chunks = gateway.stream_chat_completion(
                model="openai/gpt-4o-mini", messages=_messages(), parameters=ModelParameters()
            )
            first = await anext(chunks)
            await chunks.aclose()

        assert first.content == "a"
        assert stream.closed is True

    async def test_stream_closed_on_cancellation(self) -> None:
        gateway, _ = _make_gateway()
        token = CancellationToken()
        stream = _ClosableStream([_make_chunk("a")], hang=True)

        async def cancel_soon() -> None:
            await asyncio.sleep(0.01)
            token.cancel()

        with patch(_ACOMPLETION, new=AsyncMock(return_value=stream)):
            canceller = asyncio.create_task(cancel_soon())
            with pytest.raises(RunCancelledError):
                await _collect(gateway, cancel_token=token)
            await canceller

        assert stream.closed is True

    async def test_cancelled_token_stops_before_request(self) -> None:
        gateway, _ = _make_gateway()
        token = CancellationToken()
        token.cancel()
        mock = AsyncMock(return_value=_stream(_make_chunk("x")))

        with patch(_ACOMPLETION, new=mock):
            with pytest.raises(RunCancelledError):
                await _collect(gateway, cancel_token=token)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self) -> Any:
        return self._payload


def _fake_client(response: _FakeResponse, calls: list[dict[str, Any]]) -> type:
    class FakeAsyncClient:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            pass

        async def __aenter__(self) -> "FakeAsyncClient":
            return self

        async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
            return False

        async def get(self, url: str, headers: dict[str, str] | None = None) -> _FakeResponse:
            calls.append({"url": url, "headers": headers})
            return response

    return FakeAsyncClient


class TestFetchModels:
    """fetch_models parses the catalog and its string prices."""

    async def test_parses_models_and_pricing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        payload = {
            "data": [
                {
                    "id": "openai/gpt-4o-mini",
                    "name": "GPT-4o mini",
                    "context_length": 128000,
                    "pricing": {"prompt": "0.00000015", "completion": "0.0000006"},
                },
                {"id": "free/model", "pricing": {"prompt": "0", "completion": "0"}},
                {"id": "odd/model", "pricing": {"prompt": "n/a"}},
            ]
        }
        calls: list[dict[str, Any]] = []
        monkeypatch.setattr(httpx, "AsyncClient", _fake_client(_FakeResponse(200, payload), calls))
        gateway, observer = _make_gateway()

        models = await gateway.fetch_models()

        assert [m.id for m in models] == ["openai/gpt-4o-mini", "free/model", "odd/model"]
        assert models[0].pricing is not None
        assert models[0].pricing.prompt == pytest.approx(0.00000015)
        assert models[0].context_length == 128000
        assert models[1].name == "free/model"
        assert models[2].pricing is None
        assert observer.catalog_sizes == [3]
        assert calls[0]["url"] == "https://openrouter.ai/api/v1/models"
        assert calls[0]["headers"]["Authorization"] == "Bearer sk-test"

    async def test_error_status_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            httpx, "AsyncClient", _fake_client(_FakeResponse(401, {"error": "nope"}), [])
        )
        gateway, _ = _make_gateway()

        with pytest.raises(GatewayRequestError) as exc_info:
            await gateway.fetch_models()

        assert exc_info.value.status_code == 401
