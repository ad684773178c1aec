"""InferenceGateway port — the request/response/stream contract of the model API."""

from collections.abc import AsyncIterator
from typing import Protocol

from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.core.cancellation import CancellationToken
from benchmaker.gateway.domain.catalog import ModelInfo
from benchmaker.gateway.domain.messages import ChatMessage, Completion, StreamChunk


class InferenceGateway(Protocol):
    """Port for an external chat-completion API.

    Implementations raise GatewayRequestError on transport or API failure and
    RunCancelledError when ``cancel_token`` fires while a call is in flight.
    ``parameters`` are sent as given; callers apply ``effective()`` first.
    """

    async def fetch_models(self) -> list[ModelInfo]: ...

    async def chat_completion(
        self,
        model: str,
        messages: list[ChatMessage],
        parameters: ModelParameters,
        cancel_token: CancellationToken | None = None,
    ) -> Completion: ...

    def stream_chat_completion(
        self,
        model: str,
        messages: list[ChatMessage],
        parameters: ModelParameters,
        cancel_token: CancellationToken | None = None,
    ) -> AsyncIterator[StreamChunk]: ...
