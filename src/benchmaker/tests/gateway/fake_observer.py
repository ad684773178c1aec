"""FakeGatewayObserver — records gateway events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestCompletedEvent:
    model: str
    stream: bool
    duration_ms: int
    completion_tokens: int | None


@dataclass(frozen=True)
class RequestFailedEvent:
    model: str
    stream: bool
    reason: str


class FakeGatewayObserver:
    def __init__(self) -> None:
        self.started: list[tuple[str, bool]] = []
        self.completed: list[RequestCompletedEvent] = []
        self.failed: list[RequestFailedEvent] = []
        self.catalog_sizes: list[int] = []

    def gateway_request_started(self, model: str, stream: bool) -> None:
        self.started.append((model, stream))

    def gateway_request_completed(
        self, model: str, stream: bool, duration_ms: int, completion_tokens: int | None
    ) -> None:
        self.completed.append(
            RequestCompletedEvent(
                model=model,
                stream=stream,
                duration_ms=duration_ms,
                completion_tokens=completion_tokens,
            )
        )

    def gateway_request_failed(self, model: str, stream: bool, reason: str) -> None:
        self.failed.append(RequestFailedEvent(model=model, stream=stream, reason=reason))

    def gateway_catalog_fetched(self, num_models: int) -> None:
        self.catalog_sizes.append(num_models)
