"""Observer port for gateway requests."""

from typing import Protocol


class GatewayObserver(Protocol):
    def gateway_request_started(self, model: str, stream: bool) -> None: ...

    def gateway_request_completed(
        self, model: str, stream: bool, duration_ms: int, completion_tokens: int | None
    ) -> None: ...

    def gateway_request_failed(self, model: str, stream: bool, reason: str) -> None: ...

    def gateway_catalog_fetched(self, num_models: int) -> None: ...
