"""Structlog implementation of the GatewayObserver port."""

import structlog


class StructlogGatewayObserver:
    """Logs gateway request events at debug level; failures as warnings.

    Satisfies the GatewayObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def gateway_request_started(self, model: str, stream: bool) -> None:
        self._log.debug("gateway.request.started", model=model, stream=stream)

    def gateway_request_completed(
        self, model: str, stream: bool, duration_ms: int, completion_tokens: int | None
    ) -> None:
        self._log.debug(
            "gateway.request.completed",
            model=model,
            stream=stream,
            duration_ms=duration_ms,
            completion_tokens=completion_tokens,
        )

    def gateway_request_failed(self, model: str, stream: bool, reason: str) -> None:
        self._log.warning(
            "gateway.request.failed", model=model, stream=stream, reason=reason
        )

    def gateway_catalog_fetched(self, num_models: int) -> None:
        self._log.info("gateway.catalog.fetched", num_models=num_models)
