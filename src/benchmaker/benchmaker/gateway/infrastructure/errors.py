"""Error types raised by gateway infrastructure."""

from benchmaker.core.errors import BenchmakerError

_RETRIABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})


class GatewayRequestError(BenchmakerError):
    """Raised when the inference API cannot be reached or rejects a request."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(
            f"Failed to complete gateway request: {reason}",
            retriable=status_code in _RETRIABLE_STATUS,
        )
