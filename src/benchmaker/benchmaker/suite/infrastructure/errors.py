"""Error types raised by suite infrastructure."""

from benchmaker.core.errors import BenchmakerError


class SuiteLoadError(BenchmakerError):
    """Raised when a test suite file cannot be read or validated."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load test suite: {reason}")
