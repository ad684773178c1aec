"""Base exception class for all benchmaker-specific errors."""


class BenchmakerError(Exception):
    """Base class for all benchmaker errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


class RunCancelledError(BenchmakerError):
    """Raised when a cancellation signal stops in-flight or pending work.

    Not a failure: callers unwind and record the affected work as cancelled.
    """

    def __init__(self, reason: str = "cancellation requested") -> None:
        super().__init__(f"Failed to finish work: {reason}")
