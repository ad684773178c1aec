"""Error types raised by snapshot persistence."""

from benchmaker.core.errors import BenchmakerError


class SnapshotLoadError(BenchmakerError):
    """Raised when a snapshot file exists but cannot be parsed or validated."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load snapshot: {reason}")
