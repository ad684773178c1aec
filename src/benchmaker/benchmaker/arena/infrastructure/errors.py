"""Error types raised by the arena store."""

from benchmaker.core.errors import BenchmakerError


class OutputNotFoundError(BenchmakerError):
    def __init__(self, run_id: str, model_id: str) -> None:
        super().__init__(f"Failed to find output in arena run {run_id}: model {model_id!r}")
