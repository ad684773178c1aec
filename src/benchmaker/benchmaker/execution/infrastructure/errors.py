"""Error types raised by result store infrastructure."""

from benchmaker.core.errors import BenchmakerError


class RunNotFoundError(BenchmakerError):
    def __init__(self, run_id: str) -> None:
        super().__init__(f"Failed to find run: {run_id}")


class RunSealedError(BenchmakerError):
    """Raised when an update targets a run that has already been sealed."""

    def __init__(self, run_id: str) -> None:
        super().__init__(f"Failed to update run {run_id}: run is sealed")


class ResultNotFoundError(BenchmakerError):
    def __init__(self, run_id: str, test_case_id: str, model_id: str) -> None:
        super().__init__(
            f"Failed to find result in run {run_id}: "
            f"test case {test_case_id!r}, model {model_id!r}"
        )
