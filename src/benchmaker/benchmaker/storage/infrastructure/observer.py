"""Structlog implementation of the SnapshotObserver port."""

import structlog


class StructlogSnapshotObserver:
    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def snapshot_loaded(self, path: str, num_suites: int, num_runs: int) -> None:
        self._log.info(
            "storage.snapshot.loaded",
            path=path,
            num_suites=num_suites,
            num_runs=num_runs,
        )

    def snapshot_saved(self, path: str, num_suites: int, num_runs: int) -> None:
        self._log.info(
            "storage.snapshot.saved",
            path=path,
            num_suites=num_suites,
            num_runs=num_runs,
        )
