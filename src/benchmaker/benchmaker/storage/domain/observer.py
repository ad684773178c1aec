"""Observer port for snapshot persistence."""

from typing import Protocol


class SnapshotObserver(Protocol):
    def snapshot_loaded(self, path: str, num_suites: int, num_runs: int) -> None: ...

    def snapshot_saved(self, path: str, num_suites: int, num_runs: int) -> None: ...
