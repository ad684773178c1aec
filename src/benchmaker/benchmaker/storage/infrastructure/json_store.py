"""JsonSnapshotStore — persists a Snapshot as a single JSON document."""

import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from benchmaker.storage.domain.observer import SnapshotObserver
from benchmaker.storage.domain.snapshot import SNAPSHOT_VERSION, Snapshot
from benchmaker.storage.infrastructure.errors import SnapshotLoadError


class JsonSnapshotStore:
    """Reads and writes one snapshot file.

    A missing file reads as an empty snapshot. Writes go to a temporary file
    in the same directory which then replaces the target, so readers never
    see a partially written snapshot.
    """

    def __init__(self, path: Path, observer: SnapshotObserver) -> None:
        self._path = path
        self._observer = observer

    def load(self) -> Snapshot:
        """Read the snapshot, or an empty one when the file does not exist.

        Raises:
            SnapshotLoadError: if the file is not a valid snapshot.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Snapshot()

        try:
            snapshot = Snapshot.model_validate_json(raw)
        except ValidationError as exc:
            raise SnapshotLoadError(reason=f"{self._path}: {exc}") from exc
        if snapshot.version != SNAPSHOT_VERSION:
            raise SnapshotLoadError(
                reason=f"{self._path}: unsupported version {snapshot.version}"
            )

        self._observer.snapshot_loaded(
            path=str(self._path),
            num_suites=len(snapshot.test_suites),
            num_runs=len(snapshot.runs),
        )
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(snapshot.model_dump_json(indent=2))
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self._path)
        finally:
            tmp_path.unlink(missing_ok=True)

        self._observer.snapshot_saved(
            path=str(self._path),
            num_suites=len(snapshot.test_suites),
            num_runs=len(snapshot.runs),
        )
