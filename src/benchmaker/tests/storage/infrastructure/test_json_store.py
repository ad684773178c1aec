"""Tests for JsonSnapshotStore."""

from pathlib import Path

import pytest

from benchmaker.execution.domain.result import RunStatus
from benchmaker.storage.domain.snapshot import Snapshot
from benchmaker.storage.infrastructure.errors import SnapshotLoadError
from benchmaker.storage.infrastructure.json_store import JsonSnapshotStore
from benchmaker.suite.domain.suite import TestSuite
from benchmaker.suite.domain.test_case import TestCase
from tests.analysis.run_factory import make_run
from tests.storage.fake_observer import FakeSnapshotObserver


def _make_store(path: Path) -> tuple[JsonSnapshotStore, FakeSnapshotObserver]:
    observer = FakeSnapshotObserver()
    return JsonSnapshotStore(path=path, observer=observer), observer


class TestJsonSnapshotStoreLoad:
    def test_missing_file_is_empty_snapshot(self, tmp_path: Path) -> None:
        store, observer = _make_store(tmp_path / "absent.json")

        snapshot = store.load()

        assert snapshot == Snapshot()
        assert observer.loaded == []

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        store, _ = _make_store(path)

        with pytest.raises(SnapshotLoadError, match="Failed to load snapshot"):
            store.load()

    def test_unknown_version_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "future.json"
        path.write_text('{"version": 99, "test_suites": [], "runs": []}', encoding="utf-8")
        store, _ = _make_store(path)

        with pytest.raises(SnapshotLoadError, match="unsupported version 99"):
            store.load()


class TestJsonSnapshotStoreSave:
    def test_saved_snapshot_loads_back(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "bench.json"
        store, observer = _make_store(path)
        suite = TestSuite(id="s", name="Suite", test_cases=[TestCase(id="tc", prompt="p")])
        run = make_run("r1", {"m": {"tc": 0.75}}, suite_id="s")

        store.save(Snapshot().with_suite(suite).with_runs([run]))
        loaded = store.load()

        assert loaded.suite("s") == suite
        assert loaded.runs[0].id == "r1"
        assert loaded.runs[0].status is RunStatus.COMPLETED
        score = loaded.runs[0].results[0].score
        assert score is not None
        assert score.score == 0.75
        assert observer.saved == [(str(path), 1, 1)]
        assert observer.loaded == [(str(path), 1, 1)]

    def test_save_leaves_no_temp_files(self, tmp_path: Path) -> None:
        store, _ = _make_store(tmp_path / "bench.json")

        store.save(Snapshot())
        store.save(Snapshot())

        assert [p.name for p in tmp_path.iterdir()] == ["bench.json"]
