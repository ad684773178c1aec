"""Snapshot — the persisted state of suites and sealed runs."""

from collections.abc import Iterable

from pydantic import BaseModel

from benchmaker.arena.domain.output import CodeArenaRun
from benchmaker.execution.domain.result import RunResult
from benchmaker.suite.domain.suite import TestSuite

SNAPSHOT_VERSION = 1


class Snapshot(BaseModel, frozen=True):
    version: int = SNAPSHOT_VERSION
    test_suites: list[TestSuite] = []
    runs: list[RunResult] = []
    arena_runs: list[CodeArenaRun] = []

    def with_suite(self, suite: TestSuite) -> "Snapshot":
        """Return a copy holding ``suite``, replacing any suite with the same id."""
        suites = [s for s in self.test_suites if s.id != suite.id]
        return self.model_copy(update={"test_suites": [*suites, suite]})

    def with_runs(self, runs: Iterable[RunResult]) -> "Snapshot":
        """Return a copy with ``runs`` added; a run with a known id replaces the old one."""
        merged = {run.id: run for run in self.runs}
        for run in runs:
            merged[run.id] = run
        return self.model_copy(update={"runs": list(merged.values())})

    def with_arena_runs(self, runs: Iterable[CodeArenaRun]) -> "Snapshot":
        merged = {run.id: run for run in self.arena_runs}
        for run in runs:
            merged[run.id] = run
        return self.model_copy(update={"arena_runs": list(merged.values())})

    def suite(self, suite_id: str) -> TestSuite | None:
        return next((s for s in self.test_suites if s.id == suite_id), None)
