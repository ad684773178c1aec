"""Tests for ProgressExecutionObserver counters (rendering disabled)."""

from benchmaker.execution.infrastructure.progress_observer import (
    OVERALL,
    ProgressExecutionObserver,
)


def _started(models: list[str], total_tasks: int) -> ProgressExecutionObserver:
    observer = ProgressExecutionObserver(disabled=True)
    observer.run_started(
        run_id="r",
        suite_id="s",
        total_tasks=total_tasks,
        model_ids=models,
        max_concurrent=2,
    )
    return observer


class TestProgressExecutionObserverCounters:
    def test_totals_split_per_model(self) -> None:
        observer = _started(["m-a", "m-b"], total_tasks=6)

        assert observer.total == {"m-a": 3, "m-b": 3, OVERALL: 6}

    def test_started_then_completed_moves_inflight_to_done(self) -> None:
        observer = _started(["m-a"], total_tasks=2)

        observer.result_started(run_id="r", test_case_id="tc", model_id="m-a")
        assert observer.inflight["m-a"] == 1
        assert observer.inflight[OVERALL] == 1

        observer.result_completed(
            run_id="r", test_case_id="tc", model_id="m-a", latency_ms=5, score=1.0
        )
        assert observer.inflight["m-a"] == 0
        assert observer.done["m-a"] == 1
        assert observer.done[OVERALL] == 1

    def test_failures_and_cancellations_count_as_done(self) -> None:
        observer = _started(["m-a"], total_tasks=2)

        observer.result_started(run_id="r", test_case_id="t1", model_id="m-a")
        observer.result_failed(run_id="r", test_case_id="t1", model_id="m-a", reason="x")
        observer.result_started(run_id="r", test_case_id="t2", model_id="m-a")
        observer.result_cancelled(run_id="r", test_case_id="t2", model_id="m-a")

        assert observer.done["m-a"] == 2
        assert observer.failed["m-a"] == 1

    def test_unknown_model_only_updates_overall(self) -> None:
        observer = _started(["m-a"], total_tasks=1)

        observer.result_started(run_id="r", test_case_id="t", model_id="ghost")

        assert observer.inflight[OVERALL] == 1
        assert "ghost" not in observer.inflight

    def test_run_completed_without_live_display(self) -> None:
        observer = _started(["m-a"], total_tasks=1)
        observer.run_completed(
            run_id="r",
            completed=1,
            failed=0,
            cancelled=0,
            elapsed_seconds=0.1,
            was_cancelled=False,
        )
