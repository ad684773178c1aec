"""Tests for InMemoryArenaStore."""

import pytest

from benchmaker.arena.infrastructure.errors import OutputNotFoundError
from benchmaker.arena.infrastructure.memory_store import InMemoryArenaStore
from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.execution.domain.result import ExecutionStatus, RunStatus
from benchmaker.execution.infrastructure.errors import RunNotFoundError, RunSealedError


def _create(store: InMemoryArenaStore, models: list[str] | None = None) -> str:
    run = store.create_run(
        prompt="Build a page",
        system_prompt="Only HTML.",
        models=models or ["m-a", "m-b"],
        parameters=ModelParameters(),
    )
    return run.id


class TestArenaStore:
    def test_outputs_prepopulated_per_model(self) -> None:
        store = InMemoryArenaStore()
        run = store.create_run(
            prompt="p",
            system_prompt="",
            models=["m-a", "m-b"],
            parameters=ModelParameters(),
            judge_model="judge",
        )

        assert [o.model_id for o in run.outputs] == ["m-a", "m-b"]
        assert all(o.status is ExecutionStatus.IDLE for o in run.outputs)
        assert run.status is RunStatus.RUNNING
        assert run.judge_model == "judge"

    def test_duplicate_models_rejected(self) -> None:
        store = InMemoryArenaStore()

        with pytest.raises(ValueError, match="duplicate model ids"):
            _create(store, models=["m", "m"])
        assert store.list_runs() == []

    def test_update_output(self) -> None:
        store = InMemoryArenaStore()
        run_id = _create(store)

        store.update_output(run_id, "m-b", streamed_content="<div>", extracted_code="x")

        output = store.get_run(run_id).output_for("m-b")
        assert output is not None
        assert output.streamed_content == "<div>"
        assert output.extracted_code == "x"

    def test_unknown_field_rejected(self) -> None:
        store = InMemoryArenaStore()
        run_id = _create(store)

        with pytest.raises(ValueError, match="unknown output fields: colour"):
            store.update_output(run_id, "m-a", colour="red")

    def test_unknown_model_rejected(self) -> None:
        store = InMemoryArenaStore()
        run_id = _create(store)

        with pytest.raises(OutputNotFoundError, match="'m-z'"):
            store.update_output(run_id, "m-z", status=ExecutionStatus.RUNNING)

    def test_unknown_run_rejected(self) -> None:
        with pytest.raises(RunNotFoundError):
            InMemoryArenaStore().get_run("nope")

    def test_seal_then_updates_rejected(self) -> None:
        store = InMemoryArenaStore()
        run_id = _create(store)

        sealed = store.seal_run(run_id, cancelled=True)

        assert sealed.status is RunStatus.COMPLETED
        assert sealed.cancelled is True
        assert sealed.completed_at is not None
        with pytest.raises(RunSealedError):
            store.update_output(run_id, "m-a", error="late")

    def test_returned_runs_are_copies(self) -> None:
        store = InMemoryArenaStore()
        run_id = _create(store)

        store.get_run(run_id).outputs[0].error = "mutated"

        assert store.get_run(run_id).outputs[0].error is None

    def test_preloaded_runs_listed(self) -> None:
        source = InMemoryArenaStore()
        _create(source)

        store = InMemoryArenaStore(runs=source.list_runs())

        assert [r.id for r in store.list_runs()] == [r.id for r in source.list_runs()]
