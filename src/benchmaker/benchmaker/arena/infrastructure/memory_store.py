"""InMemoryArenaStore — thread-safe, dict-backed ArenaStore."""

import threading
import uuid
from datetime import UTC, datetime
from typing import Any

from benchmaker.arena.domain.output import CodeArenaOutput, CodeArenaRun
from benchmaker.arena.infrastructure.errors import OutputNotFoundError
from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.execution.domain.result import RunStatus
from benchmaker.execution.infrastructure.errors import RunNotFoundError, RunSealedError


class InMemoryArenaStore:
    """Holds arena runs in memory; callers receive deep copies.

    Does NOT inherit from ArenaStore (structural typing via Protocol).
    """

    def __init__(self, runs: list[CodeArenaRun] | None = None) -> None:
        self._lock = threading.Lock()
        self._runs: dict[str, CodeArenaRun] = {
            run.id: run.model_copy(deep=True) for run in runs or []
        }

    def _open_run(self, run_id: str) -> CodeArenaRun:
        run = self._runs.get(run_id)
        if run is None:
            raise RunNotFoundError(run_id=run_id)
        if run.status is RunStatus.COMPLETED:
            raise RunSealedError(run_id=run_id)
        return run

    def create_run(
        self,
        prompt: str,
        system_prompt: str,
        models: list[str],
        parameters: ModelParameters,
        judge_model: str | None = None,
    ) -> CodeArenaRun:
        if len(set(models)) != len(models):
            raise ValueError(f"duplicate model ids: {', '.join(models)}")
        run = CodeArenaRun(
            id=str(uuid.uuid4()),
            prompt=prompt,
            system_prompt=system_prompt,
            models=list(models),
            parameters=parameters,
            judge_model=judge_model,
            outputs=[CodeArenaOutput(model_id=model) for model in models],
            started_at=datetime.now(UTC),
        )
        with self._lock:
            self._runs[run.id] = run
            return run.model_copy(deep=True)

    def update_output(self, run_id: str, model_id: str, **changes: Any) -> None:
        unknown = set(changes) - set(CodeArenaOutput.model_fields)
        if unknown:
            raise ValueError(f"unknown output fields: {', '.join(sorted(unknown))}")
        with self._lock:
            run = self._open_run(run_id)
            for i, output in enumerate(run.outputs):
                if output.model_id == model_id:
                    run.outputs[i] = output.model_copy(update=changes)
                    return
            raise OutputNotFoundError(run_id=run_id, model_id=model_id)

    def seal_run(self, run_id: str, cancelled: bool = False) -> CodeArenaRun:
        with self._lock:
            run = self._open_run(run_id)
            run.status = RunStatus.COMPLETED
            run.completed_at = datetime.now(UTC)
            run.cancelled = cancelled
            return run.model_copy(deep=True)

    def get_run(self, run_id: str) -> CodeArenaRun:
        with self._lock:
            run = self._runs.get(run_id)
            if run is None:
                raise RunNotFoundError(run_id=run_id)
            return run.model_copy(deep=True)

    def list_runs(self) -> list[CodeArenaRun]:
        with self._lock:
            return [run.model_copy(deep=True) for run in self._runs.values()]
