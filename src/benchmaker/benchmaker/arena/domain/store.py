"""ArenaStore port — model-keyed storage for code arena runs."""

from typing import Any, Protocol

from benchmaker.arena.domain.output import CodeArenaRun
from benchmaker.config.domain.parameters import ModelParameters


class ArenaStore(Protocol):
    """Last-write-wins per (run, model). Sealed runs reject further updates."""

    def create_run(
        self,
        prompt: str,
        system_prompt: str,
        models: list[str],
        parameters: ModelParameters,
        judge_model: str | None = None,
    ) -> CodeArenaRun: ...

    def update_output(self, run_id: str, model_id: str, **changes: Any) -> None: ...

    def seal_run(self, run_id: str, cancelled: bool = False) -> CodeArenaRun: ...

    def get_run(self, run_id: str) -> CodeArenaRun: ...

    def list_runs(self) -> list[CodeArenaRun]: ...
