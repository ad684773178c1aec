"""Code arena run and per-model output models."""

from datetime import datetime

from pydantic import BaseModel, Field

from benchmaker.config.domain.parameters import ModelParameters
from benchmaker.execution.domain.result import ExecutionStatus, RunStatus
from benchmaker.gateway.domain.messages import TokenUsage
from benchmaker.scoring.domain.result import ScoringResult


class CodeArenaOutput(BaseModel):
    """What one model produced for the arena prompt.

    ``extracted_code`` follows ``streamed_content`` while the reply streams
    and is replaced by the extraction from the full reply on completion.
    """

    model_id: str
    raw_response: str = ""
    streamed_content: str = ""
    extracted_code: str = ""
    status: ExecutionStatus = ExecutionStatus.IDLE
    latency_ms: int | None = None
    token_usage: TokenUsage | None = None
    cost: float | None = None
    score: ScoringResult | None = None
    error: str | None = None


class CodeArenaRun(BaseModel):
    """One prompt sent to several models; outputs are keyed by model id."""

    id: str
    prompt: str
    system_prompt: str = ""
    models: list[str] = Field(min_length=1)
    parameters: ModelParameters
    judge_model: str | None = None
    outputs: list[CodeArenaOutput]
    status: RunStatus = RunStatus.RUNNING
    started_at: datetime
    completed_at: datetime | None = None
    cancelled: bool = False

    def output_for(self, model_id: str) -> CodeArenaOutput | None:
        return next((o for o in self.outputs if o.model_id == model_id), None)

    def count(self, status: ExecutionStatus) -> int:
        return sum(1 for o in self.outputs if o.status is status)
