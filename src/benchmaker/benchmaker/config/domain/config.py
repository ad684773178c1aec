"""Top-level BenchmakerConfig aggregate — the root configuration object."""

from typing import TypeAlias
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from benchmaker.config.domain.execution import ExecutionConfig
from benchmaker.config.domain.gateway import GatewayConfig
from benchmaker.config.domain.judge import JudgeConfig
from benchmaker.config.domain.parameters import ModelParameters

ModelId: TypeAlias = str


class BenchmakerConfig(BaseModel, frozen=True):
    """Root configuration aggregate for a benchmark run."""

    name: str = Field(min_length=1)
    suite: Path
    store: Path = Path("benchmaker.json")
    gateway: GatewayConfig
    models: list[ModelId] = Field(min_length=1)
    parameters: ModelParameters = ModelParameters()
    judge: JudgeConfig | None = None
    execution: ExecutionConfig = ExecutionConfig()

    @field_validator("models")
    @classmethod
    def _models_unique(cls, models: list[ModelId]) -> list[ModelId]:
        duplicates = sorted({m for m in models if models.count(m) > 1})
        if duplicates:
            raise ValueError(f"duplicate model ids: {', '.join(duplicates)}")
        return models
