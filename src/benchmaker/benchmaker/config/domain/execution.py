"""Execution configuration models."""

from pydantic import BaseModel, Field


class EmptyResponseRetryConfig(BaseModel, frozen=True):
    max_retries: int = Field(default=2, ge=0)
    backoff_base_seconds: float = Field(default=0.4, ge=0.0)


class ExecutionConfig(BaseModel, frozen=True):
    max_concurrent: int = Field(default=5, ge=1)
    empty_response: EmptyResponseRetryConfig = EmptyResponseRetryConfig()
