"""Sampling parameters sent with every model request."""

from pydantic import BaseModel, Field


class ModelParameters(BaseModel, frozen=True):
    """Sampling parameters for a run.

    ``benchmark_mode`` pins the parameters that make output non-deterministic;
    the stored values are kept so switching the mode off restores them.
    """

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_p: float = Field(default=1.0, gt=0.0, le=1.0)
    max_tokens: int = Field(default=2048, ge=1)
    frequency_penalty: float = Field(default=0.0, ge=-2.0, le=2.0)
    presence_penalty: float = Field(default=0.0, ge=-2.0, le=2.0)
    benchmark_mode: bool = False

    def effective(self) -> "ModelParameters":
        """Return the parameters actually sent to the gateway."""
        if not self.benchmark_mode:
            return self
        return self.model_copy(
            update={
                "temperature": 0.0,
                "frequency_penalty": 0.0,
                "presence_penalty": 0.0,
            }
        )
