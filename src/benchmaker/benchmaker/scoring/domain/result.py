"""ScoringResult — the normalized outcome of scoring one response."""

from pydantic import BaseModel, Field


class ScoringResult(BaseModel, frozen=True):
    """``score`` is always on [0, 1]; ``raw_score``/``max_score`` keep the
    scorer's native scale when it has one (e.g. 85 of 100)."""

    score: float = Field(ge=0.0, le=1.0)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    raw_score: float | None = None
    max_score: float | None = None
    notes: str | None = None
