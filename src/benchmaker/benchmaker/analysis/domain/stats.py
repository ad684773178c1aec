"""Multi-run statistics value objects."""

from pydantic import BaseModel, Field


class MultiRunStats(BaseModel, frozen=True):
    """A model's aggregate score across several runs of the same suite.

    ``scores`` lines up with ``run_ids``; ``std_dev`` is the population
    standard deviation.
    """

    model_id: str
    run_ids: list[str]
    scores: list[float]
    mean: float
    std_dev: float = Field(ge=0.0)
    min: float
    max: float
    confidence95: tuple[float, float]


class ModelComparison(BaseModel, frozen=True):
    """Two-sample comparison of ``model_a`` against ``model_b``.

    Positive ``score_diff``, ``t_statistic`` and ``effect_size`` favour
    ``model_a``.
    """

    model_a: str
    model_b: str
    mean_a: float
    mean_b: float
    score_diff: float
    pooled_std_err: float
    t_statistic: float
    p_value: float = Field(ge=0.0, le=1.0)
    is_significant: bool
    effect_size: float

    @property
    def effect_label(self) -> str:
        size = abs(self.effect_size)
        if size > 0.8:
            return "large"
        if size > 0.5:
            return "medium"
        return "small"
