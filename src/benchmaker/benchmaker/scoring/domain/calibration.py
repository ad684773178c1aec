"""Judge calibration value objects and the default reference samples."""

from datetime import datetime
from typing import Literal, TypeAlias

from pydantic import BaseModel, Field

CalibrationQuality: TypeAlias = Literal["excellent", "good", "fair", "poor"]


class CalibrationSample(BaseModel, frozen=True):
    """A response whose correct judge score is known in advance."""

    id: str
    prompt: str
    response: str
    expected_output: str | None = None
    expected_score: float = Field(ge=0.0, le=1.0)
    tolerance: float = Field(ge=0.0, le=1.0)
    category: str


class CalibrationSampleResult(BaseModel, frozen=True):
    sample_id: str
    expected_score: float
    actual_score: float
    error: float
    absolute_error: float
    within_tolerance: bool
    notes: str | None = None


class CalibrationSummary(BaseModel, frozen=True):
    total_samples: int
    passed_samples: int
    pass_rate: float
    mean_absolute_error: float
    max_error: float
    bias: float
    correlation: float


class CalibrationResult(BaseModel, frozen=True):
    judge_model: str
    timestamp: datetime
    samples: list[CalibrationSampleResult]
    summary: CalibrationSummary


class CalibrationReport(BaseModel, frozen=True):
    quality: CalibrationQuality
    recommendation: str
    details: list[str]


DEFAULT_CALIBRATION_SAMPLES: tuple[CalibrationSample, ...] = (
    CalibrationSample(
        id="perfect-factual",
        prompt="What is 2 + 2?",
        response="4",
        expected_output="4",
        expected_score=1.0,
        tolerance=0.1,
        category="factual",
    ),
    CalibrationSample(
        id="wrong-factual",
        prompt="What is 2 + 2?",
        response="5",
        expected_output="4",
        expected_score=0.0,
        tolerance=0.15,
        category="factual",
    ),
    CalibrationSample(
        id="partial-factual",
        prompt="What is the capital of France?",
        response="Paris is a major city in France known for the Eiffel Tower.",
        expected_output="Paris",
        expected_score=0.8,
        tolerance=0.15,
        category="factual",
    ),
    CalibrationSample(
        id="verbose-correct",
        prompt="What is 10 * 5?",
        response=(
            "To calculate 10 multiplied by 5, add 10 five times: "
            "10 + 10 + 10 + 10 + 10 = 50. Therefore, 10 * 5 = 50."
        ),
        expected_output="50",
        expected_score=0.9,
        tolerance=0.1,
        category="factual",
    ),
    CalibrationSample(
        id="empty-response",
        prompt="What is the meaning of life?",
        response="",
        expected_score=0.0,
        tolerance=0.05,
        category="empty",
    ),
    CalibrationSample(
        id="irrelevant-response",
        prompt="What is the speed of light?",
        response="I like pizza.",
        expected_output="299,792,458 meters per second",
        expected_score=0.0,
        tolerance=0.1,
        category="irrelevant",
    ),
    CalibrationSample(
        id="good-explanation",
        prompt="Explain why the sky is blue in simple terms.",
        response=(
            "The sky appears blue because of Rayleigh scattering. Sunlight "
            "collides with gas molecules in the atmosphere, and blue light, "
            "having a shorter wavelength, is scattered more than other colors."
        ),
        expected_score=0.9,
        tolerance=0.1,
        category="explanation",
    ),
    CalibrationSample(
        id="mediocre-explanation",
        prompt="Explain why the sky is blue in simple terms.",
        response="The sky is blue because of the sun and the air.",
        expected_score=0.4,
        tolerance=0.2,
        category="explanation",
    ),
)
