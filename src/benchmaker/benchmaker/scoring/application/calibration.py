"""Judge calibration — measures how closely a judge model reproduces known scores."""

import statistics
from collections.abc import Sequence
from datetime import UTC, datetime

from benchmaker.core.cancellation import CancellationToken
from benchmaker.scoring.application.llm_judge import LLMJudgeScorer
from benchmaker.scoring.domain.calibration import (
    DEFAULT_CALIBRATION_SAMPLES,
    CalibrationQuality,
    CalibrationReport,
    CalibrationResult,
    CalibrationSample,
    CalibrationSampleResult,
    CalibrationSummary,
)

# (quality, min pass rate, max MAE, min correlation), best first
_QUALITY_BANDS: tuple[tuple[CalibrationQuality, float, float, float], ...] = (
    ("excellent", 0.9, 0.1, 0.9),
    ("good", 0.75, 0.15, 0.8),
    ("fair", 0.5, 0.25, 0.6),
)

_RECOMMENDATIONS: dict[CalibrationQuality, str] = {
    "excellent": "Highly reliable judge; single runs can be trusted.",
    "good": "Reliable for most suites; run 2-3 times for critical llm-judge tasks.",
    "fair": "Moderately reliable; run 3-5 times and compare with multi-run statistics.",
    "poor": "Unreliable judge; pick another judge model or a rule-based scoring method.",
}

_BIAS_THRESHOLD = 0.05


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation, or 0.0 when it is undefined (constant or too few values)."""
    try:
        return statistics.correlation(xs, ys)
    except statistics.StatisticsError:
        return 0.0


def summarize(results: Sequence[CalibrationSampleResult]) -> CalibrationSummary:
    total = len(results)
    passed = sum(1 for r in results if r.within_tolerance)
    return CalibrationSummary(
        total_samples=total,
        passed_samples=passed,
        pass_rate=passed / total if total else 0.0,
        mean_absolute_error=statistics.fmean(r.absolute_error for r in results) if total else 0.0,
        max_error=max((r.absolute_error for r in results), default=0.0),
        bias=statistics.fmean(r.error for r in results) if total else 0.0,
        correlation=pearson(
            [r.expected_score for r in results], [r.actual_score for r in results]
        ),
    )


async def calibrate_judge(
    scorer: LLMJudgeScorer,
    samples: Sequence[CalibrationSample] = DEFAULT_CALIBRATION_SAMPLES,
    judge_system_prompt: str | None = None,
    cancel_token: CancellationToken | None = None,
) -> CalibrationResult:
    """Score every reference sample with ``scorer`` and compare against the known scores.

    Samples run one after another; a judge failure scores that sample 0.
    """
    results: list[CalibrationSampleResult] = []
    for sample in samples:
        scored = await scorer.score(
            prompt=sample.prompt,
            response=sample.response,
            expected_output=sample.expected_output,
            judge_system_prompt=judge_system_prompt,
            cancel_token=cancel_token,
            test_case_id=sample.id,
            model_id="calibration",
        )
        error = scored.score - sample.expected_score
        results.append(
            CalibrationSampleResult(
                sample_id=sample.id,
                expected_score=sample.expected_score,
                actual_score=scored.score,
                error=error,
                absolute_error=abs(error),
                within_tolerance=abs(error) <= sample.tolerance,
                notes=scored.notes,
            )
        )

    return CalibrationResult(
        judge_model=scorer.model,
        timestamp=datetime.now(UTC),
        samples=results,
        summary=summarize(results),
    )


def interpret_calibration(result: CalibrationResult) -> CalibrationReport:
    s = result.summary
    quality: CalibrationQuality = "poor"
    for band, min_pass, max_mae, min_corr in _QUALITY_BANDS:
        if s.pass_rate >= min_pass and s.mean_absolute_error <= max_mae and s.correlation >= min_corr:
            quality = band
            break

    if s.bias > _BIAS_THRESHOLD:
        bias_note = f"Bias: +{s.bias:.1%} (tends to overscore)"
    elif s.bias < -_BIAS_THRESHOLD:
        bias_note = f"Bias: {s.bias:.1%} (tends to underscore)"
    else:
        bias_note = f"Bias: {s.bias:.1%} (minimal)"

    details = [
        f"Pass rate: {s.pass_rate:.1%} ({s.passed_samples}/{s.total_samples} within tolerance)",
        f"Mean absolute error: {s.mean_absolute_error:.1%}",
        f"Max error: {s.max_error:.1%}",
        f"Correlation: {s.correlation:.3f}",
        bias_note,
    ]
    return CalibrationReport(
        quality=quality, recommendation=_RECOMMENDATIONS[quality], details=details
    )
