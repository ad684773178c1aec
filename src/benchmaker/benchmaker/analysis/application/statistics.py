"""Multi-run statistical analyzer.

Works on sealed runs of a single suite. Each run contributes one aggregate
score per model (the weighted mean of that model's scored results), and the
statistics below are computed over those per-run aggregates.
"""

import math
import statistics
from collections.abc import Iterable, Sequence
from itertools import combinations

from benchmaker.analysis.domain.stats import ModelComparison, MultiRunStats
from benchmaker.execution.domain.result import RunResult, RunStatus
from benchmaker.suite.domain.test_case import TestCase

Z_95 = 1.96
SIGNIFICANCE_LEVEL = 0.05

_STANDARD_NORMAL = statistics.NormalDist()


def weights_for(test_cases: Iterable[TestCase]) -> dict[str, float]:
    return {case.id: case.weight for case in test_cases}


def aggregate_run_score(
    run: RunResult, model_id: str, weights: dict[str, float]
) -> float | None:
    """Weighted mean of the model's scored results, None when nothing is scored.

    Test cases missing from ``weights`` count with weight 1.
    """
    total = 0.0
    weight_sum = 0.0
    for result in run.results_for_model(model_id):
        if result.score is None:
            continue
        weight = weights.get(result.test_case_id, 1.0)
        total += result.score.score * weight
        weight_sum += weight
    if weight_sum == 0:
        return None
    return total / weight_sum


def _sealed(runs: Iterable[RunResult]) -> list[RunResult]:
    return [run for run in runs if run.status is RunStatus.COMPLETED]


def _model_ids(runs: Sequence[RunResult]) -> list[str]:
    seen: dict[str, None] = {}
    for run in runs:
        for model_id in run.models:
            seen.setdefault(model_id)
    return list(seen)


def _series(
    runs: Sequence[RunResult], model_id: str, weights: dict[str, float]
) -> tuple[list[str], list[float]]:
    run_ids: list[str] = []
    scores: list[float] = []
    for run in runs:
        score = aggregate_run_score(run, model_id, weights)
        if score is not None:
            run_ids.append(run.id)
            scores.append(score)
    return run_ids, scores


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def multi_run_stats(
    runs: Iterable[RunResult], test_cases: Iterable[TestCase] = ()
) -> list[MultiRunStats]:
    """Per-model statistics, sorted by mean score, best first.

    Models with no scored result in any run are left out.
    """
    sealed = _sealed(runs)
    weights = weights_for(test_cases)
    stats: list[MultiRunStats] = []
    for model_id in _model_ids(sealed):
        run_ids, scores = _series(sealed, model_id, weights)
        if not scores:
            continue
        mean = statistics.fmean(scores)
        std_dev = statistics.pstdev(scores)
        margin = Z_95 * std_dev / math.sqrt(len(scores))
        stats.append(
            MultiRunStats(
                model_id=model_id,
                run_ids=run_ids,
                scores=scores,
                mean=mean,
                std_dev=std_dev,
                min=min(scores),
                max=max(scores),
                confidence95=(_clamp(mean - margin), _clamp(mean + margin)),
            )
        )
    return sorted(stats, key=lambda s: s.mean, reverse=True)


def two_tailed_p(t_statistic: float) -> float:
    """Two-tailed p-value under the normal approximation."""
    if math.isinf(t_statistic):
        return 0.0
    return min(1.0, 2.0 * (1.0 - _STANDARD_NORMAL.cdf(abs(t_statistic))))


def compare_scores(
    model_a: str, scores_a: Sequence[float], model_b: str, scores_b: Sequence[float]
) -> ModelComparison | None:
    """Pooled two-sample comparison; None when either side has fewer than 2 samples."""
    n_a, n_b = len(scores_a), len(scores_b)
    if n_a < 2 or n_b < 2:
        return None

    mean_a = statistics.fmean(scores_a)
    mean_b = statistics.fmean(scores_b)
    diff = mean_a - mean_b
    pooled_var = (
        (n_a - 1) * statistics.pvariance(scores_a)
        + (n_b - 1) * statistics.pvariance(scores_b)
    ) / (n_a + n_b - 2)
    std_err = math.sqrt(pooled_var * (1 / n_a + 1 / n_b))

    if std_err == 0:
        if diff == 0:
            t_statistic = effect_size = 0.0
        else:
            t_statistic = effect_size = math.copysign(math.inf, diff)
    else:
        t_statistic = diff / std_err
        effect_size = diff / math.sqrt(pooled_var)

    p_value = two_tailed_p(t_statistic)
    return ModelComparison(
        model_a=model_a,
        model_b=model_b,
        mean_a=mean_a,
        mean_b=mean_b,
        score_diff=diff,
        pooled_std_err=std_err,
        t_statistic=t_statistic,
        p_value=p_value,
        is_significant=p_value < SIGNIFICANCE_LEVEL,
        effect_size=effect_size,
    )


def compare_models(
    runs: Iterable[RunResult],
    model_a: str,
    model_b: str,
    test_cases: Iterable[TestCase] = (),
) -> ModelComparison | None:
    sealed = _sealed(runs)
    weights = weights_for(test_cases)
    _, scores_a = _series(sealed, model_a, weights)
    _, scores_b = _series(sealed, model_b, weights)
    return compare_scores(model_a, scores_a, model_b, scores_b)


def compare_all(
    runs: Iterable[RunResult], test_cases: Iterable[TestCase] = ()
) -> list[ModelComparison]:
    """Every comparable pair, the higher-mean model always as ``model_a``."""
    ranked = multi_run_stats(runs, test_cases)
    comparisons: list[ModelComparison] = []
    for a, b in combinations(ranked, 2):
        comparison = compare_scores(a.model_id, a.scores, b.model_id, b.scores)
        if comparison is not None:
            comparisons.append(comparison)
    return comparisons
