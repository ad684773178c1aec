"""Run summaries and cross-run leaderboards."""

import statistics
from collections import defaultdict
from collections.abc import Iterable, Sequence

from benchmaker.analysis.application.statistics import aggregate_run_score, weights_for
from benchmaker.analysis.domain.leaderboard import (
    DifficultyStats,
    Leaderboard,
    LeaderboardEntry,
    ModelRunSummary,
    RunSummary,
)
from benchmaker.execution.domain.result import ExecutionStatus, RunResult, RunStatus
from benchmaker.suite.domain.suite import TestSuite
from benchmaker.suite.domain.test_case import Difficulty, TestCase

DIFFICULTIES: tuple[Difficulty, ...] = ("easy", "medium", "hard")


def _sum_or_none(values: list[float]) -> float | None:
    return sum(values) if values else None


def summarize_run(run: RunResult, test_cases: Iterable[TestCase] = ()) -> RunSummary:
    weights = weights_for(test_cases)
    models: list[ModelRunSummary] = []
    for model_id in run.models:
        results = run.results_for_model(model_id)
        latencies = [r.latency_ms for r in results if r.latency_ms is not None]
        models.append(
            ModelRunSummary(
                model_id=model_id,
                aggregate_score=aggregate_run_score(run, model_id, weights),
                scored=sum(1 for r in results if r.score is not None),
                completed=sum(1 for r in results if r.status is ExecutionStatus.COMPLETED),
                failed=sum(1 for r in results if r.status is ExecutionStatus.FAILED),
                cancelled=sum(1 for r in results if r.status is ExecutionStatus.CANCELLED),
                total_cost=_sum_or_none([r.cost for r in results if r.cost is not None]),
                average_latency_ms=statistics.fmean(latencies) if latencies else None,
            )
        )

    costs = [m.total_cost for m in models if m.total_cost is not None]
    return RunSummary(
        run_id=run.id,
        test_suite_name=run.test_suite_name,
        total=len(run.results),
        completed=run.count(ExecutionStatus.COMPLETED),
        failed=run.count(ExecutionStatus.FAILED),
        cancelled=run.count(ExecutionStatus.CANCELLED),
        idle=run.count(ExecutionStatus.IDLE),
        was_cancelled=run.cancelled,
        total_cost=_sum_or_none(costs),
        models=models,
    )


def _run_winner(run: RunResult) -> str | None:
    """Model with the highest unweighted mean score; ties go to the first listed."""
    winner: str | None = None
    best = -1.0
    for model_id in run.models:
        scores = [
            r.score.score for r in run.results_for_model(model_id) if r.score is not None
        ]
        if scores and (mean := statistics.fmean(scores)) > best:
            best = mean
            winner = model_id
    return winner


def _ranked(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    ordered = sorted(entries, key=lambda e: e.average_score, reverse=True)
    return [e.model_copy(update={"rank": i}) for i, e in enumerate(ordered, start=1)]


def _difficulty_stats(
    difficulty: Difficulty, model_scores: dict[str, list[float]]
) -> DifficultyStats:
    """Average over every scored test; the top model wins by its own average."""
    averages = {
        model_id: statistics.fmean(values) for model_id, values in model_scores.items()
    }
    top_model = max(averages, key=lambda model_id: averages[model_id])
    pooled = [score for values in model_scores.values() for score in values]
    return DifficultyStats(
        difficulty=difficulty,
        total_tests=len(pooled),
        average_score=statistics.fmean(pooled),
        top_model=top_model,
        top_model_score=averages[top_model],
    )


def build_leaderboard(
    runs: Iterable[RunResult], suites: Sequence[TestSuite] = ()
) -> Leaderboard:
    """Rank models over every sealed run.

    ``consistency`` is the population standard deviation of a model's
    individual test scores (lower is steadier). ``win_rate`` is the model's
    share of run wins. Category boards and the difficulty breakdown use test
    case metadata from ``suites``.
    """
    sealed = [run for run in runs if run.status is RunStatus.COMPLETED]
    cases = [case for suite in suites for case in suite.test_cases]
    categories = {case.id: case.metadata.category for case in cases if case.metadata.category}
    difficulties = {
        case.id: case.metadata.difficulty for case in cases if case.metadata.difficulty
    }

    scores: dict[str, list[float]] = defaultdict(list)
    tests: dict[str, int] = defaultdict(int)
    by_category: dict[str, dict[str, list[float]]] = defaultdict(lambda: defaultdict(list))
    by_difficulty: dict[str, dict[str, list[float]]] = defaultdict(lambda: defaultdict(list))
    wins: dict[str, int] = defaultdict(int)

    for run in sealed:
        winner = _run_winner(run)
        if winner is not None:
            wins[winner] += 1
        for result in run.results:
            tests[result.model_id] += 1
            if result.score is None:
                continue
            scores[result.model_id].append(result.score.score)
            category = categories.get(result.test_case_id)
            if category:
                by_category[category][result.model_id].append(result.score.score)
            difficulty = difficulties.get(result.test_case_id)
            if difficulty:
                by_difficulty[difficulty][result.model_id].append(result.score.score)

    total_wins = sum(wins.values())

    def _consistency(model_id: str) -> float:
        values = scores.get(model_id, [])
        return statistics.pstdev(values) if values else 0.0

    overall = _ranked(
        [
            LeaderboardEntry(
                rank=0,
                model_id=model_id,
                average_score=statistics.fmean(scores[model_id]) if scores[model_id] else 0.0,
                total_tests=count,
                win_rate=wins[model_id] / total_wins if total_wins else 0.0,
                consistency=_consistency(model_id),
            )
            for model_id, count in tests.items()
        ]
    )
    category_boards = {
        category: _ranked(
            [
                LeaderboardEntry(
                    rank=0,
                    model_id=model_id,
                    average_score=statistics.fmean(values),
                    total_tests=len(values),
                    win_rate=0.0,
                    consistency=statistics.pstdev(values),
                )
                for model_id, values in model_scores.items()
            ]
        )
        for category, model_scores in sorted(by_category.items())
    }
    difficulty_stats = [
        _difficulty_stats(difficulty, by_difficulty[difficulty])
        for difficulty in DIFFICULTIES
        if difficulty in by_difficulty
    ]
    return Leaderboard(
        total_runs=len(sealed),
        overall=overall,
        categories=category_boards,
        difficulties=difficulty_stats,
    )
