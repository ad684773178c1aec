"""Run summary and leaderboard value objects."""

from pydantic import BaseModel

from benchmaker.suite.domain.test_case import Difficulty


class ModelRunSummary(BaseModel, frozen=True):
    model_id: str
    aggregate_score: float | None
    scored: int
    completed: int
    failed: int
    cancelled: int
    total_cost: float | None
    average_latency_ms: float | None


class RunSummary(BaseModel, frozen=True):
    """What a caller needs to report "N of M completed, K failed, cancelled: yes/no"."""

    run_id: str
    test_suite_name: str
    total: int
    completed: int
    failed: int
    cancelled: int
    idle: int
    was_cancelled: bool
    total_cost: float | None
    models: list[ModelRunSummary]

    @property
    def headline(self) -> str:
        return (
            f"{self.completed} of {self.total} completed, {self.failed} failed, "
            f"cancelled: {'yes' if self.was_cancelled else 'no'}"
        )


class LeaderboardEntry(BaseModel, frozen=True):
    rank: int
    model_id: str
    average_score: float
    total_tests: int
    win_rate: float
    consistency: float


class DifficultyStats(BaseModel, frozen=True):
    difficulty: Difficulty
    total_tests: int
    average_score: float
    top_model: str
    top_model_score: float


class Leaderboard(BaseModel, frozen=True):
    """Overall ranking, one ranking per test case category, and a difficulty breakdown."""

    total_runs: int
    overall: list[LeaderboardEntry]
    categories: dict[str, list[LeaderboardEntry]]
    difficulties: list[DifficultyStats] = []
