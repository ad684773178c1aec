"""Terminal report rendering — turns analysis results into ANSI-coloured lines."""

from collections.abc import Sequence

from benchmaker.analysis.domain.leaderboard import Leaderboard, LeaderboardEntry, RunSummary
from benchmaker.analysis.domain.stats import ModelComparison, MultiRunStats
from benchmaker.arena.domain.output import CodeArenaRun
from benchmaker.execution.domain.result import ExecutionStatus
from benchmaker.gateway.domain.catalog import ModelInfo
from benchmaker.scoring.domain.calibration import CalibrationReport, CalibrationResult

# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
CYAN = "\033[36m"
YELLOW = "\033[33m"
GREEN = "\033[32m"
RED = "\033[31m"
BLUE = "\033[34m"
WHITE = "\033[97m"

_MAX_MODEL_LEN = 32


def score_color(score: float) -> str:
    if score >= 0.8:
        return GREEN
    if score >= 0.5:
        return YELLOW
    return RED


def pct(score: float) -> str:
    return f"{score * 100:.1f}%"


def rule(width: int = 72, color: str = DIM) -> str:
    return f"{color}{'─' * width}{RESET}"


def truncate(name: str, max_len: int = _MAX_MODEL_LEN) -> str:
    """Truncate a model id to max_len, appending '…' if needed."""
    if len(name) <= max_len:
        return name
    return name[: max_len - 1] + "…"


def banner(title: str, color: str = CYAN) -> list[str]:
    return ["", rule(color=color), f"{color}{BOLD}  {title}{RESET}", rule(color=color)]


def _money(cost: float | None) -> str:
    return "--" if cost is None else f"${cost:.4f}"


def format_run_summary(summary: RunSummary) -> list[str]:
    lines = banner(f"benchmaker  ·  {summary.test_suite_name}")
    status_color = YELLOW if summary.was_cancelled or summary.failed else GREEN
    lines += [
        f"  {DIM}Run ID{RESET}  {WHITE}{summary.run_id[:8]}-...{RESET}",
        f"  {status_color}{summary.headline}{RESET}",
        f"  {DIM}Total cost{RESET}  {_money(summary.total_cost)}",
        "",
    ]

    model_w = max(len(truncate(m.model_id)) for m in summary.models)
    lines.append(
        f"  {DIM}{'Model':<{model_w}}  {'Score':>7}  {'Done':>5}  {'Failed':>6}"
        f"  {'Latency':>9}  {'Cost':>10}{RESET}"
    )
    lines.append(f"  {'─' * (model_w + 47)}")
    ranked = sorted(
        summary.models,
        key=lambda m: m.aggregate_score if m.aggregate_score is not None else -1.0,
        reverse=True,
    )
    for model in ranked:
        if model.aggregate_score is None:
            score = f"{DIM}{'--':>7}{RESET}"
        else:
            score = f"{score_color(model.aggregate_score)}{pct(model.aggregate_score):>7}{RESET}"
        latency = (
            "--"
            if model.average_latency_ms is None
            else f"{model.average_latency_ms:.0f}ms"
        )
        lines.append(
            f"  {WHITE}{truncate(model.model_id):<{model_w}}{RESET}  {score}"
            f"  {model.completed:>5}  {model.failed:>6}  {latency:>9}"
            f"  {_money(model.total_cost):>10}"
        )
    return lines


_STATUS_COLORS = {
    ExecutionStatus.COMPLETED: GREEN,
    ExecutionStatus.FAILED: RED,
    ExecutionStatus.CANCELLED: YELLOW,
}


def format_arena_run(run: CodeArenaRun) -> list[str]:
    lines = banner(f"Code arena  ·  {truncate(run.prompt, max_len=48)}")
    if run.cancelled:
        lines.append(f"  {YELLOW}Cancelled; partial outputs kept.{RESET}")

    model_w = max(len(truncate(o.model_id)) for o in run.outputs)
    lines.append(
        f"  {DIM}{'Model':<{model_w}}  {'Status':<9}  {'Score':>7}"
        f"  {'Code':>8}  {'Latency':>9}  {'Cost':>10}{RESET}"
    )
    for output in run.outputs:
        color = _STATUS_COLORS.get(output.status, DIM)
        if output.score is None:
            score = f"{DIM}{'--':>7}{RESET}"
        else:
            score = f"{score_color(output.score.score)}{pct(output.score.score):>7}{RESET}"
        latency = "--" if output.latency_ms is None else f"{output.latency_ms}ms"
        lines.append(
            f"  {WHITE}{truncate(output.model_id):<{model_w}}{RESET}"
            f"  {color}{output.status.value:<9}{RESET}  {score}"
            f"  {len(output.extracted_code):>7}c  {latency:>9}  {_money(output.cost):>10}"
        )
        if output.error:
            lines.append(f"    {RED}{output.error}{RESET}")
    return lines


def format_multi_run(stats: Sequence[MultiRunStats], num_runs: int) -> list[str]:
    lines = banner(f"Multi-Run Analysis  ({num_runs} runs)", color=BLUE)
    if not stats:
        return [*lines, f"  {DIM}No scored results.{RESET}"]

    model_w = max(len(truncate(s.model_id)) for s in stats)
    lines.append(
        f"  {DIM}{'Model':<{model_w}}  {'Mean':>7}  {'±StdDev':>8}  {'95% CI':>15}"
        f"  {'Range':>15}{RESET}"
    )
    lines.append(f"  {'─' * (model_w + 53)}")
    for s in stats:
        ci = f"[{s.confidence95[0] * 100:.1f}, {s.confidence95[1] * 100:.1f}]"
        spread = f"{pct(s.min)} - {pct(s.max)}"
        lines.append(
            f"  {WHITE}{truncate(s.model_id):<{model_w}}{RESET}"
            f"  {score_color(s.mean)}{pct(s.mean):>7}{RESET}"
            f"  {DIM}±{s.std_dev * 100:>6.1f}%{RESET}"
            f"  {ci:>15}  {spread:>15}"
        )
    return lines


def format_comparisons(comparisons: Sequence[ModelComparison]) -> list[str]:
    lines = ["", f"  {BOLD}Statistical comparison{RESET}"]
    if not comparisons:
        return [*lines, f"  {DIM}Need at least 2 runs per model to compare.{RESET}"]

    for c in comparisons:
        verdict = (
            f"{GREEN}significant{RESET}" if c.is_significant else f"{DIM}not significant{RESET}"
        )
        lines.append(
            f"  {WHITE}{truncate(c.model_a)}{RESET} vs {WHITE}{truncate(c.model_b)}{RESET}"
            f"  diff {c.score_diff * 100:+.2f}%  p={c.p_value:.4f}"
            f"  d={c.effect_size:.3f} ({c.effect_label})  {verdict}"
        )
    return lines


def _board_lines(entries: Sequence[LeaderboardEntry], show_wins: bool) -> list[str]:
    model_w = max(len(truncate(e.model_id)) for e in entries)
    header = f"  {DIM}{'#':>3}  {'Model':<{model_w}}  {'Avg':>7}  {'Tests':>5}  {'±':>6}"
    header += f"  {'Wins':>6}{RESET}" if show_wins else RESET
    lines = [header]
    for e in entries:
        row = (
            f"  {e.rank:>3}  {WHITE}{truncate(e.model_id):<{model_w}}{RESET}"
            f"  {score_color(e.average_score)}{pct(e.average_score):>7}{RESET}"
            f"  {e.total_tests:>5}  {e.consistency * 100:>5.1f}%"
        )
        if show_wins:
            row += f"  {pct(e.win_rate):>6}"
        lines.append(row)
    return lines


def format_leaderboard(board: Leaderboard) -> list[str]:
    lines = banner(f"Leaderboard  ({board.total_runs} runs)")
    if not board.overall:
        return [*lines, f"  {DIM}No completed runs yet.{RESET}"]

    lines += _board_lines(board.overall, show_wins=True)
    for category, entries in board.categories.items():
        lines += ["", f"  {BLUE}{BOLD}{category}{RESET}"]
        lines += _board_lines(entries, show_wins=False)
    if board.difficulties:
        lines += ["", f"  {BLUE}{BOLD}By difficulty{RESET}"]
        for d in board.difficulties:
            average = f"{score_color(d.average_score)}{pct(d.average_score):>7}{RESET}"
            top = f"{WHITE}{truncate(d.top_model)}{RESET} {pct(d.top_model_score)}"
            lines.append(f"  {d.difficulty:<6}  {average}  {d.total_tests:>5} tests  top {top}")
    return lines


def format_models(models: Sequence[ModelInfo]) -> list[str]:
    lines: list[str] = []
    for m in sorted(models, key=lambda m: m.id):
        price = ""
        if m.pricing is not None:
            price = (
                f"  {DIM}${m.pricing.prompt * 1_000_000:.2f} / "
                f"${m.pricing.completion * 1_000_000:.2f} per 1M tokens{RESET}"
            )
        context = f"  {DIM}{m.context_length} ctx{RESET}" if m.context_length else ""
        lines.append(f"  {WHITE}{m.id}{RESET}{context}{price}")
    lines.append(f"  {DIM}{len(models)} models{RESET}")
    return lines


_QUALITY_COLORS = {"excellent": GREEN, "good": GREEN, "fair": YELLOW, "poor": RED}


def format_calibration(result: CalibrationResult, report: CalibrationReport) -> list[str]:
    lines = banner(f"Judge calibration  ·  {result.judge_model}")
    color = _QUALITY_COLORS[report.quality]
    lines += [
        f"  {color}{BOLD}{report.quality.upper()}{RESET}  {report.recommendation}",
        "",
    ]
    lines += [f"  {detail}" for detail in report.details]
    lines.append("")
    for sample in result.samples:
        mark = f"{GREEN}✓{RESET}" if sample.within_tolerance else f"{RED}✗{RESET}"
        lines.append(
            f"  {mark} {sample.sample_id:<24} expected {pct(sample.expected_score):>6}"
            f"  got {pct(sample.actual_score):>6}"
        )
    return lines
