"""CLI entrypoint for benchmaker — typer app with run/compare/leaderboard/arena commands."""

import asyncio
import contextlib
import signal
import sys
from collections.abc import Iterator
from pathlib import Path

import structlog
import typer

from benchmaker.analysis.application.leaderboard import build_leaderboard, summarize_run
from benchmaker.analysis.application.statistics import compare_all, multi_run_stats
from benchmaker.arena.application.orchestrator import CodeArenaOrchestrator
from benchmaker.arena.domain.code_extractor import DEFAULT_FRONTEND_SYSTEM_PROMPT
from benchmaker.arena.domain.output import CodeArenaRun
from benchmaker.arena.infrastructure.memory_store import InMemoryArenaStore
from benchmaker.arena.infrastructure.observer import StructlogArenaObserver
from benchmaker.cli.output.report import (
    DIM,
    RED,
    RESET,
    YELLOW,
    format_arena_run,
    format_calibration,
    format_comparisons,
    format_leaderboard,
    format_models,
    format_multi_run,
    format_run_summary,
)
from benchmaker.config.domain.config import BenchmakerConfig
from benchmaker.config.infrastructure.observer import StructlogConfigObserver
from benchmaker.config.infrastructure.yaml_loader import YamlConfigLoader
from benchmaker.core.cancellation import CancellationToken
from benchmaker.core.errors import BenchmakerError
from benchmaker.execution.application.orchestrator import ExecutionOrchestrator
from benchmaker.execution.domain.observer import ExecutionObserver
from benchmaker.execution.domain.result import RunResult
from benchmaker.execution.infrastructure.composite_observer import (
    CompositeExecutionObserver,
)
from benchmaker.execution.infrastructure.memory_store import InMemoryResultStore
from benchmaker.execution.infrastructure.observer import StructlogExecutionObserver
from benchmaker.execution.infrastructure.progress_observer import (
    ProgressExecutionObserver,
)
from benchmaker.gateway.domain.catalog import ModelPricing, pricing_index
from benchmaker.gateway.domain.gateway import InferenceGateway
from benchmaker.gateway.infrastructure.errors import GatewayRequestError
from benchmaker.gateway.infrastructure.litellm_gateway import LiteLLMGateway
from benchmaker.gateway.infrastructure.observer import StructlogGatewayObserver
from benchmaker.scoring.application.calibration import calibrate_judge, interpret_calibration
from benchmaker.scoring.application.dispatcher import ScoringDispatcher
from benchmaker.scoring.application.llm_judge import LLMJudgeScorer
from benchmaker.scoring.infrastructure.observer import StructlogJudgeObserver
from benchmaker.storage.domain.snapshot import Snapshot
from benchmaker.storage.infrastructure.json_store import JsonSnapshotStore
from benchmaker.storage.infrastructure.observer import StructlogSnapshotObserver
from benchmaker.suite.domain.suite import TestSuite
from benchmaker.suite.infrastructure.observer import StructlogSuiteObserver
from benchmaker.suite.infrastructure.yaml_loader import YamlSuiteLoader

app = typer.Typer(add_completion=False)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def _echo(lines: list[str]) -> None:
    for line in lines:
        typer.echo(line)


def _load_config(config_path: Path) -> BenchmakerConfig:
    return YamlConfigLoader(observer=StructlogConfigObserver()).load(path=config_path)


def _load_suite(config: BenchmakerConfig) -> TestSuite:
    return YamlSuiteLoader(observer=StructlogSuiteObserver()).load(path=config.suite)


def _snapshot_store(config: BenchmakerConfig) -> JsonSnapshotStore:
    return JsonSnapshotStore(path=config.store, observer=StructlogSnapshotObserver())


def _make_gateway(config: BenchmakerConfig) -> InferenceGateway:
    return LiteLLMGateway(config=config.gateway, observer=StructlogGatewayObserver())


def _make_judge(
    config: BenchmakerConfig, gateway: InferenceGateway
) -> LLMJudgeScorer | None:
    if config.judge is None:
        return None
    return LLMJudgeScorer(
        gateway=gateway, config=config.judge, observer=StructlogJudgeObserver()
    )


async def _fetch_pricing(gateway: InferenceGateway) -> dict[str, ModelPricing]:
    """Pricing from the model catalog; an unreachable catalog only disables cost."""
    try:
        return pricing_index(await gateway.fetch_models())
    except GatewayRequestError as exc:
        structlog.get_logger().warning("cli.pricing.unavailable", reason=str(exc))
        return {}


@contextlib.contextmanager
def _sigint_cancels(token: CancellationToken) -> Iterator[None]:
    """Route Ctrl-C to ``token`` while the event loop is running."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel)
    except (NotImplementedError, RuntimeError):
        # Not supported on this platform or outside the main thread.
        yield
        return
    try:
        yield
    finally:
        loop.remove_signal_handler(signal.SIGINT)


async def _run_benchmark(
    config: BenchmakerConfig,
    suite: TestSuite,
    runs: int,
    observer: ExecutionObserver,
) -> list[RunResult]:
    """Execute ``runs`` sequential runs, stopping early once one is cancelled."""
    gateway = _make_gateway(config)
    snapshot_store = _snapshot_store(config)
    snapshot = snapshot_store.load()
    store = InMemoryResultStore(runs=snapshot.runs)
    orchestrator = ExecutionOrchestrator(
        gateway=gateway,
        store=store,
        dispatcher=ScoringDispatcher(judge=_make_judge(config, gateway)),
        observer=observer,
        config=config.execution,
        pricing=await _fetch_pricing(gateway),
        judge_model=config.judge.model if config.judge else None,
    )

    token = CancellationToken()
    completed: list[RunResult] = []
    with _sigint_cancels(token):
        for _ in range(runs):
            run = await orchestrator.execute_run(
                suite, models=config.models, parameters=config.parameters, cancel_token=token
            )
            completed.append(run)
            if run.cancelled:
                break

    snapshot_store.save(snapshot.with_suite(suite).with_runs(store.list_runs()))
    return completed


def _print_multi_run(runs: list[RunResult], suite: TestSuite) -> None:
    _echo(format_multi_run(multi_run_stats(runs, suite.test_cases), num_runs=len(runs)))
    _echo(format_comparisons(compare_all(runs, suite.test_cases)))


def _fail(exc: BenchmakerError) -> None:
    typer.echo(f"{RED}{exc}{RESET}")
    sys.exit(1)


@app.command()
def run(
    config_path: Path = typer.Argument(..., help="Path to benchmark config YAML"),
    runs: int = typer.Option(1, "--runs", "-n", min=1, help="Number of runs to execute"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Run the configured suite against every configured model."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path)
        suite = _load_suite(config)

        observers: list[ExecutionObserver] = [StructlogExecutionObserver()]
        if log_format != "json":
            observers.append(ProgressExecutionObserver())
        observer = CompositeExecutionObserver(observers=observers)

        results = asyncio.run(_run_benchmark(config, suite, runs, observer))

        for result in results:
            _echo(format_run_summary(summarize_run(result, suite.test_cases)))
        if results and results[-1].cancelled:
            typer.echo(f"\n  {YELLOW}Run cancelled; partial results saved.{RESET}")
        if len(results) > 1:
            _print_multi_run(results, suite)
        typer.echo(f"\n  {DIM}Results saved to {config.store}{RESET}\n")
    except KeyboardInterrupt:
        typer.echo("Run interrupted.")
        sys.exit(1)
    except BenchmakerError as exc:
        _fail(exc)


@app.command()
def compare(
    config_path: Path = typer.Argument(..., help="Path to benchmark config YAML"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Compare models across every stored run of the configured suite."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path)
        suite = _load_suite(config)
        snapshot = _snapshot_store(config).load()
        runs = InMemoryResultStore(runs=snapshot.runs).runs_for_suite(suite.id)
        if not runs:
            typer.echo(f"  {DIM}No completed runs of {suite.id!r} yet.{RESET}")
            return
        _print_multi_run(runs, suite)
    except BenchmakerError as exc:
        _fail(exc)


@app.command()
def leaderboard(
    config_path: Path = typer.Argument(..., help="Path to benchmark config YAML"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Rank models across every stored run."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path)
        snapshot: Snapshot = _snapshot_store(config).load()
        _echo(format_leaderboard(build_leaderboard(snapshot.runs, snapshot.test_suites)))
    except BenchmakerError as exc:
        _fail(exc)


@app.command()
def models(
    config_path: Path = typer.Argument(..., help="Path to benchmark config YAML"),
    search: str = typer.Option("", "--search", "-s", help="Filter model ids"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """List the models offered by the configured gateway."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path)
        catalog = asyncio.run(_make_gateway(config).fetch_models())
        needle = search.lower()
        _echo(format_models([m for m in catalog if needle in m.id.lower()]))
    except BenchmakerError as exc:
        _fail(exc)


@app.command()
def calibrate(
    config_path: Path = typer.Argument(..., help="Path to benchmark config YAML"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Score reference samples with the configured judge and rate its reliability."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path)
        judge = _make_judge(config, _make_gateway(config))
        if judge is None:
            typer.echo(f"{RED}Failed to calibrate: no judge configured{RESET}")
            sys.exit(1)
        result = asyncio.run(calibrate_judge(judge))
        _echo(format_calibration(result, interpret_calibration(result)))
    except BenchmakerError as exc:
        _fail(exc)


async def _run_arena(
    config: BenchmakerConfig, prompt: str, system_prompt: str
) -> CodeArenaRun:
    gateway = _make_gateway(config)
    snapshot_store = _snapshot_store(config)
    snapshot = snapshot_store.load()
    store = InMemoryArenaStore()
    orchestrator = CodeArenaOrchestrator(
        gateway=gateway,
        store=store,
        observer=StructlogArenaObserver(),
        judge=_make_judge(config, gateway),
        max_concurrent=config.execution.max_concurrent,
        pricing=await _fetch_pricing(gateway),
    )
    token = CancellationToken()
    with _sigint_cancels(token):
        arena_run = await orchestrator.execute(
            prompt,
            models=config.models,
            parameters=config.parameters,
            system_prompt=system_prompt,
            cancel_token=token,
        )
    snapshot_store.save(snapshot.with_arena_runs(store.list_runs()))
    return arena_run


def _write_outputs(arena_run: CodeArenaRun, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    for output in arena_run.outputs:
        if output.extracted_code:
            name = output.model_id.replace("/", "__")
            (out_dir / f"{name}.html").write_text(output.extracted_code, encoding="utf-8")


@app.command()
def arena(
    config_path: Path = typer.Argument(..., help="Path to benchmark config YAML"),
    prompt: str = typer.Argument(..., help="What the page should look like and do"),
    system_prompt: str = typer.Option(
        DEFAULT_FRONTEND_SYSTEM_PROMPT, "--system-prompt", help="System prompt sent to every model"
    ),
    out: Path | None = typer.Option(
        None, "--out", help="Directory to write one HTML file per model"
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Race one code-generation prompt across every configured model."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path)
        arena_run = asyncio.run(_run_arena(config, prompt, system_prompt))
        _echo(format_arena_run(arena_run))
        if out is not None:
            _write_outputs(arena_run, out)
            typer.echo(f"\n  {DIM}Pages written to {out}{RESET}")
        typer.echo(f"\n  {DIM}Results saved to {config.store}{RESET}\n")
    except BenchmakerError as exc:
        _fail(exc)


if __name__ == "__main__":
    app()
