"""ProgressExecutionObserver — renders per-model Rich progress bars to stderr."""

from __future__ import annotations

import sys

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.text import Text

_MODEL_COLORS: list[str] = [
    "cyan",
    "green",
    "yellow",
    "magenta",
    "blue",
]

OVERALL = "Overall"


class _SegmentedBarColumn(ProgressColumn):
    """Bar with four segments: succeeded, failed, in-flight, remaining."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        width = self.bar_width or 40
        total = task.total or 0
        if total > 0:
            failed = int(task.fields.get("failed", 0))
            ok_cells = int((task.completed - failed) / total * width)
            failed_cells = min(int(failed / total * width), width - ok_cells)
            inflight = int(task.fields.get("inflight", 0))
            inflight_cells = min(
                int(inflight / total * width), width - ok_cells - failed_cells
            )
        else:
            ok_cells = failed_cells = inflight_cells = 0
        remaining_cells = width - ok_cells - failed_cells - inflight_cells

        bar = Text()
        bar.append("█" * ok_cells, style="bright_green")
        bar.append("█" * failed_cells, style="red")
        bar.append("▒" * inflight_cells, style="grey50")
        bar.append("░" * remaining_cells, style="dim white")
        return bar


class ProgressExecutionObserver:
    """Renders one progress row per model plus an Overall row on stderr.

    A pair counts as done when it completes, fails or is cancelled. Model
    labels are coloured when stderr is a TTY. Pass ``disabled=True`` to keep
    the counters without any terminal output.

    Does NOT inherit from ExecutionObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._reset()

    def _reset(self) -> None:
        self.done: dict[str, int] = {}
        self.failed: dict[str, int] = {}
        self.inflight: dict[str, int] = {}
        self.total: dict[str, int] = {}
        self._task_ids: dict[str, TaskID] = {}
        self._progress: Progress | None = None
        self._live: Live | None = None

    def _make_desc(self, name: str, index: int, pad_width: int) -> str:
        if name == OVERALL or not sys.stderr.isatty():
            return f"{name:<{pad_width}}"
        color = _MODEL_COLORS[index % len(_MODEL_COLORS)]
        return f"[{color}]{name:<{pad_width}}[/{color}]"

    def _rate_str(self, key: str) -> str:
        if self._progress is None or key not in self._task_ids:
            return "-- pair/s"
        task = self._progress.tasks[self._task_ids[key]]
        elapsed = task.elapsed
        if elapsed and task.completed > 0:
            return f"{task.completed / elapsed:.1f} pair/s"
        return "-- pair/s"

    def _update_task(self, key: str) -> None:
        if self._progress is None or key not in self._task_ids:
            return
        self._progress.update(
            self._task_ids[key],
            completed=self.done[key],
            done=self.done[key],
            failed=self.failed[key],
            inflight=self.inflight[key],
            rate=self._rate_str(key=key),
        )

    def _bump(self, model_id: str, *, started: bool = False, failed: bool = False) -> None:
        for key in (model_id, OVERALL):
            if key not in self.done:
                continue
            if started:
                self.inflight[key] += 1
            else:
                self.done[key] += 1
                self.inflight[key] = max(0, self.inflight[key] - 1)
                if failed:
                    self.failed[key] += 1
            if not self._disabled:
                self._update_task(key=key)

    # ------------------------------------------------------------------
    # Observer events
    # ------------------------------------------------------------------

    def run_started(
        self,
        run_id: str,
        suite_id: str,
        total_tasks: int,
        model_ids: list[str],
        max_concurrent: int,
    ) -> None:
        self._reset()
        per_model = total_tasks // len(model_ids) if model_ids else 0
        for name in model_ids:
            self.total[name] = per_model
        self.total[OVERALL] = total_tasks
        for name in self.total:
            self.done[name] = 0
            self.failed[name] = 0
            self.inflight[name] = 0

        if self._disabled:
            return

        pad_width = max(len(name) for name in [*model_ids, OVERALL])
        console = Console(stderr=True)
        legend = Text.assemble(
            "  Legend:  ",
            ("█", "bright_green"),
            " scored  ",
            ("█", "red"),
            " failed  ",
            ("▒", "grey50"),
            " in-flight  ",
            ("░", "dim white"),
            " remaining",
        )
        self._progress = Progress(
            TextColumn("{task.description}"),
            _SegmentedBarColumn(bar_width=40),
            TextColumn("{task.fields[done]}+{task.fields[inflight]}/{task.total:.0f}"),
            TimeElapsedColumn(),
            TextColumn("eta"),
            TimeRemainingColumn(),
            TextColumn("{task.fields[rate]}"),
            console=console,
            refresh_per_second=10,
            transient=False,
        )
        for index, name in enumerate([OVERALL, *model_ids]):
            self._task_ids[name] = self._progress.add_task(
                description=self._make_desc(name=name, index=index - 1, pad_width=pad_width),
                total=float(self.total[name]),
                done=0,
                failed=0,
                inflight=0,
                rate="-- pair/s",
            )

        self._live = Live(
            Group(self._progress, Text(""), legend), console=console, refresh_per_second=10
        )
        self._live.start()

    def run_completed(
        self,
        run_id: str,
        completed: int,
        failed: int,
        cancelled: int,
        elapsed_seconds: float,
        was_cancelled: bool,
    ) -> None:
        if self._live is not None:
            self._live.stop()
        self._live = None
        self._progress = None

    def result_started(self, run_id: str, test_case_id: str, model_id: str) -> None:
        self._bump(model_id, started=True)

    def result_completed(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        latency_ms: int,
        score: float,
    ) -> None:
        self._bump(model_id)

    def result_failed(
        self, run_id: str, test_case_id: str, model_id: str, reason: str
    ) -> None:
        self._bump(model_id, failed=True)

    def result_cancelled(self, run_id: str, test_case_id: str, model_id: str) -> None:
        self._bump(model_id)

    def empty_response_retry(
        self,
        run_id: str,
        test_case_id: str,
        model_id: str,
        attempt: int,
        backoff_seconds: float,
    ) -> None:
        pass

    def task_failed(self, run_id: str, task_index: int, reason: str) -> None:
        pass
