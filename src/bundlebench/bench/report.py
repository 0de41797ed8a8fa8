"""Ranked, human-readable comparison of a group's results.

Output format::

    dayjs:
      esbuild: 41.20ms (fastest)
      rollup: 530.77ms
    Summary(dayjs):
      esbuild is
      - 12.88 times faster than rollup
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

import click

from bundlebench.bench.results import TaskResult
from bundlebench.errors import ReportError


@dataclass(frozen=True)
class Report:
    """Results of one group, ranked fastest first."""

    name: str
    ranked: tuple[TaskResult, ...]

    @property
    def fastest(self) -> TaskResult:
        return self.ranked[0]

    @property
    def ratios(self) -> list[tuple[str, float]]:
        return relative_ratios(self.ranked)


def rank(results: Sequence[TaskResult]) -> list[TaskResult]:
    """Sort by mean, ascending.  Ties keep their input order."""
    return sorted(results, key=lambda r: r.mean)


def relative_ratios(ranked: Sequence[TaskResult]) -> list[tuple[str, float]]:
    """``(name, mean / fastest mean)`` for every entry after the first."""
    if len(ranked) < 2:
        return []
    fastest_mean = ranked[0].mean
    out: list[tuple[str, float]] = []
    for other in ranked[1:]:
        if fastest_mean > 0:
            ratio = other.mean / fastest_mean
        else:
            ratio = 1.0 if other.mean == fastest_mean else float("inf")
        out.append((other.name, ratio))
    return out


def build_report(
    name: str,
    task_names: Sequence[str],
    results: Mapping[str, TaskResult],
) -> Report:
    """Collect one result per task name, in registration order, and rank them.

    Raises:
        ReportError: If there are no results, or a task has none.
    """
    if not task_names or not results:
        raise ReportError(f"No benchmark results to report for '{name}'.")
    ordered: list[TaskResult] = []
    for task_name in task_names:
        result = results.get(task_name)
        if result is None:
            raise ReportError(f"No benchmark result found for {name} {task_name}")
        ordered.append(result)
    return Report(name=name, ranked=tuple(rank(ordered)))


def format_report(report: Report, *, color: bool = False) -> str:
    """Render *report* as text.  ANSI styling only when *color* is set."""

    def style(text: str, **kwargs: object) -> str:
        return click.style(text, **kwargs) if color else text  # type: ignore[arg-type]

    lines: list[str] = [f"{style(report.name, fg='yellow')}:"]
    for idx, result in enumerate(report.ranked):
        line = f"  {result.name}: {result.mean:.2f}ms"
        if idx == 0:
            line = style(f"{line} (fastest)", fg="green")
        lines.append(line)

    ratios = report.ratios
    if ratios:
        lines.append(f"{style('Summary', fg='bright_blue')}{style(f'({report.name})', fg='bright_black')}:")
        lines.append(f"  {report.fastest.name} is")
        for other_name, ratio in ratios:
            lines.append(f"  - {style(f'{ratio:.2f}', fg='green')} times faster than {other_name}")

    return "\n".join(lines)


def display(report: Report, *, color: bool | None = None) -> None:
    """Echo *report* to stdout.

    *color* follows click's convention: None styles only when stdout is
    a terminal.
    """
    click.echo(format_report(report, color=True), color=color)
