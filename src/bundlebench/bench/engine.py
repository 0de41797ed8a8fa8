"""Task runner: groups of named async tasks, timed one after another.

Usage::

    bench_group = group("dayjs", lambda bench: (
        bench.add("rollup", lambda: rollup.invoke(suite)),
        bench.add("esbuild", lambda: esbuild.invoke(suite)),
    ))
    result = await bench_group.run()
    result.display()

Tasks never run concurrently.  Build tools compete for CPU, disk and
temp directories, so overlapping them would distort every measurement.
The ``SequentialExecutor`` below is the one place that decides this.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from bundlebench.bench.report import Report, build_report, display
from bundlebench.bench.results import TaskResult
from bundlebench.bench.timing import TaskFn, TrialPolicy, measure, validate_policy
from bundlebench.errors import (
    ConfigurationError,
    EngineError,
    MissingResultError,
    raise_for_errors,
)

log = logging.getLogger("bundlebench")


# ---------------------------------------------------------------------------
# Task registration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Task:
    """A named unit of work: a zero-argument coroutine function."""

    name: str
    fn: TaskFn


class TaskRegistry:
    """Handle passed to the registration callback of :func:`group`."""

    def __init__(self, group_name: str) -> None:
        self.group_name = group_name
        self.tasks: list[Task] = []

    def add(self, name: str, fn: TaskFn) -> TaskRegistry:
        """Append a task.  Returns the registry so calls can be chained."""
        if not name:
            raise ConfigurationError(f"Task names in group '{self.group_name}' must be non-empty.")
        if any(t.name == name for t in self.tasks):
            raise ConfigurationError(f"Duplicate task '{name}' in group '{self.group_name}'.")
        self.tasks.append(Task(name=name, fn=fn))
        return self


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


class SequentialExecutor:
    """Runs tasks strictly one after another.

    Task N, including all of its warmup and timed trials, is settled
    before task N+1 starts.  The first exception stops execution and
    propagates; tasks after it are not started.
    """

    def __init__(self, policy: TrialPolicy) -> None:
        self.policy = policy

    async def execute(self, group_name: str, tasks: list[Task]) -> dict[str, TaskResult]:
        results: dict[str, TaskResult] = {}
        for idx, task in enumerate(tasks, start=1):
            log.info("[%s %d/%d] %s", group_name, idx, len(tasks), task.name)
            try:
                samples = await measure(task.name, task.fn, self.policy)
            except Exception:
                log.debug("%s: task '%s' failed", group_name, task.name, exc_info=True)
                raise
            if samples:
                results[task.name] = TaskResult.from_samples(task.name, samples)
                log.debug(
                    "%s: %s mean %.2fms over %d trials",
                    group_name,
                    task.name,
                    results[task.name].mean,
                    len(samples),
                )
        return results


# ---------------------------------------------------------------------------
# TaskGroup
# ---------------------------------------------------------------------------


@dataclass
class GroupResult:
    """Results of one executed group, ready for reporting."""

    name: str
    task_names: list[str]
    raw: dict[str, TaskResult]

    def report(self) -> Report:
        """Rank the results.  Raises ReportError if any are missing."""
        return build_report(self.name, self.task_names, self.raw)

    def display(self, *, color: bool | None = None) -> None:
        """Echo the ranked report to stdout."""
        display(self.report(), color=color)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "tasks": [self.raw[n].to_dict() for n in self.task_names if n in self.raw],
        }


class TaskGroup:
    """A set of tasks benchmarked together.  Runs exactly once."""

    def __init__(self, name: str, tasks: list[Task], policy: TrialPolicy | None = None) -> None:
        self.name = name
        self.tasks = list(tasks)
        self.policy = policy or TrialPolicy()
        self.executor = SequentialExecutor(self.policy)
        self._ran = False

    @property
    def task_names(self) -> list[str]:
        return [t.name for t in self.tasks]

    async def run(self) -> GroupResult:
        """Measure every task and return the collected results.

        Raises:
            EngineError: If the group has no tasks or was already run.
            MissingResultError: If a task finished without a result.
            Exception: Whatever a task raised, unchanged.
        """
        if self._ran:
            raise EngineError(f"Benchmark group '{self.name}' has already been run.")
        self._ran = True

        if not self.tasks:
            raise EngineError(f"No benchmark results: group '{self.name}' has no tasks.")

        results = await self.executor.execute(self.name, self.tasks)
        if not results:
            raise EngineError(f"No benchmark results for group '{self.name}'.")
        for task in self.tasks:
            if task.name not in results:
                raise MissingResultError(self.name, task.name)

        return GroupResult(name=self.name, task_names=self.task_names, raw=results)


def group(
    name: str,
    register: Callable[[TaskRegistry], Any],
    policy: TrialPolicy | None = None,
) -> TaskGroup:
    """Create a task group, calling *register* synchronously to fill it.

    Raises:
        ConfigurationError: If *policy* is invalid or registration fails
            validation.
    """
    if policy is not None:
        raise_for_errors(validate_policy(policy), "trial policy")
    registry = TaskRegistry(name)
    register(registry)
    return TaskGroup(name, registry.tasks, policy)
