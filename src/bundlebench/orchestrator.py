"""Run every configured suite through every selected adapter.

One task group per suite, one task per adapter.  Suites run strictly
one after another, and so do the tasks inside each group.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from bundlebench.adapters import Adapter, get_adapter
from bundlebench.bench.engine import GroupResult, TaskRegistry, group
from bundlebench.bench.timing import TrialPolicy
from bundlebench.suite import SuiteDefinition, check_suites

log = logging.getLogger("bundlebench")


@dataclass
class SuiteFailure:
    """A suite whose group aborted."""

    title: str
    error: BaseException

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "error_type": type(self.error).__name__,
            "error": str(self.error),
        }


@dataclass
class SessionResult:
    """Outcome of a benchmark session."""

    groups: list[GroupResult] = field(default_factory=list)
    failures: list[SuiteFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict[str, object]:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "failures": [f.to_dict() for f in self.failures],
        }


def _register(suite: SuiteDefinition, adapters: Sequence[Adapter]):
    def register(bench: TaskRegistry) -> None:
        for adapter in adapters:
            # Bind the loop variable; each closure invokes its own adapter.
            bench.add(adapter.name, lambda adapter=adapter: adapter.invoke(suite))

    return register


def format_suites(suites: Sequence[SuiteDefinition]) -> str:
    """Multi-line listing of suites for the session log."""
    lines: list[str] = []
    for suite in suites:
        lines.append(f"{suite.title}:")
        for entry in suite.inputs:
            lines.append(f"  input: {entry}")
        for name, opts in suite.options.items():
            lines.append(f"  {name}: {dict(opts)}")
    return "\n".join(lines)


async def run_suites(
    suites: Sequence[SuiteDefinition],
    adapter_names: Sequence[str],
    *,
    root: Path,
    policy: TrialPolicy | None = None,
    keep_going: bool = False,
    echo: bool = True,
    color: bool | None = None,
) -> SessionResult:
    """Benchmark each suite with each adapter and display the rankings.

    All suites are validated before any adapter runs.  By default the
    first failing group aborts the session and its error propagates
    unchanged; with *keep_going* the failure is logged and recorded and
    the remaining suites still run.

    Raises:
        ConfigurationError: If a suite or adapter name is invalid.
    """
    check_suites(suites)
    adapters = [get_adapter(name, root) for name in adapter_names]
    log.info("Benchmarking %d suite(s) with %s", len(suites), ", ".join(adapter_names))
    log.info("\n%s", format_suites(suites))

    session = SessionResult()
    for suite in suites:
        bench_group = group(suite.title, _register(suite, adapters), policy)
        try:
            result = await bench_group.run()
        except Exception as exc:
            if not keep_going:
                raise
            log.error("Suite '%s' failed: %s: %s", suite.title, type(exc).__name__, exc)
            session.failures.append(SuiteFailure(title=suite.title, error=exc))
            continue
        session.groups.append(result)
        if echo:
            result.display(color=color)
    return session
