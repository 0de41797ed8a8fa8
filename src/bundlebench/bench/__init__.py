"""Benchmark engine for bundlebench.

Groups named async tasks, measures each one with repeated trials, and
ranks the results by mean latency.
"""

from bundlebench.bench.engine import GroupResult, SequentialExecutor, TaskGroup, TaskRegistry, group
from bundlebench.bench.report import Report, build_report, display, format_report, rank
from bundlebench.bench.results import TaskResult
from bundlebench.bench.timing import TrialPolicy

__all__ = [
    "GroupResult",
    "Report",
    "SequentialExecutor",
    "TaskGroup",
    "TaskRegistry",
    "TaskResult",
    "TrialPolicy",
    "build_report",
    "display",
    "format_report",
    "group",
    "rank",
]
