"""Exception types raised by the benchmark harness.

Errors raised by the build tools themselves are never wrapped in these
classes; they reach the caller as the tool raised them.
"""

from __future__ import annotations

from dataclasses import dataclass


class BenchError(Exception):
    """Base class for harness errors."""


class ConfigurationError(BenchError):
    """A suite or harness configuration is invalid."""

    def __init__(self, message: str, errors: list[ValidationError] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class EngineError(BenchError):
    """The task runner could not produce results for a group."""


class MissingResultError(EngineError):
    """A registered task finished without producing a result."""

    def __init__(self, group: str, task: str) -> None:
        super().__init__(f"No benchmark result found for {group} {task}")
        self.group = group
        self.task = task


class ReportError(BenchError):
    """Results cannot be formatted into a report."""


class TaskTimeoutError(BenchError):
    """A single build invocation exceeded its time limit."""

    def __init__(self, task: str, timeout: float) -> None:
        super().__init__(f"Task '{task}' timed out after {timeout:g}s")
        self.task = task
        self.timeout = timeout


@dataclass
class ValidationError:
    """A single configuration validation problem."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def raise_for_errors(errors: list[ValidationError], what: str) -> None:
    """Raise ConfigurationError if any fatal validation errors exist."""
    fatal = [e for e in errors if e.severity == "error"]
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ConfigurationError(f"Invalid {what}:\n" + "\n".join(messages), fatal)
