"""Trial calibration and wall-clock measurement.

A task is measured by awaiting its coroutine function repeatedly:

1. ``warmup`` untimed invocations (lets disk caches and lazily loaded
   tool code settle).
2. Timed invocations until at least ``iterations`` samples exist *and*
   the samples add up to ``min_time_ms``, capped at ``max_iterations``.

Slow builds stop after ``iterations`` samples; fast ones keep going
until the time floor is met.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from bundlebench.errors import TaskTimeoutError, ValidationError

log = logging.getLogger("bundlebench")

TaskFn = Callable[[], Awaitable[object]]


@dataclass(frozen=True)
class TrialPolicy:
    """How many times each task is invoked."""

    warmup: int = 1
    iterations: int = 5  # minimum number of timed samples
    min_time_ms: float = 500.0  # minimum total measured time
    max_iterations: int = 50
    timeout: float | None = None  # per invocation, in seconds

    def to_dict(self) -> dict[str, object]:
        return {
            "warmup": self.warmup,
            "iterations": self.iterations,
            "min_time_ms": self.min_time_ms,
            "max_iterations": self.max_iterations,
            "timeout": self.timeout,
        }


def validate_policy(policy: TrialPolicy) -> list[ValidationError]:
    """Validate a trial policy.  Empty list means valid."""
    errors: list[ValidationError] = []
    if policy.iterations < 1:
        errors.append(
            ValidationError(
                field="iterations",
                message=f"Need at least 1 measured iteration (got {policy.iterations}).",
            )
        )
    elif policy.iterations < 3:
        errors.append(
            ValidationError(
                field="iterations",
                message=(
                    f"Fewer than 3 measured iterations gives a noisy mean "
                    f"(got {policy.iterations})."
                ),
                severity="warning",
            )
        )
    if policy.warmup < 0:
        errors.append(
            ValidationError(
                field="warmup",
                message=f"Warmup iterations cannot be negative (got {policy.warmup}).",
            )
        )
    if policy.min_time_ms < 0:
        errors.append(
            ValidationError(
                field="min_time_ms",
                message=f"Minimum time cannot be negative (got {policy.min_time_ms}).",
            )
        )
    if policy.max_iterations < policy.iterations:
        errors.append(
            ValidationError(
                field="max_iterations",
                message=(
                    f"max_iterations ({policy.max_iterations}) must be at least "
                    f"iterations ({policy.iterations})."
                ),
            )
        )
    if policy.timeout is not None and policy.timeout <= 0:
        errors.append(
            ValidationError(
                field="timeout",
                message=f"Timeout must be positive (got {policy.timeout}).",
            )
        )
    return errors


async def _invoke(name: str, fn: TaskFn, timeout: float | None) -> None:
    if timeout is None:
        await fn()
        return
    try:
        await asyncio.wait_for(fn(), timeout=timeout)
    except asyncio.TimeoutError:
        raise TaskTimeoutError(name, timeout) from None


async def measure(name: str, fn: TaskFn, policy: TrialPolicy) -> list[float]:
    """Run the trials for one task and return latencies in milliseconds.

    Any exception raised by *fn* propagates unchanged and ends the
    measurement.
    """
    for i in range(policy.warmup):
        log.debug("%s: warmup %d/%d", name, i + 1, policy.warmup)
        await _invoke(name, fn, policy.timeout)

    samples: list[float] = []
    total_ms = 0.0
    while len(samples) < policy.max_iterations and (
        len(samples) < policy.iterations or total_ms < policy.min_time_ms
    ):
        start = time.perf_counter()
        await _invoke(name, fn, policy.timeout)
        elapsed_ms = (time.perf_counter() - start) * 1000
        samples.append(elapsed_ms)
        total_ms += elapsed_ms
        log.debug("%s: trial %d took %.2fms", name, len(samples), elapsed_ms)

    return samples
