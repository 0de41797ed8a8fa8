"""Tests for bundlebench.bench.timing — trial calibration and measurement."""

from __future__ import annotations

import asyncio
import unittest

from bundlebench.bench.timing import TrialPolicy, measure, validate_policy
from bundlebench.errors import TaskTimeoutError


class Counter:
    """Async callable that counts invocations."""

    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self.delay = delay

    async def __call__(self) -> None:
        self.calls += 1
        await asyncio.sleep(self.delay)


# ---------------------------------------------------------------------------
# TrialPolicy validation
# ---------------------------------------------------------------------------


class TestValidatePolicy(unittest.TestCase):
    """Tests for validate_policy()."""

    def test_defaults_valid(self) -> None:
        self.assertEqual(validate_policy(TrialPolicy()), [])

    def test_zero_iterations(self) -> None:
        errors = validate_policy(TrialPolicy(iterations=0))
        self.assertTrue(any(e.field == "iterations" and e.severity == "error" for e in errors))

    def test_few_iterations_warns(self) -> None:
        errors = validate_policy(TrialPolicy(iterations=2))
        self.assertEqual([e.severity for e in errors if e.field == "iterations"], ["warning"])

    def test_negative_warmup(self) -> None:
        errors = validate_policy(TrialPolicy(warmup=-1))
        self.assertTrue(any(e.field == "warmup" for e in errors))

    def test_max_below_iterations(self) -> None:
        errors = validate_policy(TrialPolicy(iterations=10, max_iterations=5))
        self.assertTrue(any(e.field == "max_iterations" for e in errors))

    def test_non_positive_timeout(self) -> None:
        errors = validate_policy(TrialPolicy(timeout=0))
        self.assertTrue(any(e.field == "timeout" for e in errors))


# ---------------------------------------------------------------------------
# measure
# ---------------------------------------------------------------------------


class TestMeasure(unittest.IsolatedAsyncioTestCase):
    """Tests for measure()."""

    async def test_iterations_and_warmup(self) -> None:
        """Warmup runs are untimed; timed runs stop at the minimum count."""
        fn = Counter()
        policy = TrialPolicy(warmup=2, iterations=3, min_time_ms=0.0, max_iterations=10)
        samples = await measure("t", fn, policy)
        self.assertEqual(len(samples), 3)
        self.assertEqual(fn.calls, 5)
        self.assertTrue(all(s >= 0 for s in samples))

    async def test_min_time_extends_trials(self) -> None:
        """Fast tasks keep running until the time floor is reached."""
        fn = Counter(delay=0.005)
        policy = TrialPolicy(warmup=0, iterations=1, min_time_ms=30.0, max_iterations=100)
        samples = await measure("t", fn, policy)
        self.assertGreater(len(samples), 1)
        self.assertGreaterEqual(sum(samples), 30.0)

    async def test_max_iterations_caps(self) -> None:
        fn = Counter()
        policy = TrialPolicy(warmup=0, iterations=2, min_time_ms=60_000.0, max_iterations=4)
        samples = await measure("t", fn, policy)
        self.assertEqual(len(samples), 4)

    async def test_samples_in_milliseconds(self) -> None:
        fn = Counter(delay=0.02)
        policy = TrialPolicy(warmup=0, iterations=1, min_time_ms=0.0, max_iterations=1)
        samples = await measure("t", fn, policy)
        self.assertGreaterEqual(samples[0], 15.0)

    async def test_error_propagates(self) -> None:
        async def boom() -> None:
            raise OSError("disk full")

        policy = TrialPolicy(warmup=0, iterations=1, min_time_ms=0.0, max_iterations=1)
        with self.assertRaises(OSError) as ctx:
            await measure("t", boom, policy)
        self.assertEqual(str(ctx.exception), "disk full")

    async def test_timeout(self) -> None:
        fn = Counter(delay=5.0)
        policy = TrialPolicy(warmup=0, iterations=1, min_time_ms=0.0, max_iterations=1, timeout=0.05)
        with self.assertRaises(TaskTimeoutError) as ctx:
            await measure("slowpoke", fn, policy)
        self.assertEqual(ctx.exception.task, "slowpoke")
        self.assertIn("timed out", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
