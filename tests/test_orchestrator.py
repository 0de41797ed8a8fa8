"""Tests for bundlebench.orchestrator — running suites through adapters."""

from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from bench_test_helpers import ONE_SHOT, BrokenAdapter, FastAdapter, SlowAdapter

from bundlebench.adapters import ADAPTERS
from bundlebench.errors import ConfigurationError
from bundlebench.orchestrator import format_suites, run_suites
from bundlebench.suite import define_suite

FAKES = {"fast": FastAdapter, "slow": SlowAdapter, "broken": BrokenAdapter}


class TestRunSuites(unittest.IsolatedAsyncioTestCase):
    """Tests for run_suites()."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        patcher = patch.dict(ADAPTERS, FAKES)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def test_one_group_per_suite(self) -> None:
        suites = [define_suite("a", ["a.js"]), define_suite("b", ["b.js"])]
        session = await run_suites(suites, ["slow", "fast"], root=self.root, policy=ONE_SHOT, echo=False)
        self.assertTrue(session.ok)
        self.assertEqual([g.name for g in session.groups], ["a", "b"])
        for g in session.groups:
            self.assertEqual(g.task_names, ["slow", "fast"])
            self.assertEqual(g.report().fastest.name, "fast")

    async def test_displays_each_group(self) -> None:
        buf = io.StringIO()
        with redirect_stdout(buf):
            await run_suites(
                [define_suite("dayjs", ["a.js"])],
                ["slow", "fast"],
                root=self.root,
                policy=ONE_SHOT,
                color=False,
            )
        out = buf.getvalue()
        self.assertIn("dayjs:", out)
        self.assertIn("(fastest)", out)
        self.assertIn("Summary(dayjs):", out)
        self.assertIn("times faster than slow", out)

    async def test_failure_aborts_session(self) -> None:
        suites = [define_suite("ok", ["a.js"]), define_suite("bad", ["b.js"]), define_suite("later", ["c.js"])]
        with self.assertRaises(RuntimeError) as ctx:
            await run_suites(suites, ["fast", "broken"], root=self.root, policy=ONE_SHOT, echo=False)
        self.assertEqual(str(ctx.exception), "cannot build bad")

    async def test_keep_going_records_failure(self) -> None:
        suites = [define_suite("ok", ["a.js"]), define_suite("bad", ["b.js"]), define_suite("later", ["c.js"])]
        with self.assertLogs("bundlebench", level="ERROR") as logs:
            session = await run_suites(
                suites,
                ["fast", "broken"],
                root=self.root,
                policy=ONE_SHOT,
                keep_going=True,
                echo=False,
            )
        self.assertFalse(session.ok)
        self.assertEqual([g.name for g in session.groups], ["ok", "later"])
        self.assertEqual([f.title for f in session.failures], ["bad"])
        self.assertIsInstance(session.failures[0].error, RuntimeError)
        self.assertTrue(any("cannot build bad" in line for line in logs.output))
        self.assertEqual(session.to_dict()["failures"][0]["error_type"], "RuntimeError")

    async def test_invalid_suite_fails_before_any_build(self) -> None:
        with patch.object(FastAdapter, "invoke") as invoke:
            with self.assertRaises(ConfigurationError):
                await run_suites(
                    [define_suite("ok", ["a.js"]), define_suite("empty", [])],
                    ["fast"],
                    root=self.root,
                    policy=ONE_SHOT,
                    echo=False,
                )
        invoke.assert_not_called()

    async def test_unknown_adapter(self) -> None:
        with self.assertRaises(ConfigurationError):
            await run_suites([define_suite("a", ["a.js"])], ["parcel"], root=self.root, echo=False)


class TestFormatSuites(unittest.TestCase):
    """Tests for format_suites()."""

    def test_listing(self) -> None:
        text = format_suites([define_suite("qs", ["index.js"], esbuild={"external": ["x"]})])
        self.assertIn("qs:", text)
        self.assertIn("  input: index.js", text)
        self.assertIn("  esbuild: {'external': ['x']}", text)


if __name__ == "__main__":
    unittest.main()
