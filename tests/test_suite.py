"""Tests for bundlebench.suite — suite definitions and output locations."""

from __future__ import annotations

import unittest
from pathlib import Path

from bundlebench.errors import ConfigurationError
from bundlebench.suite import (
    SuiteDefinition,
    adapter_options,
    check_suites,
    define_suite,
    output_dir,
    validate_suite,
    validate_suites,
)


class TestSuiteDefinition(unittest.TestCase):
    """Tests for the SuiteDefinition dataclass."""

    def test_inputs_become_tuple(self) -> None:
        suite = SuiteDefinition(title="dayjs", inputs=["a.js", "b.js"])
        self.assertEqual(suite.inputs, ("a.js", "b.js"))

    def test_immutable(self) -> None:
        suite = define_suite("dayjs", ["a.js"], esbuild={"format": "cjs"})
        with self.assertRaises(AttributeError):
            suite.title = "other"  # type: ignore[misc]
        with self.assertRaises(TypeError):
            suite.options["esbuild"]["format"] = "esm"  # type: ignore[index]
        with self.assertRaises(TypeError):
            suite.options["rollup"] = {}  # type: ignore[index]

    def test_caller_dict_not_shared(self) -> None:
        opts = {"external": ["react"]}
        suite = define_suite("react", ["react"], esbuild=opts)
        opts["external"].append("react-dom")
        self.assertEqual(suite.options["esbuild"]["external"], ["react"])

    def test_round_trip_dict(self) -> None:
        data = {"title": "vue", "inputs": ["vue-entry.js"], "options": {"rollup": {"format": "cjs"}}}
        self.assertEqual(SuiteDefinition.from_dict(data).to_dict(), data)

    def test_from_dict_single_input_string(self) -> None:
        suite = SuiteDefinition.from_dict({"title": "x", "inputs": "main.js"})
        self.assertEqual(suite.inputs, ("main.js",))

    def test_bare_string_inputs_rejected(self) -> None:
        with self.assertRaises(TypeError):
            SuiteDefinition(title="dayjs", inputs="a.js")  # type: ignore[arg-type]

    def test_hashable_with_options(self) -> None:
        a = define_suite("dayjs", ["a.js"], esbuild={"format": "cjs"})
        b = define_suite("dayjs", ["a.js"], esbuild={"format": "cjs"})
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertEqual(len({a, b, define_suite("vue", ["v.js"])}), 2)


class TestAdapterOptions(unittest.TestCase):
    """Tests for adapter_options()."""

    def test_absent_is_empty(self) -> None:
        self.assertEqual(adapter_options(define_suite("x", ["a"]), "rollup"), {})

    def test_copy_is_private(self) -> None:
        suite = define_suite("x", ["a"], esbuild={"external": ["react"]})
        opts = adapter_options(suite, "esbuild")
        opts["external"].append("vue")
        opts["format"] = "cjs"
        self.assertEqual(dict(suite.options["esbuild"]), {"external": ["react"]})


class TestValidation(unittest.TestCase):
    """Tests for suite validation."""

    def test_valid(self) -> None:
        self.assertEqual(validate_suite(define_suite("dayjs", ["a.js"])), [])

    def test_empty_title(self) -> None:
        errors = validate_suite(define_suite("", ["a.js"]))
        self.assertTrue(any(e.field == "title" for e in errors))

    def test_title_with_separator(self) -> None:
        for title in ("a/b", "..", ".", "a\\b"):
            with self.subTest(title=title):
                self.assertTrue(validate_suite(define_suite(title, ["a.js"])))

    def test_empty_inputs(self) -> None:
        errors = validate_suite(define_suite("x", []))
        self.assertTrue(any("no inputs" in e.message for e in errors))

    def test_blank_input(self) -> None:
        self.assertTrue(validate_suite(define_suite("x", ["  "])))

    def test_duplicate_inputs_allowed(self) -> None:
        self.assertEqual(validate_suite(define_suite("x", ["a.js", "a.js"])), [])

    def test_duplicate_titles(self) -> None:
        errors = validate_suites([define_suite("x", ["a"]), define_suite("x", ["b"])])
        self.assertTrue(any("Duplicate" in e.message for e in errors))

    def test_check_suites_raises(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            check_suites([define_suite("", [])])
        self.assertGreaterEqual(len(ctx.exception.errors), 2)


class TestOutputDir(unittest.TestCase):
    """Tests for output_dir()."""

    def test_layout(self) -> None:
        self.assertEqual(
            output_dir(Path("/proj"), "esbuild", "dayjs"),
            Path("/proj/dist/esbuild/dayjs"),
        )

    def test_distinct_titles_do_not_overlap(self) -> None:
        a = output_dir(Path("/proj"), "rollup", "a")
        b = output_dir(Path("/proj"), "rollup", "b")
        self.assertNotEqual(a, b)
        self.assertFalse(a in b.parents or b in a.parents)

    def test_distinct_tools_do_not_overlap(self) -> None:
        self.assertNotEqual(
            output_dir(Path("/proj"), "rollup", "a"),
            output_dir(Path("/proj"), "esbuild", "a"),
        )


if __name__ == "__main__":
    unittest.main()
