"""Tests for bundlebench.logging — console and file handler setup."""

from __future__ import annotations

import logging
import sys
import tempfile
import unittest
from pathlib import Path

from bundlebench.logging import _ConsoleFormatter, setup_logging


class TestSetupLogging(unittest.TestCase):
    """Tests for setup_logging()."""

    def tearDown(self) -> None:
        logger = logging.getLogger("bundlebench")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.propagate = True

    def test_console_goes_to_stderr(self) -> None:
        logger = setup_logging()
        self.assertEqual(len(logger.handlers), 1)
        self.assertIs(logger.handlers[0].stream, sys.stderr)  # type: ignore[attr-defined]
        self.assertEqual(logger.handlers[0].level, logging.INFO)

    def test_verbose_and_quiet(self) -> None:
        self.assertEqual(setup_logging(verbose=True).handlers[0].level, logging.DEBUG)
        self.assertEqual(setup_logging(quiet=True).handlers[0].level, logging.WARNING)
        self.assertEqual(setup_logging(verbose=True, quiet=True).handlers[0].level, logging.DEBUG)

    def test_reconfigure_replaces_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        self.assertEqual(len(logger.handlers), 1)

    def test_log_file_records_debug(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "logs" / "session.log"
            logger = setup_logging(quiet=True, log_file=path)
            logger.debug("rollup: trial 1 took 12.00ms")
            for handler in logger.handlers:
                handler.flush()
                handler.close()
            logger.handlers.clear()
            self.assertIn("rollup: trial 1 took 12.00ms", path.read_text())


class TestConsoleFormatter(unittest.TestCase):
    """Tests for the console formatter."""

    def _record(self, level: int) -> logging.LogRecord:
        return logging.LogRecord("bundlebench", level, __file__, 1, "build %s", ("done",), None)

    def test_plain(self) -> None:
        text = _ConsoleFormatter(color=False).format(self._record(logging.WARNING))
        self.assertEqual(text, "WARNING  build done")

    def test_colored_level(self) -> None:
        text = _ConsoleFormatter(color=True).format(self._record(logging.ERROR))
        self.assertIn("\x1b[", text)
        self.assertTrue(text.endswith(" build done"))

    def test_info_never_colored(self) -> None:
        text = _ConsoleFormatter(color=True).format(self._record(logging.INFO))
        self.assertEqual(text, "INFO     build done")


if __name__ == "__main__":
    unittest.main()
