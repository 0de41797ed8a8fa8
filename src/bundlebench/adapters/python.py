"""In-process adapters for Python's own build tooling.

These run inside the harness process, so they measure the build work
without any interpreter start-up cost.
"""

from __future__ import annotations

import py_compile
import zipapp
from pathlib import Path
from typing import Any

from bundlebench.adapters.base import InProcessAdapter
from bundlebench.suite import SuiteDefinition


def _resolve_input(root: Path, entry: str) -> Path:
    path = Path(entry)
    if not path.is_absolute():
        path = root / path
    if not path.exists():
        raise FileNotFoundError(f"Input does not exist: {path}")
    return path


class PyCompileAdapter(InProcessAdapter):
    """Byte-compile Python sources into the output directory.

    Directory inputs are walked recursively and mirrored under
    ``<dir>/<input name>/``; file inputs land directly in ``<dir>``.
    """

    name = "pycompile"

    def defaults(self, suite: SuiteDefinition) -> dict[str, Any]:
        return {
            "optimize": -1,
            "invalidation_mode": "timestamp",
            "dir": str(self.output_dir(suite)),
        }

    def build(self, suite: SuiteDefinition, options: dict[str, Any]) -> None:
        out = Path(options["dir"])
        mode = py_compile.PycInvalidationMode[str(options["invalidation_mode"]).upper()]
        optimize = int(options["optimize"])

        for entry in suite.inputs:
            source = _resolve_input(self.root, entry)
            if source.is_dir():
                targets = [
                    (path, out / source.name / path.relative_to(source).with_suffix(".pyc"))
                    for path in sorted(source.rglob("*.py"))
                ]
            else:
                targets = [(source, out / source.with_suffix(".pyc").name)]

            for path, cfile in targets:
                cfile.parent.mkdir(parents=True, exist_ok=True)
                py_compile.compile(
                    str(path),
                    cfile=str(cfile),
                    doraise=True,
                    optimize=optimize,
                    invalidation_mode=mode,
                )


class ZipappAdapter(InProcessAdapter):
    """Bundle each input directory into an executable ``.pyz`` archive."""

    name = "zipapp"

    def defaults(self, suite: SuiteDefinition) -> dict[str, Any]:
        return {
            "main": None,
            "interpreter": None,
            "compressed": False,
            "dir": str(self.output_dir(suite)),
        }

    def build(self, suite: SuiteDefinition, options: dict[str, Any]) -> None:
        out = Path(options["dir"])
        out.mkdir(parents=True, exist_ok=True)
        for entry in suite.inputs:
            source = _resolve_input(self.root, entry)
            zipapp.create_archive(
                source,
                target=out / f"{source.name}.pyz",
                interpreter=options["interpreter"],
                main=options["main"],
                compressed=bool(options["compressed"]),
            )
