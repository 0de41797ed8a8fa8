"""Adapter base classes.

Every build tool is exposed through one coroutine, ``invoke(suite)``,
that performs exactly one cold build and either returns ``None`` or
raises the tool's own error.  Two variants implement it:

- ``ProcessAdapter`` spawns an external executable and checks its exit
  status.
- ``InProcessAdapter`` calls a Python build function in a worker thread
  and discards the non-fatal warnings it emits.
"""

from __future__ import annotations

import abc
import asyncio
import logging
import os
import shutil
import subprocess
import warnings
from pathlib import Path
from typing import Any, Mapping

from bundlebench.suite import SuiteDefinition, adapter_options, output_dir

log = logging.getLogger("bundlebench")

# Option key that overrides the executable of a process adapter.
BIN_OPTION = "bin"


# ---------------------------------------------------------------------------
# Option merging
# ---------------------------------------------------------------------------


def merge_options(
    defaults: Mapping[str, Any],
    overrides: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Layer *overrides* on top of *defaults*.

    Overrides win for every key.  Nested mappings are merged key by key;
    any other value (lists included) is replaced wholesale.  Neither
    argument is modified.
    """
    merged: dict[str, Any] = {}
    for key, value in defaults.items():
        merged[key] = dict(value) if isinstance(value, Mapping) else value
    for key, value in (overrides or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_options(current, value)
        elif isinstance(value, Mapping):
            merged[key] = dict(value)
        else:
            merged[key] = value
    return merged


def options_to_flags(options: Mapping[str, Any]) -> list[str]:
    """Translate an option mapping into ``--key=value`` style flags.

    ``True`` becomes a bare ``--key``; ``False`` and ``None`` are
    dropped; lists repeat the flag once per item.
    """
    flags: list[str] = []
    for key, value in options.items():
        if value is None or value is False:
            continue
        if value is True:
            flags.append(f"--{key}")
        elif isinstance(value, (list, tuple)):
            flags.extend(f"--{key}={item}" for item in value)
        else:
            flags.append(f"--{key}={value}")
    return flags


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class BuildProcessError(subprocess.CalledProcessError):
    """A build tool exited with a non-zero status."""

    def __init__(
        self,
        tool: str,
        returncode: int,
        cmd: list[str],
        output: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(returncode, cmd, output=output, stderr=stderr)
        self.tool = tool

    def __str__(self) -> str:
        msg = f"{self.tool} exited with status {self.returncode}"
        detail = (self.stderr or self.output or "").strip()
        if detail:
            tail = "\n".join(detail.splitlines()[-20:])
            msg += f":\n{tail}"
        return msg


# ---------------------------------------------------------------------------
# Adapter interface
# ---------------------------------------------------------------------------


class Adapter(abc.ABC):
    """A build tool behind the ``invoke(suite)`` contract."""

    name: str = ""
    kind: str = ""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def output_dir(self, suite: SuiteDefinition) -> Path:
        """Default artifact directory for *suite*."""
        return output_dir(self.root, self.name, suite.title)

    @abc.abstractmethod
    def defaults(self, suite: SuiteDefinition) -> dict[str, Any]:
        """Adapter defaults for *suite*, before suite overrides."""

    def resolve_options(self, suite: SuiteDefinition) -> dict[str, Any]:
        """Adapter defaults with the suite's overrides layered on top."""
        return merge_options(self.defaults(suite), adapter_options(suite, self.name))

    @abc.abstractmethod
    async def invoke(self, suite: SuiteDefinition) -> None:
        """Run one build of *suite*.  Raises the tool's error on failure."""


class ProcessAdapter(Adapter):
    """Adapter that spawns an external build executable."""

    kind = "process"
    executable: str = ""

    @abc.abstractmethod
    def build_args(self, suite: SuiteDefinition, options: dict[str, Any]) -> list[str]:
        """Command-line arguments (without the executable) for one build."""

    def find_executable(self, options: Mapping[str, Any]) -> str:
        """Locate the tool binary.

        Resolution order: the ``bin`` option, ``PATH``, then the
        project's ``node_modules/.bin``.  When nothing is found the bare
        name is returned so the spawn itself reports the failure.
        """
        explicit = options.get(BIN_OPTION)
        if explicit:
            return str(explicit)
        found = shutil.which(self.executable)
        if found:
            return found
        local = self.root / "node_modules" / ".bin" / self.executable
        if local.exists():
            return str(local)
        return self.executable

    def command(self, suite: SuiteDefinition) -> list[str]:
        """Full argv for one build of *suite*."""
        options = self.resolve_options(suite)
        executable = self.find_executable(options)
        options.pop(BIN_OPTION, None)
        return [executable, *self.build_args(suite, options)]

    async def invoke(self, suite: SuiteDefinition) -> None:
        cmd = self.command(suite)
        log.debug("%s: %s", self.name, " ".join(cmd))
        # Spawn errors (missing binary, permission denied) propagate as-is.
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(self.root),
            env=dict(os.environ),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise
        if proc.returncode != 0:
            raise BuildProcessError(
                self.name,
                proc.returncode if proc.returncode is not None else -1,
                cmd,
                output=stdout.decode("utf-8", errors="replace"),
                stderr=stderr.decode("utf-8", errors="replace"),
            )


class InProcessAdapter(Adapter):
    """Adapter that runs a Python build function in a worker thread."""

    kind = "in-process"

    @abc.abstractmethod
    def build(self, suite: SuiteDefinition, options: dict[str, Any]) -> None:
        """Perform the build synchronously.  Raise on fatal errors."""

    def _build_quietly(self, suite: SuiteDefinition, options: dict[str, Any]) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            self.build(suite, options)

    async def invoke(self, suite: SuiteDefinition) -> None:
        options = self.resolve_options(suite)
        log.debug("%s: building %s in-process", self.name, suite.title)
        build = asyncio.ensure_future(asyncio.to_thread(self._build_quietly, suite, options))
        try:
            await asyncio.shield(build)
        except asyncio.CancelledError:
            # A worker thread cannot be interrupted; the build must settle
            # before the next one starts writing to the same tree.
            if not build.done():
                log.debug("%s: cancelled, waiting for %s to finish", self.name, suite.title)
                await asyncio.wait({build})
            if not build.cancelled() and build.exception() is not None:
                log.debug("%s: build ended with %r after cancellation", self.name, build.exception())
            raise
