"""Adapters for JavaScript bundlers driven through their CLIs."""

from __future__ import annotations

from typing import Any, Mapping

from bundlebench.adapters.base import ProcessAdapter, merge_options, options_to_flags
from bundlebench.suite import SuiteDefinition


class RollupAdapter(ProcessAdapter):
    """Rollup with node-resolve and commonjs, writing ES modules."""

    name = "rollup"
    executable = "rollup"

    def defaults(self, suite: SuiteDefinition) -> dict[str, Any]:
        return {
            "format": "es",
            "plugin": ["node-resolve", "commonjs"],
            "silent": True,
            "dir": str(self.output_dir(suite)),
        }

    def resolve_options(self, suite: SuiteDefinition) -> dict[str, Any]:
        # Output options may be nested under "output"; they apply last.
        options = super().resolve_options(suite)
        output = options.pop("output", None)
        if isinstance(output, Mapping):
            options = merge_options(options, output)
        return options

    def build_args(self, suite: SuiteDefinition, options: dict[str, Any]) -> list[str]:
        return [*suite.inputs, *options_to_flags(options)]


class EsbuildAdapter(ProcessAdapter):
    """esbuild bundling for node as ESM with code splitting."""

    name = "esbuild"
    executable = "esbuild"

    def defaults(self, suite: SuiteDefinition) -> dict[str, Any]:
        return {
            "bundle": True,
            "platform": "node",
            "format": "esm",
            "splitting": True,
            "outdir": str(self.output_dir(suite)),
            "log-level": "error",
        }

    def build_args(self, suite: SuiteDefinition, options: dict[str, Any]) -> list[str]:
        return [*suite.inputs, *esbuild_flags(options)]


def esbuild_flags(options: Mapping[str, Any]) -> list[str]:
    """Translate options to esbuild's flag syntax.

    Lists become ``--key:item`` (``--external:react``) and mappings
    become ``--key:name=value`` (``--define:DEBUG=false``).
    """
    flags: list[str] = []
    for key, value in options.items():
        if isinstance(value, (list, tuple)):
            flags.extend(f"--{key}:{item}" for item in value)
        elif isinstance(value, Mapping):
            flags.extend(f"--{key}:{name}={item}" for name, item in value.items())
        else:
            flags.extend(options_to_flags({key: value}))
    return flags


class WebpackAdapter(ProcessAdapter):
    """webpack-cli in production mode targeting node."""

    name = "webpack"
    executable = "webpack"

    def defaults(self, suite: SuiteDefinition) -> dict[str, Any]:
        return {
            "target": "node",
            "mode": "production",
            "output-path": str(self.output_dir(suite)),
            "no-stats": True,
        }

    def build_args(self, suite: SuiteDefinition, options: dict[str, Any]) -> list[str]:
        entries = [f"--entry={entry}" for entry in suite.inputs]
        return [*entries, *options_to_flags(options)]


class MinipackAdapter(ProcessAdapter):
    """The native minipack executable."""

    name = "minipack"
    executable = "minipack"

    def defaults(self, suite: SuiteDefinition) -> dict[str, Any]:
        return {
            "platform": "node",
            "dir": str(self.output_dir(suite)),
            "silent": True,
        }

    def build_args(self, suite: SuiteDefinition, options: dict[str, Any]) -> list[str]:
        return options_to_flags({"input": list(suite.inputs), **options})
