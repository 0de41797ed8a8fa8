"""Benchmark suite definitions.

A suite is one benchmark scenario: a title, the entry inputs handed to
every build tool, and optional per-adapter option overrides.  Suites are
immutable once built so adapters can derive their configuration from
them but never write back.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from bundlebench.errors import ValidationError, raise_for_errors


# ---------------------------------------------------------------------------
# SuiteDefinition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SuiteDefinition:
    """One benchmark scenario shared by every adapter."""

    title: str
    inputs: tuple[str, ...]
    options: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.inputs, (str, bytes)):
            raise TypeError(
                f"Suite '{self.title}': inputs must be a sequence of entries, not a single string"
            )
        # Freeze the containers handed in by the caller.
        object.__setattr__(self, "inputs", tuple(str(i) for i in self.inputs))
        frozen = {
            name: MappingProxyType(copy.deepcopy(dict(opts)))
            for name, opts in (self.options or {}).items()
        }
        object.__setattr__(self, "options", MappingProxyType(frozen))

    def __hash__(self) -> int:
        # Option mappings are unhashable; equal suites still share title and inputs.
        return hash((self.title, self.inputs))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict (sparse: omits empty options)."""
        d: dict[str, Any] = {"title": self.title, "inputs": list(self.inputs)}
        if self.options:
            d["options"] = {name: dict(opts) for name, opts in self.options.items()}
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SuiteDefinition:
        """Build a suite from a parsed config mapping."""
        inputs = data.get("inputs") or []
        if isinstance(inputs, str):
            inputs = [inputs]
        return cls(
            title=str(data.get("title") or ""),
            inputs=tuple(inputs),
            options=data.get("options") or {},
        )


def define_suite(title: str, inputs: Sequence[str], **options: Mapping[str, Any]) -> SuiteDefinition:
    """Build a suite, passing per-adapter options as keyword arguments.

    Example::

        define_suite("query-string", ["./index.js"], esbuild={"external": ["filter-obj"]})
    """
    return SuiteDefinition(title=title, inputs=tuple(inputs), options=options)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_suite(suite: SuiteDefinition) -> list[ValidationError]:
    """Validate a single suite.  Empty list means valid."""
    errors: list[ValidationError] = []
    label = suite.title or "<untitled>"

    if not suite.title or not suite.title.strip():
        errors.append(ValidationError(field="title", message="Suite title must be non-empty."))
    elif suite.title in (".", "..") or "/" in suite.title or "\\" in suite.title:
        errors.append(
            ValidationError(
                field="title",
                message=(
                    f"Suite title '{suite.title}' is used as a directory name "
                    f"and cannot contain path separators or be '.' or '..'."
                ),
            )
        )

    if not suite.inputs:
        errors.append(
            ValidationError(
                field=f"suites.{label}.inputs",
                message=f"Suite '{label}' has no inputs.",
            )
        )
    for idx, entry in enumerate(suite.inputs):
        if not entry.strip():
            errors.append(
                ValidationError(
                    field=f"suites.{label}.inputs[{idx}]",
                    message=f"Suite '{label}' has an empty input.",
                )
            )

    return errors


def validate_suites(suites: Sequence[SuiteDefinition]) -> list[ValidationError]:
    """Validate a session's suites, including title uniqueness."""
    errors: list[ValidationError] = []
    seen: set[str] = set()
    for suite in suites:
        errors.extend(validate_suite(suite))
        if suite.title in seen:
            errors.append(
                ValidationError(
                    field="title",
                    message=f"Duplicate suite title '{suite.title}'.",
                )
            )
        seen.add(suite.title)
    return errors


def check_suites(suites: Sequence[SuiteDefinition]) -> None:
    """Raise ConfigurationError if any suite is invalid."""
    raise_for_errors(validate_suites(suites), "suite definition")


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


def output_dir(root: Path, tool: str, title: str) -> Path:
    """Directory where *tool* writes the artifacts for suite *title*.

    ``root/dist/<tool>/<title>``.  Titles are validated to be single path
    components, so distinct (tool, title) pairs never overlap.
    """
    return Path(root) / "dist" / tool / title


def adapter_options(suite: SuiteDefinition, adapter_name: str) -> dict[str, Any]:
    """Return a private, mutable copy of the suite's options for one adapter."""
    return copy.deepcopy(dict(suite.options.get(adapter_name, {})))
