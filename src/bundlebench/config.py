"""Harness configuration loading.

Handles:
- Loading the suite file from YAML.
- Merging CLI options over file values.
- Resolving suite input paths relative to the config file.
- Validating the final configuration before any build runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bundlebench.adapters import ADAPTERS, available_adapters
from bundlebench.bench.timing import TrialPolicy, validate_policy
from bundlebench.errors import ConfigurationError, ValidationError, raise_for_errors
from bundlebench.suite import SuiteDefinition, validate_suites

log = logging.getLogger("bundlebench")


# ---------------------------------------------------------------------------
# HarnessConfig
# ---------------------------------------------------------------------------


@dataclass
class HarnessConfig:
    """Resolved configuration for a benchmark session."""

    name: str = ""
    root: Path = field(default_factory=Path.cwd)  # artifacts go to root/dist
    adapters: list[str] = field(default_factory=available_adapters)
    suites: list[SuiteDefinition] = field(default_factory=list)

    # Trial policy
    warmup: int = 1
    iterations: int = 5
    min_time_ms: float = 500.0
    max_iterations: int = 50
    timeout: float | None = None

    keep_going: bool = False

    @property
    def policy(self) -> TrialPolicy:
        return TrialPolicy(
            warmup=self.warmup,
            iterations=self.iterations,
            min_time_ms=self.min_time_ms,
            max_iterations=self.max_iterations,
            timeout=self.timeout,
        )

    def select_suites(self, titles: list[str]) -> None:
        """Keep only the suites named in *titles* (all when empty)."""
        if not titles:
            return
        known = {s.title for s in self.suites}
        missing = [t for t in titles if t not in known]
        if missing:
            raise ConfigurationError(f"Unknown suite(s): {', '.join(missing)}")
        wanted = set(titles)
        self.suites = [s for s in self.suites if s.title in wanted]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_config(config: HarnessConfig) -> list[ValidationError]:
    """Validate a harness configuration.  Empty list means valid."""
    errors: list[ValidationError] = []

    if not config.suites:
        errors.append(ValidationError(field="suites", message="No suites defined."))
    errors.extend(validate_suites(config.suites))

    if not config.adapters:
        errors.append(ValidationError(field="adapters", message="No adapters selected."))
    seen: set[str] = set()
    for name in config.adapters:
        if name not in ADAPTERS:
            errors.append(
                ValidationError(
                    field="adapters",
                    message=(
                        f"Unknown adapter '{name}'. "
                        f"Available: {', '.join(available_adapters())}"
                    ),
                )
            )
        if name in seen:
            errors.append(
                ValidationError(field="adapters", message=f"Adapter '{name}' listed twice.")
            )
        seen.add(name)

    # Options for adapters that will never run are most likely typos.
    for suite in config.suites:
        for name in suite.options:
            if name not in ADAPTERS:
                errors.append(
                    ValidationError(
                        field=f"suites.{suite.title}.options.{name}",
                        message=f"Options given for unknown adapter '{name}'.",
                        severity="warning",
                    )
                )

    errors.extend(validate_policy(config.policy))
    return errors


def check_config(config: HarnessConfig) -> None:
    """Log warnings and raise ConfigurationError on fatal problems."""
    errors = validate_config(config)
    for w in errors:
        if w.severity == "warning":
            log.warning("Config warning: %s: %s", w.field, w.message)
    raise_for_errors(errors, "benchmark configuration")


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


def load_config_data(path: Path) -> dict[str, Any]:
    """Load the raw suite file.

    Format::

        name: bundlers
        root: .
        adapters: [rollup, esbuild]
        iterations: 5
        warmup: 1
        suites:
          - title: dayjs
            inputs: [tmp/bench/dayjs/src/index.js]
          - title: query-string
            inputs: [tmp/bench/query-string/index.js]
            options:
              esbuild:
                external: [decode-uri-component, filter-obj]
    """
    import yaml

    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config must be a YAML mapping, got {type(data).__name__}")
    return data


def _resolve_input(entry: str, base_dir: Path) -> str:
    """Anchor relative file inputs at *base_dir*; leave module specifiers alone.

    ``./x``, ``../x`` and paths that exist under *base_dir* are files.
    Anything else (``react``, ``@vue/runtime-dom``, ``lodash/fp``) is
    handed to the build tool unchanged.
    """
    path = Path(entry)
    if path.is_absolute() or entry.startswith("@"):
        return entry
    candidate = base_dir / path
    if entry in (".", "..") or entry.startswith(("./", "../")) or candidate.exists():
        return str(candidate.resolve())
    return entry


def _number(value: Any, kind: type, name: str) -> Any:
    """Coerce a numeric setting, turning bad values into ConfigurationError."""
    if isinstance(value, bool):
        raise ConfigurationError(f"'{name}' must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{name}' must be a number, got {value!r}") from None


def config_from_data(
    data: dict[str, Any],
    *,
    base_dir: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> HarnessConfig:
    """Build a HarnessConfig from parsed YAML.

    CLI overrides take precedence over file values.  Keys match
    HarnessConfig field names; ``None`` means "not given".
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    base = base_dir or Path.cwd()

    suites_data = data.get("suites", [])
    if not isinstance(suites_data, list):
        raise ConfigurationError("Config 'suites' must be a list of suite definitions.")

    suites: list[SuiteDefinition] = []
    for idx, item in enumerate(suites_data):
        if not isinstance(item, dict):
            raise ConfigurationError(f"Suite #{idx + 1} must be a mapping, got {type(item).__name__}")
        options = item.get("options") or {}
        if not isinstance(options, dict) or not all(
            isinstance(v, dict) for v in options.values()
        ):
            raise ConfigurationError(
                f"Suite #{idx + 1} 'options' must map adapter names to option mappings."
            )
        try:
            suite = SuiteDefinition.from_dict(item)
        except TypeError as exc:
            raise ConfigurationError(f"Suite #{idx + 1}: {exc}") from None
        suites.append(
            SuiteDefinition(
                title=suite.title,
                inputs=tuple(_resolve_input(i, base) for i in suite.inputs),
                options=options,
            )
        )

    root = cli.get("root") or data.get("root") or "."
    root_path = Path(root)
    if not root_path.is_absolute():
        root_path = (base if "root" not in cli else Path.cwd()) / root_path

    adapters = cli.get("adapters") or data.get("adapters") or available_adapters()
    if isinstance(adapters, str):
        adapters = [a.strip() for a in adapters.split(",") if a.strip()]

    timeout = cli.get("timeout", data.get("timeout"))

    return HarnessConfig(
        name=cli.get("name") or data.get("name", ""),
        root=root_path.resolve(),
        adapters=list(adapters),
        suites=suites,
        warmup=_number(cli.get("warmup", data.get("warmup", 1)), int, "warmup"),
        iterations=_number(cli.get("iterations", data.get("iterations", 5)), int, "iterations"),
        min_time_ms=_number(cli.get("min_time_ms", data.get("min_time_ms", 500.0)), float, "min_time_ms"),
        max_iterations=_number(
            cli.get("max_iterations", data.get("max_iterations", 50)), int, "max_iterations"
        ),
        timeout=_number(timeout, float, "timeout") if timeout is not None else None,
        keep_going=bool(cli.get("keep_going", data.get("keep_going", False))),
    )


def load_config(path: Path, *, cli_overrides: dict[str, Any] | None = None) -> HarnessConfig:
    """Load a suite file, apply CLI overrides, and resolve paths."""
    data = load_config_data(path)
    return config_from_data(data, base_dir=path.parent.resolve(), cli_overrides=cli_overrides)
