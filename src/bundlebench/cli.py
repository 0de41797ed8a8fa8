"""Command-line interface for bundlebench.

Subcommands:
    bundlebench run        Benchmark the suites in a config file
    bundlebench suites     Print the resolved suites of a config file
    bundlebench adapters   List the available build tool adapters
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from bundlebench import __version__
from bundlebench.adapters import ADAPTERS
from bundlebench.config import check_config, load_config
from bundlebench.errors import ConfigurationError
from bundlebench.logging import setup_logging
from bundlebench.orchestrator import format_suites, run_suites

log = logging.getLogger("bundlebench")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """bundlebench: compare build tools on identical inputs."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--suite",
    "suite_titles",
    multiple=True,
    help="Only run this suite (repeatable).",
)
@click.option(
    "--adapter",
    "adapter_names",
    multiple=True,
    help="Only run this adapter (repeatable). Default: the config's list.",
)
@click.option("--iterations", type=int, default=None, help="Minimum measured iterations.")
@click.option("--warmup", type=int, default=None, help="Untimed warm-up iterations.")
@click.option("--min-time", "min_time_ms", type=float, default=None, help="Minimum measured time per task (ms).")
@click.option("--max-iterations", type=int, default=None, help="Cap on measured iterations.")
@click.option("--timeout", type=float, default=None, help="Per-build timeout in seconds.")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root; artifacts are written to ROOT/dist/<tool>/<suite>.",
)
@click.option("--keep-going", is_flag=True, default=False, help="Continue with the next suite when one fails.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print results as JSON instead of text.")
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output.")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option("--log-file", type=click.Path(path_type=Path), default=None)
def run(  # noqa: PLR0913
    config_path: Path,
    suite_titles: tuple[str, ...],
    adapter_names: tuple[str, ...],
    iterations: int | None,
    warmup: int | None,
    min_time_ms: float | None,
    max_iterations: int | None,
    timeout: float | None,
    root: Path | None,
    keep_going: bool,
    as_json: bool,
    no_color: bool,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Benchmark every suite in CONFIG_PATH with every adapter.

    \b
    Examples:
        bundlebench run bench.yaml
        bundlebench run bench.yaml --suite dayjs --adapter esbuild --adapter rollup
    """
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    overrides = {
        "adapters": list(adapter_names) or None,
        "iterations": iterations,
        "warmup": warmup,
        "min_time_ms": min_time_ms,
        "max_iterations": max_iterations,
        "timeout": timeout,
        "root": root,
        "keep_going": keep_going or None,
    }
    try:
        config = load_config(config_path, cli_overrides=overrides)
        config.select_suites(list(suite_titles))
        check_config(config)
    except (ConfigurationError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    try:
        session = asyncio.run(
            run_suites(
                config.suites,
                config.adapters,
                root=config.root,
                policy=config.policy,
                keep_going=config.keep_going,
                echo=not as_json,
                color=False if no_color else None,
            )
        )
    except Exception as exc:  # noqa: BLE001
        log.debug("Benchmark aborted", exc_info=True)
        click.echo(f"Error: {type(exc).__name__}: {exc}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(session.to_dict(), indent=2))

    if not session.ok:
        titles = ", ".join(f.title for f in session.failures)
        click.echo(f"Error: {len(session.failures)} suite(s) failed: {titles}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# suites
# ---------------------------------------------------------------------------


@main.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def suites(config_path: Path) -> None:
    """Print the suites defined in CONFIG_PATH with resolved inputs."""
    try:
        config = load_config(config_path)
    except (ConfigurationError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    if not config.suites:
        click.echo("No suites defined.")
        return
    click.echo(format_suites(config.suites))


# ---------------------------------------------------------------------------
# adapters
# ---------------------------------------------------------------------------


@main.command()
def adapters() -> None:
    """List the available build tool adapters."""
    for name, cls in ADAPTERS.items():
        click.echo(f"{name:<12s} {cls.kind}")
