"""Build tool adapters and the registry that selects them by name."""

from __future__ import annotations

from pathlib import Path

from bundlebench.adapters.base import (
    Adapter,
    BuildProcessError,
    InProcessAdapter,
    ProcessAdapter,
    merge_options,
    options_to_flags,
)
from bundlebench.adapters.bundlers import (
    EsbuildAdapter,
    MinipackAdapter,
    RollupAdapter,
    WebpackAdapter,
)
from bundlebench.adapters.python import PyCompileAdapter, ZipappAdapter
from bundlebench.errors import ConfigurationError

__all__ = [
    "ADAPTERS",
    "Adapter",
    "BuildProcessError",
    "InProcessAdapter",
    "ProcessAdapter",
    "available_adapters",
    "get_adapter",
    "merge_options",
    "options_to_flags",
]

# Registration order is the default task order within a group.
ADAPTERS: dict[str, type[Adapter]] = {
    cls.name: cls
    for cls in (
        RollupAdapter,
        WebpackAdapter,
        EsbuildAdapter,
        MinipackAdapter,
        PyCompileAdapter,
        ZipappAdapter,
    )
}


def available_adapters() -> list[str]:
    """Names of all registered adapters, in registration order."""
    return list(ADAPTERS)


def get_adapter(name: str, root: Path) -> Adapter:
    """Return a fresh adapter instance for *name*.

    Raises:
        ConfigurationError: If no adapter is registered under *name*.
    """
    try:
        cls = ADAPTERS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown adapter '{name}'. Available: {', '.join(available_adapters())}"
        ) from None
    return cls(root)
