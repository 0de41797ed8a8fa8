"""Per-task benchmark results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from bundlebench.bench.stats import DescriptiveStats, describe, detect_outliers


@dataclass
class TaskResult:
    """Timing results for one task of a group.

    ``mean`` (milliseconds) is the value used for ranking; the other
    statistics are kept for inspection and JSON output.
    """

    name: str
    mean: float
    samples: list[float] = field(default_factory=list)
    stats: DescriptiveStats | None = None
    outliers: list[bool] = field(default_factory=list)

    @classmethod
    def from_samples(cls, name: str, samples: Sequence[float]) -> TaskResult:
        """Aggregate raw trial latencies into a result."""
        values = list(samples)
        stats = describe(values)
        return cls(
            name=name,
            mean=stats.mean,
            samples=values,
            stats=stats,
            outliers=detect_outliers(values),
        )

    @property
    def n_outliers(self) -> int:
        """Number of samples flagged as outliers."""
        return sum(self.outliers)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        d: dict[str, Any] = {
            "name": self.name,
            "mean": round(self.mean, 6),
            "samples": [round(s, 6) for s in self.samples],
        }
        if self.stats:
            d["stats"] = self.stats.to_dict()
        if self.outliers:
            d["outliers"] = self.n_outliers
        return d
