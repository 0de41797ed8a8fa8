"""Summary statistics for trial latencies.

All values are in whatever unit the samples are in; the engine records
milliseconds.  Pure Python, using :mod:`statistics`.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Sequence

# Two-sided 95% critical value of the normal distribution.
_Z_95 = 1.959964


@dataclass
class DescriptiveStats:
    """Summary statistics for a sample of trial latencies."""

    n: int
    mean: float
    median: float
    stdev: float
    min: float
    max: float
    q1: float  # 25th percentile
    q3: float  # 75th percentile
    iqr: float
    cv: float  # stdev / mean
    sem: float  # standard error of the mean
    rme: float  # relative margin of error at 95%, in percent

    def to_dict(self) -> dict[str, float | int]:
        """Serialize to a dict with rounded values."""
        return {
            "n": self.n,
            "mean": round(self.mean, 6),
            "median": round(self.median, 6),
            "stdev": round(self.stdev, 6),
            "min": round(self.min, 6),
            "max": round(self.max, 6),
            "q1": round(self.q1, 6),
            "q3": round(self.q3, 6),
            "iqr": round(self.iqr, 6),
            "cv": round(self.cv, 6),
            "sem": round(self.sem, 6),
            "rme": round(self.rme, 4),
        }


def describe(values: Sequence[float]) -> DescriptiveStats:
    """Compute descriptive statistics for a sample.

    With fewer than two values the spread statistics (stdev, cv, sem,
    rme) are 0.0.  An empty sample yields NaN everywhere.
    """
    if not values:
        nan = float("nan")
        return DescriptiveStats(0, nan, nan, nan, nan, nan, nan, nan, nan, nan, nan, nan)

    sorted_v = sorted(values)
    n = len(sorted_v)
    mean = statistics.fmean(sorted_v)
    median = statistics.median(sorted_v)

    if n >= 2:
        stdev = statistics.stdev(sorted_v)
        cv = stdev / mean if mean != 0 else float("inf")
        sem = stdev / math.sqrt(n)
        rme = (sem * _Z_95 / mean) * 100 if mean != 0 else float("inf")
    else:
        stdev = cv = sem = rme = 0.0

    q1 = _percentile(sorted_v, 0.25)
    q3 = _percentile(sorted_v, 0.75)

    return DescriptiveStats(
        n=n,
        mean=mean,
        median=median,
        stdev=stdev,
        min=sorted_v[0],
        max=sorted_v[-1],
        q1=q1,
        q3=q3,
        iqr=q3 - q1,
        cv=cv,
        sem=sem,
        rme=rme,
    )


def _percentile(sorted_values: list[float], p: float) -> float:
    """The p-th percentile by linear interpolation (numpy's default)."""
    n = len(sorted_values)
    if n == 0:
        return float("nan")
    if n == 1:
        return sorted_values[0]

    k = (n - 1) * p
    f = math.floor(k)
    c = math.ceil(k)
    if f == c:
        return sorted_values[int(k)]
    d = k - f
    return sorted_values[int(f)] * (1 - d) + sorted_values[int(c)] * d


def detect_outliers(values: Sequence[float], *, factor: float = 1.5) -> list[bool]:
    """Flag values outside ``[Q1 - factor*IQR, Q3 + factor*IQR]``.

    Samples shorter than four values are never flagged.
    """
    if len(values) < 4:
        return [False] * len(values)

    sorted_v = sorted(values)
    q1 = _percentile(sorted_v, 0.25)
    q3 = _percentile(sorted_v, 0.75)
    iqr = q3 - q1
    lower = q1 - factor * iqr
    upper = q3 + factor * iqr
    return [v < lower or v > upper for v in values]
