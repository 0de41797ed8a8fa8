"""bundlebench: apples-to-apples build tool benchmarks."""

__version__ = "0.1.0"
