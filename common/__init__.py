"""Common models, errors and utilities shared by the benchmark packages."""

from common.models.run import RunConfig
from common.models.metrics import Metric, Rating, TimingResult
from common.models.report import Report
from common.errors import (
    BenchmarkError,
    ConfigError,
    PreconditionError,
    NotFoundError,
    InactiveError,
    CommandFailedError,
)

__all__ = [
    "RunConfig",
    "Metric",
    "Rating",
    "TimingResult",
    "Report",
    "BenchmarkError",
    "ConfigError",
    "PreconditionError",
    "NotFoundError",
    "InactiveError",
    "CommandFailedError",
]
