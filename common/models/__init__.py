"""Common data models for the storage benchmark."""

from common.models.command import CommandResult
from common.models.run import RunConfig
from common.models.metrics import (
    Metric,
    Rating,
    Direction,
    Threshold,
    TimingResult,
    THRESHOLDS,
    OPERATION_METRICS,
    IO_METRICS,
    classify,
)
from common.models.report import Report, BenchmarkInfo, OperationTimings, IOPerformance

__all__ = [
    "CommandResult",
    "RunConfig",
    "Metric",
    "Rating",
    "Direction",
    "Threshold",
    "TimingResult",
    "THRESHOLDS",
    "OPERATION_METRICS",
    "IO_METRICS",
    "classify",
    "Report",
    "BenchmarkInfo",
    "OperationTimings",
    "IOPerformance",
]
