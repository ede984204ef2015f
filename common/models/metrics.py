"""Measurement, threshold and rating models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Metric(str, Enum):
    """Names of recorded measurements."""
    VM_CREATE = "vm_create"
    VOLUME_CREATE = "volume_create"
    SNAPSHOT_CREATE = "snapshot_create"
    CLONE_OPERATION = "clone_operation"
    VOLUME_RESIZE = "volume_resize"
    SNAPSHOT_DELETE = "snapshot_delete"
    SEQ_WRITE_MBPS = "seq_write_mbps"
    SEQ_READ_MBPS = "seq_read_mbps"
    RAND_READ_IOPS = "rand_read_iops"
    RAND_WRITE_IOPS = "rand_write_iops"


OPERATION_METRICS: list[Metric] = [
    Metric.VM_CREATE,
    Metric.VOLUME_CREATE,
    Metric.SNAPSHOT_CREATE,
    Metric.CLONE_OPERATION,
    Metric.VOLUME_RESIZE,
    Metric.SNAPSHOT_DELETE,
]

IO_METRICS: list[Metric] = [
    Metric.SEQ_WRITE_MBPS,
    Metric.SEQ_READ_MBPS,
    Metric.RAND_READ_IOPS,
    Metric.RAND_WRITE_IOPS,
]


class Rating(str, Enum):
    """Classification of a measurement."""
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


class Direction(str, Enum):
    """Which way a metric improves."""
    LOWER_IS_BETTER = "lower"
    HIGHER_IS_BETTER = "higher"


class Threshold(BaseModel):
    """GOOD/FAIR boundaries for one metric; both bounds are inclusive."""
    metric: Metric
    good: float
    fair: float
    direction: Direction = Direction.LOWER_IS_BETTER

    def classify(self, value: float) -> Rating:
        if self.direction == Direction.LOWER_IS_BETTER:
            if value <= self.good:
                return Rating.GOOD
            if value <= self.fair:
                return Rating.FAIR
            return Rating.POOR

        if value >= self.good:
            return Rating.GOOD
        if value >= self.fair:
            return Rating.FAIR
        return Rating.POOR


THRESHOLDS: dict[Metric, Threshold] = {
    t.metric: t for t in [
        Threshold(metric=Metric.VM_CREATE, good=2.0, fair=5.0),
        Threshold(metric=Metric.VOLUME_CREATE, good=5.0, fair=15.0),
        Threshold(metric=Metric.SNAPSHOT_CREATE, good=2.0, fair=5.0),
        Threshold(metric=Metric.CLONE_OPERATION, good=60.0, fair=120.0),
        Threshold(metric=Metric.VOLUME_RESIZE, good=3.0, fair=10.0),
        Threshold(metric=Metric.SNAPSHOT_DELETE, good=2.0, fair=5.0),
        Threshold(metric=Metric.SEQ_WRITE_MBPS, good=100, fair=50, direction=Direction.HIGHER_IS_BETTER),
        Threshold(metric=Metric.SEQ_READ_MBPS, good=100, fair=50, direction=Direction.HIGHER_IS_BETTER),
        Threshold(metric=Metric.RAND_READ_IOPS, good=1000, fair=500, direction=Direction.HIGHER_IS_BETTER),
        Threshold(metric=Metric.RAND_WRITE_IOPS, good=1000, fair=500, direction=Direction.HIGHER_IS_BETTER),
    ]
}


def classify(metric: Metric, value: float) -> Optional[Rating]:
    """Rate a value against the fixed threshold table."""
    threshold = THRESHOLDS.get(Metric(metric))
    if threshold is None:
        return None
    return threshold.classify(value)


class TimingResult(BaseModel):
    """Measurements collected during a run, keyed by metric name.

    Entries are write-once: recording the same metric twice is an error.
    """
    measurements: dict[str, float] = Field(default_factory=dict)

    def record(self, metric: Metric, value: float) -> None:
        key = Metric(metric).value
        if key in self.measurements:
            raise ValueError(f"Measurement already recorded: {key}")
        self.measurements[key] = value

    def get(self, metric: Metric, default: Optional[float] = None) -> Optional[float]:
        return self.measurements.get(Metric(metric).value, default)

    def __contains__(self, metric: object) -> bool:
        try:
            return Metric(metric).value in self.measurements
        except ValueError:
            return False

    @property
    def has_io_results(self) -> bool:
        """True when at least one I/O measurement was recorded."""
        return any(m in self for m in IO_METRICS)
