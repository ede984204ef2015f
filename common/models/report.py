"""Report document written to the optional output file."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from common.models.metrics import Metric, TimingResult
from common.models.run import RunConfig


class BenchmarkInfo(BaseModel):
    """Run description section."""
    storage: str
    node: str
    test_size: str
    test_size_bytes: int
    timestamp: str
    with_io_tests: bool


class OperationTimings(BaseModel):
    """Storage operation durations in seconds."""
    vm_create_seconds: float = 0
    volume_create_seconds: float = 0
    snapshot_create_seconds: float = 0
    clone_operation_seconds: float = 0
    volume_resize_seconds: float = 0
    snapshot_delete_seconds: float = 0


class IOPerformance(BaseModel):
    """fio workload results."""
    sequential_write_mbps: float = 0
    sequential_read_mbps: float = 0
    random_read_iops: int = 0
    random_write_iops: int = 0


class Report(BaseModel):
    """Complete benchmark report."""
    benchmark: BenchmarkInfo
    operations: OperationTimings = Field(default_factory=OperationTimings)
    io_performance: Optional[IOPerformance] = None

    @classmethod
    def build(
        cls,
        config: RunConfig,
        results: TimingResult,
        generated_at: Optional[datetime] = None,
    ) -> "Report":
        """Snapshot a run configuration and its measurements."""
        generated_at = generated_at or datetime.now().astimezone()

        benchmark = BenchmarkInfo(
            storage=config.storage_name,
            node=config.node_name,
            test_size=config.test_size,
            test_size_bytes=config.test_size_bytes,
            timestamp=generated_at.isoformat(timespec="seconds"),
            with_io_tests=config.with_io_tests,
        )

        operations = OperationTimings(
            vm_create_seconds=results.get(Metric.VM_CREATE, 0),
            volume_create_seconds=results.get(Metric.VOLUME_CREATE, 0),
            snapshot_create_seconds=results.get(Metric.SNAPSHOT_CREATE, 0),
            clone_operation_seconds=results.get(Metric.CLONE_OPERATION, 0),
            volume_resize_seconds=results.get(Metric.VOLUME_RESIZE, 0),
            snapshot_delete_seconds=results.get(Metric.SNAPSHOT_DELETE, 0),
        )

        io_performance = None
        if config.with_io_tests and results.has_io_results:
            io_performance = IOPerformance(
                sequential_write_mbps=results.get(Metric.SEQ_WRITE_MBPS, 0),
                sequential_read_mbps=results.get(Metric.SEQ_READ_MBPS, 0),
                random_read_iops=int(results.get(Metric.RAND_READ_IOPS, 0)),
                random_write_iops=int(results.get(Metric.RAND_WRITE_IOPS, 0)),
            )

        return cls(benchmark=benchmark, operations=operations, io_performance=io_performance)

    def to_document(self) -> dict:
        """Plain dict for serialization; io_performance only when present."""
        return self.model_dump(exclude_none=True)
