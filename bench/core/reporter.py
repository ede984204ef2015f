"""Scoring and rendering of benchmark results."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, TextIO

from common.models.metrics import (
    Metric,
    Direction,
    THRESHOLDS,
    OPERATION_METRICS,
    IO_METRICS,
    TimingResult,
    classify,
)
from common.models.report import Report
from common.models.run import RunConfig
from common.utils import save_document

logger = logging.getLogger(__name__)

RULE = "═" * 59
TABLE_RULE = "─" * 55


def operation_labels(config: RunConfig) -> dict[Metric, str]:
    return {
        Metric.VM_CREATE: "VM Create",
        Metric.VOLUME_CREATE: f"Volume Create ({config.test_size})",
        Metric.SNAPSHOT_CREATE: "Snapshot Create",
        Metric.CLONE_OPERATION: "Clone Operation",
        Metric.VOLUME_RESIZE: "Volume Resize",
        Metric.SNAPSHOT_DELETE: "Snapshot Delete",
    }


IO_LABELS = {
    Metric.SEQ_WRITE_MBPS: "Sequential Write",
    Metric.SEQ_READ_MBPS: "Sequential Read",
    Metric.RAND_READ_IOPS: "Random Read (4K)",
    Metric.RAND_WRITE_IOPS: "Random Write (4K)",
}

# Legend rows: label, metric whose thresholds apply, unit
BASELINE_ROWS = [
    ("VM Create", Metric.VM_CREATE, "s"),
    ("Volume Create", Metric.VOLUME_CREATE, "s"),
    ("Snapshot Create", Metric.SNAPSHOT_CREATE, "s"),
    ("Clone Operation", Metric.CLONE_OPERATION, "s"),
    ("Volume Resize", Metric.VOLUME_RESIZE, "s"),
    ("Snapshot Delete", Metric.SNAPSHOT_DELETE, "s"),
]

IO_BASELINE_ROWS = [
    ("Sequential Write", Metric.SEQ_WRITE_MBPS, "MB/s"),
    ("Sequential Read", Metric.SEQ_READ_MBPS, "MB/s"),
    ("Random IOPS", Metric.RAND_READ_IOPS, ""),
]


def format_measurement(metric: Metric, value: float) -> str:
    if metric in (Metric.SEQ_WRITE_MBPS, Metric.SEQ_READ_MBPS):
        return f"{value:8.2f} MB/s"
    if metric in (Metric.RAND_READ_IOPS, Metric.RAND_WRITE_IOPS):
        return f"{value:9.0f} IOPS"
    return f"{value:9.3f}s"


def format_row(label: str, metric: Metric, value: float) -> str:
    rating = classify(metric, value)
    return f"  {label:<25} {format_measurement(metric, value)}   {rating.value if rating else ''}"


def format_baseline(label: str, metric: Metric, unit: str) -> str:
    threshold = THRESHOLDS[metric]
    good, fair = f"{threshold.good:g}{unit}", f"{threshold.fair:g}{unit}"
    if threshold.direction == Direction.LOWER_IS_BETTER:
        cells = (f"<= {good}", f"<= {fair}", f"> {fair}")
    else:
        cells = (f">= {good}", f">= {fair}", f"< {fair}")
    return (
        f"  {label + ':':<20} {cells[0] + ' (Good),':<18} "
        f"{cells[1] + ' (Fair),':<18} {cells[2]} (Poor)"
    )


class BenchmarkReporter:
    """Render results as text tables and write the optional report file."""

    def __init__(self, config: RunConfig, results: TimingResult, out: Optional[TextIO] = None):
        self.config = config
        self.results = results
        self.out = out

    def _print(self, line: str = "") -> None:
        print(line, file=self.out)

    def section(self, title: str) -> None:
        self._print(RULE)
        self._print(f"  {title}")
        self._print(RULE)
        self._print()

    def print_header(self, started_at: Optional[datetime] = None) -> None:
        started_at = started_at or datetime.now()
        io_state = "Enabled" if self.config.with_io_tests else "Disabled (use --with-io to enable)"

        self._print()
        self.section("Storage Performance Benchmark")
        self._print(f"Storage:      {self.config.storage_name}")
        self._print(f"Test Size:    {self.config.test_size}")
        self._print(f"Node:         {self.config.node_name}")
        self._print(f"Date:         {started_at.strftime('%Y-%m-%d %H:%M:%S')}")
        self._print(f"I/O Tests:    {io_state}")
        self._print()

    def operation_rows(self) -> list[str]:
        labels = operation_labels(self.config)
        return [
            format_row(labels[metric], metric, self.results.get(metric))
            for metric in OPERATION_METRICS
            if metric in self.results
        ]

    def io_rows(self) -> list[str]:
        return [
            format_row(IO_LABELS[metric], metric, self.results.get(metric))
            for metric in IO_METRICS
            if metric in self.results
        ]

    def print_results(self) -> None:
        self.section("Performance Benchmark Results")

        self._print("Storage Operations:")
        self._print(f"  {'Operation':<25} {'Duration':>10}   Status")
        self._print(f"  {TABLE_RULE}")
        for row in self.operation_rows():
            self._print(row)
        self._print()

        if self.config.with_io_tests and self.results.has_io_results:
            self._print("I/O Performance:")
            self._print(f"  {'Test':<25} {'Result':>10}   Status")
            self._print(f"  {TABLE_RULE}")
            for row in self.io_rows():
                self._print(row)
            self._print()

        self._print("Expected Baseline Values:")
        rows = BASELINE_ROWS + (IO_BASELINE_ROWS if self.config.with_io_tests else [])
        for label, metric, unit in rows:
            self._print(format_baseline(label, metric, unit))
        self._print()

    def print_footer(self) -> None:
        self._print(RULE)
        self._print("Benchmark Complete!")
        self._print(RULE)
        self._print()
        if not self.config.with_io_tests:
            self._print("Tip: Run with --with-io flag for comprehensive I/O performance tests")
            self._print()

    def build_report(self, generated_at: Optional[datetime] = None) -> Report:
        return Report.build(self.config, self.results, generated_at)

    def save(self, path: Optional[str] = None) -> bool:
        """Write the report file. Failures are logged, never raised."""
        path = path or self.config.output_path
        if not path:
            return False

        logger.info(f"Saving results to: {path}")
        try:
            save_document(path, self.build_report().to_document())
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save results to {path}: {e}")
            return False

        logger.info("Results saved")
        return True
