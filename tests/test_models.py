"""Unit tests for Pydantic models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from common.models import (
    RunConfig,
    Metric,
    Rating,
    Direction,
    Threshold,
    TimingResult,
    THRESHOLDS,
    OPERATION_METRICS,
    IO_METRICS,
    classify,
    Report,
    CommandResult,
)


class TestRunConfig:
    """Tests for the run configuration model."""

    def test_defaults(self):
        config = RunConfig(storage_name="tnscale", node_name="pve1")

        assert config.test_size == "10G"
        assert config.test_size_bytes == 10 * 1024 ** 3
        assert config.with_io_tests is False
        assert config.output_path is None
        assert config.test_vmid == 9999
        assert config.clone_vmid == 9998

    def test_frozen(self, run_config):
        with pytest.raises(ValidationError):
            run_config.storage_name = "other"

    def test_test_size_mb(self):
        config = RunConfig(storage_name="p", node_name="n", test_size="512M", test_size_bytes=512 * 1024 ** 2)
        assert config.test_size_mb == 512

        assert RunConfig(storage_name="p", node_name="n").test_size_mb == 10240


class TestCommandResult:
    """Tests for the command result model."""

    def test_success(self):
        assert CommandResult(command="qm status 1", exit_code=0).success is True
        assert CommandResult(command="qm status 1", exit_code=2).success is False


class TestThresholds:
    """Tests for rating thresholds."""

    def test_table_covers_every_metric(self):
        assert set(THRESHOLDS) == set(OPERATION_METRICS) | set(IO_METRICS)

    def test_latency_metrics_lower_is_better(self):
        for metric in OPERATION_METRICS:
            assert THRESHOLDS[metric].direction == Direction.LOWER_IS_BETTER

    def test_io_metrics_higher_is_better(self):
        for metric in IO_METRICS:
            assert THRESHOLDS[metric].direction == Direction.HIGHER_IS_BETTER

    def test_good_bound_inclusive(self):
        assert classify(Metric.VM_CREATE, 2.0) == Rating.GOOD
        assert classify(Metric.VM_CREATE, 2.001) == Rating.FAIR

    def test_fair_bound_inclusive(self):
        assert classify(Metric.SNAPSHOT_CREATE, 5.0) == Rating.FAIR
        assert classify(Metric.SNAPSHOT_DELETE, 5.0) == Rating.FAIR
        assert classify(Metric.CLONE_OPERATION, 120.0) == Rating.FAIR
        assert classify(Metric.CLONE_OPERATION, 120.01) == Rating.POOR

    @pytest.mark.parametrize("metric,value,expected", [
        (Metric.VOLUME_CREATE, 4.0, Rating.GOOD),
        (Metric.VOLUME_CREATE, 15.0, Rating.FAIR),
        (Metric.VOLUME_CREATE, 16.0, Rating.POOR),
        (Metric.CLONE_OPERATION, 45.0, Rating.GOOD),
        (Metric.VOLUME_RESIZE, 3.0, Rating.GOOD),
        (Metric.VOLUME_RESIZE, 10.5, Rating.POOR),
    ])
    def test_latency_ratings(self, metric, value, expected):
        assert classify(metric, value) == expected

    @pytest.mark.parametrize("metric,value,expected", [
        (Metric.SEQ_WRITE_MBPS, 100, Rating.GOOD),
        (Metric.SEQ_WRITE_MBPS, 99.99, Rating.FAIR),
        (Metric.SEQ_READ_MBPS, 50, Rating.FAIR),
        (Metric.SEQ_READ_MBPS, 49.99, Rating.POOR),
        (Metric.RAND_READ_IOPS, 1000, Rating.GOOD),
        (Metric.RAND_WRITE_IOPS, 500, Rating.FAIR),
        (Metric.RAND_WRITE_IOPS, 0, Rating.POOR),
    ])
    def test_throughput_ratings(self, metric, value, expected):
        assert classify(metric, value) == expected

    def test_classify_accepts_metric_names(self):
        assert classify("vm_create", 1.0) == Rating.GOOD

    def test_custom_threshold(self):
        threshold = Threshold(metric=Metric.VM_CREATE, good=1, fair=2)
        assert threshold.classify(1.5) == Rating.FAIR


class TestTimingResult:
    """Tests for the measurement collection."""

    def test_record_and_get(self):
        results = TimingResult()
        results.record(Metric.VM_CREATE, 1.2)

        assert results.get(Metric.VM_CREATE) == 1.2
        assert results.get(Metric.CLONE_OPERATION) is None
        assert Metric.VM_CREATE in results
        assert "vm_create" in results
        assert "not_a_metric" not in results

    def test_entries_are_write_once(self):
        results = TimingResult()
        results.record(Metric.VM_CREATE, 1.2)

        with pytest.raises(ValueError):
            results.record(Metric.VM_CREATE, 3.4)
        assert results.get(Metric.VM_CREATE) == 1.2

    def test_has_io_results(self):
        results = TimingResult()
        results.record(Metric.VM_CREATE, 1.0)
        assert results.has_io_results is False

        results.record(Metric.RAND_READ_IOPS, 0)
        assert results.has_io_results is True


class TestReport:
    """Tests for the report document."""

    @pytest.fixture
    def results(self) -> TimingResult:
        results = TimingResult()
        for metric, value in zip(OPERATION_METRICS, [1.2, 4.0, 0.8, 45.0, 2.1, 0.5]):
            results.record(metric, value)
        return results

    def test_build_without_io(self, run_config, results):
        generated_at = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
        document = Report.build(run_config, results, generated_at).to_document()

        assert document["benchmark"] == {
            "storage": "mypool",
            "node": "pve1",
            "test_size": "20G",
            "test_size_bytes": 21474836480,
            "timestamp": "2026-10-19T12:00:00+00:00",
            "with_io_tests": False,
        }
        assert document["operations"] == {
            "vm_create_seconds": 1.2,
            "volume_create_seconds": 4.0,
            "snapshot_create_seconds": 0.8,
            "clone_operation_seconds": 45.0,
            "volume_resize_seconds": 2.1,
            "snapshot_delete_seconds": 0.5,
        }
        assert "io_performance" not in document

    def test_build_with_io(self, run_config, results):
        config = run_config.model_copy(update={"with_io_tests": True})
        results.record(Metric.SEQ_WRITE_MBPS, 210.5)
        results.record(Metric.SEQ_READ_MBPS, 0)
        results.record(Metric.RAND_READ_IOPS, 1500)
        results.record(Metric.RAND_WRITE_IOPS, 800)

        document = Report.build(config, results).to_document()

        assert document["benchmark"]["with_io_tests"] is True
        assert document["io_performance"] == {
            "sequential_write_mbps": 210.5,
            "sequential_read_mbps": 0,
            "random_read_iops": 1500,
            "random_write_iops": 800,
        }

    def test_io_enabled_without_measurements(self, run_config, results):
        config = run_config.model_copy(update={"with_io_tests": True})
        document = Report.build(config, results).to_document()

        assert "io_performance" not in document
