"""Timed storage lifecycle operations."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List

from common.errors import CommandFailedError
from common.models.command import CommandResult
from common.models.metrics import Metric, TimingResult
from common.models.run import RunConfig
from common.utils import Timer, format_duration
from bench.config import BenchSettings
from bench.core.proxmox import ProxmoxClient

logger = logging.getLogger(__name__)


@dataclass
class OperationStep:
    """One timed call to the orchestration CLI."""
    metric: Metric
    title: str
    action: Callable[[], Awaitable[CommandResult]]
    fatal: bool = True


class StorageOperationsBenchmark:
    """Time the six storage lifecycle operations in order.

    The first failing fatal step raises CommandFailedError and ends the
    run; nothing after it is attempted.
    """

    def __init__(
        self,
        client: ProxmoxClient,
        config: RunConfig,
        settings: BenchSettings,
        results: TimingResult,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.client = client
        self.config = config
        self.settings = settings
        self.results = results
        self.clock = clock

    def build_steps(self) -> List[OperationStep]:
        config = self.config
        settings = self.settings
        pid = os.getpid()

        return [
            OperationStep(
                metric=Metric.VM_CREATE,
                title="VM Creation",
                action=lambda: self.client.create_vm(
                    config.test_vmid,
                    f"benchmark-test-{pid}",
                    memory_mb=settings.vm_memory_mb,
                    cores=settings.vm_cores,
                    bridge=settings.vm_bridge,
                ),
            ),
            OperationStep(
                metric=Metric.VOLUME_CREATE,
                title=f"Volume Creation ({config.test_size})",
                action=lambda: self.client.attach_volume(
                    config.test_vmid, settings.disk_slot, config.storage_name, config.test_size_mb,
                ),
            ),
            OperationStep(
                metric=Metric.SNAPSHOT_CREATE,
                title="Snapshot Creation",
                action=lambda: self.client.create_snapshot(config.test_vmid, settings.snapshot_name),
            ),
            OperationStep(
                metric=Metric.CLONE_OPERATION,
                title="VM Clone Operation",
                action=lambda: self.client.clone_vm(
                    config.test_vmid, config.clone_vmid, f"benchmark-clone-{pid}",
                ),
            ),
            OperationStep(
                metric=Metric.VOLUME_RESIZE,
                title=f"Volume Resize ({settings.resize_increment})",
                action=lambda: self.client.resize_disk(
                    config.test_vmid, settings.disk_slot, settings.resize_increment,
                ),
            ),
            OperationStep(
                metric=Metric.SNAPSHOT_DELETE,
                title="Snapshot Deletion",
                action=lambda: self.client.delete_snapshot(config.test_vmid, settings.snapshot_name),
            ),
        ]

    async def run(self) -> TimingResult:
        steps = self.build_steps()

        for index, step in enumerate(steps, start=1):
            logger.info(f"[{index}/{len(steps)}] {step.title}")

            with Timer(clock=self.clock) as timer:
                result = await step.action()

            if not result.success:
                if step.fatal:
                    raise CommandFailedError(step.title, result)
                logger.warning(f"{step.title} failed: {result.stderr.strip()}")

            self.results.record(step.metric, timer.elapsed_seconds)
            logger.info(f"      Duration: {format_duration(timer.elapsed_seconds)}")

        return self.results
