"""fio workloads against the test VM's disk."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN
from pathlib import Path
from typing import Awaitable, Callable, Optional

from common.models.metrics import Metric, TimingResult
from common.models.run import RunConfig
from bench.config import BenchSettings
from bench.core.commands import CommandRunner
from bench.core.proxmox import ProxmoxClient, parse_disk_volume

logger = logging.getLogger(__name__)

# fio reports bandwidth in KiB/s
KIB_PER_MB = 1024


@dataclass(frozen=True)
class FioWorkload:
    """A fixed fio job profile and the field it is scored on."""
    name: str
    title: str
    rw: str
    block_size: str
    metric: Metric
    direction: str  # "read" or "write" section of the job
    field: str      # "bw" or "iops"


WORKLOADS: list[FioWorkload] = [
    FioWorkload("seqwrite", "Sequential Write Test", "write", "1M", Metric.SEQ_WRITE_MBPS, "write", "bw"),
    FioWorkload("seqread", "Sequential Read Test", "read", "1M", Metric.SEQ_READ_MBPS, "read", "bw"),
    FioWorkload("randread", "Random Read IOPS (4K)", "randread", "4k", Metric.RAND_READ_IOPS, "read", "iops"),
    FioWorkload("randwrite", "Random Write IOPS (4K)", "randwrite", "4k", Metric.RAND_WRITE_IOPS, "write", "iops"),
]


def parse_fio_value(output: str, direction: str, field: str) -> float:
    """Pull jobs[0].<direction>.<field> from fio JSON output, 0 if absent."""
    start = output.find("{")
    if start < 0:
        return 0.0

    try:
        data = json.loads(output[start:])
        job = data["jobs"][0]
        value = job.get(direction, {}).get(field, 0)
        return float(value or 0)
    except (ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
        logger.debug(f"Unparseable fio output: {e}")
        return 0.0


def normalize(workload: FioWorkload, raw: float) -> float:
    """Convert a raw fio value to MB/s (truncated to two decimals) or whole IOPS."""
    if workload.field == "bw":
        mbps = Decimal(str(raw)) / KIB_PER_MB
        return float(mbps.quantize(Decimal("0.01"), rounding=ROUND_DOWN))
    return float(round(raw))


class FioBenchmark:
    """Run the four fio workloads on the test VM's raw disk.

    Nothing here is fatal: a missing tool or device skips the phase, and a
    failed workload is recorded as 0.
    """

    def __init__(
        self,
        client: ProxmoxClient,
        config: RunConfig,
        settings: BenchSettings,
        results: TimingResult,
        runner: Optional[CommandRunner] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.config = config
        self.settings = settings
        self.results = results
        self.runner = runner or client.runner
        self.sleep = sleep

    def is_available(self) -> bool:
        return self.runner.which(self.settings.fio_binary) is not None

    def build_command(self, workload: FioWorkload, device: str) -> list[str]:
        return [
            self.settings.fio_binary,
            f"--name={workload.name}",
            f"--rw={workload.rw}",
            f"--bs={workload.block_size}",
            f"--size={self.settings.io_size}",
            "--numjobs=1",
            f"--filename={device}",
            "--direct=1",
            "--group_reporting",
            "--output-format=json",
        ]

    async def run(self) -> bool:
        """Run the I/O phase. Returns True when workloads were executed."""
        if not self.is_available():
            logger.warning("fio not installed, skipping I/O tests (install with: apt-get install fio)")
            return False

        vmid = self.config.test_vmid
        logger.info("Starting VM for I/O tests...")
        started = await self.client.start_vm(vmid)
        if not started.success:
            logger.warning(f"Could not start VM {vmid}, skipping I/O tests: {started.stderr.strip()}")
            return False

        try:
            await self.sleep(self.settings.start_settle_seconds)

            device = await self.resolve_device()
            if device is None:
                logger.warning("Could not access disk device, skipping I/O tests")
                return False

            offset = 6
            total = offset + len(WORKLOADS)
            for index, workload in enumerate(WORKLOADS, start=offset + 1):
                logger.info(f"[{index}/{total}] {workload.title}")
                value = await self.run_workload(workload, device)
                self.results.record(workload.metric, value)
                if workload.field == "bw":
                    logger.info(f"      Bandwidth: {value:.2f} MB/s")
                else:
                    logger.info(f"      IOPS: {value:.0f}")
            return True
        finally:
            stopped = await self.client.stop_vm(vmid)
            if not stopped.success:
                logger.debug(f"Stopping VM {vmid} failed: {stopped.stderr.strip()}")
            await self.sleep(self.settings.stop_settle_seconds)

    async def resolve_device(self) -> Optional[str]:
        """Return the stable device path of the test disk.

        None when the disk is not attached from the target storage or the
        device node is missing.
        """
        vmid = self.config.test_vmid
        config_result = await self.client.vm_config(vmid)
        if not config_result.success:
            logger.warning(f"Reading config of VM {vmid} failed: {config_result.stderr.strip()}")
            return None

        slot = self.settings.disk_slot
        volume = parse_disk_volume(config_result.stdout, slot)
        if volume is None or not volume.startswith(f"{self.config.storage_name}:"):
            logger.warning(f"VM {vmid} has no {slot} disk on storage '{self.config.storage_name}' (found: {volume})")
            return None
        logger.debug(f"Test disk volume: {volume}")

        device = self.settings.device_path
        if not Path(device).exists():
            return None
        return device

    async def run_workload(self, workload: FioWorkload, device: str) -> float:
        result = await self.runner.run(*self.build_command(workload, device))
        if not result.success:
            logger.warning(f"fio {workload.name} failed, recording 0: {result.stderr.strip()}")
            return 0.0

        raw = parse_fio_value(result.stdout, workload.direction, workload.field)
        return normalize(workload, raw)
