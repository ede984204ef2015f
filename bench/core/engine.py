"""Benchmark engine - runs the phases of a storage benchmark in order."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TextIO

from common.models.metrics import TimingResult
from common.models.run import RunConfig
from bench.config import BenchSettings, get_settings
from bench.core.commands import CommandRunner
from bench.core.guard import ResourceGuard
from bench.core.io_runner import FioBenchmark
from bench.core.operations import StorageOperationsBenchmark
from bench.core.proxmox import ProxmoxClient
from bench.core.reporter import BenchmarkReporter
from bench.prechecks.storage import StoragePrecheck

logger = logging.getLogger(__name__)


class BenchmarkEngine:
    """Orchestrate precheck, lifecycle timings, optional fio and reporting.

    The resource guard is entered before the precheck and left after the
    report, so cleanup runs once on every exit path.
    """

    def __init__(
        self,
        config: RunConfig,
        settings: Optional[BenchSettings] = None,
        client: Optional[ProxmoxClient] = None,
        clock: Callable[[], float] = time.perf_counter,
        out: Optional[TextIO] = None,
    ):
        self.config = config
        self.settings = settings or get_settings()
        self.client = client or ProxmoxClient(
            runner=CommandRunner(timeout=self.settings.command_timeout),
            qm_binary=self.settings.qm_binary,
            pvesm_binary=self.settings.pvesm_binary,
        )
        self.results = TimingResult()
        self.clock = clock
        self.fio = FioBenchmark(self.client, config, self.settings, self.results)
        self.reporter = BenchmarkReporter(config, self.results, out=out)
        self.guard = ResourceGuard(self.client, config.test_vmid, config.clone_vmid)

    async def run(self) -> TimingResult:
        """Run the whole benchmark and return the collected measurements."""
        self.reporter.print_header()

        async with self.guard:
            await StoragePrecheck(self.client, self.config.storage_name).run()
            await self.guard.prepare()

            self.reporter.section("Storage Operations Benchmark")
            operations = StorageOperationsBenchmark(
                self.client, self.config, self.settings, self.results, clock=self.clock,
            )
            await operations.run()

            if self.config.with_io_tests:
                self.reporter.section("I/O Performance Tests (fio)")
                await self.fio.run()

            self.reporter.print_results()
            self.reporter.save()
            self.reporter.print_footer()

        return self.results
