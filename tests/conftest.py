"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Optional

import pytest

from common.models.command import CommandResult
from common.models.run import RunConfig
from bench.config import BenchSettings
from bench.core.proxmox import ProxmoxClient


PVESM_STATUS = """\
Name             Type     Status           Total            Used       Available        %
local             dir     active        98497780        12345678        81088420   12.53%
mypool            zfspool active       942931968       123456789       819475179   13.09%
offline           nfs     inactive               0               0               0    0.00%
tnscale           zfspool active       942931968       123456789       819475179   13.09%
"""


class FakeClock:
    """Monotonic clock advanced explicitly by the fake runner."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRunner:
    """Stand-in for CommandRunner that emulates qm, pvesm and fio."""

    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self.calls: list[list[str]] = []
        self.existing: set[int] = set()
        self.storage_output = PVESM_STATUS
        self.durations: dict[str, float] = {}
        self.failures: set[str] = set()
        self.fio_installed = False
        self.fio_outputs: dict[str, str] = {}
        self.fio_failures: set[str] = set()
        self.config_output: Optional[str] = None

    def which(self, binary: str) -> Optional[str]:
        if binary == "fio" and not self.fio_installed:
            return None
        return f"/usr/bin/{binary}"

    def calls_for(self, subcommand: str) -> list[list[str]]:
        return [c for c in self.calls if len(c) > 1 and c[1] == subcommand]

    def _result(self, args: list[str], exit_code: int = 0, stdout: str = "") -> CommandResult:
        return CommandResult(command=" ".join(args), exit_code=exit_code, stdout=stdout,
                             stderr="" if exit_code == 0 else "simulated failure")

    async def run(self, *args, timeout=None) -> CommandResult:
        args = [str(a) for a in args]
        self.calls.append(args)
        program = args[0]

        if program == "pvesm":
            return self._result(args, stdout=self.storage_output)

        if program == "fio":
            name = args[1].split("=", 1)[1]
            if name in self.fio_failures:
                return self._result(args, exit_code=1)
            return self._result(args, stdout=self.fio_outputs.get(name, ""))

        subcommand = args[1]
        vmid = int(args[2])
        self.clock.advance(self.durations.get(subcommand, 0.0))

        if subcommand in self.failures:
            return self._result(args, exit_code=255)

        if subcommand == "status":
            return self._result(args, exit_code=0 if vmid in self.existing else 2)
        if subcommand == "create":
            self.existing.add(vmid)
        elif subcommand == "clone":
            self.existing.add(int(args[3]))
        elif subcommand == "destroy":
            if vmid not in self.existing:
                return self._result(args, exit_code=2)
            self.existing.discard(vmid)
        elif subcommand == "config":
            if self.config_output is not None:
                return self._result(args, stdout=self.config_output)
            return self._result(args, stdout=f"cores: 1\nscsi0: mypool:vm-{vmid}-disk-0,size=22G\n")

        return self._result(args)


def fio_json(direction: str, bw: float = 0, iops: float = 0) -> str:
    return json.dumps({"jobs": [{"jobname": "test", direction: {"bw": bw, "iops": iops}}]})


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_runner(fake_clock: FakeClock) -> FakeRunner:
    return FakeRunner(fake_clock)


@pytest.fixture
def client(fake_runner: FakeRunner) -> ProxmoxClient:
    return ProxmoxClient(runner=fake_runner)


@pytest.fixture
def device(tmp_path: Path) -> Path:
    path = tmp_path / "scsi-0QEMU_QEMU_HARDDISK_drive-scsi0"
    path.touch()
    return path


@pytest.fixture
def settings(device: Path) -> BenchSettings:
    return BenchSettings(
        device_path=str(device),
        start_settle_seconds=0,
        stop_settle_seconds=0,
    )


@pytest.fixture
def run_config() -> RunConfig:
    return RunConfig(
        storage_name="mypool",
        test_size="20G",
        test_size_bytes=20 * 1024 ** 3,
        node_name="pve1",
    )


@pytest.fixture
def pvesm_status() -> str:
    return PVESM_STATUS


@pytest.fixture
def fio_output():
    """Build fio JSON output for a single job."""
    return fio_json
