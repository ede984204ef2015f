"""Thin wrapper around the Proxmox VE command line tools."""

from __future__ import annotations

import logging
from typing import Optional

from common.models.command import CommandResult
from bench.core.commands import CommandRunner

logger = logging.getLogger(__name__)


class ProxmoxClient:
    """Drive `qm` and `pvesm` on the local node.

    Every method returns the CommandResult of the underlying call.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        qm_binary: str = "qm",
        pvesm_binary: str = "pvesm",
    ):
        self.runner = runner or CommandRunner()
        self.qm_binary = qm_binary
        self.pvesm_binary = pvesm_binary

    async def run_qm(self, *args) -> CommandResult:
        """Execute a `qm` subcommand."""
        return await self.runner.run(self.qm_binary, *[str(a) for a in args])

    async def storage_status(self) -> CommandResult:
        return await self.runner.run(self.pvesm_binary, "status")

    async def vm_exists(self, vmid: int) -> bool:
        result = await self.run_qm("status", vmid)
        return result.success

    async def create_vm(
        self,
        vmid: int,
        name: str,
        memory_mb: int = 512,
        cores: int = 1,
        bridge: str = "vmbr0",
    ) -> CommandResult:
        return await self.run_qm(
            "create", vmid,
            "--name", name,
            "--memory", memory_mb,
            "--cores", cores,
            "--net0", f"virtio,bridge={bridge}",
        )

    async def destroy_vm(self, vmid: int) -> CommandResult:
        return await self.run_qm("destroy", vmid, "--purge")

    async def attach_volume(self, vmid: int, slot: str, storage: str, size_mb: int) -> CommandResult:
        return await self.run_qm("set", vmid, f"--{slot}", f"{storage}:{size_mb}")

    async def create_snapshot(self, vmid: int, name: str) -> CommandResult:
        return await self.run_qm("snapshot", vmid, name)

    async def delete_snapshot(self, vmid: int, name: str) -> CommandResult:
        return await self.run_qm("delsnapshot", vmid, name)

    async def clone_vm(self, vmid: int, new_vmid: int, name: str) -> CommandResult:
        return await self.run_qm("clone", vmid, new_vmid, "--name", name)

    async def resize_disk(self, vmid: int, slot: str, increment: str) -> CommandResult:
        return await self.run_qm("resize", vmid, slot, increment)

    async def start_vm(self, vmid: int) -> CommandResult:
        return await self.run_qm("start", vmid)

    async def stop_vm(self, vmid: int) -> CommandResult:
        return await self.run_qm("stop", vmid)

    async def vm_config(self, vmid: int) -> CommandResult:
        return await self.run_qm("config", vmid)


def parse_storage_status(output: str, storage_name: str) -> Optional[str]:
    """Return the status column for a storage in `pvesm status` output.

    The first column must equal the storage name exactly. Returns None
    when no line matches.
    """
    for line in output.splitlines():
        fields = line.split()
        if fields and fields[0] == storage_name:
            return fields[2] if len(fields) >= 3 else ""
    return None


def parse_disk_volume(config_output: str, slot: str) -> Optional[str]:
    """Extract the volume spec of a disk slot from `qm config` output."""
    prefix = f"{slot}:"
    for line in config_output.splitlines():
        if line.startswith(prefix):
            value = line[len(prefix):].strip()
            return value.split(",")[0] or None
    return None
