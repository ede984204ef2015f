"""Lifecycle guard for the reserved benchmark VMs."""

from __future__ import annotations

import logging

from common.errors import CommandFailedError
from bench.core.proxmox import ProxmoxClient

logger = logging.getLogger(__name__)


class ResourceGuard:
    """Keep the reserved test and clone VM ids clear before and after a run.

    Used as an async context manager: entering registers the guard, leaving
    releases it on every exit path (normal return, exception, cancellation).
    Release runs at most once.
    """

    def __init__(self, client: ProxmoxClient, test_vmid: int, clone_vmid: int):
        self.client = client
        self.test_vmid = test_vmid
        self.clone_vmid = clone_vmid
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    async def __aenter__(self) -> "ResourceGuard":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.release()

    async def prepare(self) -> None:
        """Destroy stale VMs left behind by an earlier run."""
        for vmid in (self.test_vmid, self.clone_vmid):
            if not await self.client.vm_exists(vmid):
                continue

            logger.warning(f"Test VM {vmid} already exists, destroying...")
            result = await self.client.destroy_vm(vmid)
            if not result.success:
                raise CommandFailedError(f"Removing stale VM {vmid}", result)

    async def release(self) -> None:
        """Destroy the clone and then the test VM if they exist. Never raises."""
        if self._released:
            return
        self._released = True

        logger.info("Cleaning up test resources...")
        for vmid in (self.clone_vmid, self.test_vmid):
            try:
                if await self.client.vm_exists(vmid):
                    result = await self.client.destroy_vm(vmid)
                    if not result.success:
                        logger.warning(f"Failed to destroy VM {vmid}: {result.stderr.strip()}")
            except Exception as e:
                logger.warning(f"Cleanup of VM {vmid} failed: {e}")
        logger.info("Cleanup complete")
