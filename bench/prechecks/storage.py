"""Storage pool precondition check."""

from __future__ import annotations

import logging

from common.errors import NotFoundError, InactiveError, PreconditionError
from bench.core.proxmox import ProxmoxClient, parse_storage_status

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "active"


class StoragePrecheck:
    """Verify that the target storage exists and is active."""

    def __init__(self, client: ProxmoxClient, storage_name: str):
        self.client = client
        self.storage_name = storage_name

    async def run(self) -> str:
        """Return the storage status, raising when the pool cannot be used."""
        logger.info("Verifying storage configuration...")

        result = await self.client.storage_status()
        if not result.success:
            detail = result.stderr.strip() or f"exit {result.exit_code}"
            raise PreconditionError(self.storage_name, f"Cannot query storage status: {detail}")

        status = parse_storage_status(result.stdout, self.storage_name)
        if status is None:
            raise NotFoundError(self.storage_name)
        if status != ACTIVE_STATUS:
            raise InactiveError(self.storage_name, status or "unknown")

        logger.info(f"Storage '{self.storage_name}' is active")
        return status
