"""Blocking runner for external commands."""

from __future__ import annotations

import asyncio
import logging
import shlex
import shutil
import time
from typing import Optional

from common.models.command import CommandResult

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run external programs one at a time and capture their results.

    Failures to launch a program are reported as a failed CommandResult;
    deciding whether a failure is fatal is left to the caller.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    @staticmethod
    def which(binary: str) -> Optional[str]:
        """Locate a program on PATH."""
        return shutil.which(binary)

    async def run(self, *args: str, timeout: Optional[float] = None) -> CommandResult:
        """Run a single command and wait for it to exit."""
        cmd_parts = [str(a) for a in args]
        command = shlex.join(cmd_parts)
        timeout = timeout if timeout is not None else self.timeout
        start_time = time.monotonic()

        logger.debug(f"Running: {command}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd_parts,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return CommandResult(
                command=command,
                exit_code=-1,
                stderr=str(e),
                duration_ms=(time.monotonic() - start_time) * 1000,
            )

        try:
            if timeout is None:
                stdout, stderr = await process.communicate()
            else:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return CommandResult(
                command=command,
                exit_code=-1,
                stderr=f"Command timed out after {timeout}s",
                duration_ms=(time.monotonic() - start_time) * 1000,
            )
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
            raise

        result = CommandResult(
            command=command,
            exit_code=process.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            duration_ms=(time.monotonic() - start_time) * 1000,
        )

        if not result.success:
            logger.debug(f"Command exited {result.exit_code}: {command}: {result.stderr.strip()}")

        return result
