"""Exception hierarchy for benchmark runs."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from common.models.command import CommandResult


class BenchmarkError(Exception):
    """Base class for fatal benchmark errors."""


class ConfigError(BenchmarkError):
    """Invalid invocation options."""


class PreconditionError(BenchmarkError):
    """Target storage is not usable for a benchmark run."""

    def __init__(self, storage: str, message: str):
        super().__init__(message)
        self.storage = storage


class NotFoundError(PreconditionError):
    """Storage pool does not exist."""

    def __init__(self, storage: str):
        super().__init__(storage, f"Storage '{storage}' not found")


class InactiveError(PreconditionError):
    """Storage pool exists but is not active."""

    def __init__(self, storage: str, status: str):
        super().__init__(storage, f"Storage '{storage}' is not active (status: {status})")
        self.status = status


class CommandFailedError(BenchmarkError):
    """An external command required by the run exited unsuccessfully."""

    def __init__(self, step: str, result: Optional[CommandResult] = None):
        detail = ""
        if result is not None:
            detail = f" (exit {result.exit_code}): {result.stderr.strip() or result.command}"
        super().__init__(f"{step} failed{detail}")
        self.step = step
        self.result = result
