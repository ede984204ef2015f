"""External command result model."""

from __future__ import annotations

from pydantic import BaseModel


class CommandResult(BaseModel):
    """Result of executing an external command."""
    command: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: float = 0

    @property
    def success(self) -> bool:
        return self.exit_code == 0
