"""Run configuration model."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RunConfig(BaseModel):
    """Validated configuration for a single benchmark run."""
    storage_name: str = Field(..., description="Target storage pool")
    test_size: str = Field(default="10G", description="Test volume size as given")
    test_size_bytes: int = Field(default=10 * 1024 ** 3, ge=0)
    with_io_tests: bool = Field(default=False)
    output_path: Optional[str] = Field(default=None, description="Report file path")
    node_name: str = Field(..., description="Host the benchmark runs on")

    # Reserved VM identifiers
    test_vmid: int = Field(default=9999)
    clone_vmid: int = Field(default=9998)

    class Config:
        frozen = True

    @property
    def test_size_mb(self) -> int:
        """Test volume size in MB, as passed to the orchestration CLI."""
        return self.test_size_bytes // (1024 * 1024)
