"""Benchmark configuration settings."""

from __future__ import annotations

import socket
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class BenchSettings(BaseSettings):
    """Settings loaded from environment variables."""

    # Defaults for invocation options
    default_storage: str = "tnscale"
    default_test_size: str = "10G"

    # Reserved VM identifiers; must not be used by anything else on the node
    test_vmid: int = 9999
    clone_vmid: int = 9998

    # Test VM shape
    vm_memory_mb: int = 512
    vm_cores: int = 1
    vm_bridge: str = "vmbr0"
    disk_slot: str = "scsi0"
    snapshot_name: str = "benchmark-snap"
    resize_increment: str = "+2G"

    # I/O tests
    device_path: str = "/dev/disk/by-id/scsi-0QEMU_QEMU_HARDDISK_drive-scsi0"
    io_size: str = "1G"
    start_settle_seconds: float = 5
    stop_settle_seconds: float = 2

    # External tools
    qm_binary: str = "qm"
    pvesm_binary: str = "pvesm"
    fio_binary: str = "fio"
    command_timeout: Optional[float] = Field(default=None, description="None blocks until exit")

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_prefix = "STORAGE_BENCH_"
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def hostname(self) -> str:
        return socket.gethostname()


# Global settings instance
_settings: Optional[BenchSettings] = None


def get_settings() -> BenchSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = BenchSettings()
    return _settings


def init_settings(**kwargs) -> BenchSettings:
    """Initialize settings with custom values."""
    global _settings
    _settings = BenchSettings(**kwargs)
    return _settings
