"""Storage benchmark orchestration for Proxmox VE hosts."""

__version__ = "1.0.0"
