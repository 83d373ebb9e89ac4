"""CLI commands for VM Disk Export."""

from .base import configure_run, exit_with_error
from .export import export_os_disk

__all__ = [
    "configure_run",
    "exit_with_error",
    "export_os_disk",
]
