"""Services that implement the OS disk export flow."""

from .access_grant import DiskAccessGrant, GrantState
from .export_service import VmDiskExportService
from .interfaces import AzureSession

__all__ = [
    "AzureSession",
    "DiskAccessGrant",
    "GrantState",
    "VmDiskExportService",
]
