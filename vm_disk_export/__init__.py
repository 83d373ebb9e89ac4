"""
VM Disk Export

Copies an Azure virtual machine's OS disk into a storage account container
as a VHD blob, using a temporary read-only SAS on the managed disk.
"""

__version__ = "0.1.0"
