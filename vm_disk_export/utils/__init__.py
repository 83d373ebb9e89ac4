"""
Utility modules for VM Disk Export.

This package contains helpers shared across the export flow.
"""

from .secret_logging import redact_sas_url, suppress_secret_logging

__all__ = [
    "redact_sas_url",
    "suppress_secret_logging",
]
