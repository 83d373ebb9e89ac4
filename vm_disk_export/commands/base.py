"""Shared command utilities.

This module provides helpers used by the CLI commands:
- exit_with_error for reporting fatal errors
- configure_run for config loading and logging setup
"""

import sys
from typing import Optional

import click

from vm_disk_export.config_manager import (
    VmDiskExportConfig,
    create_config_from_env,
    setup_logging,
)
from vm_disk_export.logging_config import configure_structlog


def exit_with_error(message: str, code: int = 1) -> None:
    """Exit with error message."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def configure_run(
    subscription_id: Optional[str] = None,
    log_level: Optional[str] = None,
    debug: bool = False,
) -> VmDiskExportConfig:
    """Load configuration from the environment and set up logging.

    Args:
        subscription_id: Explicit subscription, overrides AZURE_SUBSCRIPTION_ID
        log_level: Explicit log level, overrides LOG_LEVEL
        debug: Force DEBUG logging and print the configuration summary

    Returns:
        Validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    config = create_config_from_env(
        subscription_id=subscription_id,
        log_level="DEBUG" if debug else log_level,
    )
    setup_logging(config.logging)
    configure_structlog(config.logging.json_logs)
    if debug:
        config.log_configuration_summary()
    return config


__all__ = [
    "configure_run",
    "exit_with_error",
]
