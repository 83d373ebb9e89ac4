"""
Configuration Management for VM Disk Export

This module provides centralized configuration management with validation
and environment variable handling.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import colorlog

from .exceptions import InvalidConfigurationError

HTTP_LOGGERS = [
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.core.pipeline.policies.HttpLoggingPolicy",
    "azure.core.pipeline",
    "azure.identity",
    "azure.mgmt",
    "azure.storage",
    "msal",
    "azure",
    "urllib3",
    "urllib3.connectionpool",
    "http.client",
]


def _set_azure_http_log_level(log_level: str) -> None:
    """Set log levels for HTTP-related loggers to reduce noise."""
    # HTTP logging should only appear at DEBUG level
    target_level = logging.DEBUG if log_level == "DEBUG" else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(target_level)


logger = logging.getLogger(__name__)


@dataclass
class AzureConfig:
    """Azure subscription and tenant selection."""

    subscription_id: Optional[str] = field(
        default_factory=lambda: os.getenv("AZURE_SUBSCRIPTION_ID") or None
    )
    tenant_id: Optional[str] = field(
        default_factory=lambda: os.getenv("AZURE_TENANT_ID") or None
    )

    def get_masked_subscription_id(self) -> str:
        """Get subscription ID for logging (first 8 chars only)."""
        if not self.subscription_id:
            return "From session"
        if len(self.subscription_id) > 8:
            return self.subscription_id[:8] + "..."
        return self.subscription_id


def _poll_interval_from_env() -> float:
    raw = os.getenv("VM_DISK_EXPORT_COPY_POLL_INTERVAL", "5.0")
    try:
        return float(raw)
    except ValueError as e:
        raise InvalidConfigurationError(
            f"Copy poll interval must be a number of seconds: {raw!r}",
            config_section="copy",
            cause=e,
        ) from e


@dataclass
class CopyConfig:
    """Configuration for blob copy monitoring."""

    poll_interval: float = field(default_factory=_poll_interval_from_env)

    def __post_init__(self) -> None:
        """Validate copy configuration."""
        if self.poll_interval <= 0:
            raise InvalidConfigurationError(
                "Copy poll interval must be positive", config_section="copy"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(log_color)s%(levelname)s:%(name)s:%(message)s"
        )
    )
    file_output: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE"))
    json_logs: bool = field(
        default_factory=lambda: os.getenv("LOG_JSON", "false").lower() == "true"
    )

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise InvalidConfigurationError(
                f"Log level must be one of: {valid_levels}", config_section="logging"
            )
        self.level = self.level.upper()

    def get_log_level(self) -> int:
        """Convert string log level to logging constant."""
        return int(getattr(logging, self.level))


@dataclass
class VmDiskExportConfig:
    """Main configuration class that aggregates all configuration sections."""

    azure: AzureConfig = field(default_factory=AzureConfig)
    copy: CopyConfig = field(default_factory=CopyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_environment(
        cls,
        subscription_id: Optional[str] = None,
        log_level: Optional[str] = None,
        poll_interval: Optional[float] = None,
    ) -> "VmDiskExportConfig":
        """
        Create configuration from environment variables.

        Explicit arguments override the environment.

        Args:
            subscription_id: Optional Azure subscription ID
            log_level: Optional logging level name
            poll_interval: Optional blob copy poll interval in seconds

        Returns:
            VmDiskExportConfig: Configured instance
        """
        config = cls()
        if subscription_id:
            config.azure.subscription_id = subscription_id
        if log_level:
            config.logging.level = log_level
        if poll_interval is not None:
            config.copy.poll_interval = poll_interval
        return config

    def validate_all(self) -> None:
        """Validate all configuration sections."""
        try:
            self.copy.__post_init__()
            self.logging.__post_init__()
            logger.debug("Configuration validation successful")
        except InvalidConfigurationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def log_configuration_summary(self) -> None:
        """Log a summary of the current configuration (without sensitive data)."""
        logger.info("=" * 60)
        logger.info("VM DISK EXPORT CONFIGURATION")
        logger.info("=" * 60)
        logger.info(f"Subscription: {self.azure.get_masked_subscription_id()}")
        logger.info(f"Copy poll interval: {self.copy.poll_interval}s")
        logger.info(f"Logging Level: {self.logging.level}")
        if self.logging.file_output:
            logger.info(f"Log File: {self.logging.file_output}")
        logger.info("=" * 60)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            "azure": {
                "subscription_id": self.azure.subscription_id,
                "tenant_id": self.azure.tenant_id,
            },
            "copy": {
                "poll_interval": self.copy.poll_interval,
            },
            "logging": {
                "level": self.logging.level,
                "file_output": self.logging.file_output,
                "json_logs": self.logging.json_logs,
            },
        }


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup logging configuration based on config.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(config.get_log_level())

    console_handler = colorlog.StreamHandler()
    console_handler.setFormatter(colorlog.ColoredFormatter(config.format))
    root_logger.addHandler(console_handler)

    if config.file_output:
        file_handler = logging.FileHandler(config.file_output)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s:%(name)s:%(message)s"
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Applied after the root level so SDK request/response logs stay quiet
    _set_azure_http_log_level(config.level)

    logger.debug(
        f"Logging configured: level={config.level}, file={config.file_output or 'console'}"
    )


def create_config_from_env(
    subscription_id: Optional[str] = None,
    log_level: Optional[str] = None,
) -> VmDiskExportConfig:
    """
    Factory function to create and validate configuration from environment.

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    config = VmDiskExportConfig.from_environment(
        subscription_id=subscription_id, log_level=log_level
    )
    config.validate_all()
    return config
