"""
Custom Exception Hierarchy for VM Disk Export

This module provides the exception hierarchy used across the export flow.
Every failure carries an error code, structured context and an optional
recovery suggestion so the CLI can report it in one consistent format.
"""

from typing import Any, Dict, Optional


class VmDiskExportError(Exception):
    """
    Base exception class for all VM disk export errors.

    Provides structured error information including context, error codes,
    and optional recovery suggestions.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        if self.recovery_suggestion:
            result += f" (suggestion: {self.recovery_suggestion})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


# Input validation exceptions
class ValidationError(VmDiskExportError):
    """Base class for input validation errors."""

    pass


class InvalidDestinationError(ValidationError):
    """Raised when the destination file name is not a .vhd file."""

    def __init__(
        self, message: str, file_name: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if file_name is not None:
            context["file_name"] = file_name
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_DESTINATION")
        kwargs.setdefault(
            "recovery_suggestion", "Use a destination file name ending in .vhd"
        )
        super().__init__(message, **kwargs)


class InvalidParameterError(ValidationError):
    """Raised when a command parameter is empty or out of range."""

    def __init__(
        self, message: str, parameter: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if parameter:
            context["parameter"] = parameter
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_PARAMETER")
        super().__init__(message, **kwargs)


# Azure-related exceptions
class AzureError(VmDiskExportError):
    """Base class for Azure-related errors."""

    pass


class AzureAuthenticationError(AzureError):
    """Raised when Azure authentication fails."""

    def __init__(
        self, message: str, tenant_id: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if tenant_id:
            context["tenant_id"] = tenant_id
        kwargs["context"] = context
        kwargs.setdefault("error_code", "AZURE_AUTH_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Try running 'az login' or check your Azure credentials",
        )
        super().__init__(message, **kwargs)


class ResourceResolutionError(AzureError):
    """Raised when the resource group, VM or its OS disk cannot be resolved."""

    def __init__(
        self,
        message: str,
        resource_group: Optional[str] = None,
        resource_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if resource_group:
            context["resource_group"] = resource_group
        if resource_name:
            context["resource_name"] = resource_name
        kwargs["context"] = context
        kwargs.setdefault("error_code", "RESOURCE_RESOLUTION_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Check the resource names and that your account has Reader access",
        )
        super().__init__(message, **kwargs)


class StorageKeyError(AzureError):
    """Raised when the storage account key cannot be retrieved."""

    def __init__(
        self, message: str, account_name: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if account_name:
            context["account_name"] = account_name
        kwargs["context"] = context
        kwargs.setdefault("error_code", "STORAGE_KEY_FETCH_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Check that the storage account exists and allows listing keys",
        )
        super().__init__(message, **kwargs)


class DiskAccessGrantError(AzureError):
    """Raised when SAS access to a disk cannot be granted."""

    def __init__(
        self, message: str, disk_name: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if disk_name:
            context["disk_name"] = disk_name
        kwargs["context"] = context
        kwargs.setdefault("error_code", "DISK_GRANT_FAILED")
        super().__init__(message, **kwargs)


class DiskAccessRevokeError(AzureError):
    """Raised when SAS access to a disk cannot be revoked."""

    def __init__(
        self, message: str, disk_name: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if disk_name:
            context["disk_name"] = disk_name
        kwargs["context"] = context
        kwargs.setdefault("error_code", "DISK_REVOKE_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Revoke access manually with 'az disk revoke-access'",
        )
        super().__init__(message, **kwargs)


class BlobCopyError(AzureError):
    """Raised when the blob copy fails or ends in a non-success state."""

    def __init__(
        self,
        message: str,
        container: Optional[str] = None,
        blob_name: Optional[str] = None,
        copy_status: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if container:
            context["container"] = container
        if blob_name:
            context["blob_name"] = blob_name
        if copy_status:
            context["copy_status"] = copy_status
        kwargs["context"] = context
        kwargs.setdefault("error_code", "BLOB_COPY_FAILED")
        super().__init__(message, **kwargs)


class GrantStateError(VmDiskExportError):
    """Raised on an invalid disk access grant state transition."""

    def __init__(
        self,
        message: str,
        current_state: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if current_state:
            context["current_state"] = current_state
        kwargs["context"] = context
        kwargs.setdefault("error_code", "GRANT_STATE_INVALID")
        super().__init__(message, **kwargs)


# Configuration-related exceptions
class ConfigurationError(VmDiskExportError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration validation fails."""

    def __init__(
        self, message: str, config_section: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if config_section:
            context["config_section"] = config_section
        kwargs["context"] = context
        kwargs.setdefault("error_code", "INVALID_CONFIG")
        kwargs.setdefault(
            "recovery_suggestion", "Check configuration file and environment variables"
        )
        super().__init__(message, **kwargs)


def wrap_azure_exception(
    exc: Exception, context: Optional[Dict[str, Any]] = None
) -> AzureError:
    """
    Wrap a generic Azure SDK exception in our custom exception hierarchy.

    Args:
        exc: The original exception
        context: Optional context information

    Returns:
        AzureError: Wrapped exception with enhanced context
    """
    error_message = str(exc)

    if (
        "authentication" in error_message.lower()
        or "unauthorized" in error_message.lower()
    ):
        return AzureAuthenticationError(
            f"Azure authentication failed: {error_message}", context=context, cause=exc
        )
    return AzureError(
        f"Azure operation failed: {error_message}", context=context, cause=exc
    )
