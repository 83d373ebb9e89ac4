"""Data models for a single OS disk export run."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .validation import (
    validate_destination_file_name,
    validate_identifier,
    validate_sas_expiry,
)

DEFAULT_SAS_EXPIRY_SECONDS = 28800


@dataclass
class ExportRequest:
    """Operator-supplied parameters for one export.

    Attributes:
        resource_group: Resource group containing the VM
        vm_name: Name of the virtual machine whose OS disk is exported
        storage_account: Destination storage account name
        container: Destination blob container name
        destination_file_name: Destination blob name, must end in .vhd
        sas_expiry_seconds: Lifetime of the read-only disk SAS
        no_confirm: Skip the operator confirmation prompt
        storage_resource_group: Resource group of the storage account
            (defaults to ``resource_group``)
        revoke_on_failure: Revoke the disk SAS when the copy fails
    """

    resource_group: str
    vm_name: str
    storage_account: str
    container: str
    destination_file_name: str
    sas_expiry_seconds: int = DEFAULT_SAS_EXPIRY_SECONDS
    no_confirm: bool = False
    storage_resource_group: Optional[str] = None
    revoke_on_failure: bool = False

    def validate(self) -> None:
        """Validate every parameter. Makes no network calls.

        Raises:
            InvalidDestinationError: If the destination is not a .vhd file
            InvalidParameterError: If an identifier is empty or the expiry
                is not positive
        """
        validate_destination_file_name(self.destination_file_name)
        validate_identifier("resource group name", self.resource_group)
        validate_identifier("VM name", self.vm_name)
        validate_identifier("storage account name", self.storage_account)
        validate_identifier("storage container name", self.container)
        if self.storage_resource_group is not None:
            validate_identifier(
                "storage resource group name", self.storage_resource_group
            )
        validate_sas_expiry(self.sas_expiry_seconds)

    @property
    def effective_storage_resource_group(self) -> str:
        return self.storage_resource_group or self.resource_group


@dataclass
class ExportPlan:
    """Resolved plan presented at the confirmation gate."""

    request: ExportRequest
    subscription_id: str
    region: str
    os_disk_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subscription_id": self.subscription_id,
            "resource_group": self.request.resource_group,
            "region": self.region,
            "vm_name": self.request.vm_name,
            "os_disk_name": self.os_disk_name,
            "storage_account": self.request.storage_account,
            "storage_resource_group": self.request.effective_storage_resource_group,
            "container": self.request.container,
            "destination_file_name": self.request.destination_file_name,
            "sas_expiry_seconds": self.request.sas_expiry_seconds,
        }


class StorageAccountKey:
    """Storage account access key with a redacted string representation.

    The raw value is only reachable through :attr:`value`.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        if not value:
            raise ValueError("Storage account key cannot be empty")
        self._value = value

    @property
    def value(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return "StorageAccountKey('***REDACTED***')"

    def __str__(self) -> str:
        return self.__repr__()


@dataclass
class CopyResult:
    """Outcome of a completed blob copy."""

    bytes_copied: int
    elapsed_seconds: float
    destination_url: str
    copy_id: Optional[str] = None
    copy_status: str = "success"


@dataclass
class ExportResult:
    """Outcome of a full export run."""

    plan: ExportPlan
    copy: CopyResult
    grant_state: str
