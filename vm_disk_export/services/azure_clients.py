"""
Azure SDK implementations of the export collaborators.

``AzureClients`` binds the management and storage clients to one
``AzureSession`` and implements MetadataClient, StorageKeyClient,
DiskAccessClient and BlobCopier. Every Azure SDK failure is wrapped in the
matching exception from ``vm_disk_export.exceptions``; nothing is retried.
"""

import logging
import time
from typing import Callable, Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.compute.models import AccessLevel, GrantAccessData
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient
from azure.storage.blob import BlobServiceClient

from ..exceptions import (
    BlobCopyError,
    DiskAccessGrantError,
    DiskAccessRevokeError,
    ResourceResolutionError,
    StorageKeyError,
)
from ..models import CopyResult, StorageAccountKey
from ..utils.secret_logging import suppress_secret_logging
from .interfaces import AzureSession

logger = logging.getLogger(__name__)

BLOB_ENDPOINT_TEMPLATE = "https://{account}.blob.core.windows.net"

COPY_SUCCESS = "success"
COPY_PENDING = "pending"


class AzureClients:
    """
    Azure-backed collaborators for one export run.

    Attributes:
        session: Authenticated session the clients are bound to
        poll_interval: Seconds between blob copy status checks
    """

    def __init__(
        self,
        session: AzureSession,
        poll_interval: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

        # Lazy-initialized clients
        self._resource_client: Optional[ResourceManagementClient] = None
        self._compute_client: Optional[ComputeManagementClient] = None
        self._storage_client: Optional[StorageManagementClient] = None

    @property
    def resource_client(self) -> ResourceManagementClient:
        """Lazy-initialized resource management client."""
        if self._resource_client is None:
            self._resource_client = ResourceManagementClient(
                self.session.credential, self.session.subscription_id
            )
        return self._resource_client

    @property
    def compute_client(self) -> ComputeManagementClient:
        """Lazy-initialized compute management client."""
        if self._compute_client is None:
            self._compute_client = ComputeManagementClient(
                self.session.credential, self.session.subscription_id
            )
        return self._compute_client

    @property
    def storage_client(self) -> StorageManagementClient:
        """Lazy-initialized storage management client."""
        if self._storage_client is None:
            self._storage_client = StorageManagementClient(
                self.session.credential, self.session.subscription_id
            )
        return self._storage_client

    # Metadata

    def get_region(self, resource_group: str) -> str:
        try:
            group = self.resource_client.resource_groups.get(resource_group)
        except ResourceNotFoundError as exc:
            raise ResourceResolutionError(
                f"Resource group '{resource_group}' was not found",
                resource_group=resource_group,
                cause=exc,
            ) from exc
        except AzureError as exc:
            raise ResourceResolutionError(
                f"Failed to look up resource group '{resource_group}': {exc}",
                resource_group=resource_group,
                cause=exc,
            ) from exc
        return group.location

    def get_os_disk_name(self, resource_group: str, vm_name: str) -> str:
        try:
            vm = self.compute_client.virtual_machines.get(
                resource_group_name=resource_group, vm_name=vm_name
            )
        except ResourceNotFoundError as exc:
            raise ResourceResolutionError(
                f"Virtual machine '{vm_name}' was not found",
                resource_group=resource_group,
                resource_name=vm_name,
                cause=exc,
            ) from exc
        except AzureError as exc:
            raise ResourceResolutionError(
                f"Failed to look up virtual machine '{vm_name}': {exc}",
                resource_group=resource_group,
                resource_name=vm_name,
                cause=exc,
            ) from exc

        os_disk = vm.storage_profile.os_disk if vm.storage_profile else None
        if os_disk is None or os_disk.managed_disk is None or not os_disk.name:
            raise ResourceResolutionError(
                f"Virtual machine '{vm_name}' has no managed OS disk",
                resource_group=resource_group,
                resource_name=vm_name,
                recovery_suggestion="Only VMs with managed OS disks can be exported",
            )
        return os_disk.name

    # Storage key

    def get_storage_key(
        self, resource_group: str, account_name: str
    ) -> StorageAccountKey:
        try:
            result = self.storage_client.storage_accounts.list_keys(
                resource_group, account_name
            )
        except AzureError as exc:
            raise StorageKeyError(
                f"Failed to list keys for storage account '{account_name}': {exc}",
                account_name=account_name,
                context={"resource_group": resource_group},
                cause=exc,
            ) from exc

        if not result.keys or not result.keys[0].value:
            raise StorageKeyError(
                f"Storage account '{account_name}' returned no access keys",
                account_name=account_name,
                context={"resource_group": resource_group},
            )
        return StorageAccountKey(result.keys[0].value)

    # Disk access

    def grant_sas(
        self, resource_group: str, disk_name: str, duration_seconds: int
    ) -> str:
        access = GrantAccessData(
            access=AccessLevel.READ, duration_in_seconds=duration_seconds
        )
        try:
            poller = self.compute_client.disks.begin_grant_access(
                resource_group, disk_name, access
            )
            access_uri = poller.result()
        except AzureError as exc:
            raise DiskAccessGrantError(
                f"Failed to grant access to disk '{disk_name}': {exc}",
                disk_name=disk_name,
                context={"resource_group": resource_group},
                cause=exc,
            ) from exc

        if not access_uri or not access_uri.access_sas:
            raise DiskAccessGrantError(
                f"Grant access for disk '{disk_name}' returned no SAS URL",
                disk_name=disk_name,
                context={"resource_group": resource_group},
            )
        return access_uri.access_sas

    def revoke_sas(self, resource_group: str, disk_name: str) -> None:
        try:
            poller = self.compute_client.disks.begin_revoke_access(
                resource_group, disk_name
            )
            poller.result()
        except AzureError as exc:
            raise DiskAccessRevokeError(
                f"Failed to revoke access to disk '{disk_name}': {exc}",
                disk_name=disk_name,
                context={"resource_group": resource_group},
                cause=exc,
            ) from exc

    # Blob copy

    def copy_blob(
        self,
        source_url: str,
        account_name: str,
        account_key: StorageAccountKey,
        container: str,
        blob_name: str,
    ) -> CopyResult:
        with suppress_secret_logging():
            service_client = BlobServiceClient(
                account_url=BLOB_ENDPOINT_TEMPLATE.format(account=account_name),
                credential=account_key.value,
            )
            blob_client = service_client.get_blob_client(container, blob_name)

        started = self._clock()
        try:
            copy = blob_client.start_copy_from_url(source_url)
            copy_id = copy.get("copy_id")
            status = copy.get("copy_status") or COPY_PENDING
            properties = blob_client.get_blob_properties()
            status = properties.copy.status or status
            while status == COPY_PENDING:
                logger.debug(
                    f"Copy of {container}/{blob_name} pending: {properties.copy.progress}"
                )
                self._sleep(self.poll_interval)
                properties = blob_client.get_blob_properties()
                status = properties.copy.status or status
        except AzureError as exc:
            raise BlobCopyError(
                f"Copy into '{container}/{blob_name}' failed: {exc}",
                container=container,
                blob_name=blob_name,
                cause=exc,
            ) from exc
        elapsed = self._clock() - started

        if status != COPY_SUCCESS:
            raise BlobCopyError(
                f"Copy into '{container}/{blob_name}' ended with status '{status}'",
                container=container,
                blob_name=blob_name,
                copy_status=status,
                context={"status_description": properties.copy.status_description},
            )

        return CopyResult(
            bytes_copied=properties.size or 0,
            elapsed_seconds=elapsed,
            destination_url=blob_client.url,
            copy_id=copy_id,
            copy_status=status,
        )


def create_azure_clients(
    session: AzureSession, poll_interval: float = 5.0
) -> AzureClients:
    """Factory used by the CLI to bind Azure collaborators to a session."""
    return AzureClients(session, poll_interval=poll_interval)
