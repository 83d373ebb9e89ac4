"""
Type protocols for the Azure collaborators of the export flow.

Each protocol is a narrow request/response boundary so the orchestration in
``export_service`` can run against in-memory fakes with no network access.
``AzureClients`` in ``azure_clients`` implements all of them on top of the
Azure SDK.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from ..models import CopyResult, StorageAccountKey


@dataclass
class AzureSession:
    """An authenticated Azure context.

    Attributes:
        credential: ``azure.core.credentials.TokenCredential`` for the session
        subscription_id: Subscription every management call is scoped to
        source: How the session was obtained ("existing" or "interactive")
    """

    credential: Any
    subscription_id: str
    source: str = "existing"


class SessionProvider(Protocol):
    """Protocol for obtaining an authenticated session."""

    def get_session(self) -> AzureSession:
        """
        Return the active session, logging in interactively if there is none.

        Raises:
            AzureAuthenticationError: If no session can be established
        """
        ...


class MetadataClient(Protocol):
    """Protocol for read-only resource metadata lookups."""

    def get_region(self, resource_group: str) -> str:
        """Return the region of a resource group."""
        ...

    def get_os_disk_name(self, resource_group: str, vm_name: str) -> str:
        """Return the name of the VM's managed OS disk."""
        ...


class StorageKeyClient(Protocol):
    """Protocol for fetching a storage account access key."""

    def get_storage_key(
        self, resource_group: str, account_name: str
    ) -> StorageAccountKey:
        """Return the first access key of the storage account."""
        ...


class DiskAccessClient(Protocol):
    """Protocol for granting and revoking SAS access on a managed disk."""

    def grant_sas(
        self, resource_group: str, disk_name: str, duration_seconds: int
    ) -> str:
        """Grant read access for ``duration_seconds`` and return the SAS URL."""
        ...

    def revoke_sas(self, resource_group: str, disk_name: str) -> None:
        """Revoke all SAS access on the disk."""
        ...


class BlobCopier(Protocol):
    """Protocol for copying a source URL into a destination blob."""

    def copy_blob(
        self,
        source_url: str,
        account_name: str,
        account_key: StorageAccountKey,
        container: str,
        blob_name: str,
    ) -> CopyResult:
        """Copy ``source_url`` into ``container/blob_name``, overwriting it."""
        ...


class ClientFactory(Protocol):
    """Protocol for building the Azure collaborators bound to a session."""

    def __call__(self, session: AzureSession) -> Any:
        """
        Return an object implementing MetadataClient, StorageKeyClient,
        DiskAccessClient and BlobCopier for ``session``.
        """
        ...
