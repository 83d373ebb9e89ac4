"""VM OS disk export service.

Public API:
    VmDiskExportService: Runs one export from validation through revoke

The run is a single linear sequence and stops at the first failure:

    validate -> session -> region -> OS disk -> [confirm] -> storage key
    -> grant SAS -> copy -> revoke SAS

Once the SAS is granted, a copy failure leaves it active until it expires
unless the request sets ``revoke_on_failure``.

Usage:
    ```python
    from vm_disk_export.services.export_service import VmDiskExportService
    from vm_disk_export.services.session import AzureSessionProvider
    from vm_disk_export.services.azure_clients import create_azure_clients

    service = VmDiskExportService(
        session_provider=AzureSessionProvider(),
        client_factory=create_azure_clients,
    )
    result = service.run(request)
    ```
"""

from typing import Callable, Optional

import structlog
from rich.console import Console
from rich.markup import escape

from ..models import ExportPlan, ExportRequest, ExportResult
from ..utils.secret_logging import suppress_secret_logging
from .access_grant import DiskAccessGrant
from .confirmation import ConsoleConfirmation
from .interfaces import ClientFactory, SessionProvider

logger = structlog.get_logger(__name__)


class VmDiskExportService:
    """Copies a VM's OS disk into a storage container as a VHD blob."""

    def __init__(
        self,
        session_provider: SessionProvider,
        client_factory: ClientFactory,
        confirm: Optional[Callable[[ExportPlan], bool]] = None,
        console: Optional[Console] = None,
    ) -> None:
        """Initialize the export service.

        Args:
            session_provider: Resolves the authenticated session
            client_factory: Builds the Azure collaborators for a session
            confirm: Confirmation gate; defaults to an interactive prompt
            console: Console for status lines
        """
        self.session_provider = session_provider
        self.client_factory = client_factory
        self.console = console or Console()
        self.confirm = confirm or ConsoleConfirmation(console=self.console)

    def run(self, request: ExportRequest) -> Optional[ExportResult]:
        """Run the export.

        Args:
            request: Export parameters

        Returns:
            ExportResult on success, None if the operator declined

        Raises:
            VmDiskExportError: On the first failing step
        """
        request.validate()

        session = self.session_provider.get_session()
        clients = self.client_factory(session)

        region = clients.get_region(request.resource_group)
        os_disk_name = clients.get_os_disk_name(request.resource_group, request.vm_name)
        plan = ExportPlan(
            request=request,
            subscription_id=session.subscription_id,
            region=region,
            os_disk_name=os_disk_name,
        )
        self._status(
            f"Resolved VM {request.vm_name} in {region}, OS disk {os_disk_name}"
        )
        logger.info("export_plan_resolved", **plan.to_dict())

        if not request.no_confirm and not self.confirm(plan):
            self._status("Export cancelled by operator. No changes were made.")
            logger.info("export_cancelled", vm=request.vm_name)
            return None

        storage_resource_group = request.effective_storage_resource_group
        with suppress_secret_logging():
            account_key = clients.get_storage_key(
                storage_resource_group, request.storage_account
            )
        self._status(f"Retrieved access key for storage account {request.storage_account}")

        grant = DiskAccessGrant(request.resource_group, os_disk_name)
        sas_url = grant.grant(clients, request.sas_expiry_seconds)
        self._status(
            f"Granted read access to {os_disk_name} for {request.sas_expiry_seconds} seconds"
        )

        self._status(
            f"Copying {os_disk_name} to "
            f"{request.storage_account}/{request.container}/{request.destination_file_name}"
        )
        try:
            copy_result = clients.copy_blob(
                sas_url,
                request.storage_account,
                account_key,
                request.container,
                request.destination_file_name,
            )
        except Exception:
            self._handle_copy_failure(request, grant, clients)
            raise

        self._status(
            f"Copied {copy_result.bytes_copied} bytes in "
            f"{copy_result.elapsed_seconds:.1f} seconds"
        )
        logger.info(
            "blob_copy_completed",
            destination=copy_result.destination_url,
            bytes_copied=copy_result.bytes_copied,
            elapsed_seconds=round(copy_result.elapsed_seconds, 3),
        )

        grant.revoke(clients)
        self._status(f"Revoked access to {os_disk_name}")
        self._status("[green]Complete![/green]", raw=True)

        return ExportResult(plan=plan, copy=copy_result, grant_state=grant.state.value)

    def _handle_copy_failure(
        self, request: ExportRequest, grant: DiskAccessGrant, clients
    ) -> None:
        if not request.revoke_on_failure:
            self._status(
                f"[yellow]Copy failed. Read access to {escape(grant.disk_name)} "
                f"stays active until it expires in {request.sas_expiry_seconds} seconds.[/yellow]",
                raw=True,
            )
            logger.warning(
                "disk_access_left_active",
                disk=grant.disk_name,
                expires_in_seconds=request.sas_expiry_seconds,
            )
            return

        self._status(f"Copy failed. Revoking access to {grant.disk_name}")
        try:
            grant.revoke(clients)
        except Exception as revoke_exc:
            # The copy error is re-raised by the caller
            logger.error(
                "disk_access_revoke_after_copy_failure_failed",
                disk=grant.disk_name,
                error=str(revoke_exc),
            )

    def _status(self, message: str, raw: bool = False) -> None:
        self.console.print(message if raw else escape(message))
