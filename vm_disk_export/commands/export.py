"""OS disk export command.

This module provides the single CLI command, which copies a VM's OS disk
into a storage container as a VHD blob through a temporary disk SAS.
"""

from typing import Optional

import click
from rich.console import Console

from vm_disk_export.commands.base import configure_run, exit_with_error
from vm_disk_export.config_manager import VmDiskExportConfig
from vm_disk_export.exceptions import VmDiskExportError
from vm_disk_export.models import DEFAULT_SAS_EXPIRY_SECONDS, ExportRequest
from vm_disk_export.services.azure_clients import create_azure_clients
from vm_disk_export.services.export_service import VmDiskExportService
from vm_disk_export.services.session import AzureSessionProvider

console = Console()


def build_export_service(
    config: VmDiskExportConfig, console: Console
) -> VmDiskExportService:
    """Wire the Azure-backed collaborators into an export service."""
    poll_interval = config.copy.poll_interval
    return VmDiskExportService(
        session_provider=AzureSessionProvider(
            subscription_id=config.azure.subscription_id,
            tenant_id=config.azure.tenant_id,
        ),
        client_factory=lambda session: create_azure_clients(
            session, poll_interval=poll_interval
        ),
        console=console,
    )


@click.command("vm-disk-export")
@click.option(
    "--resource-group-name",
    required=True,
    help="Resource group containing the virtual machine",
)
@click.option("--vm-name", required=True, help="Name of the virtual machine")
@click.option(
    "--storage-account-name",
    required=True,
    help="Destination storage account",
)
@click.option(
    "--storage-container-name",
    required=True,
    help="Destination blob container",
)
@click.option(
    "--destination-file-name",
    required=True,
    help="Destination blob name, must end with .vhd",
)
@click.option(
    "--sas-expiry-duration",
    type=int,
    default=DEFAULT_SAS_EXPIRY_SECONDS,
    show_default=True,
    help="Lifetime of the read-only disk SAS in seconds",
)
@click.option(
    "--no-confirm",
    is_flag=True,
    help="Skip the confirmation prompt",
)
@click.option(
    "--storage-resource-group-name",
    required=False,
    help="Resource group of the storage account (defaults to --resource-group-name)",
)
@click.option(
    "--subscription-id",
    required=False,
    help="Azure subscription ID (defaults to AZURE_SUBSCRIPTION_ID or the first enabled subscription)",
)
@click.option(
    "--revoke-on-failure",
    is_flag=True,
    help="Revoke the disk SAS if the copy fails instead of leaving it until expiry",
)
@click.option(
    "--log-level",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    default=None,
    help="Logging level",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging and print the configuration summary",
)
def export_os_disk(
    resource_group_name: str,
    vm_name: str,
    storage_account_name: str,
    storage_container_name: str,
    destination_file_name: str,
    sas_expiry_duration: int,
    no_confirm: bool,
    storage_resource_group_name: Optional[str],
    subscription_id: Optional[str],
    revoke_on_failure: bool,
    log_level: Optional[str],
    debug: bool,
) -> None:
    """Copy an Azure VM's OS disk into a storage container as a VHD.

    A read-only SAS is granted on the OS disk, the disk is copied into the
    destination blob (overwriting it if it exists), and the SAS is revoked.
    If the copy fails the SAS stays active until it expires, unless
    --revoke-on-failure is given.

    Examples:
        vm-disk-export --resource-group-name rg1 --vm-name vm1 \\
            --storage-account-name acct1 --storage-container-name vhds \\
            --destination-file-name vm1-os.vhd
    """
    request = ExportRequest(
        resource_group=resource_group_name,
        vm_name=vm_name,
        storage_account=storage_account_name,
        container=storage_container_name,
        destination_file_name=destination_file_name,
        sas_expiry_seconds=sas_expiry_duration,
        no_confirm=no_confirm,
        storage_resource_group=storage_resource_group_name,
        revoke_on_failure=revoke_on_failure,
    )

    try:
        request.validate()
        config = configure_run(
            subscription_id=subscription_id, log_level=log_level, debug=debug
        )
        service = build_export_service(config, console)
        service.run(request)
    except VmDiskExportError as e:
        exit_with_error(str(e))
