"""
Disk access grant lifecycle.

A grant moves through exactly three states:

    UNGRANTED --grant()--> GRANTED --revoke()--> REVOKED

There is no way back to UNGRANTED and no retry of a failed grant. Any other
transition raises ``GrantStateError``.
"""

from enum import Enum
from typing import Optional

import structlog

from ..exceptions import GrantStateError
from ..utils.secret_logging import redact_sas_url
from .interfaces import DiskAccessClient

logger = structlog.get_logger(__name__)


class GrantState(Enum):
    """States of a disk SAS grant."""

    UNGRANTED = "ungranted"
    GRANTED = "granted"
    REVOKED = "revoked"


class DiskAccessGrant:
    """
    Tracks the SAS grant on one managed disk.

    Attributes:
        resource_group: Resource group of the disk
        disk_name: Managed disk name
        state: Current GrantState
        sas_url: SAS-bearing URL while GRANTED, otherwise None
    """

    def __init__(self, resource_group: str, disk_name: str) -> None:
        self.resource_group = resource_group
        self.disk_name = disk_name
        self.state = GrantState.UNGRANTED
        self.sas_url: Optional[str] = None

    def grant(self, client: DiskAccessClient, duration_seconds: int) -> str:
        """
        Request read-only SAS access to the disk.

        Args:
            client: Disk access API
            duration_seconds: SAS lifetime, passed to the API unmodified

        Returns:
            The SAS URL

        Raises:
            GrantStateError: If the grant is not UNGRANTED
            DiskAccessGrantError: If the API call fails
        """
        if self.state is not GrantState.UNGRANTED:
            raise GrantStateError(
                f"Cannot grant access to disk {self.disk_name}: already {self.state.value}",
                current_state=self.state.value,
            )

        sas_url = client.grant_sas(self.resource_group, self.disk_name, duration_seconds)
        self.sas_url = sas_url
        self.state = GrantState.GRANTED
        logger.info(
            "disk_access_granted",
            disk=self.disk_name,
            resource_group=self.resource_group,
            duration_seconds=duration_seconds,
            sas_url=redact_sas_url(sas_url),
        )
        return sas_url

    def revoke(self, client: DiskAccessClient) -> None:
        """
        Revoke the SAS access.

        Raises:
            GrantStateError: If the grant is not GRANTED
            DiskAccessRevokeError: If the API call fails
        """
        if self.state is not GrantState.GRANTED:
            raise GrantStateError(
                f"Cannot revoke access to disk {self.disk_name}: {self.state.value}",
                current_state=self.state.value,
            )

        client.revoke_sas(self.resource_group, self.disk_name)
        self.sas_url = None
        self.state = GrantState.REVOKED
        logger.info(
            "disk_access_revoked",
            disk=self.disk_name,
            resource_group=self.resource_group,
        )

    @property
    def is_active(self) -> bool:
        return self.state is GrantState.GRANTED
