"""
Azure session resolution.

Finds an existing Azure CLI login, or establishes one through the interactive
browser flow when there is none, and pins the subscription that every
management client of the run is scoped to.
"""

import logging
from typing import Any, Optional

from azure.core.exceptions import AzureError, ClientAuthenticationError
from azure.identity import AzureCliCredential, InteractiveBrowserCredential
from azure.mgmt.resource import SubscriptionClient

from ..exceptions import AzureAuthenticationError, wrap_azure_exception
from .interfaces import AzureSession

logger = logging.getLogger(__name__)

MANAGEMENT_SCOPE = "https://management.azure.com/.default"


class AzureSessionProvider:
    """
    Resolves an authenticated AzureSession.

    Attributes:
        subscription_id: Subscription to use; when None the first enabled
            subscription visible to the credential is used
        tenant_id: Tenant for the interactive login, if any
    """

    def __init__(
        self,
        subscription_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
    ) -> None:
        self.subscription_id = subscription_id
        self.tenant_id = tenant_id

    def get_session(self) -> AzureSession:
        """
        Return the existing session, or log in interactively.

        Returns:
            AzureSession bound to a credential and subscription

        Raises:
            AzureAuthenticationError: If interactive login fails or no
                subscription is available
        """
        credential = self._existing_credential()
        source = "existing"
        if credential is None:
            credential = self._interactive_login()
            source = "interactive"

        subscription_id = self.subscription_id or self._default_subscription(
            credential
        )
        logger.info(
            f"Using Azure subscription {subscription_id[:8]}... ({source} session)"
        )
        return AzureSession(
            credential=credential, subscription_id=subscription_id, source=source
        )

    def _existing_credential(self) -> Optional[Any]:
        """Return the Azure CLI credential if it can issue a token, else None."""
        credential = AzureCliCredential(tenant_id=self.tenant_id or "")
        try:
            credential.get_token(MANAGEMENT_SCOPE)
        except ClientAuthenticationError as exc:
            logger.info("No active Azure session found, starting interactive login")
            logger.debug(f"Azure CLI credential unavailable: {exc}")
            return None
        return credential

    def _interactive_login(self) -> Any:
        if self.tenant_id:
            credential = InteractiveBrowserCredential(tenant_id=self.tenant_id)
        else:
            credential = InteractiveBrowserCredential()
        try:
            credential.get_token(MANAGEMENT_SCOPE)
        except ClientAuthenticationError as exc:
            raise AzureAuthenticationError(
                f"Interactive Azure login failed: {exc}",
                tenant_id=self.tenant_id,
                cause=exc,
            ) from exc
        logger.info("Interactive Azure login succeeded")
        return credential

    def _default_subscription(self, credential: Any) -> str:
        """Return the first enabled subscription visible to the credential."""
        try:
            subscriptions = list(SubscriptionClient(credential).subscriptions.list())
        except AzureError as exc:
            raise wrap_azure_exception(
                exc, context={"operation": "list_subscriptions"}
            ) from exc

        for subscription in subscriptions:
            if subscription.state is None or subscription.state == "Enabled":
                return subscription.subscription_id

        raise AzureAuthenticationError(
            "No enabled Azure subscription is available to the signed-in account",
            tenant_id=self.tenant_id,
            recovery_suggestion="Pass --subscription-id or set AZURE_SUBSCRIPTION_ID",
        )
