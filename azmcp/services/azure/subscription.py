"""Subscription listing and name resolution."""

from typing import List, Optional

from ...errors import AzureNotFoundError, handle_azure_error
from ...retry import RetryPolicyOptions
from .base import BaseAzureService
from .models import SubscriptionInfo
from .tenant import is_guid


class SubscriptionService(BaseAzureService):
    """Subscriptions visible to the caller's credential."""

    @handle_azure_error
    async def list_subscriptions(
        self,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> List[SubscriptionInfo]:
        from azure.mgmt.resource.subscriptions.aio import SubscriptionClient

        arm_client = await self.create_arm_client(tenant, retry_policy)
        client = arm_client.get(SubscriptionClient)

        subscriptions = []
        async for sub in client.subscriptions.list():
            state = getattr(sub, "state", None)
            subscriptions.append(SubscriptionInfo(
                subscription_id=sub.subscription_id,
                display_name=sub.display_name,
                state=getattr(state, "value", state),
                tenant_id=getattr(sub, "tenant_id", None),
            ))
        return subscriptions

    async def get_subscription_id(
        self,
        subscription: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> str:
        """Resolve a subscription GUID or display name to its ID.

        Raises:
            AzureNotFoundError: If no visible subscription has that name
        """
        self.validate_required_parameters(subscription=subscription)
        if is_guid(subscription):
            return subscription

        wanted = subscription.lower()
        for sub in await self.list_subscriptions(tenant, retry_policy):
            if sub.display_name and sub.display_name.lower() == wanted:
                return sub.subscription_id

        raise AzureNotFoundError(f"Could not find subscription with name '{subscription}'")
