"""Resource group listing."""

from typing import List, Optional

from ...errors import handle_azure_error
from ...response import ResultModel
from ...retry import RetryPolicyOptions
from ...services.azure.base import BaseAzureService
from ...services.azure.subscription import SubscriptionService


class ResourceGroupInfo(ResultModel):
    name: str
    id: str
    location: Optional[str] = None


class ResourceGroupService(BaseAzureService):
    def __init__(self, subscription_service: SubscriptionService, **kwargs):
        super().__init__(**kwargs)
        self.subscription_service = subscription_service

    @handle_azure_error
    async def list_resource_groups(
        self,
        subscription: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> List[ResourceGroupInfo]:
        from azure.mgmt.resource.resources.aio import ResourceManagementClient

        self.validate_required_parameters(subscription=subscription)
        subscription_id = await self.subscription_service.get_subscription_id(subscription, tenant, retry_policy)
        arm_client = await self.create_arm_client(tenant, retry_policy)
        client = arm_client.get(ResourceManagementClient, subscription_id)

        groups = []
        async for rg in client.resource_groups.list():
            groups.append(ResourceGroupInfo(name=rg.name, id=rg.id, location=rg.location))
        return groups
