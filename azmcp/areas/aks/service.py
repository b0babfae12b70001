"""AKS service: thin wrapper over azure-mgmt-containerservice."""

from typing import Any, List, Optional

from ...errors import handle_azure_error
from ...logging_config import get_logger
from ...retry import RetryPolicyOptions
from ...services.azure.base import BaseAzureService
from ...services.azure.subscription import SubscriptionService
from .models import Cluster, NodePool

logger = get_logger(__name__)


def _enum_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


def _resource_group_from_id(resource_id: Optional[str]) -> Optional[str]:
    """Extract the resource group segment from an ARM resource ID."""
    if not resource_id:
        return None
    parts = resource_id.split("/")
    for index, part in enumerate(parts[:-1]):
        if part.lower() == "resourcegroups":
            return parts[index + 1]
    return None


def cluster_from_sdk(cluster: Any, subscription_id: Optional[str] = None) -> Cluster:
    power_state = getattr(cluster, "power_state", None)
    sku = getattr(cluster, "sku", None)
    return Cluster(
        id=cluster.id,
        name=cluster.name,
        subscription_id=subscription_id,
        resource_group_name=_resource_group_from_id(cluster.id),
        location=cluster.location,
        kubernetes_version=getattr(cluster, "kubernetes_version", None),
        provisioning_state=getattr(cluster, "provisioning_state", None),
        power_state=_enum_value(getattr(power_state, "code", None)),
        dns_prefix=getattr(cluster, "dns_prefix", None),
        fqdn=getattr(cluster, "fqdn", None),
        node_resource_group=getattr(cluster, "node_resource_group", None),
        agent_pool_count=len(getattr(cluster, "agent_pool_profiles", None) or []),
        sku_tier=_enum_value(getattr(sku, "tier", None)),
        tags=getattr(cluster, "tags", None),
    )


def node_pool_from_sdk(pool: Any) -> NodePool:
    power_state = getattr(pool, "power_state", None)
    return NodePool(
        name=pool.name,
        count=getattr(pool, "count", None),
        vm_size=getattr(pool, "vm_size", None),
        os_disk_size_gb=getattr(pool, "os_disk_size_gb", None),
        os_type=_enum_value(getattr(pool, "os_type", None)),
        mode=_enum_value(getattr(pool, "mode", None)),
        max_pods=getattr(pool, "max_pods", None),
        orchestrator_version=getattr(pool, "orchestrator_version", None),
        enable_auto_scaling=getattr(pool, "enable_auto_scaling", None),
        min_count=getattr(pool, "min_count", None),
        max_count=getattr(pool, "max_count", None),
        provisioning_state=getattr(pool, "provisioning_state", None),
        power_state=_enum_value(getattr(power_state, "code", None)),
        node_labels=getattr(pool, "node_labels", None),
        node_taints=getattr(pool, "node_taints", None),
    )


class AksService(BaseAzureService):
    """Managed cluster and agent pool queries."""

    def __init__(self, subscription_service: SubscriptionService, **kwargs):
        super().__init__(**kwargs)
        self.subscription_service = subscription_service

    async def _client(self, subscription: str, tenant: Optional[str], retry_policy: Optional[RetryPolicyOptions]):
        from azure.mgmt.containerservice.aio import ContainerServiceClient

        subscription_id = await self.subscription_service.get_subscription_id(subscription, tenant, retry_policy)
        arm_client = await self.create_arm_client(tenant, retry_policy)
        return subscription_id, arm_client.get(ContainerServiceClient, subscription_id)

    @handle_azure_error
    async def list_clusters(
        self,
        subscription: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> List[Cluster]:
        self.validate_required_parameters(subscription=subscription)
        subscription_id, client = await self._client(subscription, tenant, retry_policy)

        clusters = []
        async for cluster in client.managed_clusters.list():
            clusters.append(cluster_from_sdk(cluster, subscription_id))
        return clusters

    @handle_azure_error
    async def get_cluster(
        self,
        subscription: str,
        cluster_name: str,
        resource_group: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> Optional[Cluster]:
        from azure.core.exceptions import ResourceNotFoundError

        self.validate_required_parameters(
            subscription=subscription, cluster_name=cluster_name, resource_group=resource_group
        )
        subscription_id, client = await self._client(subscription, tenant, retry_policy)
        try:
            cluster = await client.managed_clusters.get(resource_group, cluster_name)
        except ResourceNotFoundError:
            return None
        return cluster_from_sdk(cluster, subscription_id)

    @handle_azure_error
    async def list_node_pools(
        self,
        subscription: str,
        resource_group: str,
        cluster_name: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> List[NodePool]:
        self.validate_required_parameters(
            subscription=subscription, resource_group=resource_group, cluster_name=cluster_name
        )
        _, client = await self._client(subscription, tenant, retry_policy)

        pools = []
        async for pool in client.agent_pools.list(resource_group, cluster_name):
            pools.append(node_pool_from_sdk(pool))
        return pools

    @handle_azure_error
    async def get_node_pool(
        self,
        subscription: str,
        resource_group: str,
        cluster_name: str,
        node_pool_name: str,
        tenant: Optional[str] = None,
        retry_policy: Optional[RetryPolicyOptions] = None,
    ) -> Optional[NodePool]:
        from azure.core.exceptions import ResourceNotFoundError

        self.validate_required_parameters(
            subscription=subscription,
            resource_group=resource_group,
            cluster_name=cluster_name,
            node_pool_name=node_pool_name,
        )
        _, client = await self._client(subscription, tenant, retry_policy)
        try:
            pool = await client.agent_pools.get(resource_group, cluster_name, node_pool_name)
        except ResourceNotFoundError:
            return None
        return node_pool_from_sdk(pool)
