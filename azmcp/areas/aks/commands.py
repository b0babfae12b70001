"""AKS cluster and node pool commands."""

from typing import List

from ...commands.base import READ_ONLY_METADATA, CommandContext, SubscriptionCommand, SubscriptionOptions
from ...commands.errors import ErrorRule, has_status
from ...errors import AzureNotFoundError
from ...options import OptionDefinitions, OptionParser
from ...response import ResultModel
from .models import Cluster, NodePool
from .options import AksOptionDefinitions, ClusterGetOptions, NodepoolGetOptions, NodepoolListOptions
from .service import AksService

CLUSTER_NOT_FOUND_RULE = ErrorRule(
    match=has_status(404),
    status_code=404,
    message=lambda error: (
        "AKS cluster not found. Verify the cluster name, resource group, and subscription, "
        "and ensure you have access."
    ),
)

NODEPOOL_ERROR_RULES = (
    ErrorRule(
        match=has_status(404),
        status_code=404,
        message=lambda error: (
            "AKS cluster or node pools not found. Verify the cluster name, resource group, "
            "and subscription, and ensure you have access."
        ),
    ),
    ErrorRule(
        match=has_status(403),
        status_code=403,
        message=lambda error: f"Authorization failed accessing AKS node pools. Details: {error}",
    ),
)


class ClusterListResult(ResultModel):
    clusters: List[Cluster]


class ClusterGetResult(ResultModel):
    cluster: Cluster


class NodepoolListResult(ResultModel):
    node_pools: List[NodePool]


class NodepoolGetResult(ResultModel):
    node_pool: NodePool


class BaseAksCommand(SubscriptionCommand):
    metadata = READ_ONLY_METADATA

    def __init__(self, aks_service: AksService, logger=None):
        self.aks_service = aks_service
        super().__init__(logger)


class ClusterListCommand(BaseAksCommand):
    name = "list"
    title = "List AKS Clusters"
    description = """
        List all Azure Kubernetes Service (AKS) clusters in a subscription. Returns an array of cluster details
        including name, location, Kubernetes version, provisioning state and power state.
    """
    options_model = SubscriptionOptions

    async def run(self, context: CommandContext, options: SubscriptionOptions) -> ClusterListResult:
        clusters = await self.aks_service.list_clusters(
            options.subscription,
            options.tenant,
            options.retry_policy,
        )
        return ClusterListResult(clusters=clusters or [])

    @staticmethod
    def result_summary(results) -> dict:
        return {"count": len(results.clusters)}


class ClusterGetCommand(BaseAksCommand):
    name = "get"
    title = "Get AKS Cluster Details"
    description = """
        Get details for a specific Azure Kubernetes Service (AKS) cluster. Returns the cluster's configuration,
        Kubernetes version, network settings and state.
    """
    options_model = ClusterGetOptions
    error_rules = (CLUSTER_NOT_FOUND_RULE,)

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        OptionDefinitions.Common.RESOURCE_GROUP.as_required().apply(parser)
        AksOptionDefinitions.CLUSTER.apply(parser)

    async def run(self, context: CommandContext, options: ClusterGetOptions) -> ClusterGetResult:
        cluster = await self.aks_service.get_cluster(
            options.subscription,
            options.cluster_name,
            options.resource_group,
            options.tenant,
            options.retry_policy,
        )
        if cluster is None:
            raise AzureNotFoundError(
                f"AKS cluster '{options.cluster_name}' not found in resource group '{options.resource_group}'"
            )
        return ClusterGetResult(cluster=cluster)


class NodepoolListCommand(BaseAksCommand):
    name = "list"
    title = "List AKS Node Pools"
    description = """
        List all node pools for a specific Azure Kubernetes Service (AKS) cluster.
        Returns key node pool details including sizing, count, OS type, mode, and autoscaling settings.
    """
    options_model = NodepoolListOptions
    error_rules = NODEPOOL_ERROR_RULES

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        OptionDefinitions.Common.RESOURCE_GROUP.as_required().apply(parser)
        AksOptionDefinitions.CLUSTER.apply(parser)

    async def run(self, context: CommandContext, options: NodepoolListOptions) -> NodepoolListResult:
        node_pools = await self.aks_service.list_node_pools(
            options.subscription,
            options.resource_group,
            options.cluster_name,
            options.tenant,
            options.retry_policy,
        )
        return NodepoolListResult(node_pools=node_pools or [])

    @staticmethod
    def result_summary(results) -> dict:
        return {"count": len(results.node_pools)}


class NodepoolGetCommand(BaseAksCommand):
    name = "get"
    title = "Get AKS Node Pool Details"
    description = """
        Get details for a specific node pool (agent pool) in an Azure Kubernetes Service (AKS) cluster.
        Returns sizing, count, OS type, mode, autoscaling settings and state.
    """
    options_model = NodepoolGetOptions
    error_rules = NODEPOOL_ERROR_RULES

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        OptionDefinitions.Common.RESOURCE_GROUP.as_required().apply(parser)
        AksOptionDefinitions.CLUSTER.apply(parser)
        AksOptionDefinitions.NODEPOOL.apply(parser)

    async def run(self, context: CommandContext, options: NodepoolGetOptions) -> NodepoolGetResult:
        node_pool = await self.aks_service.get_node_pool(
            options.subscription,
            options.resource_group,
            options.cluster_name,
            options.node_pool_name,
            options.tenant,
            options.retry_policy,
        )
        if node_pool is None:
            raise AzureNotFoundError(
                f"Node pool '{options.node_pool_name}' not found in cluster '{options.cluster_name}'"
            )
        return NodepoolGetResult(node_pool=node_pool)
