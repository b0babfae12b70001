"""AKS option definitions and bound option models."""

from typing import Optional

from pydantic import Field

from ...commands.base import SubscriptionOptions
from ...options import Option


class AksOptionDefinitions:
    CLUSTER = Option("cluster", "AKS cluster name.", required=True)
    NODEPOOL = Option("nodepool", "AKS node pool (agent pool) name.", required=True)


class ClusterGetOptions(SubscriptionOptions):
    cluster_name: Optional[str] = Field(default=None, alias="cluster")


class NodepoolListOptions(SubscriptionOptions):
    cluster_name: Optional[str] = Field(default=None, alias="cluster")


class NodepoolGetOptions(NodepoolListOptions):
    node_pool_name: Optional[str] = Field(default=None, alias="nodepool")
