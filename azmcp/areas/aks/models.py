"""AKS result models."""

from typing import Dict, List, Optional

from ...response import ResultModel


class Cluster(ResultModel):
    id: Optional[str] = None
    name: Optional[str] = None
    subscription_id: Optional[str] = None
    resource_group_name: Optional[str] = None
    location: Optional[str] = None
    kubernetes_version: Optional[str] = None
    provisioning_state: Optional[str] = None
    power_state: Optional[str] = None
    dns_prefix: Optional[str] = None
    fqdn: Optional[str] = None
    node_resource_group: Optional[str] = None
    agent_pool_count: Optional[int] = None
    sku_tier: Optional[str] = None
    tags: Optional[Dict[str, str]] = None


class NodePool(ResultModel):
    name: Optional[str] = None
    count: Optional[int] = None
    vm_size: Optional[str] = None
    os_disk_size_gb: Optional[int] = None
    os_type: Optional[str] = None
    mode: Optional[str] = None
    max_pods: Optional[int] = None
    orchestrator_version: Optional[str] = None
    enable_auto_scaling: Optional[bool] = None
    min_count: Optional[int] = None
    max_count: Optional[int] = None
    provisioning_state: Optional[str] = None
    power_state: Optional[str] = None
    node_labels: Optional[Dict[str, str]] = None
    node_taints: Optional[List[str]] = None
