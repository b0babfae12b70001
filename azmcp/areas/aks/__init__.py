"""AKS area: managed clusters and node pools."""

from ...commands.group import CommandGroup
from ...services.azure.subscription import SubscriptionService
from ...services.azure.tenant import TenantService
from .. import AreaSetup
from .commands import ClusterGetCommand, ClusterListCommand, NodepoolGetCommand, NodepoolListCommand
from .service import AksService


class AksSetup(AreaSetup):
    name = "aks"

    def configure_services(self, services) -> None:
        services.add_singleton(AksService, AksService(
            services.get(SubscriptionService),
            tenant_service=services.get(TenantService),
            settings=services.settings,
        ))

    def register_commands(self, root_group, services) -> None:
        aks = root_group.add_sub_group(CommandGroup(
            "aks",
            "Azure Kubernetes Service operations - Commands for managing and querying AKS clusters and node pools.",
        ))
        aks_service = services.get(AksService)

        cluster = aks.add_sub_group(CommandGroup("cluster", "AKS cluster operations - Commands for listing and inspecting AKS clusters."))
        cluster.add_command("list", ClusterListCommand(aks_service))
        cluster.add_command("get", ClusterGetCommand(aks_service))

        nodepool = aks.add_sub_group(CommandGroup("nodepool", "AKS node pool operations - Commands for listing and inspecting node pools."))
        nodepool.add_command("list", NodepoolListCommand(aks_service))
        nodepool.add_command("get", NodepoolGetCommand(aks_service))


__all__ = ["AksService", "AksSetup"]
