"""Resource areas.

Each area contributes one subtree of commands:
- tools: built-in introspection (hidden)
- subscription: subscription listing
- group: resource group listing
- aks: Azure Kubernetes Service clusters and node pools
- appconfig: App Configuration stores and key-value settings
- costmanagement: Cost Management queries and forecasts
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..commands.group import CommandGroup
    from ..services import ServiceCollection


class AreaSetup(ABC):
    """Registers an area's services and commands."""

    name: str = ""

    def configure_services(self, services: "ServiceCollection") -> None:
        """Add the area's service singletons to ``services``."""

    @abstractmethod
    def register_commands(self, root_group: "CommandGroup", services: "ServiceCollection") -> None:
        """Create the area's command group(s) under ``root_group``."""


def default_areas() -> List[AreaSetup]:
    """Areas registered by the server, in tool-listing order."""
    from .aks import AksSetup
    from .appconfig import AppConfigSetup
    from .costmanagement import CostManagementSetup
    from .group import GroupSetup
    from .subscription import SubscriptionSetup
    from .tools import ToolsSetup

    return [
        ToolsSetup(),
        SubscriptionSetup(),
        GroupSetup(),
        AksSetup(),
        AppConfigSetup(),
        CostManagementSetup(),
    ]
